"""
Service Layer per il Registro Attività
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Scrittura (append-only) e lettura del feed delle attività. L'append
avviene nella stessa unità di lavoro della modifica che lo origina:
il commit è responsabilità del chiamante.
"""

import logging
import uuid
from typing import Optional, assert_never

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.database import map_store_errors, retry_read
from invoicing.core.exceptions import BusinessValidationError
from invoicing.models import Activity
from invoicing.schemas.activity import ActivityFeedEntry, ActivityType, Subject

# Logger per questo modulo
logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Funzioni di presentazione
# -------------------------------------------------------------------

def resolve_identifier(
    quote_num: Optional[str] = None,
    invoice_num: Optional[str] = None,
    customer_name: Optional[str] = None,
    customer_id: Optional[uuid.UUID] = None,
) -> str:
    """
    Identificativo mostrato per il soggetto di un'attività.

    Precedenza: numero preventivo, numero fattura, nome cliente,
    id cliente, stringa vuota. I valori vuoti passano al successivo.
    """
    return quote_num or invoice_num or customer_name or (str(customer_id) if customer_id else "")


def activity_text(activity_type: ActivityType, identifier: str) -> str:
    """Descrizione leggibile dell'evento."""
    match activity_type:
        case ActivityType.QUOTE_CREATED:
            return f"Preventivo n°{identifier} creato"
        case ActivityType.QUOTE_SENT:
            return f"Preventivo n°{identifier} inviato"
        case ActivityType.QUOTE_ACCEPTED:
            return f"Preventivo n°{identifier} accettato"
        case ActivityType.QUOTE_DECLINED:
            return f"Preventivo n°{identifier} rifiutato"
        case ActivityType.INVOICE_CREATED:
            return f"Fattura n°{identifier} creata"
        case ActivityType.INVOICE_SENT:
            return f"Fattura n°{identifier} inviata"
        case ActivityType.INVOICE_PAID:
            return f"Fattura n°{identifier} pagata"
        case ActivityType.INVOICE_CANCELLED:
            return f"Fattura n°{identifier} annullata"
        case ActivityType.CUSTOMER_CREATED:
            return f"Cliente {identifier} creato"
        case ActivityType.CUSTOMER_DELETED:
            return f"Cliente {identifier} eliminato"
        case ActivityType.CUSTOMER_EDITED:
            return f"Cliente {identifier} modificato"
        case _:
            assert_never(activity_type)


def activity_link(activity: Activity) -> str:
    """Percorso della pagina di dettaglio del soggetto."""
    subject = activity.subject
    match subject.kind:
        case "quote":
            return f"/quotes/{subject.quote_id}"
        case "invoice":
            return f"/invoices/{subject.invoice_id}"
        case _:
            return f"/customers/{subject.customer_id}"


def to_feed_entry(activity: Activity) -> ActivityFeedEntry:
    """Converte un'attività nella voce del feed, risolvendo l'identificativo."""
    identifier = resolve_identifier(
        quote_num=activity.quote.num if activity.quote else None,
        invoice_num=activity.invoice.num if activity.invoice else None,
        customer_name=activity.customer.name if activity.customer else None,
        customer_id=activity.customer_id,
    )
    activity_type = ActivityType(activity.type)
    return ActivityFeedEntry(
        id=activity.id,
        type=activity_type,
        created_at=activity.created_at,
        subject=activity.subject,
        identifier=identifier,
        text=activity_text(activity_type, identifier),
        link=activity_link(activity),
    )


# -------------------------------------------------------------------
# Service
# -------------------------------------------------------------------

class ActivityService:
    """
    Service per il registro attività.

    Le attività non vengono mai modificate né eliminate dalla logica
    applicativa.
    """

    @map_store_errors
    async def append(
        self,
        db: AsyncSession,
        activity_type: ActivityType,
        subject: Subject,
    ) -> Activity:
        """
        Registra un'attività.

        Args:
            db: Sessione database
            activity_type: Tipo di evento
            subject: Soggetto (cliente, preventivo o fattura)

        Returns:
            Activity: L'attività registrata (non ancora committata)

        Raises:
            BusinessValidationError: Se il tipo non corrisponde al soggetto
            StoreUnavailableError: Se il database non è raggiungibile
        """
        activity_type = ActivityType(activity_type)
        if activity_type.subject_kind != subject.kind:
            raise BusinessValidationError(
                f"Il tipo {activity_type.value} non è compatibile con un soggetto '{subject.kind}'"
            )

        activity = Activity.from_subject(activity_type.value, subject)
        db.add(activity)
        await db.flush()

        logger.info("Registrata attività %s (%s)", activity_type.value, subject.kind)
        return activity

    @retry_read
    async def recent(self, db: AsyncSession, limit: int) -> list[ActivityFeedEntry]:
        """
        Le attività più recenti, dalla più nuova.

        Args:
            db: Sessione database
            limit: Numero massimo di voci

        Returns:
            list[ActivityFeedEntry]: Voci con identificativo risolto
        """
        stmt = (
            select(Activity)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        activities = result.scalars().all()

        logger.debug("Recuperate %d attività recenti", len(activities))
        return [to_feed_entry(activity) for activity in activities]
