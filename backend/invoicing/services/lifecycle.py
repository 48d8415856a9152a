"""
Macchina a stati dei documenti
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Risolve un'azione richiesta sullo stato corrente di un preventivo o
di una fattura usando le matrici QUOTE_TRANSITIONS e INVOICE_TRANSITIONS.
Nessun accesso al database: la validazione avviene prima di qualsiasi
scrittura.
"""

import datetime
import logging
import uuid
from typing import Optional, Union

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.exceptions import ConflictError, InvalidTransitionError
from invoicing.schemas.invoice import INVOICE_TRANSITIONS, InvoiceAction, InvoiceStatus
from invoicing.schemas.quote import QUOTE_TRANSITIONS, QuoteAction, QuoteStatus

# Logger per questo modulo
logger = logging.getLogger(__name__)


def _value(member: Union[str, QuoteStatus, QuoteAction, InvoiceStatus, InvoiceAction]) -> str:
    return member.value if hasattr(member, "value") else str(member)


def resolve_quote_transition(
    status: Union[QuoteStatus, str],
    action: Union[QuoteAction, str],
) -> Optional[QuoteStatus]:
    """
    Stato di arrivo di un preventivo per l'azione richiesta.

    Args:
        status: Stato corrente
        action: Azione richiesta

    Returns:
        Optional[QuoteStatus]: Nuovo stato, oppure None per la cancellazione

    Raises:
        InvalidTransitionError: Se l'azione non è consentita dallo stato corrente
    """
    try:
        allowed = QUOTE_TRANSITIONS[QuoteStatus(status)]
        requested = QuoteAction(action)
    except ValueError:
        allowed, requested = {}, None

    if requested not in allowed:
        logger.warning(
            "Transizione preventivo non consentita: stato=%s azione=%s",
            _value(status), _value(action),
        )
        raise InvalidTransitionError(_value(status), _value(action))
    return allowed[requested]


def resolve_invoice_transition(
    status: Union[InvoiceStatus, str],
    action: Union[InvoiceAction, str],
) -> InvoiceStatus:
    """
    Stato di arrivo di una fattura per l'azione richiesta.

    Il ritardo di pagamento non influisce: una fattura scaduta
    può sempre essere pagata o annullata.

    Raises:
        InvalidTransitionError: Se l'azione non è consentita dallo stato corrente
    """
    try:
        allowed = INVOICE_TRANSITIONS[InvoiceStatus(status)]
        requested = InvoiceAction(action)
    except ValueError:
        allowed, requested = {}, None

    if requested not in allowed:
        logger.warning(
            "Transizione fattura non consentita: stato=%s azione=%s",
            _value(status), _value(action),
        )
        raise InvalidTransitionError(_value(status), _value(action))
    return allowed[requested]


def allowed_quote_actions(status: Union[QuoteStatus, str]) -> list[QuoteAction]:
    """Azioni consentite su un preventivo nello stato indicato."""
    return list(QUOTE_TRANSITIONS[QuoteStatus(status)])


def allowed_invoice_actions(status: Union[InvoiceStatus, str]) -> list[InvoiceAction]:
    """Azioni consentite su una fattura nello stato indicato."""
    return list(INVOICE_TRANSITIONS[InvoiceStatus(status)])


# -------------------------------------------------------------------
# Scrittura condizionale dello stato
# -------------------------------------------------------------------

async def compare_and_set_status(
    db: AsyncSession,
    model,
    document_id: uuid.UUID,
    expected_status: str,
    new_status: str,
) -> None:
    """
    Aggiorna lo stato solo se è ancora quello letto in fase di validazione.

    Esegue UPDATE ... WHERE id = :id AND status = :expected: se un'altra
    richiesta ha cambiato lo stato nel frattempo nessuna riga viene
    aggiornata e la transizione fallisce.

    Args:
        db: Sessione database
        model: Modello del documento (Quote o Invoice)
        document_id: UUID del documento
        expected_status: Stato letto prima della validazione
        new_status: Stato da scrivere

    Raises:
        ConflictError: Se lo stato è cambiato dopo la lettura (CONCURRENT_MODIFICATION)
    """
    stmt = (
        update(model)
        .where(model.id == document_id, model.status == expected_status)
        .values(status=new_status, updated_at=datetime.datetime.now(datetime.timezone.utc))
    )
    result = await db.execute(stmt)

    if result.rowcount != 1:
        logger.warning(
            "Modifica concorrente su %s %s: stato atteso %s",
            model.__tablename__, document_id, expected_status,
        )
        raise ConflictError(
            "Il documento è stato modificato da un'altra operazione, ricaricare e riprovare",
            error_code="CONCURRENT_MODIFICATION",
            extra={"expected_status": expected_status},
        )
