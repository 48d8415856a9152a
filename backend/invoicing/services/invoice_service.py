"""
Service Layer per la Fatturazione
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Definisce la logica di business per:
- Creazione fatture (eventualmente collegate a un preventivo)
- Pagamento e annullamento
- Letture per liste e dashboard
"""

import datetime
import logging
import uuid
from typing import Collection, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.config import get_settings
from invoicing.core.database import map_store_errors, retry_read
from invoicing.core.exceptions import BusinessValidationError, ConflictError, NotFoundError
from invoicing.models import Customer, Invoice, InvoiceLine, Quote
from invoicing.schemas.activity import ActivityType, InvoiceSubject
from invoicing.schemas.common import TransitionResult
from invoicing.schemas.invoice import InvoiceAction, InvoiceCreate, InvoiceStatus
from invoicing.services.activity_service import ActivityService
from invoicing.services.filters import filter_documents
from invoicing.services.lifecycle import compare_and_set_status, resolve_invoice_transition
from invoicing.services.numbering import next_document_number

# Logger per questo modulo
logger = logging.getLogger(__name__)


class InvoiceService:
    """
    Service per la gestione delle fatture.

    Il totale di una fattura non viene mai memorizzato: si ricalcola
    sempre dalle righe (Invoice.total).
    """

    def __init__(self, activity_service: Optional[ActivityService] = None) -> None:
        """
        Inizializza il service.

        Args:
            activity_service: Registro attività (default: nuova istanza)
        """
        self.activity_service = activity_service or ActivityService()

    # ------------------------------------------------------------
    # Letture
    # ------------------------------------------------------------

    async def _load(self, db: AsyncSession, invoice_id: uuid.UUID) -> Invoice:
        """Carica la fattura senza nuovi tentativi (usato nei percorsi di scrittura)."""
        result = await db.execute(select(Invoice).where(Invoice.id == invoice_id))
        invoice = result.scalar_one_or_none()
        if not invoice:
            logger.warning("Fattura non trovata: %s", invoice_id)
            raise NotFoundError(f"Fattura con ID {invoice_id} non trovata")
        return invoice

    @retry_read
    async def get_by_id(self, db: AsyncSession, invoice_id: uuid.UUID) -> Invoice:
        """
        Recupera una fattura per ID, con cliente e righe.

        Raises:
            NotFoundError: Se la fattura non esiste
        """
        return await self._load(db, invoice_id)

    @retry_read
    async def get_all(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        statuses: Optional[Collection[InvoiceStatus]] = None,
        customer_id: Optional[uuid.UUID] = None,
    ) -> list[Invoice]:
        """
        Recupera le fatture, dalla più recente, filtrate per testo e stato.

        Args:
            db: Sessione database
            search: Testo cercato in numero, nome cliente e titolo
            statuses: Stati ammessi (vuoto = tutti)
            customer_id: Limita alle fatture del cliente

        Returns:
            list[Invoice]: Fatture filtrate
        """
        stmt = select(Invoice).order_by(Invoice.emit_date.desc(), Invoice.num.desc())
        if customer_id:
            stmt = stmt.where(Invoice.customer_id == customer_id)
        result = await db.execute(stmt)
        invoices = filter_documents(result.scalars().all(), search, statuses)

        logger.debug("Recuperate %d fatture", len(invoices))
        return invoices

    @retry_read
    async def get_unpaid(self, db: AsyncSession, limit: int) -> list[Invoice]:
        """Fatture non pagate, dalla scadenza più vicina (o più vecchia)."""
        stmt = (
            select(Invoice)
            .where(Invoice.status == InvoiceStatus.UNPAID.value)
            .order_by(Invoice.due_date.asc(), Invoice.num.asc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @retry_read
    async def get_in_period(
        self,
        db: AsyncSession,
        start: datetime.date,
        end: Optional[datetime.date] = None,
    ) -> list[Invoice]:
        """
        Fatture emesse nella finestra [start, end).

        Args:
            db: Sessione database
            start: Primo giorno incluso
            end: Primo giorno escluso (None = nessun limite superiore)

        Returns:
            list[Invoice]: Fatture di qualsiasi stato
        """
        stmt = select(Invoice).where(Invoice.emit_date >= start)
        if end is not None:
            stmt = stmt.where(Invoice.emit_date < end)
        result = await db.execute(stmt.order_by(Invoice.emit_date.asc()))
        return list(result.scalars().all())

    # ------------------------------------------------------------
    # Creazione
    # ------------------------------------------------------------

    @map_store_errors
    async def create(self, db: AsyncSession, data: InvoiceCreate) -> Invoice:
        """
        Crea una fattura in stato UNPAID.

        Logica:
        1. Verifica il cliente e l'eventuale preventivo di origine
        2. Calcola la scadenza se non indicata
        3. Genera il numero progressivo annuale
        4. Registra l'attività INVOICE_CREATED

        Args:
            db: Sessione database
            data: Dati della fattura con le righe

        Returns:
            Invoice: La fattura creata

        Raises:
            NotFoundError: Se il cliente o il preventivo non esistono
            BusinessValidationError: Se il preventivo appartiene a un altro cliente
            ConflictError: Se il numero generato è già stato assegnato
        """
        customer = await db.get(Customer, data.customer_id)
        if not customer:
            logger.warning("Cliente non trovato: %s", data.customer_id)
            raise NotFoundError(f"Cliente con ID {data.customer_id} non trovato")

        if data.quote_id is not None:
            quote = await db.get(Quote, data.quote_id)
            if not quote:
                logger.warning("Preventivo non trovato: %s", data.quote_id)
                raise NotFoundError(f"Preventivo con ID {data.quote_id} non trovato")
            if quote.customer_id != customer.id:
                logger.warning(
                    "Preventivo %s non appartiene al cliente %s", data.quote_id, customer.id
                )
                raise BusinessValidationError(
                    "Il preventivo non appartiene al cliente selezionato",
                    fields={"quote_id": "Il preventivo appartiene a un altro cliente"},
                )

        emit_date = data.emit_date or datetime.date.today()
        due_date = data.due_date or emit_date + datetime.timedelta(
            days=get_settings().invoice_payment_terms_days
        )
        num = await next_document_number(db, Invoice, emit_date)

        invoice = Invoice(
            num=num,
            customer=customer,
            quote_id=data.quote_id,
            status=InvoiceStatus.UNPAID.value,
            title=data.title,
            emit_date=emit_date,
            due_date=due_date,
            lines=[
                InvoiceLine(
                    position=position,
                    description=line.description,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                )
                for position, line in enumerate(data.lines, start=1)
            ],
        )
        db.add(invoice)
        try:
            await db.flush()
        except IntegrityError as exc:
            logger.warning("Numero fattura %s già assegnato", num)
            raise ConflictError(
                f"Numero fattura {num} già assegnato, riprovare",
                error_code="DOCUMENT_NUMBER_CONFLICT",
            ) from exc

        await self.activity_service.append(
            db, ActivityType.INVOICE_CREATED, InvoiceSubject(invoice_id=invoice.id)
        )

        logger.info("Creata fattura %s: %s", invoice.num, invoice.id)
        return invoice

    # ------------------------------------------------------------
    # Transizioni di stato
    # ------------------------------------------------------------

    async def _transition(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        action: InvoiceAction,
    ) -> TransitionResult:
        """
        Esegue una transizione di stato.

        Il ritardo di pagamento non viene considerato: una fattura
        scaduta può sempre essere pagata o annullata.
        """
        invoice = await self._load(db, invoice_id)
        current_status = InvoiceStatus(invoice.status)
        new_status = resolve_invoice_transition(current_status, action)

        await compare_and_set_status(db, Invoice, invoice.id, current_status.value, new_status.value)
        await self.activity_service.append(
            db, ActivityType(f"INVOICE_{new_status.value}"), InvoiceSubject(invoice_id=invoice.id)
        )

        logger.info(
            "Fattura %s: %s → %s", invoice.num, current_status.value, new_status.value
        )
        return TransitionResult(document_id=invoice.id, new_status=new_status.value)

    @map_store_errors
    async def pay(self, db: AsyncSession, invoice_id: uuid.UUID) -> TransitionResult:
        """Registra il pagamento della fattura (UNPAID → PAID)."""
        return await self._transition(db, invoice_id, InvoiceAction.PAY)

    @map_store_errors
    async def cancel(self, db: AsyncSession, invoice_id: uuid.UUID) -> TransitionResult:
        """Annulla la fattura (UNPAID → CANCELLED)."""
        return await self._transition(db, invoice_id, InvoiceAction.CANCEL)
