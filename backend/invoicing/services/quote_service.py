"""
Service Layer per i Preventivi
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Definisce la logica di business per la gestione dei preventivi,
incluse le transizioni di stato e la registrazione delle attività.
"""

import datetime
import logging
import uuid
from typing import Collection, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.database import map_store_errors, retry_read
from invoicing.core.exceptions import ConflictError, NotFoundError
from invoicing.models import Customer, Quote, QuoteLine
from invoicing.schemas.activity import ActivityType, QuoteSubject
from invoicing.schemas.common import TransitionResult
from invoicing.schemas.quote import QuoteAction, QuoteCreate, QuoteStatus
from invoicing.services.activity_service import ActivityService
from invoicing.services.calculations import document_total
from invoicing.services.filters import filter_documents
from invoicing.services.lifecycle import compare_and_set_status, resolve_quote_transition
from invoicing.services.numbering import next_document_number

# Logger per questo modulo
logger = logging.getLogger(__name__)


class QuoteService:
    """
    Service per la gestione dei preventivi.

    Fornisce metodi asincroni per interagire con il database
    in modo centralizzato, senza dipendenze da FastAPI.
    I metodi che scrivono eseguono solo flush: il commit spetta al
    chiamante, così cambio di stato e attività formano una sola
    unità di lavoro.
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

    async def _load(self, db: AsyncSession, quote_id: uuid.UUID) -> Quote:
        """Carica il preventivo senza nuovi tentativi (usato nei percorsi di scrittura)."""
        result = await db.execute(select(Quote).where(Quote.id == quote_id))
        quote = result.scalar_one_or_none()
        if not quote:
            logger.warning("Preventivo non trovato: %s", quote_id)
            raise NotFoundError(f"Preventivo con ID {quote_id} non trovato")
        return quote

    @retry_read
    async def get_by_id(self, db: AsyncSession, quote_id: uuid.UUID) -> Quote:
        """
        Recupera un preventivo per ID, con cliente e righe.

        Raises:
            NotFoundError: Se il preventivo non esiste
        """
        return await self._load(db, quote_id)

    @retry_read
    async def get_all(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        statuses: Optional[Collection[QuoteStatus]] = None,
        customer_id: Optional[uuid.UUID] = None,
    ) -> list[Quote]:
        """
        Recupera i preventivi, dal più recente, filtrati per testo e stato.

        Args:
            db: Sessione database
            search: Testo cercato in numero, nome cliente e titolo
            statuses: Stati ammessi (vuoto = tutti)
            customer_id: Limita ai preventivi del cliente

        Returns:
            list[Quote]: Preventivi filtrati
        """
        stmt = select(Quote).order_by(Quote.emit_date.desc(), Quote.num.desc())
        if customer_id:
            stmt = stmt.where(Quote.customer_id == customer_id)
        result = await db.execute(stmt)
        quotes = filter_documents(result.scalars().all(), search, statuses)

        logger.debug("Recuperati %d preventivi", len(quotes))
        return quotes

    @retry_read
    async def count_by_status(self, db: AsyncSession) -> dict[QuoteStatus, int]:
        """Numero di preventivi per stato (zero per gli stati senza preventivi)."""
        stmt = select(Quote.status, func.count(Quote.id)).group_by(Quote.status)
        result = await db.execute(stmt)
        counts = {status: 0 for status in QuoteStatus}
        for status, count in result.all():
            counts[QuoteStatus(status)] = count
        return counts

    @retry_read
    async def get_pending(self, db: AsyncSession, limit: int) -> list[Quote]:
        """Preventivi inviati in attesa di risposta, per scadenza crescente."""
        stmt = (
            select(Quote)
            .where(Quote.status == QuoteStatus.SENT.value)
            .order_by(Quote.expiration_date.asc().nulls_last(), Quote.emit_date.asc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------
    # Creazione
    # ------------------------------------------------------------

    @map_store_errors
    async def create(self, db: AsyncSession, data: QuoteCreate) -> Quote:
        """
        Crea un preventivo in stato DRAFT.

        Logica:
        1. Verifica il cliente
        2. Genera il numero progressivo annuale
        3. Calcola e memorizza il totale dalle righe
        4. Registra l'attività QUOTE_CREATED

        Args:
            db: Sessione database
            data: Dati del preventivo con le righe

        Returns:
            Quote: Il preventivo creato

        Raises:
            NotFoundError: Se il cliente non esiste
            ConflictError: Se il numero generato è già stato assegnato
        """
        customer = await db.get(Customer, data.customer_id)
        if not customer:
            logger.warning("Cliente non trovato: %s", data.customer_id)
            raise NotFoundError(f"Cliente con ID {data.customer_id} non trovato")

        emit_date = data.emit_date or datetime.date.today()
        num = await next_document_number(db, Quote, emit_date)

        quote = Quote(
            num=num,
            customer=customer,
            status=QuoteStatus.DRAFT.value,
            title=data.title,
            notes=data.notes,
            total_amount=document_total(data.lines),
            emit_date=emit_date,
            expiration_date=data.expiration_date,
            lines=[
                QuoteLine(
                    position=position,
                    description=line.description,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                )
                for position, line in enumerate(data.lines, start=1)
            ],
        )
        db.add(quote)
        try:
            await db.flush()
        except IntegrityError as exc:
            logger.warning("Numero preventivo %s già assegnato", num)
            raise ConflictError(
                f"Numero preventivo {num} già assegnato, riprovare",
                error_code="DOCUMENT_NUMBER_CONFLICT",
            ) from exc

        await self.activity_service.append(
            db, ActivityType.QUOTE_CREATED, QuoteSubject(quote_id=quote.id)
        )

        logger.info("Creato preventivo %s: %s", quote.num, quote.id)
        return quote

    # ------------------------------------------------------------
    # Transizioni di stato
    # ------------------------------------------------------------

    async def _transition(
        self,
        db: AsyncSession,
        quote_id: uuid.UUID,
        action: QuoteAction,
    ) -> TransitionResult:
        """
        Esegue una transizione di stato.

        Logica:
        1. Carica il preventivo (NotFoundError)
        2. Valida l'azione sullo stato corrente (InvalidTransitionError, nessuna scrittura)
        3. Scrive il nuovo stato solo se invariato dalla lettura (ConflictError)
        4. Registra l'attività QUOTE_{NUOVO_STATO}
        """
        quote = await self._load(db, quote_id)
        current_status = QuoteStatus(quote.status)
        new_status = resolve_quote_transition(current_status, action)

        await compare_and_set_status(db, Quote, quote.id, current_status.value, new_status.value)
        await self.activity_service.append(
            db, ActivityType(f"QUOTE_{new_status.value}"), QuoteSubject(quote_id=quote.id)
        )

        logger.info(
            "Preventivo %s: %s → %s", quote.num, current_status.value, new_status.value
        )
        return TransitionResult(document_id=quote.id, new_status=new_status.value)

    @map_store_errors
    async def send(self, db: AsyncSession, quote_id: uuid.UUID) -> TransitionResult:
        """Invia il preventivo al cliente (DRAFT → SENT)."""
        return await self._transition(db, quote_id, QuoteAction.SEND)

    @map_store_errors
    async def accept(self, db: AsyncSession, quote_id: uuid.UUID) -> TransitionResult:
        """Registra l'accettazione del cliente (SENT → ACCEPTED)."""
        return await self._transition(db, quote_id, QuoteAction.ACCEPT)

    @map_store_errors
    async def decline(self, db: AsyncSession, quote_id: uuid.UUID) -> TransitionResult:
        """Registra il rifiuto del cliente (SENT → DECLINED)."""
        return await self._transition(db, quote_id, QuoteAction.DECLINE)

    @map_store_errors
    async def delete(self, db: AsyncSession, quote_id: uuid.UUID) -> None:
        """
        Elimina definitivamente un preventivo in stato DRAFT.

        Le righe vengono eliminate con il preventivo; le fatture che lo
        referenziano perdono il collegamento. Nessuna attività viene
        registrata.

        Raises:
            NotFoundError: Se il preventivo non esiste
            InvalidTransitionError: Se il preventivo non è in stato DRAFT
            ConflictError: Se lo stato è cambiato dopo la lettura
        """
        quote = await self._load(db, quote_id)
        resolve_quote_transition(quote.status, QuoteAction.DELETE)

        stmt = delete(Quote).where(
            Quote.id == quote.id,
            Quote.status == QuoteStatus.DRAFT.value,
        )
        result = await db.execute(stmt)
        if result.rowcount != 1:
            logger.warning("Modifica concorrente sul preventivo %s durante l'eliminazione", quote_id)
            raise ConflictError(
                "Il preventivo è stato modificato da un'altra operazione, ricaricare e riprovare",
                error_code="CONCURRENT_MODIFICATION",
                extra={"expected_status": QuoteStatus.DRAFT.value},
            )

        logger.info("Eliminato preventivo %s: %s", quote.num, quote_id)
