"""
Router FastAPI per i Preventivi
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Dettaglio, transizioni di stato ed eliminazione dei preventivi.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.database import get_db
from invoicing.schemas.common import TransitionResult
from invoicing.schemas.quote import QuoteRead
from invoicing.services.quote_service import QuoteService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/quotes",
    tags=["Preventivi"],
)


def get_quote_service() -> QuoteService:
    """Dependency per ottenere un'istanza del QuoteService."""
    return QuoteService()


@router.get(
    "/{quote_id}",
    name="preventivo_dettaglio",
    summary="Dettaglio preventivo",
    response_model=QuoteRead,
    status_code=status.HTTP_200_OK,
)
async def get_quote(
    quote_id: uuid.UUID = Path(..., description="UUID del preventivo"),
    db: AsyncSession = Depends(get_db),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteRead:
    """
    Recupera un preventivo con righe e totale.

    Raises:
        NotFoundError: Se il preventivo non esiste
    """
    quote = await service.get_by_id(db, quote_id)
    return QuoteRead.model_validate(quote)


@router.post(
    "/{quote_id}/send",
    name="preventivo_invia",
    summary="Invia preventivo",
    description="DRAFT → SENT. Registra l'attività QUOTE_SENT.",
    response_model=TransitionResult,
    status_code=status.HTTP_200_OK,
)
async def send_quote(
    quote_id: uuid.UUID = Path(..., description="UUID del preventivo"),
    db: AsyncSession = Depends(get_db),
    service: QuoteService = Depends(get_quote_service),
) -> TransitionResult:
    """
    Invia il preventivo.

    Raises:
        NotFoundError: Se il preventivo non esiste
        InvalidTransitionError: Se il preventivo non è in stato DRAFT
    """
    result = await service.send(db, quote_id)
    await db.commit()
    return result


@router.post(
    "/{quote_id}/accept",
    name="preventivo_accetta",
    summary="Accetta preventivo",
    description="SENT → ACCEPTED. Registra l'attività QUOTE_ACCEPTED.",
    response_model=TransitionResult,
    status_code=status.HTTP_200_OK,
)
async def accept_quote(
    quote_id: uuid.UUID = Path(..., description="UUID del preventivo"),
    db: AsyncSession = Depends(get_db),
    service: QuoteService = Depends(get_quote_service),
) -> TransitionResult:
    """
    Registra l'accettazione del preventivo.

    Raises:
        NotFoundError: Se il preventivo non esiste
        InvalidTransitionError: Se il preventivo non è in stato SENT
    """
    result = await service.accept(db, quote_id)
    await db.commit()
    return result


@router.post(
    "/{quote_id}/decline",
    name="preventivo_rifiuta",
    summary="Rifiuta preventivo",
    description="SENT → DECLINED. Registra l'attività QUOTE_DECLINED.",
    response_model=TransitionResult,
    status_code=status.HTTP_200_OK,
)
async def decline_quote(
    quote_id: uuid.UUID = Path(..., description="UUID del preventivo"),
    db: AsyncSession = Depends(get_db),
    service: QuoteService = Depends(get_quote_service),
) -> TransitionResult:
    """
    Registra il rifiuto del preventivo.

    Raises:
        NotFoundError: Se il preventivo non esiste
        InvalidTransitionError: Se il preventivo non è in stato SENT
    """
    result = await service.decline(db, quote_id)
    await db.commit()
    return result


@router.delete(
    "/{quote_id}",
    name="preventivo_elimina",
    summary="Elimina preventivo",
    description="Elimina definitivamente un preventivo in stato DRAFT con le sue righe.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_quote(
    quote_id: uuid.UUID = Path(..., description="UUID del preventivo"),
    db: AsyncSession = Depends(get_db),
    service: QuoteService = Depends(get_quote_service),
) -> None:
    """
    Elimina un preventivo in bozza.

    Raises:
        NotFoundError: Se il preventivo non esiste
        InvalidTransitionError: Se il preventivo non è in stato DRAFT
    """
    await service.delete(db, quote_id)
    await db.commit()
