"""
Router FastAPI per la Fatturazione
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Dettaglio, pagamento e annullamento delle fatture.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.database import get_db
from invoicing.schemas.common import TransitionResult
from invoicing.schemas.invoice import InvoiceRead
from invoicing.services.invoice_service import InvoiceService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/invoices",
    tags=["Fatture"],
)


def get_invoice_service() -> InvoiceService:
    """Dependency per ottenere un'istanza dell'InvoiceService."""
    return InvoiceService()


@router.get(
    "/{invoice_id}",
    name="fattura_dettaglio",
    summary="Dettaglio fattura",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def get_invoice(
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    """
    Recupera una fattura con righe, totale e ritardo.

    Raises:
        NotFoundError: Se la fattura non esiste
    """
    invoice = await service.get_by_id(db, invoice_id)
    return InvoiceRead.model_validate(invoice)


@router.post(
    "/{invoice_id}/pay",
    name="fattura_paga",
    summary="Registra pagamento",
    description="UNPAID → PAID. Registra l'attività INVOICE_PAID.",
    response_model=TransitionResult,
    status_code=status.HTTP_200_OK,
)
async def pay_invoice(
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
    service: InvoiceService = Depends(get_invoice_service),
) -> TransitionResult:
    """
    Registra il pagamento della fattura.

    Raises:
        NotFoundError: Se la fattura non esiste
        InvalidTransitionError: Se la fattura non è in stato UNPAID
    """
    result = await service.pay(db, invoice_id)
    await db.commit()
    return result


@router.post(
    "/{invoice_id}/cancel",
    name="fattura_annulla",
    summary="Annulla fattura",
    description="UNPAID → CANCELLED. Registra l'attività INVOICE_CANCELLED.",
    response_model=TransitionResult,
    status_code=status.HTTP_200_OK,
)
async def cancel_invoice(
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
    service: InvoiceService = Depends(get_invoice_service),
) -> TransitionResult:
    """
    Annulla la fattura.

    Raises:
        NotFoundError: Se la fattura non esiste
        InvalidTransitionError: Se la fattura non è in stato UNPAID
    """
    result = await service.cancel(db, invoice_id)
    await db.commit()
    return result
