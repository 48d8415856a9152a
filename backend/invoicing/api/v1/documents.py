"""
Router FastAPI per i Documenti (preventivi e fatture)
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Lista combinata con filtri indipendenti per preventivi e fatture,
e creazione di un documento di uno dei due tipi.
"""

import logging
from typing import Annotated, Optional, Union

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.api.v1.invoices import get_invoice_service
from invoicing.api.v1.quotes import get_quote_service
from invoicing.core.database import get_db
from invoicing.schemas.document import DocumentCreate, DocumentList
from invoicing.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceStatus, InvoiceSummary
from invoicing.schemas.quote import QuoteRead, QuoteStatus, QuoteSummary
from invoicing.services.invoice_service import InvoiceService
from invoicing.services.quote_service import QuoteService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/documents",
    tags=["Documenti"],
)


@router.get(
    "/",
    name="documenti_lista",
    summary="Lista preventivi e fatture",
    description="Recupera preventivi e fatture, ciascuno con il proprio filtro di ricerca e di stato.",
    response_model=DocumentList,
    status_code=status.HTTP_200_OK,
)
async def get_documents(
    quote_search: Optional[str] = Query(None, description="Ricerca su numero, cliente e titolo dei preventivi"),
    quote_status: Optional[list[QuoteStatus]] = Query(None, description="Stati dei preventivi"),
    invoice_search: Optional[str] = Query(None, description="Ricerca su numero, cliente e titolo delle fatture"),
    invoice_status: Optional[list[InvoiceStatus]] = Query(None, description="Stati delle fatture"),
    db: AsyncSession = Depends(get_db),
    quote_service: QuoteService = Depends(get_quote_service),
    invoice_service: InvoiceService = Depends(get_invoice_service),
) -> DocumentList:
    """
    Recupera preventivi e fatture filtrati.

    Args:
        quote_search: Testo cercato nei preventivi
        quote_status: Stati ammessi per i preventivi (vuoto = tutti)
        invoice_search: Testo cercato nelle fatture
        invoice_status: Stati ammessi per le fatture (vuoto = tutti)
        db: Sessione database

    Returns:
        DocumentList: Preventivi e fatture filtrati
    """
    quotes = await quote_service.get_all(db, search=quote_search, statuses=quote_status)
    invoices = await invoice_service.get_all(db, search=invoice_search, statuses=invoice_status)

    return DocumentList(
        quotes=[QuoteSummary.model_validate(quote) for quote in quotes],
        invoices=[InvoiceSummary.model_validate(invoice) for invoice in invoices],
    )


@router.post(
    "/",
    name="documento_crea",
    summary="Crea preventivo o fattura",
    description="Crea un preventivo (type='quote', stato DRAFT) o una fattura (type='invoice', stato UNPAID).",
    response_model=Union[QuoteRead, InvoiceRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_document(
    data: Annotated[DocumentCreate, Body(discriminator="type")],
    db: AsyncSession = Depends(get_db),
    quote_service: QuoteService = Depends(get_quote_service),
    invoice_service: InvoiceService = Depends(get_invoice_service),
) -> Union[QuoteRead, InvoiceRead]:
    """
    Crea un documento.

    Raises:
        NotFoundError: Se il cliente (o il preventivo di origine) non esiste
        BusinessValidationError: Se il preventivo appartiene a un altro cliente
    """
    if isinstance(data, InvoiceCreate):
        invoice = await invoice_service.create(db, data)
        await db.commit()
        return InvoiceRead.model_validate(invoice)

    quote = await quote_service.create(db, data)
    await db.commit()
    return QuoteRead.model_validate(quote)
