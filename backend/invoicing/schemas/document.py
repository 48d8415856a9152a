"""
Schemas Pydantic per le viste che combinano preventivi e fatture
Progetto: Invoicing (Gestionale Preventivi e Fatture)
"""

from typing import Union

from pydantic import BaseModel, Field

from invoicing.schemas.customer import CustomerRead
from invoicing.schemas.invoice import InvoiceCreate, InvoiceSummary
from invoicing.schemas.quote import QuoteCreate, QuoteSummary


# Creazione di un documento: il campo "type" decide se preventivo o fattura
DocumentCreate = Union[QuoteCreate, InvoiceCreate]


class DocumentList(BaseModel):
    """Preventivi e fatture filtrati, ciascuno con il proprio totale."""
    quotes: list[QuoteSummary]
    invoices: list[InvoiceSummary]


class CustomerDetail(CustomerRead):
    """Dettaglio cliente con i suoi documenti."""
    quotes: list[QuoteSummary] = Field(default_factory=list)
    invoices: list[InvoiceSummary] = Field(default_factory=list)
