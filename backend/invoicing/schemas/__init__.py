"""
Schemas Pydantic per il progetto Invoicing

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
e serializzazione delle richieste e risposte API.
"""

# Import degli schemi per renderli disponibili tramite import diretto
# es: from invoicing.schemas import QuoteRead, CustomerRead, etc.

from invoicing.schemas.activity import (
    ActivityFeed,
    ActivityFeedEntry,
    ActivityType,
    CustomerSubject,
    InvoiceSubject,
    QuoteSubject,
    Subject,
)
from invoicing.schemas.common import (
    CustomerSummary,
    DocumentLineCreate,
    DocumentLineRead,
    TransitionResult,
)
from invoicing.schemas.customer import (
    CustomerCreate,
    CustomerList,
    CustomerRead,
    CustomerUpdate,
)
from invoicing.schemas.quote import (
    QUOTE_TRANSITIONS,
    QuoteAction,
    QuoteCreate,
    QuoteRead,
    QuoteStatus,
    QuoteSummary,
)
from invoicing.schemas.invoice import (
    INVOICE_TRANSITIONS,
    InvoiceAction,
    InvoiceCreate,
    InvoiceLateness,
    InvoiceRead,
    InvoiceStatus,
    InvoiceSummary,
    RevenueBreakdown,
)
from invoicing.schemas.document import CustomerDetail, DocumentCreate, DocumentList
from invoicing.schemas.dashboard import Dashboard, QuoteCounters, RevenueSummary

__all__ = [
    # Activity schemas
    "ActivityFeed",
    "ActivityFeedEntry",
    "ActivityType",
    "CustomerSubject",
    "InvoiceSubject",
    "QuoteSubject",
    "Subject",
    # Common schemas
    "CustomerSummary",
    "DocumentLineCreate",
    "DocumentLineRead",
    "TransitionResult",
    # Customer schemas
    "CustomerCreate",
    "CustomerList",
    "CustomerRead",
    "CustomerUpdate",
    "CustomerDetail",
    # Quote schemas
    "QUOTE_TRANSITIONS",
    "QuoteAction",
    "QuoteCreate",
    "QuoteRead",
    "QuoteStatus",
    "QuoteSummary",
    # Invoice schemas
    "INVOICE_TRANSITIONS",
    "InvoiceAction",
    "InvoiceCreate",
    "InvoiceLateness",
    "InvoiceRead",
    "InvoiceStatus",
    "InvoiceSummary",
    "RevenueBreakdown",
    # Document schemas
    "DocumentCreate",
    "DocumentList",
    # Dashboard schemas
    "Dashboard",
    "QuoteCounters",
    "RevenueSummary",
]
