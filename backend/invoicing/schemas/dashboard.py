"""
Schemas Pydantic per la Dashboard
Progetto: Invoicing (Gestionale Preventivi e Fatture)
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from invoicing.schemas.activity import ActivityFeedEntry
from invoicing.schemas.invoice import InvoiceSummary
from invoicing.schemas.quote import QuoteSummary


class QuoteCounters(BaseModel):
    """Contatori dei preventivi per stato."""
    sent: int = 0
    accepted: int = 0
    declined: int = 0


class RevenueSummary(BaseModel):
    """
    Fatturato del mese corrente confrontato con il mese precedente.

    Attributes:
        total: Fatturato del mese (fatture non annullate)
        paid_total: Quota incassata
        pending_total: Quota in attesa di pagamento
        previous_total: Fatturato del mese precedente
        evolution_percent: Variazione percentuale rispetto al mese precedente
    """
    total: Decimal = Field(default=Decimal("0"))
    paid_total: Decimal = Field(default=Decimal("0"))
    pending_total: Decimal = Field(default=Decimal("0"))
    previous_total: Decimal = Field(default=Decimal("0"))
    evolution_percent: int = 0


class Dashboard(BaseModel):
    """Dati aggregati della dashboard."""
    quote_counters: QuoteCounters
    recent_activities: list[ActivityFeedEntry]
    pending_quotes: list[QuoteSummary]
    unpaid_invoices: list[InvoiceSummary]
    revenue: RevenueSummary
