"""
Service Layer per la Dashboard
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Aggrega contatori, attività recenti, documenti in attesa e fatturato
mensile. Ogni dato proviene da una lettura indipendente: sotto scritture
concorrenti i valori possono non essere coerenti tra loro.
"""

import datetime
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.config import Settings, get_settings
from invoicing.schemas.dashboard import Dashboard, QuoteCounters, RevenueSummary
from invoicing.schemas.invoice import InvoiceSummary
from invoicing.schemas.quote import QuoteStatus, QuoteSummary
from invoicing.services.activity_service import ActivityService
from invoicing.services.calculations import (
    period_revenue,
    revenue_evolution_percent,
    total_revenue,
)
from invoicing.services.display import invoice_lateness
from invoicing.services.invoice_service import InvoiceService
from invoicing.services.quote_service import QuoteService

# Logger per questo modulo
logger = logging.getLogger(__name__)


def month_window(day: datetime.date) -> tuple[datetime.date, datetime.date]:
    """
    Primo giorno del mese di `day` e primo giorno del mese successivo.

    Example:
        >>> month_window(date(2025, 12, 15))
        (date(2025, 12, 1), date(2026, 1, 1))
    """
    start = day.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def previous_month_window(day: datetime.date) -> tuple[datetime.date, datetime.date]:
    """Finestra [inizio, fine) del mese precedente a quello di `day`."""
    current_start, _ = month_window(day)
    previous_start, _ = month_window(current_start - datetime.timedelta(days=1))
    return previous_start, current_start


class DashboardService:
    """Service per i dati aggregati della dashboard."""

    def __init__(
        self,
        quote_service: Optional[QuoteService] = None,
        invoice_service: Optional[InvoiceService] = None,
        activity_service: Optional[ActivityService] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.activity_service = activity_service or ActivityService()
        self.quote_service = quote_service or QuoteService(self.activity_service)
        self.invoice_service = invoice_service or InvoiceService(self.activity_service)
        self.settings = settings or get_settings()

    async def get_revenue(self, db: AsyncSession, today: datetime.date) -> RevenueSummary:
        """
        Fatturato del mese corrente e confronto con il mese precedente.

        Il mese corrente include tutte le fatture emesse dal primo del mese;
        il mese precedente somma tutte le fatture del mese, in qualsiasi stato.
        """
        current_start, _ = month_window(today)
        previous_start, previous_end = previous_month_window(today)

        current = period_revenue(
            await self.invoice_service.get_in_period(db, current_start)
        )
        previous_total = total_revenue(
            await self.invoice_service.get_in_period(db, previous_start, previous_end)
        )

        return RevenueSummary(
            total=current.total,
            paid_total=current.paid_total,
            pending_total=current.pending_total,
            previous_total=previous_total,
            evolution_percent=revenue_evolution_percent(current.total, previous_total),
        )

    async def get_dashboard(
        self,
        db: AsyncSession,
        today: Optional[datetime.date] = None,
    ) -> Dashboard:
        """
        Dati completi della dashboard.

        Args:
            db: Sessione database
            today: Data di riferimento (default: oggi)

        Returns:
            Dashboard: Contatori, attività, preventivi in attesa,
            fatture non pagate e fatturato
        """
        today = today or datetime.date.today()
        list_size = self.settings.dashboard_list_size

        counts = await self.quote_service.count_by_status(db)
        activities = await self.activity_service.recent(db, self.settings.activity_feed_size)
        pending = await self.quote_service.get_pending(db, list_size)
        unpaid = await self.invoice_service.get_unpaid(db, list_size)
        revenue = await self.get_revenue(db, today)

        logger.debug(
            "Dashboard: %d preventivi in attesa, %d fatture non pagate",
            len(pending), len(unpaid),
        )

        return Dashboard(
            quote_counters=QuoteCounters(
                sent=counts[QuoteStatus.SENT],
                accepted=counts[QuoteStatus.ACCEPTED],
                declined=counts[QuoteStatus.DECLINED],
            ),
            recent_activities=activities,
            pending_quotes=[QuoteSummary.model_validate(quote) for quote in pending],
            unpaid_invoices=[
                InvoiceSummary.model_validate(invoice).model_copy(
                    update={"lateness": invoice_lateness(invoice.due_date, today)}
                )
                for invoice in unpaid
            ],
            revenue=revenue,
        )
