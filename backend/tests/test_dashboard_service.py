"""
Tests per DashboardService sui dati dimostrativi.

La data di riferimento è fissa (20 giugno 2025): seed e dashboard
usano la stessa, così i valori attesi non dipendono dal giorno di esecuzione.
"""

import datetime
from decimal import Decimal

import pytest

from invoicing.core.config import Settings
from invoicing.schemas.activity import ActivityType
from invoicing.schemas.dashboard import QuoteCounters
from invoicing.seed import seed
from invoicing.services.dashboard_service import (
    DashboardService,
    month_window,
    previous_month_window,
)

TODAY = datetime.date(2025, 6, 20)


class TestMonthWindows:
    """Tests per le finestre mensili."""

    def test_month_window(self):
        """Test [primo del mese, primo del mese successivo)."""
        assert month_window(TODAY) == (datetime.date(2025, 6, 1), datetime.date(2025, 7, 1))

    def test_december_rolls_over(self):
        """Test dicembre: fine finestra a gennaio dell'anno dopo."""
        assert month_window(datetime.date(2025, 12, 31)) == (
            datetime.date(2025, 12, 1),
            datetime.date(2026, 1, 1),
        )

    def test_previous_month_of_january(self):
        """Test mese precedente a gennaio."""
        assert previous_month_window(datetime.date(2026, 1, 10)) == (
            datetime.date(2025, 12, 1),
            datetime.date(2026, 1, 1),
        )


@pytest.fixture
async def seeded(db_session):
    """Database con i dati dimostrativi alla data TODAY."""
    await seed(db_session, today=TODAY)
    await db_session.commit()
    return db_session


@pytest.fixture
def dashboard_service() -> DashboardService:
    return DashboardService(settings=Settings(activity_feed_size=3, dashboard_list_size=3))


class TestDashboard:
    """Tests per i dati aggregati della dashboard."""

    async def test_quote_counters(self, seeded, dashboard_service):
        """Test contatori SENT / ACCEPTED / DECLINED."""
        dashboard = await dashboard_service.get_dashboard(seeded, today=TODAY)

        assert dashboard.quote_counters == QuoteCounters(sent=2, accepted=2, declined=0)

    async def test_revenue(self, seeded, dashboard_service):
        """Test fatturato di giugno confrontato con maggio."""
        revenue = (await dashboard_service.get_dashboard(seeded, today=TODAY)).revenue

        assert revenue.total == Decimal("4500")
        assert revenue.paid_total == Decimal("0")
        assert revenue.pending_total == Decimal("4500")
        assert revenue.previous_total == Decimal("3000")
        assert revenue.evolution_percent == 50

    async def test_pending_quotes_by_expiration(self, seeded, dashboard_service):
        """Test preventivi in attesa dalla scadenza più vicina."""
        dashboard = await dashboard_service.get_dashboard(seeded, today=TODAY)

        assert [quote.title for quote in dashboard.pending_quotes] == [
            "Manutenzione annuale",
            "Rifacimento e-commerce",
        ]

    async def test_unpaid_invoices_with_lateness(self, seeded, dashboard_service):
        """Test fatture non pagate dalla scadenza più vecchia, ritardo rispetto a TODAY."""
        unpaid = (await dashboard_service.get_dashboard(seeded, today=TODAY)).unpaid_invoices

        assert [invoice.customer.name for invoice in unpaid] == ["DevCorp", "TechStart SAS"]
        assert unpaid[0].lateness.is_late is True
        assert unpaid[0].lateness.days_late == 5
        assert unpaid[1].lateness.is_late is False

    async def test_recent_activities(self, seeded, dashboard_service):
        """Test ultime tre attività, dalla più recente."""
        activities = (await dashboard_service.get_dashboard(seeded, today=TODAY)).recent_activities

        assert [entry.type for entry in activities] == [
            ActivityType.INVOICE_CREATED,
            ActivityType.INVOICE_CREATED,
            ActivityType.INVOICE_PAID,
        ]
        assert [entry.identifier for entry in activities] == ["2025-003", "2025-002", "2025-001"]

    async def test_empty_database(self, db_session, dashboard_service):
        """Test dashboard senza dati: tutto a zero."""
        dashboard = await dashboard_service.get_dashboard(db_session, today=TODAY)

        assert dashboard.quote_counters == QuoteCounters()
        assert dashboard.recent_activities == []
        assert dashboard.revenue.evolution_percent == 0
