"""
Unit tests per i calcoli monetari.

Funzioni pure: nessun database, righe e documenti costruiti con SimpleNamespace.
"""

import itertools
from decimal import Decimal
from types import SimpleNamespace

import pytest

from invoicing.schemas.invoice import RevenueBreakdown
from invoicing.services.calculations import (
    document_total,
    line_total,
    period_revenue,
    quote_display_total,
    revenue_evolution_percent,
    total_revenue,
)


def line(price: str, quantity: int) -> SimpleNamespace:
    return SimpleNamespace(unit_price=Decimal(price), quantity=quantity)


def invoice(status: str, *lines: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(status=status, lines=list(lines))


# ============================================================
# Totali di riga e documento
# ============================================================


class TestDocumentTotal:
    """Tests per line_total e document_total."""

    def test_line_total_no_rounding(self):
        """Test il totale riga non viene arrotondato."""
        assert line_total(line("0.333", 3)) == Decimal("0.999")

    def test_document_total_sums_lines(self):
        """Test somma dei totali di riga."""
        assert document_total([line("100", 1), line("50", 2)]) == Decimal("200")

    def test_document_total_empty(self):
        """Test documento senza righe."""
        assert document_total([]) == Decimal("0")

    def test_document_total_is_order_independent(self):
        """Test il totale è lo stesso per ogni permutazione delle righe."""
        lines = [line("19.99", 3), line("0.10", 7), line("1200", 1), line("0.01", 1)]
        expected = sum(l.unit_price * l.quantity for l in lines)

        for permutation in itertools.permutations(lines):
            assert document_total(permutation) == expected

    def test_decimal_has_no_float_drift(self):
        """Test 0.1 × 3 fa esattamente 0.3."""
        assert document_total([line("0.1", 1)] * 3) == Decimal("0.3")


class TestQuoteDisplayTotal:
    """Tests per il totale mostrato dei preventivi."""

    def test_missing_total_falls_back_to_lines(self):
        """Test total_amount assente: ricalcolo dalle righe."""
        quote = SimpleNamespace(total_amount=None, lines=[line("100", 1), line("50", 2)])

        assert quote_display_total(quote) == document_total(quote.lines)

    def test_cached_total_takes_precedence(self):
        """Test il totale memorizzato vince anche se non coincide con le righe."""
        quote = SimpleNamespace(total_amount=Decimal("999"), lines=[line("100", 1)])

        assert quote_display_total(quote) == Decimal("999")

    def test_cached_zero_is_not_missing(self):
        """Test un totale memorizzato a zero non attiva il ricalcolo."""
        quote = SimpleNamespace(total_amount=Decimal("0"), lines=[line("100", 1)])

        assert quote_display_total(quote) == Decimal("0")


# ============================================================
# Fatturato
# ============================================================


class TestPeriodRevenue:
    """Tests per il fatturato di periodo."""

    def test_cancelled_invoices_are_excluded(self):
        """Test ripartizione PAID / UNPAID con fattura annullata esclusa."""
        invoices = [
            invoice("PAID", line("100", 2)),
            invoice("UNPAID", line("50", 1)),
            invoice("CANCELLED", line("999", 1)),
        ]

        result = period_revenue(invoices)

        assert result == RevenueBreakdown(
            total=Decimal("250"),
            paid_total=Decimal("200"),
            pending_total=Decimal("50"),
        )

    def test_empty_period(self):
        """Test nessuna fattura nel periodo."""
        result = period_revenue([])

        assert result.total == result.paid_total == result.pending_total == Decimal("0")

    def test_total_revenue_ignores_status(self):
        """Test total_revenue somma tutte le fatture."""
        invoices = [invoice("PAID", line("10", 1)), invoice("CANCELLED", line("5", 1))]

        assert total_revenue(invoices) == Decimal("15")


class TestRevenueEvolution:
    """Tests per la variazione percentuale del fatturato."""

    def test_previous_zero_returns_zero(self):
        """Test periodo precedente a zero: nessuna divisione, risultato 0."""
        assert revenue_evolution_percent(Decimal("500"), Decimal("0")) == 0

    @pytest.mark.parametrize(
        "current, previous, expected",
        [
            ("150", "100", 50),
            ("50", "100", -50),
            ("100", "100", 0),
            ("4500", "3000", 50),
            ("112.5", "100", 13),
            ("87.5", "100", -12),
            ("100", "300", -67),
        ],
    )
    def test_rounding(self, current, previous, expected):
        """Test arrotondamento all'intero, metà verso +infinito."""
        assert revenue_evolution_percent(Decimal(current), Decimal(previous)) == expected
