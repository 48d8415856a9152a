"""
Unit tests per i predicati di filtro dei documenti.
"""

from types import SimpleNamespace

import pytest

from invoicing.schemas.invoice import InvoiceStatus
from invoicing.schemas.quote import QuoteStatus
from invoicing.services.filters import filter_documents, matches, matches_search, matches_status


@pytest.fixture
def documents():
    """Due preventivi: uno con titolo, uno senza."""
    return [
        SimpleNamespace(num="2025-001", customer=SimpleNamespace(name="ACME"), title="Site", status="SENT"),
        SimpleNamespace(num="2025-002", customer=SimpleNamespace(name="TechStart"), title=None, status="DRAFT"),
    ]


class TestMatchesSearch:
    """Tests per la ricerca testuale."""

    def test_case_insensitive_customer_name(self, documents):
        """Test 'acme' trova il cliente ACME."""
        assert matches(documents[0], "acme", []) is True

    def test_null_title_never_matches(self, documents):
        """Test titolo assente e nessun'altra corrispondenza."""
        assert matches(documents[1], "site", []) is False

    def test_number_substring(self, documents):
        """Test ricerca per parte del numero."""
        assert matches_search(documents[1], "-002") is True

    @pytest.mark.parametrize("search_text", ["", None])
    def test_empty_search_matches_all(self, documents, search_text):
        """Test ricerca vuota: tutto incluso."""
        assert all(matches_search(document, search_text) for document in documents)


class TestMatchesStatus:
    """Tests per il filtro per stato."""

    def test_empty_set_matches_all(self, documents):
        """Test nessuno stato selezionato: tutto incluso."""
        assert all(matches_status(document, set()) for document in documents)

    def test_membership_with_enums(self, documents):
        """Test enum e stringhe del database si confrontano per valore."""
        assert matches_status(documents[0], {QuoteStatus.SENT}) is True
        assert matches_status(documents[1], {QuoteStatus.SENT, QuoteStatus.ACCEPTED}) is False

    def test_other_document_type_status(self):
        """Test stati fattura."""
        invoice = SimpleNamespace(num="2025-010", customer=SimpleNamespace(name="X"), title=None, status="PAID")

        assert matches_status(invoice, [InvoiceStatus.PAID]) is True


class TestFilterDocuments:
    """Tests per il filtro combinato."""

    def test_search_and_status_are_combined(self, documents):
        """Test inclusione solo se entrambi i predicati sono soddisfatti."""
        assert filter_documents(documents, "2025", ["DRAFT"]) == [documents[1]]

    def test_preserves_order_and_input(self, documents):
        """Test ordine preservato, lista originale invariata."""
        original = list(documents)

        assert filter_documents(documents) == original
        assert filter_documents(documents, "2025") == original
        assert documents == original

    def test_is_repeatable(self, documents):
        """Test stessa ricerca, stesso risultato."""
        first = filter_documents(documents, "tech", None)

        assert filter_documents(documents, "tech", None) == first == [documents[1]]
