"""
Tests per il registro attività: precedenza dell'identificativo,
testi del feed, append con soggetto tipizzato e lettura delle recenti.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from invoicing.core.exceptions import BusinessValidationError
from invoicing.models import Activity
from invoicing.schemas.activity import (
    ActivityType,
    CustomerSubject,
    InvoiceSubject,
    QuoteSubject,
)
from invoicing.services.activity_service import (
    ActivityService,
    activity_text,
    resolve_identifier,
)
from invoicing.services.quote_service import QuoteService


# ============================================================
# Identificativo del soggetto
# ============================================================


class TestResolveIdentifier:
    """Tests per la precedenza numero preventivo → fattura → nome → id."""

    def test_quote_number_wins(self):
        """Test il numero del preventivo ha la precedenza su tutto."""
        assert resolve_identifier("2025-001", "2025-009", "ACME", uuid.uuid4()) == "2025-001"

    def test_invoice_number_before_customer(self):
        """Test senza preventivo vale il numero fattura."""
        assert resolve_identifier(None, "2025-009", "ACME", uuid.uuid4()) == "2025-009"

    def test_customer_name(self):
        """Test senza documenti vale il nome cliente."""
        assert resolve_identifier(customer_name="ACME") == "ACME"

    def test_customer_id_fallback(self):
        """Test senza nome vale l'id cliente."""
        customer_id = uuid.uuid4()

        assert resolve_identifier(customer_id=customer_id) == str(customer_id)

    def test_empty_values_fall_through(self):
        """Test stringhe vuote passano al valore successivo."""
        assert resolve_identifier("", "", "ACME") == "ACME"

    def test_nothing_available(self):
        """Test nessun dato: stringa vuota."""
        assert resolve_identifier() == ""


class TestActivityText:
    """Tests per i testi del feed."""

    def test_every_type_has_text(self):
        """Test ogni tipo produce un testo che contiene l'identificativo."""
        for activity_type in ActivityType:
            assert "X-1" in activity_text(activity_type, "X-1")

    def test_examples(self):
        """Test alcuni testi attesi."""
        assert activity_text(ActivityType.QUOTE_SENT, "2025-001") == "Preventivo n°2025-001 inviato"
        assert activity_text(ActivityType.INVOICE_PAID, "2025-002") == "Fattura n°2025-002 pagata"
        assert activity_text(ActivityType.CUSTOMER_CREATED, "ACME") == "Cliente ACME creato"

    @pytest.mark.parametrize(
        "activity_type, kind",
        [
            (ActivityType.QUOTE_DECLINED, "quote"),
            (ActivityType.INVOICE_CANCELLED, "invoice"),
            (ActivityType.CUSTOMER_EDITED, "customer"),
        ],
    )
    def test_subject_kind(self, activity_type, kind):
        """Test il prefisso del tipo indica il soggetto atteso."""
        assert activity_type.subject_kind == kind


# ============================================================
# Append e lettura
# ============================================================


class TestActivityService:
    """Tests per ActivityService su database SQLite."""

    async def test_append_sets_only_subject_column(self, db_session, customer):
        """Test una sola colonna soggetto valorizzata."""
        activity = await ActivityService().append(
            db_session, ActivityType.CUSTOMER_EDITED, CustomerSubject(customer_id=customer.id)
        )

        assert (activity.customer_id, activity.quote_id, activity.invoice_id) == (customer.id, None, None)
        assert activity.subject == CustomerSubject(customer_id=customer.id)

    async def test_append_rejects_mismatched_subject(self, db_session, customer):
        """Test tipo QUOTE_* con soggetto cliente: errore, nessuna scrittura."""
        with pytest.raises(BusinessValidationError):
            await ActivityService().append(
                db_session, ActivityType.QUOTE_SENT, CustomerSubject(customer_id=customer.id)
            )

        assert not db_session.new

    async def test_store_enforces_exactly_one_subject(self, db_session):
        """Test il vincolo del database rifiuta un'attività senza soggetto."""
        db_session.add(Activity(type=ActivityType.CUSTOMER_CREATED.value))

        with pytest.raises(IntegrityError):
            await db_session.flush()
        await db_session.rollback()

    async def test_recent_newest_first_with_identifiers(self, db_session, customer, quote_data):
        """Test feed dal più recente, con identificativo e link risolti."""
        quote = await QuoteService().create(db_session, quote_data)
        await QuoteService().send(db_session, quote.id)

        entries = await ActivityService().recent(db_session, limit=2)

        assert [entry.type for entry in entries] == [ActivityType.QUOTE_SENT, ActivityType.QUOTE_CREATED]
        assert entries[0].identifier == quote.num
        assert entries[0].text == f"Preventivo n°{quote.num} inviato"
        assert entries[0].link == f"/quotes/{quote.id}"
        assert entries[0].subject == QuoteSubject(quote_id=quote.id)

    async def test_recent_customer_entry(self, db_session, customer):
        """Test attività cliente identificata dal nome."""
        entries = await ActivityService().recent(db_session, limit=10)

        assert len(entries) == 1
        assert entries[0].identifier == "ACME Corp"
        assert entries[0].link == f"/customers/{customer.id}"

    def test_invoice_subject_variant(self):
        """Test la variante fattura porta il proprio tag."""
        subject = InvoiceSubject(invoice_id=uuid.uuid4())

        assert subject.kind == "invoice"
