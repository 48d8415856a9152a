"""
Tests per InvoiceService su database SQLite in memoria.

Verificano creazione (scadenza di default, preventivo di origine),
pagamento e annullamento, e che il ritardo non blocchi mai le transizioni.
"""

import datetime
import uuid
from decimal import Decimal

import pytest

from conftest import activity_types, make_lines
from invoicing.core.config import get_settings
from invoicing.core.exceptions import (
    BusinessValidationError,
    InvalidTransitionError,
    NotFoundError,
)
from invoicing.schemas.invoice import InvoiceCreate, InvoiceLateness
from invoicing.services.invoice_service import InvoiceService
from invoicing.services.quote_service import QuoteService


# ============================================================
# Creazione
# ============================================================


class TestInvoiceCreate:
    """Tests per la creazione delle fatture."""

    async def test_create_unpaid_with_live_total(self, db_session, customer):
        """Test nuova fattura UNPAID, totale calcolato dalle righe."""
        invoice = await InvoiceService().create(
            db_session,
            InvoiceCreate(customer_id=customer.id, lines=make_lines(("19.99", 3), ("0.03", 1))),
        )

        assert invoice.status == "UNPAID"
        assert invoice.total == Decimal("60.00")
        assert await activity_types(db_session, invoice_id=invoice.id) == ["INVOICE_CREATED"]

    async def test_due_date_defaults_to_payment_terms(self, db_session, customer):
        """Test scadenza = emissione + giorni di pagamento configurati."""
        emit_date = datetime.date(2025, 1, 31)

        invoice = await InvoiceService().create(
            db_session,
            InvoiceCreate(customer_id=customer.id, emit_date=emit_date, lines=make_lines(("10", 1))),
        )

        expected = emit_date + datetime.timedelta(days=get_settings().invoice_payment_terms_days)
        assert invoice.due_date == expected
        assert invoice.num == "2025-001"

    async def test_linked_quote_of_same_customer(self, db_session, customer, quote_data):
        """Test fattura collegata al preventivo dello stesso cliente."""
        quote = await QuoteService().create(db_session, quote_data)

        invoice = await InvoiceService().create(
            db_session,
            InvoiceCreate(customer_id=customer.id, quote_id=quote.id, lines=make_lines(("200", 1))),
        )

        assert invoice.quote_id == quote.id

    async def test_quote_of_other_customer_is_rejected(self, db_session, other_customer, quote_data):
        """Test preventivo di un altro cliente: errore sul campo quote_id."""
        quote = await QuoteService().create(db_session, quote_data)

        with pytest.raises(BusinessValidationError) as exc_info:
            await InvoiceService().create(
                db_session,
                InvoiceCreate(
                    customer_id=other_customer.id,
                    quote_id=quote.id,
                    lines=make_lines(("200", 1)),
                ),
            )

        assert set(exc_info.value.fields) == {"quote_id"}
        assert exc_info.value.status_code == 422

    async def test_unknown_quote(self, db_session, customer):
        """Test preventivo di origine inesistente: NotFoundError."""
        with pytest.raises(NotFoundError):
            await InvoiceService().create(
                db_session,
                InvoiceCreate(customer_id=customer.id, quote_id=uuid.uuid4(), lines=make_lines(("1", 1))),
            )


# ============================================================
# Transizioni
# ============================================================


class TestInvoiceTransitions:
    """Tests per pagamento e annullamento."""

    async def test_late_invoice_can_be_paid(self, db_session, invoice_data):
        """Test fattura scaduta: segnalata in ritardo ma pagabile."""
        service = InvoiceService()
        invoice = await service.create(db_session, invoice_data)

        assert invoice.lateness == InvoiceLateness(is_late=True, days_late=5)

        result = await service.pay(db_session, invoice.id)

        assert result.new_status == "PAID"
        assert invoice.lateness is None
        assert await activity_types(db_session, invoice_id=invoice.id) == [
            "INVOICE_CREATED",
            "INVOICE_PAID",
        ]

    async def test_late_invoice_can_be_cancelled(self, db_session, invoice_data):
        """Test fattura scaduta: annullabile."""
        service = InvoiceService()
        invoice = await service.create(db_session, invoice_data)

        result = await service.cancel(db_session, invoice.id)

        assert result.new_status == "CANCELLED"
        assert "INVOICE_CANCELLED" in await activity_types(db_session, invoice_id=invoice.id)

    async def test_paid_invoice_cannot_be_paid_again(self, db_session, invoice_data):
        """Test PAID → pay rifiutato senza nuove attività."""
        service = InvoiceService()
        invoice = await service.create(db_session, invoice_data)
        await service.pay(db_session, invoice.id)

        with pytest.raises(InvalidTransitionError) as exc_info:
            await service.pay(db_session, invoice.id)

        assert exc_info.value.current_status == "PAID"
        assert len(await activity_types(db_session, invoice_id=invoice.id)) == 2

    async def test_cancelled_invoice_cannot_be_paid(self, db_session, invoice_data):
        """Test CANCELLED è uno stato finale."""
        service = InvoiceService()
        invoice = await service.create(db_session, invoice_data)
        await service.cancel(db_session, invoice.id)

        with pytest.raises(InvalidTransitionError):
            await service.pay(db_session, invoice.id)

    async def test_unknown_invoice(self, db_session):
        """Test fattura inesistente: NotFoundError."""
        with pytest.raises(NotFoundError):
            await InvoiceService().cancel(db_session, uuid.uuid4())


# ============================================================
# Letture
# ============================================================


class TestInvoiceQueries:
    """Tests per fatture non pagate e fatture di periodo."""

    async def test_unpaid_ordered_by_due_date(self, db_session, customer):
        """Test solo UNPAID, dalla scadenza più vecchia."""
        service = InvoiceService()
        emit_date = datetime.date(2025, 5, 1)
        later = await service.create(
            db_session,
            InvoiceCreate(
                customer_id=customer.id,
                emit_date=emit_date,
                due_date=datetime.date(2025, 6, 30),
                lines=make_lines(("10", 1)),
            ),
        )
        sooner = await service.create(
            db_session,
            InvoiceCreate(
                customer_id=customer.id,
                emit_date=emit_date,
                due_date=datetime.date(2025, 5, 15),
                lines=make_lines(("10", 1)),
            ),
        )
        paid = await service.create(
            db_session,
            InvoiceCreate(customer_id=customer.id, emit_date=emit_date, lines=make_lines(("10", 1))),
        )
        await service.pay(db_session, paid.id)

        unpaid = await service.get_unpaid(db_session, limit=10)

        assert [invoice.id for invoice in unpaid] == [sooner.id, later.id]

    async def test_in_period_window(self, db_session, customer):
        """Test finestra [start, end) sulla data di emissione."""
        service = InvoiceService()
        for emit_date in (datetime.date(2025, 4, 30), datetime.date(2025, 5, 1), datetime.date(2025, 6, 1)):
            await service.create(
                db_session,
                InvoiceCreate(customer_id=customer.id, emit_date=emit_date, lines=make_lines(("10", 1))),
            )

        may = await service.get_in_period(db_session, datetime.date(2025, 5, 1), datetime.date(2025, 6, 1))
        from_may = await service.get_in_period(db_session, datetime.date(2025, 5, 1))

        assert [invoice.emit_date for invoice in may] == [datetime.date(2025, 5, 1)]
        assert len(from_may) == 2
