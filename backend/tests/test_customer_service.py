"""
Tests per CustomerService: schemi di input, attività e cancellazione a cascata.
"""

import uuid

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select

from conftest import activity_types, make_lines
from invoicing.core.exceptions import NotFoundError
from invoicing.models import Activity, Customer, Invoice, InvoiceLine, Quote, QuoteLine
from invoicing.schemas.customer import CustomerCreate, CustomerUpdate, compose_address
from invoicing.schemas.invoice import InvoiceCreate
from invoicing.schemas.quote import QuoteCreate
from invoicing.services.customer_service import CustomerService
from invoicing.services.invoice_service import InvoiceService
from invoicing.services.quote_service import QuoteService


# ============================================================
# Schemi di input
# ============================================================


class TestCustomerSchemas:
    """Tests per validazione e normalizzazione dei dati cliente."""

    def test_address_is_composed(self):
        """Test indirizzo composto da via, CAP e città."""
        data = CustomerCreate(name=" ACME ", street="Via Roma 1", postal_code="00100", city="Roma")

        assert data.name == "ACME"
        assert data.address == "Via Roma 1, 00100 Roma"
        assert compose_address(" Via Po 2 ", "10100", "Torino ") == "Via Po 2, 10100 Torino"

    def test_phone_is_normalized(self):
        """Test spazi rimossi dal telefono."""
        data = CustomerCreate(name="A", street="S", postal_code="1", city="C", phone="+39 06 1234")

        assert data.phone == "+39061234"

    @pytest.mark.parametrize(
        "field, value",
        [("name", ""), ("email", "non-una-email"), ("phone", "06-ABC")],
    )
    def test_invalid_fields(self, field, value):
        """Test campi non validi rifiutati per campo."""
        payload = {"name": "A", "street": "S", "postal_code": "1", "city": "C", field: value}

        with pytest.raises(PydanticValidationError) as exc_info:
            CustomerCreate(**payload)

        assert exc_info.value.errors()[0]["loc"][0] == field

    def test_update_requires_all_address_parts(self):
        """Test via senza CAP e città: rifiutato."""
        with pytest.raises(PydanticValidationError):
            CustomerUpdate(street="Via Nuova 3")

    def test_update_rejects_null_name(self):
        """Test nome omesso accettato, nome nullo rifiutato."""
        assert "name" not in CustomerUpdate(phone="0612").model_dump(exclude_unset=True)

        with pytest.raises(PydanticValidationError) as exc_info:
            CustomerUpdate(name=None)

        assert exc_info.value.errors()[0]["loc"] == ("name",)

    def test_update_empty_email_is_none(self):
        """Test email vuota normalizzata come in creazione."""
        assert CustomerUpdate(email="  ").email is None


# ============================================================
# Service
# ============================================================


class TestCustomerService:
    """Tests per CRUD clienti su database SQLite."""

    async def test_create_appends_activity(self, db_session, customer):
        """Test CUSTOMER_CREATED registrata alla creazione."""
        assert customer.address == "Via Roma 1, 00100 Roma"
        assert await activity_types(db_session, customer_id=customer.id) == ["CUSTOMER_CREATED"]

    async def test_update_partial(self, db_session, customer):
        """Test aggiornamento della sola email, indirizzo invariato."""
        updated = await CustomerService().update(
            db_session, customer.id, CustomerUpdate(email="billing@acme.com")
        )

        assert updated.email == "billing@acme.com"
        assert updated.address == "Via Roma 1, 00100 Roma"
        assert await activity_types(db_session, customer_id=customer.id) == [
            "CUSTOMER_CREATED",
            "CUSTOMER_EDITED",
        ]

    async def test_update_address(self, db_session, customer):
        """Test nuovo indirizzo composto dalle parti."""
        updated = await CustomerService().update(
            db_session,
            customer.id,
            CustomerUpdate(street="Via Milano 10", postal_code="20100", city="Milano"),
        )

        assert updated.address == "Via Milano 10, 20100 Milano"

    async def test_update_unknown(self, db_session):
        """Test cliente inesistente: NotFoundError."""
        with pytest.raises(NotFoundError):
            await CustomerService().update(db_session, uuid.uuid4(), CustomerUpdate(name="X"))

    async def test_search(self, db_session, customer, other_customer):
        """Test ricerca su nome e indirizzo, ordine alfabetico."""
        service = CustomerService()

        by_city, total = await service.get_all(db_session, search="milano")
        everyone, _ = await service.get_all(db_session)

        assert [c.id for c in by_city] == [other_customer.id]
        assert total == 1
        assert [c.name for c in everyone] == ["ACME Corp", "TechStart SAS"]


class TestCustomerDelete:
    """Tests per la cancellazione a cascata."""

    async def test_delete_cascades_documents_and_activities(self, database, db_session, customer, other_customer):
        """Test cliente eliminato con documenti, righe e attività; l'altro cliente resta."""
        quote = await QuoteService().create(
            db_session, QuoteCreate(customer_id=customer.id, lines=make_lines(("100", 1)))
        )
        await QuoteService().send(db_session, quote.id)
        invoice = await InvoiceService().create(
            db_session,
            InvoiceCreate(customer_id=customer.id, quote_id=quote.id, lines=make_lines(("100", 1))),
        )
        await InvoiceService().pay(db_session, invoice.id)
        await db_session.commit()

        async with database.session() as session:
            await CustomerService().delete(session, customer.id)
            await session.commit()

        async with database.session() as session:
            counts = {
                model.__tablename__: await session.scalar(select(func.count()).select_from(model))
                for model in (Customer, Quote, QuoteLine, Invoice, InvoiceLine)
            }
            remaining = list((await session.execute(select(Activity))).scalars().all())

        assert counts == {
            "customers": 1,
            "quotes": 0,
            "quote_lines": 0,
            "invoices": 0,
            "invoice_lines": 0,
        }
        assert [(a.type, a.customer_id) for a in remaining] == [("CUSTOMER_CREATED", other_customer.id)]

    async def test_delete_unknown(self, db_session):
        """Test cliente inesistente: NotFoundError."""
        with pytest.raises(NotFoundError):
            await CustomerService().delete(db_session, uuid.uuid4())
