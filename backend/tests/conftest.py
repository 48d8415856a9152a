"""
Pytest configuration and fixtures per il backend Invoicing.

Due famiglie di fixture:
- mock_db: AsyncSession finta per i test di unità
- database / db_session: SQLite in memoria (aiosqlite) con foreign key
  attive, per i test dei service e dell'API
"""

import datetime
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from invoicing.core.database import Database, get_db
from invoicing.models import Activity, Customer
from invoicing.schemas.common import DocumentLineCreate
from invoicing.schemas.customer import CustomerCreate
from invoicing.schemas.invoice import InvoiceCreate
from invoicing.schemas.quote import QuoteCreate
from invoicing.services.customer_service import CustomerService


# ============================================================
# Fixtures per AsyncSession Mock
# ============================================================


@pytest.fixture
def mock_db():
    """Crea un mock di AsyncSession."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    db.bind = None
    return db


# ============================================================
# Fixtures per Database SQLite in memoria
# ============================================================


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Database SQLite in memoria con tutte le tabelle create."""
    database = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Sessione sul database di test."""
    async with database.session() as session:
        yield session


@pytest.fixture
async def customer(db_session: AsyncSession) -> Customer:
    """Cliente già salvato."""
    customer = await CustomerService().create(
        db_session,
        CustomerCreate(
            name="ACME Corp",
            street="Via Roma 1",
            postal_code="00100",
            city="Roma",
            email="contact@acme.com",
            phone="0123456789",
        ),
    )
    await db_session.commit()
    return customer


@pytest.fixture
async def other_customer(db_session: AsyncSession) -> Customer:
    """Secondo cliente, per i controlli di appartenenza."""
    customer = await CustomerService().create(
        db_session,
        CustomerCreate(
            name="TechStart SAS",
            street="Corso Italia 45",
            postal_code="20122",
            city="Milano",
        ),
    )
    await db_session.commit()
    return customer


# ============================================================
# Fixtures per dati di creazione
# ============================================================


def make_lines(*items: tuple[str, int]) -> list[DocumentLineCreate]:
    """Righe documento da coppie (prezzo, quantità)."""
    return [
        DocumentLineCreate(description=f"Voce {index}", unit_price=Decimal(price), quantity=quantity)
        for index, (price, quantity) in enumerate(items, start=1)
    ]


@pytest.fixture
def quote_data(customer: Customer) -> QuoteCreate:
    """Preventivo con due righe: 100×1 e 50×2."""
    return QuoteCreate(
        customer_id=customer.id,
        title="Sito web vetrina",
        emit_date=datetime.date(2025, 3, 10),
        lines=make_lines(("100", 1), ("50", 2)),
    )


@pytest.fixture
def invoice_data(customer: Customer) -> InvoiceCreate:
    """Fattura già scaduta di 5 giorni."""
    today = datetime.date.today()
    return InvoiceCreate(
        customer_id=customer.id,
        title="Consulenza",
        emit_date=today - datetime.timedelta(days=35),
        due_date=today - datetime.timedelta(days=5),
        lines=make_lines(("500", 1)),
    )


# ============================================================
# Helper per le attività
# ============================================================


async def activity_types(db: AsyncSession, **subject) -> list[str]:
    """Tipi delle attività registrate per il soggetto indicato (es. quote_id=...)."""
    stmt = select(Activity.type).order_by(Activity.created_at.asc())
    for column, value in subject.items():
        stmt = stmt.where(getattr(Activity, column) == value)
    result = await db.execute(stmt)
    return list(result.scalars().all())


# ============================================================
# Fixtures per l'API
# ============================================================


@pytest.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Client HTTP sull'applicazione, con sessioni dal database di test."""
    from invoicing.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with database.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
