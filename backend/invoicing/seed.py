"""
Dati dimostrativi
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Popola un database vuoto con clienti, preventivi e fatture di esempio.
Tutto passa dai service, quindi numerazione, totali e attività
sono gli stessi prodotti dall'uso reale dell'applicazione.
"""

import datetime
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.schemas.common import DocumentLineCreate
from invoicing.schemas.customer import CustomerCreate
from invoicing.schemas.invoice import InvoiceCreate
from invoicing.schemas.quote import QuoteCreate
from invoicing.services.activity_service import ActivityService
from invoicing.services.customer_service import CustomerService
from invoicing.services.invoice_service import InvoiceService
from invoicing.services.quote_service import QuoteService

# Logger per questo modulo
logger = logging.getLogger(__name__)

DEMO_CUSTOMERS = [
    CustomerCreate(
        name="ACME Corp",
        street="Via della Pace 123",
        postal_code="20121",
        city="Milano",
        email="contact@acme.com",
        phone="0123456789",
    ),
    CustomerCreate(
        name="TechStart SAS",
        street="Corso Vittorio Emanuele 45",
        postal_code="10121",
        city="Torino",
        email="hello@techstart.fr",
        phone="0987654321",
    ),
    CustomerCreate(
        name="DevCorp",
        street="Viale Europa 78",
        postal_code="00144",
        city="Roma",
        email="dev@devcorp.io",
        phone="0612345678",
    ),
]


def _lines(*items: tuple[str, str, int]) -> list[DocumentLineCreate]:
    return [
        DocumentLineCreate(description=description, unit_price=Decimal(price), quantity=quantity)
        for description, price, quantity in items
    ]


async def seed(db: AsyncSession, today: Optional[datetime.date] = None) -> dict[str, int]:
    """
    Crea i dati dimostrativi nella sessione indicata.

    Il commit resta a carico del chiamante.

    Args:
        db: Sessione database (su un database vuoto)
        today: Data di riferimento (default: oggi)

    Returns:
        dict: Numero di clienti, preventivi e fatture creati
    """
    today = today or datetime.date.today()
    last_month = (today.replace(day=1) - datetime.timedelta(days=1)).replace(day=15)
    this_month = today.replace(day=1)

    activity_service = ActivityService()
    customer_service = CustomerService(activity_service)
    quote_service = QuoteService(activity_service)
    invoice_service = InvoiceService(activity_service)

    acme, techstart, devcorp = [
        await customer_service.create(db, data) for data in DEMO_CUSTOMERS
    ]

    website = await quote_service.create(db, QuoteCreate(
        customer_id=acme.id,
        title="Sito web vetrina",
        emit_date=last_month,
        lines=_lines(
            ("Design UI/UX", "800", 1),
            ("Sviluppo frontend", "1200", 1),
            ("Hosting 1 anno", "500", 1),
        ),
    ))
    mobile_app = await quote_service.create(db, QuoteCreate(
        customer_id=techstart.id,
        title="Applicazione mobile",
        emit_date=this_month,
        lines=_lines(
            ("Sviluppo iOS", "2000", 1),
            ("Sviluppo Android", "2000", 1),
            ("API Backend", "500", 1),
        ),
    ))
    ecommerce = await quote_service.create(db, QuoteCreate(
        customer_id=devcorp.id,
        title="Rifacimento e-commerce",
        emit_date=this_month,
        expiration_date=today + datetime.timedelta(days=5),
        lines=_lines(
            ("Audit tecnico", "500", 1),
            ("Restyling grafico", "1200", 1),
            ("Sviluppo", "2100", 1),
        ),
    ))
    maintenance = await quote_service.create(db, QuoteCreate(
        customer_id=acme.id,
        title="Manutenzione annuale",
        emit_date=this_month,
        expiration_date=today + datetime.timedelta(days=1),
        lines=_lines(("Supporto tecnico", "100", 12)),
    ))

    for quote in (website, mobile_app, ecommerce, maintenance):
        await quote_service.send(db, quote.id)
    for quote in (website, mobile_app):
        await quote_service.accept(db, quote.id)

    paid_invoice = await invoice_service.create(db, InvoiceCreate(
        customer_id=acme.id,
        quote_id=website.id,
        title="Fattura - Sito web vetrina",
        emit_date=last_month,
        due_date=last_month + datetime.timedelta(days=30),
        lines=_lines(
            ("Design UI/UX", "800", 1),
            ("Sviluppo frontend", "1200", 1),
            ("Hosting 1 anno", "500", 1),
        ),
    ))
    await invoice_service.pay(db, paid_invoice.id)

    await invoice_service.create(db, InvoiceCreate(
        customer_id=techstart.id,
        quote_id=mobile_app.id,
        title="Fattura - Applicazione mobile",
        emit_date=this_month,
        due_date=today + datetime.timedelta(days=10),
        lines=_lines(
            ("Sviluppo iOS", "2000", 1),
            ("Sviluppo Android", "2000", 1),
            ("API Backend", "500", 1),
        ),
    ))
    # Fattura scaduta: emessa 35 giorni fa, scadenza 5 giorni fa
    await invoice_service.create(db, InvoiceCreate(
        customer_id=devcorp.id,
        title="Fattura - Consulenza",
        emit_date=today - datetime.timedelta(days=35),
        due_date=today - datetime.timedelta(days=5),
        lines=_lines(("Consulenza tecnica", "500", 1)),
    ))

    counts = {"customers": 3, "quotes": 4, "invoices": 3}
    logger.info("Dati dimostrativi creati: %s", counts)
    return counts
