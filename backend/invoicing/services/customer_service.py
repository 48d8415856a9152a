"""
Service Layer per l'entità Customer
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Definisce la logica di business per la gestione dei clienti:
- Ricerca e dettaglio con i documenti del cliente
- Creazione e modifica con registrazione dell'attività
- Eliminazione con cascata esplicita su documenti e attività
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from invoicing.core.database import map_store_errors, retry_read
from invoicing.core.exceptions import NotFoundError
from invoicing.models import Activity, Customer
from invoicing.schemas.activity import ActivityType, CustomerSubject
from invoicing.schemas.customer import CustomerCreate, CustomerUpdate
from invoicing.services.activity_service import ActivityService

# Logger per questo modulo
logger = logging.getLogger(__name__)


class CustomerService:
    """
    Service per la gestione delle operazioni CRUD sui clienti.

    Fornisce metodi asincroni per interagire con il database
    in modo centralizzato, senza dipendenze da FastAPI.

    Usage with Dependency Injection:
        from invoicing.services.customer_service import CustomerService

        @app.get("/customers")
        async def get_customers(service: CustomerService = Depends(get_customer_service)):
            return await service.get_all(db)
    """

    def __init__(self, activity_service: Optional[ActivityService] = None) -> None:
        self.activity_service = activity_service or ActivityService()

    async def _load(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
        with_documents: bool = False,
    ) -> Customer:
        """Carica il cliente, opzionalmente con preventivi e fatture."""
        query = select(Customer).where(Customer.id == customer_id)
        if with_documents:
            query = query.options(
                selectinload(Customer.quotes),
                selectinload(Customer.invoices),
            )
        result = await db.execute(query)
        customer = result.scalar_one_or_none()

        if not customer:
            logger.warning("Cliente non trovato: %s", customer_id)
            raise NotFoundError(f"Cliente con ID {customer_id} non trovato")
        return customer

    @retry_read
    async def get_all(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
    ) -> tuple[list[Customer], int]:
        """
        Recupera i clienti in ordine alfabetico.

        Args:
            db: Sessione database
            search: Termine di ricerca su nome, indirizzo, email e telefono

        Returns:
            Tuple di (lista clienti, totale)
        """
        query = select(Customer).order_by(Customer.name.asc())

        if search:
            search_term = f"%{search}%"
            query = query.where(
                or_(
                    Customer.name.ilike(search_term),
                    Customer.address.ilike(search_term),
                    Customer.email.ilike(search_term),
                    Customer.phone.ilike(search_term),
                )
            )

        result = await db.execute(query)
        customers = list(result.scalars().all())

        logger.debug("Recuperati %s clienti (search=%s)", len(customers), search)
        return customers, len(customers)

    @retry_read
    async def get_by_id(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
        with_documents: bool = False,
    ) -> Customer:
        """
        Recupera un cliente per ID.

        Args:
            db: Sessione database
            customer_id: UUID del cliente
            with_documents: Se True carica anche preventivi e fatture

        Raises:
            NotFoundError: Se il cliente non esiste
        """
        return await self._load(db, customer_id, with_documents=with_documents)

    @map_store_errors
    async def create(self, db: AsyncSession, customer_data: CustomerCreate) -> Customer:
        """
        Crea un nuovo cliente e registra l'attività CUSTOMER_CREATED.

        Args:
            db: Sessione database
            customer_data: Dati del cliente

        Returns:
            Customer: Il cliente creato
        """
        customer = Customer(
            name=customer_data.name,
            address=customer_data.address,
            email=customer_data.email,
            phone=customer_data.phone,
        )
        db.add(customer)
        await db.flush()

        await self.activity_service.append(
            db, ActivityType.CUSTOMER_CREATED, CustomerSubject(customer_id=customer.id)
        )

        logger.info("Creato cliente: %s - %s", customer.id, customer.name)
        return customer

    @map_store_errors
    async def update(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
        customer_data: CustomerUpdate,
    ) -> Customer:
        """
        Aggiorna un cliente e registra l'attività CUSTOMER_EDITED.

        Args:
            db: Sessione database
            customer_id: UUID del cliente da aggiornare
            customer_data: Dati parziali del cliente

        Returns:
            Customer: Il cliente aggiornato

        Raises:
            NotFoundError: Se il cliente non esiste
        """
        customer = await self._load(db, customer_id)

        # Estrai solo i campi inviati nel payload
        update_data = customer_data.model_dump(
            exclude_unset=True,
            exclude={"street", "postal_code", "city"},
        )
        if customer_data.address is not None:
            update_data["address"] = customer_data.address

        for field, value in update_data.items():
            setattr(customer, field, value)
        await db.flush()

        await self.activity_service.append(
            db, ActivityType.CUSTOMER_EDITED, CustomerSubject(customer_id=customer.id)
        )

        logger.info("Aggiornato cliente: %s - %s", customer.id, customer.name)
        return customer

    @map_store_errors
    async def delete(self, db: AsyncSession, customer_id: uuid.UUID) -> None:
        """
        Elimina definitivamente un cliente.

        La cascata è esplicita:
        1. Attività del cliente, dei suoi preventivi e delle sue fatture
        2. Preventivi e fatture del cliente, con le loro righe

        Raises:
            NotFoundError: Se il cliente non esiste
        """
        customer = await self._load(db, customer_id, with_documents=True)
        quote_ids = [quote.id for quote in customer.quotes]
        invoice_ids = [invoice.id for invoice in customer.invoices]

        await db.execute(
            delete(Activity)
            .where(
                or_(
                    Activity.customer_id == customer.id,
                    Activity.quote_id.in_(quote_ids),
                    Activity.invoice_id.in_(invoice_ids),
                )
            )
            .execution_options(synchronize_session="fetch")
        )

        await db.delete(customer)
        await db.flush()

        logger.warning(
            "Eliminato cliente %s - %s (%d preventivi, %d fatture)",
            customer.id, customer.name, len(quote_ids), len(invoice_ids),
        )
