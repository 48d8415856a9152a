"""
Router FastAPI per l'entità Customer
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Definisce gli endpoint API per la gestione dei clienti.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.database import get_db
from invoicing.schemas.customer import (
    CustomerCreate,
    CustomerList,
    CustomerRead,
    CustomerUpdate,
)
from invoicing.schemas.document import CustomerDetail
from invoicing.services.customer_service import CustomerService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/customers",
    tags=["Clienti"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_customer_service() -> CustomerService:
    """
    Dependency per ottenere un'istanza del CustomerService.

    Questo permette di iniettare il service nei router senza
    usare istanze globali, facilitando i test e la manutenzione.
    """
    return CustomerService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "/",
    name="clienti_lista",
    summary="Lista clienti",
    description="Recupera la lista dei clienti con eventuale filtro di ricerca.",
    response_model=CustomerList,
    status_code=status.HTTP_200_OK,
)
async def get_customers(
    search: Optional[str] = Query(None, description="Termine di ricerca"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerList:
    """
    Recupera la lista dei clienti.

    Args:
        search: Termine di ricerca opzionale su nome, indirizzo, email, telefono
        db: Sessione database
        service: Service clienti

    Returns:
        CustomerList: Clienti e totale
    """
    customers, total = await service.get_all(db, search=search)
    return CustomerList(
        items=[CustomerRead.model_validate(customer) for customer in customers],
        total=total,
    )


@router.get(
    "/{customer_id}",
    name="cliente_dettaglio",
    summary="Dettaglio cliente",
    description="Recupera il cliente con i suoi preventivi e le sue fatture.",
    response_model=CustomerDetail,
    status_code=status.HTTP_200_OK,
)
async def get_customer(
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetail:
    """
    Recupera il dettaglio di un cliente.

    Raises:
        NotFoundError: Se il cliente non esiste
    """
    customer = await service.get_by_id(db, customer_id, with_documents=True)
    return CustomerDetail.model_validate(customer)


@router.post(
    "/",
    name="cliente_crea",
    summary="Crea cliente",
    description="Crea un nuovo cliente e registra l'attività corrispondente.",
    response_model=CustomerRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    data: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    """
    Crea un nuovo cliente.

    Args:
        data: Dati del cliente
        db: Sessione database
        service: Service clienti

    Returns:
        CustomerRead: Il cliente creato
    """
    customer = await service.create(db, data)
    await db.commit()
    return CustomerRead.model_validate(customer)


@router.put(
    "/{customer_id}",
    name="cliente_aggiorna",
    summary="Aggiorna cliente",
    description="Aggiorna i dati di un cliente esistente.",
    response_model=CustomerRead,
    status_code=status.HTTP_200_OK,
)
async def update_customer(
    data: CustomerUpdate,
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    """
    Aggiorna un cliente.

    Raises:
        NotFoundError: Se il cliente non esiste
    """
    customer = await service.update(db, customer_id, data)
    await db.commit()
    return CustomerRead.model_validate(customer)


@router.delete(
    "/{customer_id}",
    name="cliente_elimina",
    summary="Elimina cliente",
    description="Elimina un cliente con tutti i suoi documenti e le relative attività.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_customer(
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> None:
    """
    Elimina un cliente.

    Raises:
        NotFoundError: Se il cliente non esiste
    """
    await service.delete(db, customer_id)
    await db.commit()
