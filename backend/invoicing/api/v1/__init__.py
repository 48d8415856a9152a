"""
API v1 Routes
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Router versione 1 dell'API.
"""

from fastapi import APIRouter

from invoicing.api.v1 import (
    activities, customers, dashboard, documents, invoices, quotes
)

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

# Includi i router dei moduli
api_v1_router.include_router(customers.router)
api_v1_router.include_router(documents.router)
api_v1_router.include_router(quotes.router)
api_v1_router.include_router(invoices.router)
api_v1_router.include_router(activities.router)
api_v1_router.include_router(dashboard.router)

# Esportazione
__all__ = ["api_v1_router"]
