"""
Router FastAPI per la Dashboard
Progetto: Invoicing (Gestionale Preventivi e Fatture)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.database import get_db
from invoicing.schemas.dashboard import Dashboard
from invoicing.services.dashboard_service import DashboardService

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


def get_dashboard_service() -> DashboardService:
    """Dependency per ottenere un'istanza del DashboardService."""
    return DashboardService()


@router.get(
    "/",
    name="dashboard",
    summary="Dati dashboard",
    description="Contatori preventivi, attività recenti, documenti in attesa e fatturato mensile.",
    response_model=Dashboard,
    status_code=status.HTTP_200_OK,
)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
) -> Dashboard:
    """Recupera i dati aggregati della dashboard."""
    return await service.get_dashboard(db)
