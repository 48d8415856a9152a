"""
Router FastAPI per il Registro Attività
Progetto: Invoicing (Gestionale Preventivi e Fatture)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicing.core.config import get_settings
from invoicing.core.database import get_db
from invoicing.schemas.activity import ActivityFeed
from invoicing.services.activity_service import ActivityService

router = APIRouter(
    prefix="/activities",
    tags=["Attività"],
)


def get_activity_service() -> ActivityService:
    """Dependency per ottenere un'istanza dell'ActivityService."""
    return ActivityService()


@router.get(
    "/",
    name="attivita_recenti",
    summary="Attività recenti",
    description="Le attività più recenti, dalla più nuova, con l'identificativo del soggetto.",
    response_model=ActivityFeed,
    status_code=status.HTTP_200_OK,
)
async def get_recent_activities(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Numero di voci (default da configurazione)"),
    db: AsyncSession = Depends(get_db),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityFeed:
    """Recupera il feed delle attività recenti."""
    entries = await service.recent(db, limit or get_settings().activity_feed_size)
    return ActivityFeed(items=entries)
