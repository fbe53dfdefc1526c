"""
Health check route.
"""
from fastapi import APIRouter, Depends

from pastebox.database import PasteStore
from pastebox.dependencies import get_store
from pastebox.models import HealthCheck

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
async def health_check(store: PasteStore = Depends(get_store)) -> HealthCheck:
    """
    Health check endpoint.
    Returns 200 with ok=true if the application can reach its store.
    """
    return HealthCheck(ok=store.is_healthy())
