from fastapi import APIRouter, Depends

from app.core.db import ConnectionPool
from app.core.dependencies import get_pool
from app.schemas import ErrorResponse, HealthStatus

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus, responses={500: {"model": ErrorResponse}})
def health_check(pool: ConnectionPool = Depends(get_pool)):
    # Database failures are turned into {"ok": false, "error": ...} by the app's handler.
    return HealthStatus(ok=True, db=pool.health_check())
