"""Health check endpoint: version, uptime and database connectivity."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pictura.core.config import settings
from pictura.core.database import check_db_connected, get_db
from pictura.schemas.health import HealthResponse

router = APIRouter()

SERVICE_VERSION = "0.1.0"
_STARTED_AT = time.monotonic()


@router.get("", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """Used by load balancers and monitoring; never requires authentication."""
    return HealthResponse(
        environment=settings.APP_ENV,
        version=SERVICE_VERSION,
        timestamp=datetime.now(UTC),
        uptime_seconds=int(time.monotonic() - _STARTED_AT),
        database="connected" if check_db_connected(db) else "disconnected",
    )
