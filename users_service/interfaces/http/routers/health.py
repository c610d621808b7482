from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ....config import settings
from ....infrastructure.db import get_db, ping

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)


@router.get("/health")
def health(db: Session = Depends(get_db)):
    database_status = "OK"
    database_message = "database connection is working"
    try:
        ping(db)
    except SQLAlchemyError as exc:
        database_status = "ERROR"
        database_message = "database connection failed"
        logger.error("database_ping_failed", error=str(exc))

    healthy = database_status == "OK"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "OK" if healthy else "DEGRADED",
            "message": "Users API",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.APP_VERSION,
            "services": {
                "api": "OK",
                "database": {"status": database_status, "message": database_message},
            },
        },
    )
