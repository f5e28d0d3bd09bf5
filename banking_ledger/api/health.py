"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from banking_ledger.api.dependencies import get_app_logger
from banking_ledger.models.base import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    logger: logging.Logger = Depends(get_app_logger),
):
    """
    Return application health status including database connectivity.

    The database check executes a simple query to verify
    the connection is alive.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        logger.exception("database health check failed")
        db_status = "unhealthy"
    finally:
        db.rollback()

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "banking-ledger",
        "database": db_status,
    }
