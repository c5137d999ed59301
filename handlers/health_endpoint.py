"""
Health Check Endpoint Handler
Provides system health status for monitoring
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from config import Config
from database import test_connection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(request: Request):
    """Basic health check"""
    database_ok = test_connection(request.app.state.session_factory)
    if not database_ok:
        logger.error("Health check failed: database unreachable")

    return JSONResponse(
        content={
            "status": "healthy" if database_ok else "unhealthy",
            "service": "planmoni-api",
            "environment": Config.ENVIRONMENT,
            "components": {
                "database": "connected" if database_ok else "unreachable",
                **{
                    name: ("configured" if ready else "not configured")
                    for name, ready in Config.external_services().configured().items()
                },
            },
        },
        status_code=200 if database_ok else 503,
    )
