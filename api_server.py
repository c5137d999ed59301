"""
FastAPI server for the Planmoni mobile app.
Run with: uvicorn api_server:app --host 0.0.0.0 --port 8001
"""

import os
import sys
import logging
from contextlib import asynccontextmanager
from typing import Optional

# Load .env before Config reads the environment
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env"))

from fastapi import FastAPI, Request
from sqlalchemy.orm import sessionmaker

from config import Config
from database import get_session_factory, init_db
from handlers.emergency_withdrawal import router as emergency_withdrawal_router
from handlers.health_endpoint import router as health_router
from handlers.kyc_status import router as kyc_status_router
from handlers.payout_plans import router as payout_plans_router

logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format=Config.LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration and make sure the schema exists before serving"""
    logger.info("🚀 Starting Planmoni API server")
    Config.log_environment_config()
    init_db(app.state.session_factory.kw["bind"])
    yield
    logger.info("🛑 Planmoni API server stopped")


def create_app(session_factory: Optional[sessionmaker] = None) -> FastAPI:
    """Build the application; tests pass their own session factory"""
    app = FastAPI(
        title="Planmoni API",
        description="Payout plans, emergency withdrawals and KYC status",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory or get_session_factory()

    @app.middleware("http")
    async def strip_api_prefix(request: Request, call_next):
        # The app calls /api/<route>; routes are mounted without the prefix
        if request.scope["path"].startswith("/api/"):
            request.scope["path"] = request.scope["path"][4:]
        return await call_next(request)

    app.include_router(health_router)
    app.include_router(emergency_withdrawal_router)
    app.include_router(kyc_status_router)
    app.include_router(payout_plans_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8001")))
