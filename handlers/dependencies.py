"""
Shared FastAPI dependencies: database session per request and bearer authentication
"""

import logging
from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from database import managed_session
from services.session_service import resolve_session
from utils.exception_handler import AuthenticationError

logger = logging.getLogger(__name__)


def get_db_session(request: Request) -> Iterator[Session]:
    """One unit of work per request: commit on success, roll back on any error.

    HTTPException is a client answer, already logged by the route that
    raised it, so it rolls back without a database error log.
    """
    with managed_session(request.app.state.session_factory, expected_errors=(HTTPException,)) as session:
        yield session


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    session: Session = Depends(get_db_session),
) -> str:
    try:
        return resolve_session(session, authorization)
    except AuthenticationError as e:
        logger.info(f"🔒 AUTH_REJECTED: {e}")
        raise HTTPException(status_code=401, detail="Unauthorized")
