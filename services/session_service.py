"""
Session Service
Issues and resolves the bearer tokens the mobile app sends as Authorization headers
"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from config import Config
from models import UserSession
from utils.datetime_helpers import utcnow
from utils.exception_handler import AuthenticationError
from utils.helpers import generate_session_token

logger = logging.getLogger(__name__)


def issue_session(session: Session, user_id: str, ttl_hours: Optional[int] = None) -> str:
    """Create a session for user_id and return its bearer token"""
    token = generate_session_token()
    hours = Config.SESSION_TTL_HOURS if ttl_hours is None else ttl_hours
    session.add(UserSession(
        session_id=token,
        user_id=user_id,
        status="active",
        expires_at=utcnow() + timedelta(hours=hours),
    ))
    session.flush()
    return token


def resolve_session(session: Session, authorization: Optional[str]) -> str:
    """Return the user id behind an 'Authorization: Bearer <token>' header"""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Missing bearer token")

    token = authorization.split(" ", 1)[1].strip()
    user_session = session.get(UserSession, token)
    if user_session is None or user_session.status != "active":
        raise AuthenticationError("Unknown session")
    if user_session.expires_at <= utcnow():
        logger.info(f"Expired session presented for user {user_session.user_id}")
        raise AuthenticationError("Session expired")
    return user_session.user_id
