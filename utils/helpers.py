"""Helper utilities for the Planmoni backend"""

import uuid
import time
import secrets
import logging

logger = logging.getLogger(__name__)


def generate_reference(prefix: str) -> str:
    """Transaction reference: '<prefix>-<epoch ms>-<random suffix>', e.g. 'ew-1718000000000-3f9a1c'"""
    timestamp_ms = int(time.time() * 1000)
    return f"{prefix.lower()}-{timestamp_ms}-{uuid.uuid4().hex[:6]}"


def generate_session_token() -> str:
    """Opaque bearer token for a user session"""
    return secrets.token_urlsafe(32)
