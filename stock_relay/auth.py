# stock_relay/auth.py
import logging
from enum import Enum
from fastapi import Request
from stock_relay.config import AUTH_KEY, PUBLIC_ACCESS_KEY
from stock_relay.errors import UnauthorizedError

logger = logging.getLogger(__name__)


class AccessMode(str, Enum):
    PUBLIC = "public"
    AUTHORIZED = "authorized"


def authorize(request: Request) -> AccessMode:
    """
    FastAPI dependency guarding the stock routes.
    A GET with ?key=status is let through as public access; anything else
    must send the shared secret in the Authorization header.
    """
    if request.method == "GET" and request.query_params.get("key") == PUBLIC_ACCESS_KEY:
        return AccessMode.PUBLIC

    auth_header = request.headers.get("Authorization")
    if not auth_header or auth_header != AUTH_KEY:
        logger.warning(f"🚫 Rejected {request.method} {request.url.path}: invalid or missing Authorization header")
        raise UnauthorizedError(hint=f"For public access, use ?key={PUBLIC_ACCESS_KEY} (GET requests only)")
    return AccessMode.AUTHORIZED
