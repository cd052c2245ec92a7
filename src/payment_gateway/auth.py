"""Authentication and rate limiting helpers for the API."""

import secrets
import logging

from fastapi import HTTPException, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import ServiceSettings

logger = logging.getLogger(__name__)

security = HTTPBearer()


def create_limiter() -> Limiter:
    """Rate limiter keyed on client address; each app gets its own counters."""
    return Limiter(key_func=get_remote_address)


async def verify_api_key(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """Verify the API key from the Authorization header.
    
    Args:
        request: Incoming request; the expected key comes from the app's settings.
        credentials: HTTP Bearer credentials from the request.
    
    Returns:
        The verified API key.
    
    Raises:
        HTTPException: If API key is invalid or not configured.
    """
    settings: ServiceSettings = request.app.state.settings
    expected_key = settings.api_key
    if not expected_key:
        logger.error("API_KEY is not configured")
        raise HTTPException(status_code=500, detail="Server configuration error")
    if not secrets.compare_digest(credentials.credentials, expected_key):
        raise HTTPException(status_code=401, detail="Invalid API key")
    return credentials.credentials
