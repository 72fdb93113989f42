"""
FastAPI dependencies shared by the endpoints.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from typing import Optional

from ledger_api.core.config import settings
from ledger_api.core.exceptions import Unauthorized
from ledger_api.core.security import decode_token
from ledger_api.services.status_broadcaster import StatusBroadcaster

# HTTP Bearer token scheme (Authorization: Bearer <token>); absence is handled below
bearer_scheme = HTTPBearer(auto_error=False)


def get_broadcaster(request: Request) -> StatusBroadcaster:
    """Return the status broadcaster created in the application lifespan."""
    return request.app.state.status_broadcaster


async def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Validate the bearer token when REQUIRE_AUTH is enabled.

    Returns the username carried by the token, or None when enforcement is
    disabled and no token was sent.

    Raises:
        Unauthorized: If enforcement is on and the token is missing, invalid or expired
    """
    if credentials is None:
        if settings.REQUIRE_AUTH:
            raise Unauthorized("Authentication required")
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        if settings.REQUIRE_AUTH:
            raise Unauthorized("Could not validate credentials")
        return None

    username = payload.get("username")
    if username is None and settings.REQUIRE_AUTH:
        raise Unauthorized("Could not validate credentials")
    return username
