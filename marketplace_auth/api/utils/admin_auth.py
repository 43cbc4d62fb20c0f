"""
Admin API Key Authentication

Validates admin API keys for system administration endpoints.
"""

import hmac

from fastapi import Header, Request, status

from marketplace_auth.api.error import ClientError
from marketplace_auth.libs.result import Error


async def verify_admin_api_key(request: Request, x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Service-to-service auth, different from user access tokens. When no
    ADMIN_API_KEY is configured every call is rejected.

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    valid_admin_key = request.app.state.admin_api_key

    if not valid_admin_key or not hmac.compare_digest(
        x_admin_api_key.encode(), str(valid_admin_key).encode()
    ):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
