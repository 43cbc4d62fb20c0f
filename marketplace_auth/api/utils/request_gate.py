"""
Request Gate

Access-token check in front of protected handlers. Purely cryptographic:
the session store is never consulted here.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Request

from marketplace_auth.api.error import unauthorized
from marketplace_auth.app.services.token_codec import TokenCodec

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        return None
    return parts[1]


class RequestGate:
    def __init__(self, tokens: TokenCodec):
        self.tokens = tokens

    def authenticate(self, request: Request) -> Optional[UUID]:
        """Principal id behind the request's bearer token, or None."""
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token is None:
            return None
        user_id = self.tokens.verify_access_token(token)
        if user_id is not None:
            request.state.user_id = user_id
        return user_id

    def verify(self, request: Request) -> UUID:
        """
        Verify the request's access token.

        Missing, malformed, forged and expired tokens all produce the same
        401 response before any handler logic runs.

        Raises:
            ClientError: 401 INVALID_OR_EXPIRED
        """
        user_id = self.authenticate(request)
        if user_id is None:
            logger.debug(f"Rejected unauthenticated request to {request.url.path}")
            raise unauthorized()
        return user_id
