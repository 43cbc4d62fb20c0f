"""
Token Codec

Mints and verifies the two signed token families:

- access tokens (HS256 JWT under JWT_SECRET, short-lived, never stored)
- single-use tokens for password reset / email verification (HS256 JWT
  under ACTION_TOKEN_SECRET, digest stored on the user row)

The two families use independent secrets so leaking one does not let an
attacker forge the other. Expiry is always checked against the shared
Clock, and a token is valid only while now < exp.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from marketplace_auth.app.services.clock import Clock
from marketplace_auth.domain.entities import TokenPurpose
from marketplace_auth.domain.errors import (
    ConfigurationError,
    InvalidCredentialsError,
    TokenExpiredError,
)
from marketplace_auth.domain.settings import AuthSettings

ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class AccessToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class SingleUseToken:
    token: str
    digest: str
    expires_at: Optional[datetime]


def keyed_digest(key: str, value: str) -> str:
    """HMAC-SHA256 hex digest, used for every token value we persist."""
    if not key:
        raise ConfigurationError(["token digest key"])
    return hmac.new(key.encode(), value.encode(), hashlib.sha256).hexdigest()


def _timestamp(value: datetime) -> float:
    # Naive datetimes are UTC throughout the service
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.timestamp()


class TokenCodec:
    def __init__(self, settings: AuthSettings, clock: Optional[Clock] = None):
        self.settings = settings
        self.clock = clock or Clock()

    def _secret(self, value: str, name: str) -> str:
        if not value:
            raise ConfigurationError([name])
        return value

    def _is_expired(self, exp) -> bool:
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return True
        return _timestamp(self.clock.now()) >= exp

    # ------------------------------------------------------------------
    # Access tokens
    # ------------------------------------------------------------------

    def mint_access_token(self, user_id: UUID) -> AccessToken:
        """
        Mint a signed access token for a user.

        Args:
            user_id: Principal the token authenticates

        Returns:
            AccessToken with the encoded JWT and its absolute expiry

        Raises:
            ConfigurationError: JWT_SECRET is empty
        """
        secret = self._secret(self.settings.jwt_secret, "JWT_SECRET")
        issued_at = self.clock.now().replace(microsecond=0)
        expires_at = issued_at + self.settings.access_token_ttl
        payload = {
            "sub": str(user_id),
            "typ": ACCESS_TOKEN_TYPE,
            "iat": int(_timestamp(issued_at)),
            "exp": int(_timestamp(expires_at)),
        }
        token = jwt.encode(payload, secret, algorithm=self.settings.jwt_algorithm)
        return AccessToken(token=token, expires_at=expires_at)

    def verify_access_token(self, token: str) -> Optional[UUID]:
        """
        Verify an access token.

        Returns the user id, or None for any malformed, forged, foreign or
        expired token. Callers cannot tell which check failed.
        """
        secret = self._secret(self.settings.jwt_secret, "JWT_SECRET")
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.jwt_algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            return None

        if claims.get("typ") != ACCESS_TOKEN_TYPE:
            return None
        if self._is_expired(claims.get("exp")):
            return None
        try:
            return UUID(claims["sub"])
        except (KeyError, TypeError, ValueError):
            return None

    # ------------------------------------------------------------------
    # Single-use tokens
    # ------------------------------------------------------------------

    def mint_single_use_token(self, user_id: UUID, purpose: TokenPurpose) -> SingleUseToken:
        """
        Mint a password reset or email verification token.

        Reset tokens expire after PASSWORD_RESET_TTL; verification tokens
        carry no expiry.
        """
        secret = self._secret(self.settings.action_token_secret, "ACTION_TOKEN_SECRET")
        issued_at = self.clock.now().replace(microsecond=0)
        payload = {
            "sub": str(user_id),
            "purpose": purpose.value,
            "jti": secrets.token_urlsafe(16),
            "iat": int(_timestamp(issued_at)),
        }
        expires_at = None
        if purpose == TokenPurpose.password_reset:
            expires_at = issued_at + self.settings.password_reset_ttl
            payload["exp"] = int(_timestamp(expires_at))

        token = jwt.encode(payload, secret, algorithm=self.settings.jwt_algorithm)
        return SingleUseToken(
            token=token,
            digest=self.digest_single_use_token(token),
            expires_at=expires_at,
        )

    def read_single_use_token(self, token: str, purpose: TokenPurpose) -> UUID:
        """
        Check signature, purpose and signed expiry of a single-use token.

        Whether the token is still the live one for its user is decided by
        the caller against the stored digest.

        Raises:
            InvalidCredentialsError: malformed, forged or wrong purpose
            TokenExpiredError: signed expiry has passed
        """
        secret = self._secret(self.settings.action_token_secret, "ACTION_TOKEN_SECRET")
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.jwt_algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidCredentialsError("single-use token failed signature check") from exc

        if claims.get("purpose") != purpose.value:
            raise InvalidCredentialsError("single-use token purpose mismatch")
        if "exp" in claims and self._is_expired(claims["exp"]):
            raise TokenExpiredError("single-use token expired")
        try:
            return UUID(claims["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidCredentialsError("single-use token has no valid subject") from exc

    def digest_single_use_token(self, token: str) -> str:
        secret = self._secret(self.settings.action_token_secret, "ACTION_TOKEN_SECRET")
        return keyed_digest(secret, token)
