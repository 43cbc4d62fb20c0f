"""
Authentication Error Taxonomy

ConfigurationError is fatal and only raised at startup (or by a codec that
was handed an empty secret). Everything deriving from AuthError is collapsed
into one generic message before it reaches a caller; the code survives only
for logs and in-process callers. InfrastructureError marks storage failures
that are retryable and must not be reported as an authentication failure.
"""

from typing import Dict, Iterable, Optional


class ConfigurationError(Exception):
    """Required secrets are missing or unusable."""

    code = "CONFIGURATION_ERROR"

    def __init__(self, missing: Iterable[str], descriptions: Optional[Dict[str, str]] = None):
        self.missing = list(missing)
        descriptions = descriptions or {}
        lines = [
            f"  - {name}: {descriptions[name]}" if name in descriptions else f"  - {name}"
            for name in self.missing
        ]
        message = (
            "Missing required secret configuration: "
            + ", ".join(self.missing)
            + "\n"
            + "\n".join(lines)
            + "\nSet them in the environment or in env.yaml before starting the service."
        )
        super().__init__(message)


class AuthError(Exception):
    """Base for every 'verified and invalid' outcome."""

    code = "AUTH_ERROR"


class InvalidCredentialsError(AuthError):
    """Bad handle/password, or an invalid/expired access or session token."""

    code = "INVALID_CREDENTIALS"


class TokenConsumedError(AuthError):
    """Single-use token already used or superseded by a newer one."""

    code = "TOKEN_CONSUMED"


class TokenExpiredError(AuthError):
    """Single-use token past its expiry."""

    code = "TOKEN_EXPIRED"


class InfrastructureError(Exception):
    """Storage or timeout failure: could not verify, caller may retry."""

    code = "INFRASTRUCTURE_ERROR"


class EmailAlreadyExistsError(Exception):
    """Another account already owns this email address."""

    code = "EMAIL_ALREADY_EXISTS"
