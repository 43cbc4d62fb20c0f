"""
Translation of internal errors into use case Results.

Every AuthError carries the same generic message out of the use case; the
specific code is kept for logs and in-process callers only.
"""

import logging

from marketplace_auth.domain.errors import AuthError, InfrastructureError
from marketplace_auth.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

GENERIC_AUTH_MESSAGE = "Invalid or expired credentials"
INFRASTRUCTURE_MESSAGE = "Authentication service temporarily unavailable"


def auth_failure(operation: str, exc: AuthError) -> Result:
    logger.warning(f"{operation} rejected: {exc.code} ({exc})")
    return Return.err(Error(exc.code, GENERIC_AUTH_MESSAGE))


def infrastructure_failure(operation: str, exc: InfrastructureError) -> Result:
    logger.error(f"{operation} failed: {exc}", exc_info=exc)
    return Return.err(Error(exc.code, INFRASTRUCTURE_MESSAGE))
