from typing import Optional

from fastapi import status

from marketplace_auth.libs.result import Error

# Every authentication failure looks the same to the client
AUTH_ERROR_CODES = {"AUTH_ERROR", "INVALID_CREDENTIALS", "TOKEN_CONSUMED", "TOKEN_EXPIRED"}
INVALID_OR_EXPIRED = Error("INVALID_OR_EXPIRED", "Invalid or expired credentials")


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error, status_code: Optional[int] = None):
        self.base_error = base_error
        self.status_code = status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        super().__init__(base_error.message)


def unauthorized() -> ClientError:
    return ClientError(INVALID_OR_EXPIRED, status_code=status.HTTP_401_UNAUTHORIZED)


def raise_for_error(error: Error, client_errors: Optional[dict] = None):
    """
    Map a use case Error onto the HTTP error taxonomy.

    Args:
        error: Error carried by a failed Result
        client_errors: extra code -> status mappings for the calling route

    Raises:
        ClientError: authentication failures (401) or a mapped client error
        ServerError: infrastructure failures (503) and anything unmapped (500)
    """
    if error.code in AUTH_ERROR_CODES:
        raise unauthorized()
    if client_errors and error.code in client_errors:
        raise ClientError(error, status_code=client_errors[error.code])
    if error.code == "INFRASTRUCTURE_ERROR":
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)
