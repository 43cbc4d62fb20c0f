import logging

from marketplace_auth.app.services.token_delivery import ITokenDelivery

logger = logging.getLogger(__name__)


class LoggingTokenDelivery(ITokenDelivery):
    """
    Default delivery adapter.

    Email sending lives outside this service; this adapter only records that
    a dispatch was requested. Token values are never written to the log.
    """

    async def send_password_reset(self, email: str, token: str) -> None:
        logger.info(f"Password reset email queued for {email}")

    async def send_email_verification(self, email: str, token: str) -> None:
        logger.info(f"Verification email queued for {email}")
