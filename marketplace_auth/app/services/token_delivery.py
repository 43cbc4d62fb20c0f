from abc import ABC, abstractmethod


class ITokenDelivery(ABC):
    """Hands single-use tokens to the user out of band (email in production)"""

    @abstractmethod
    async def send_password_reset(self, email: str, token: str) -> None:
        pass

    @abstractmethod
    async def send_email_verification(self, email: str, token: str) -> None:
        pass
