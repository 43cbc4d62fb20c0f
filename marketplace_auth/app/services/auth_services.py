from dataclasses import dataclass
from typing import Optional

from marketplace_auth.app.services.clock import Clock
from marketplace_auth.app.services.password_hasher import PasswordHasher
from marketplace_auth.app.services.token_codec import TokenCodec
from marketplace_auth.app.services.token_delivery import ITokenDelivery
from marketplace_auth.domain.settings import AuthSettings


@dataclass(frozen=True)
class AuthServices:
    """Stateless collaborators shared by every auth use case"""

    settings: AuthSettings
    tokens: TokenCodec
    passwords: PasswordHasher
    clock: Clock
    delivery: ITokenDelivery


def build_auth_services(
    settings: AuthSettings,
    delivery: ITokenDelivery,
    clock: Optional[Clock] = None,
) -> AuthServices:
    clock = clock or Clock()
    return AuthServices(
        settings=settings,
        tokens=TokenCodec(settings, clock),
        passwords=PasswordHasher(settings.bcrypt_rounds),
        clock=clock,
        delivery=delivery,
    )
