from datetime import datetime

from marketplace_auth.domain.base import utcnow


class Clock:
    """Single source of 'now' for token and session expiry checks (naive UTC)"""

    def now(self) -> datetime:
        return utcnow()
