"""
Session Sweeper

Background asyncio task that periodically deletes expired session records.
It opens its own database session per cycle and never runs inside a request.
"""

import asyncio
import contextlib
import logging
from datetime import timedelta
from typing import Callable, Optional

from marketplace_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from marketplace_auth.app.services.auth_services import AuthServices
from marketplace_auth.app.use_cases.sessions import SweepExpiredSessionsUseCase, SweepResponse
from marketplace_auth.libs.result import Result

logger = logging.getLogger(__name__)


class SessionSweeper:
    def __init__(self, session_factory: Callable, auth: AuthServices, interval: timedelta):
        self.session_factory = session_factory
        self.auth = auth
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> Result[SweepResponse]:
        """Run a single sweep cycle on a fresh database session."""
        async with self.session_factory() as session:
            uow = SqlAlchemyUnitOfWork(session, self.auth.settings)
            return await SweepExpiredSessionsUseCase(uow, self.auth).execute()

    async def _run(self) -> None:
        seconds = self.interval.total_seconds()
        try:
            while True:
                try:
                    result = await self.run_once()
                    if result.is_err():
                        logger.warning(f"Session sweep failed: {result.error.code}")
                except asyncio.CancelledError:
                    raise
                except Exception:
                    # One failed cycle must not stop the loop
                    logger.exception("Session sweep cycle crashed")
                await asyncio.sleep(seconds)
        except asyncio.CancelledError:
            logger.info("Session sweeper stopped")

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Session sweeper started (every {int(self.interval.total_seconds())}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
