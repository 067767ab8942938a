"""Readiness tracking for the WhatsApp session.

The bridge finishes its handshake (QR linking, browser start-up) on its own
schedule. `ReadinessState` records that it happened and `ReadinessGate` lets
request handlers wait for it for a bounded time before delivering.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger("formrelay.readiness")

DEFAULT_POLL_INTERVAL = 0.5


class ReadinessState:
    """One-way readiness flag plus the handshake metadata that came with it.

    The flag starts false and flips to true at most once; nothing resets it
    for the lifetime of the process.
    """

    def __init__(self) -> None:
        self._ready = False
        self.info: Optional[Dict[str, Any]] = None
        self.ready_at: Optional[datetime] = None

    @property
    def ready(self) -> bool:
        return self._ready

    def mark_ready(self, info: Optional[Dict[str, Any]] = None) -> bool:
        """Set the flag. Returns False when it was already set."""
        if self._ready:
            return False
        self.info = info or {}
        self.ready_at = datetime.now(timezone.utc)
        self._ready = True
        return True


class ReadinessGate:
    """Bounded polling wait on a shared `ReadinessState`."""

    def __init__(
        self,
        state: ReadinessState,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.state = state
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    async def wait_until_ready(self, timeout: float) -> bool:
        """Wait up to `timeout` seconds for the state to become ready.

        Returns True at once when already ready. Otherwise the flag is checked
        every `poll_interval` seconds; the result is True at the first poll
        that sees it set, or False at the first poll at or past the timeout.
        """
        if self.state.ready:
            return True
        if timeout <= 0:
            return False

        logger.info("Waiting for WhatsApp client to be ready", extra={"timeout": timeout})
        started = self._clock()
        while True:
            await self._sleep(self.poll_interval)
            if self.state.ready:
                logger.info("WhatsApp client is now ready")
                return True
            if self._clock() - started >= timeout:
                logger.warning("Timeout waiting for WhatsApp client to be ready", extra={"timeout": timeout})
                return False
