"""In-memory registry keeping one usage ledger per user."""
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from memory.usage_ledger import IDLE_RESET_SECONDS, UsageLedger

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Hands out an independent :class:`UsageLedger` per user id.

    Ledgers are personalisation state, not a shared cache, so two users never
    see each other's counts. The registry lock only guards the mapping; a
    ledger's own ``lock`` serializes the calls that use it. Ledgers idle for
    longer than the window are dropped whenever another ledger is requested.
    """

    def __init__(
        self,
        idle_window_seconds: float = IDLE_RESET_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.idle_window_seconds = idle_window_seconds
        self.clock = clock
        self._ledgers: Dict[str, UsageLedger] = {}
        self._lock = threading.Lock()

    def get_ledger(self, user_id: str) -> UsageLedger:
        with self._lock:
            self._prune_locked(keep=user_id)
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                ledger = UsageLedger(idle_window_seconds=self.idle_window_seconds, clock=self.clock)
                self._ledgers[user_id] = ledger
                logger.debug("Created usage ledger for new session")
            return ledger

    def drop_session(self, user_id: str) -> Optional[UsageLedger]:
        with self._lock:
            return self._ledgers.pop(user_id, None)

    def prune_idle(self) -> List[str]:
        """Forget ledgers whose session went idle; they would reset anyway."""

        with self._lock:
            return self._prune_locked()

    def _prune_locked(self, keep: Optional[str] = None) -> List[str]:
        # The requested user's ledger is kept; its own touch() performs the reset.
        now = self.clock()
        expired = [
            user_id
            for user_id, ledger in self._ledgers.items()
            if user_id != keep
            and ledger.last_call is not None
            and now - ledger.last_call > ledger.idle_window_seconds
        ]
        for user_id in expired:
            del self._ledgers[user_id]
        if expired:
            logger.info("Pruned %s idle sessions", len(expired))
        return expired

    def __len__(self) -> int:
        return len(self._ledgers)


__all__ = ["SessionRegistry"]
