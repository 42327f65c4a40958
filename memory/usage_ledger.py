"""Per-session usage ledger and the diversity score derived from it."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional

from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

MAX_ITEM_USAGE = 2
IDLE_RESET_SECONDS = 5 * 60
DIVERSITY_PENALTY_PER_USE = 0.3


@dataclass
class UsageLedger:
    """Counts how often each item has been recommended in a live session.

    The ledger resets itself when more than ``idle_window_seconds`` pass
    between two calls to :meth:`touch`. Counts only ever grow otherwise.
    Callers sharing a ledger across threads hold ``lock`` around a whole
    touch, snapshot and record cycle.
    """

    idle_window_seconds: float = IDLE_RESET_SECONDS
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    counts: Dict[str, int] = field(default_factory=dict)
    last_reset: Optional[float] = None
    last_call: Optional[float] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.last_reset is None:
            self.last_reset = self.clock()

    def snapshot(self) -> Mapping[str, int]:
        """Return a read-only copy for the generator and scorer."""

        return MappingProxyType(dict(self.counts))

    def touch(self) -> bool:
        """Register a new call, resetting the ledger if the session went idle.

        Returns True when a reset happened.
        """

        now = self.clock()
        expired = self.last_call is not None and now - self.last_call > self.idle_window_seconds
        if expired:
            logger.info(
                "Usage ledger idle for %.1fs, resetting %s counts", now - self.last_call, len(self.counts)
            )
            self.reset(now)
        self.last_call = now
        return expired

    def reset(self, now: Optional[float] = None) -> None:
        self.counts.clear()
        self.last_reset = self.clock() if now is None else now

    def record(self, items: Iterable[WardrobeItem]) -> None:
        for item in items:
            self.counts[item.id] = self.counts.get(item.id, 0) + 1


def diversity_score(items: Iterable[WardrobeItem], usage: Mapping[str, int]) -> float:
    """Favour outfits built from items that have not been shown recently."""

    total = sum(usage.get(item.id, 0) for item in items)
    return max(0.0, 1.0 - DIVERSITY_PENALTY_PER_USE * total)


def under_cap(item: WardrobeItem, usage: Mapping[str, int], cap: int = MAX_ITEM_USAGE) -> bool:
    return usage.get(item.id, 0) < cap


__all__ = [
    "MAX_ITEM_USAGE",
    "IDLE_RESET_SECONDS",
    "UsageLedger",
    "diversity_score",
    "under_cap",
]
