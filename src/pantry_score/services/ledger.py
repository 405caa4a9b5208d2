"""Score ledger: the single writer of user inventory scores."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from pantry_score.domain.products import UserInventory
from pantry_score.errors import InventoryNotFound

_logger = logging.getLogger(__name__)


class InventoryRepository(Protocol):
    """Persistence interface for user inventories."""

    def get_by_user(self, user_id: UUID) -> UserInventory | None:
        """Return the inventory for a user, if present."""

    def increment_score(self, user_id: UUID, delta: int) -> int | None:
        """Atomically add delta to the score and return the new value.

        Returns None when the user has no inventory.
        """

    def set_score(self, user_id: UUID, score: int) -> bool:
        """Overwrite the score; return False when the user has no inventory."""


@dataclass
class _UserLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


@dataclass
class ScoreLedger:
    """Applies score deltas and overwrites, serialized per user.

    A user's lock only lives while some thread holds or waits for it.
    """

    repository: InventoryRepository
    _locks: dict[UUID, _UserLock] = field(default_factory=dict, repr=False)
    _locks_guard: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def apply_delta(self, user_id: UUID, delta: int) -> int | None:
        """Add a signed delta to the user's score.

        Returns the new score, or None when delta is zero.
        """
        if delta == 0:
            return None
        with self._user_guard(user_id):
            new_score = self.repository.increment_score(user_id, delta)
        if new_score is None:
            _logger.error("No inventory found for user %s", user_id)
            raise InventoryNotFound(user_id)
        _logger.debug(
            "Updated score for user %s by %s points to %s", user_id, delta, new_score
        )
        return new_score

    def overwrite(self, user_id: UUID, score: int) -> bool:
        """Replace the user's score with a recomputed total."""
        with self._user_guard(user_id):
            updated = self.repository.set_score(user_id, score)
        if not updated:
            _logger.warning("Skipping score reset, no inventory for user %s", user_id)
        return updated

    @contextmanager
    def _user_guard(self, user_id: UUID) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.get(user_id)
            if entry is None:
                entry = _UserLock()
                self._locks[user_id] = entry
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[user_id]
