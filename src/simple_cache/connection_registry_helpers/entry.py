"""Registry keys, entries and freshness states."""

from dataclasses import dataclass
from enum import Enum

from ..redis_protocol.typing import RedisClient


class EntryState(Enum):
    """
    Freshness of a registered connection.

    FRESH entries are handed out without a probe. STALE entries must pass a
    PING before reuse; a failed probe moves the key to RECREATING, which ends
    either in a new FRESH entry or in the key being absent.
    """

    FRESH = "fresh"
    STALE = "stale"
    RECREATING = "recreating"


@dataclass(frozen=True)
class ConnectionKey:
    store: str
    index: int

    def __post_init__(self) -> None:
        if not isinstance(self.store, str) or not self.store:
            raise ValueError(f"store must be a non-empty string, got {self.store!r}")
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            raise ValueError(f"index must be a non-negative integer, got {self.index!r}")

    def __str__(self) -> str:
        return f"{self.store}/{self.index}"


@dataclass
class ConnectionEntry:
    client: RedisClient
    last_checked_at: float

    def state(self, now: float, freshness_window: float) -> EntryState:
        if now - self.last_checked_at > freshness_window:
            return EntryState.STALE
        return EntryState.FRESH

    def mark_checked(self, now: float) -> None:
        self.last_checked_at = now


__all__ = ["ConnectionEntry", "ConnectionKey", "EntryState"]
