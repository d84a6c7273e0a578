"""Helpers for ConnectionRegistry."""

from .entry import ConnectionEntry, ConnectionKey, EntryState

__all__ = ["ConnectionEntry", "ConnectionKey", "EntryState"]
