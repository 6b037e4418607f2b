"""Row-level change feed shared by all domains.

Domains publish a ``ChangeEvent`` after a row is inserted or updated (from
their event handlers, so only committed changes are published). Views
subscribe by table, optionally narrowed to rows whose columns match a
filter, and receive every matching event until they unsubscribe.

Subscriptions are long-lived and must be torn down explicitly by the view
that opened them, either by calling ``unsubscribe()`` or by using the
subscription as a context manager.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

import structlog

logger = structlog.get_logger(__name__)


class ChangeType(Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """A single row change, carrying the row before and after the write."""

    table: str
    change_type: ChangeType
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


Callback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle for an open feed subscription."""

    def __init__(
        self,
        feed: ChangeFeed,
        table: str,
        callback: Callback,
        row_filter: dict[str, Any] | None = None,
        change_types: set[ChangeType] | None = None,
    ) -> None:
        self.id = uuid4().hex
        self.table = table
        self.callback = callback
        self.row_filter = dict(row_filter or {})
        self.change_types = set(change_types) if change_types else None
        self._feed = feed

    @property
    def active(self) -> bool:
        return self._feed.is_subscribed(self.id)

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        if self.change_types is not None and event.change_type not in self.change_types:
            return False
        row = event.new or event.old
        return all(str(row.get(column)) == str(value) for column, value in self.row_filter.items())

    def unsubscribe(self) -> None:
        self._feed.unsubscribe(self.id)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.unsubscribe()


class ChangeFeed:
    """In-process fan-out of row changes to subscribers."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        table: str,
        callback: Callback,
        row_filter: dict[str, Any] | None = None,
        change_types: set[ChangeType] | None = None,
    ) -> Subscription:
        subscription = Subscription(self, table, callback, row_filter, change_types)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        logger.debug("Feed subscription opened", table=table, subscription_id=subscription.id)
        return subscription

    def unsubscribe(self, subscription_id: str) -> None:
        with self._lock:
            removed = self._subscriptions.pop(subscription_id, None)
        if removed is not None:
            logger.debug("Feed subscription closed", table=removed.table, subscription_id=subscription_id)

    def is_subscribed(self, subscription_id: str) -> bool:
        with self._lock:
            return subscription_id in self._subscriptions

    @property
    def subscription_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to every matching subscriber. Returns the delivery count."""
        with self._lock:
            targets = [s for s in self._subscriptions.values() if s.matches(event)]

        delivered = 0
        for subscription in targets:
            try:
                subscription.callback(event)
                delivered += 1
            except Exception:
                # Isolate subscriber failures
                logger.exception(
                    "Feed subscriber failed",
                    table=event.table,
                    subscription_id=subscription.id,
                )
        return delivered


_current_feed: ChangeFeed | None = None


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    global _current_feed
    if _current_feed is None:
        _current_feed = ChangeFeed()
    return _current_feed


def reset_change_feed() -> None:
    """Drop every subscription by replacing the feed (useful for tests)."""
    global _current_feed
    _current_feed = None
