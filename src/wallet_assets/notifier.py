"""Same-process publish/subscribe channel for asset update events."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetUpdateEvent:
    """A wallet's cached asset set changed."""

    name: str
    wallet_id: str


UpdateHandler = Callable[[AssetUpdateEvent], None]


class UpdateNotifier:
    """Synchronous fire-and-forget event channel.

    Handlers receive every event (optionally restricted to one event name) and
    are expected to filter on ``event.wallet_id`` themselves. Events published
    while nobody is subscribed are dropped.
    """

    def __init__(self) -> None:
        """Initialize with no subscribers."""
        self._handlers: list[tuple[UpdateHandler, str | None]] = []
        self._published = 0

    def subscribe(self, handler: UpdateHandler, event_name: str | None = None) -> None:
        """Register a handler, for all events or only ``event_name``."""
        self._handlers.append((handler, event_name))

    def unsubscribe(self, handler: UpdateHandler) -> None:
        """Remove every registration of ``handler``. Unknown handlers are ignored."""
        self._handlers = [(h, name) for h, name in self._handlers if h != handler]

    def publish(self, event_name: str, wallet_id: str) -> None:
        """Dispatch an event to the currently registered handlers."""
        event = AssetUpdateEvent(name=event_name, wallet_id=wallet_id)
        self._published += 1

        # Snapshot so handlers may (un)subscribe while being called
        for handler, name in list(self._handlers):
            if name is not None and name != event_name:
                continue
            try:
                handler(event)
            except Exception as e:
                logger.warning(f"⚠️ Update handler {handler!r} failed for {event_name}/{wallet_id}: {e}")

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    @property
    def published_count(self) -> int:
        return self._published
