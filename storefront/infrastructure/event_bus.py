"""
Event Bus Implementation (Infrastructure Layer).

Notifies in-process subscribers of committed domain events.
"""
import asyncio
import json
import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from storefront.domain.event_bus import EventBus
from storefront.domain.events.base import DomainEvent


logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    In-Memory Event Bus Implementation.

    Keeps a bounded history of published events for inspection and
    notifies subscribers in registration order. A failing subscriber
    is logged and never affects the publisher.
    """

    def __init__(self, history_size: int = 1000):
        self._subscribers: List[Callable[[DomainEvent], None]] = []
        self.history: Deque[DomainEvent] = deque(maxlen=history_size)

    async def publish(self, event: DomainEvent) -> None:
        logger.info(f"Publishing event: {event.event_type} (aggregate: {event.aggregate_id})")
        self.history.append(event)
        await self._notify_subscribers(event)

    async def publish_all(self, events: List[DomainEvent]) -> None:
        if not events:
            return
        logger.info(f"Publishing {len(events)} events")
        for event in events:
            await self.publish(event)

    def subscribe(self, handler: Callable[[DomainEvent], None]) -> None:
        if handler not in self._subscribers:
            self._subscribers.append(handler)
            logger.info(f"Registered event subscriber: {handler.__name__}")

    def unsubscribe(self, handler: Callable[[DomainEvent], None]) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)
            logger.info(f"Unregistered event subscriber: {handler.__name__}")

    async def _notify_subscribers(self, event: DomainEvent) -> None:
        for subscriber in list(self._subscribers):
            try:
                if asyncio.iscoroutinefunction(subscriber):
                    await subscriber(event)
                else:
                    subscriber(event)
            except Exception as e:
                logger.error(f"Subscriber {subscriber.__name__} failed: {e}", exc_info=True)


def log_domain_event(event: DomainEvent) -> None:
    """Audit subscriber: one JSON log line per committed event."""
    logger.info(f"Domain event: {json.dumps(event.to_dict(), default=str)}")


# Global event bus instance
_event_bus_instance: Optional[InMemoryEventBus] = None


def get_event_bus() -> InMemoryEventBus:
    """
    Get or create global event bus instance.

    The instance is created with the audit log subscriber attached.

    Returns:
        Global event bus instance
    """
    global _event_bus_instance

    if _event_bus_instance is None:
        _event_bus_instance = InMemoryEventBus()
        _event_bus_instance.subscribe(log_domain_event)

    return _event_bus_instance
