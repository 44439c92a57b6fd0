"""
Event Bus Interface (Domain Layer).

Pure interface definition - no implementation details.
"""
from abc import ABC, abstractmethod
from typing import Callable, List

from .events.base import DomainEvent


class EventBus(ABC):
    """Publishes committed domain events to interested subscribers."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        pass

    @abstractmethod
    async def publish_all(self, events: List[DomainEvent]) -> None:
        """
        Publish multiple domain events in order.

        Args:
            events: List of domain events to publish
        """
        pass

    @abstractmethod
    def subscribe(self, handler: Callable[[DomainEvent], None]) -> None:
        pass
