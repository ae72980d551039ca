"""Event sink contract used by every command handler.

Handlers persist first, then drain each aggregate's pending events and
hand them to the publisher in the order they were raised.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from orderflow.domain.events import DomainEvent
from orderflow.domain.model.aggregate import AggregateRoot

logger = logging.getLogger(__name__)


class EventPublisher(ABC):

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Deliver one event to its subscribers."""


def publish_events(publisher: EventPublisher, *aggregates: AggregateRoot) -> int:
    """Publish the pending events of each aggregate, in order.

    An aggregate's queue is cleared only after all of its events went out,
    so a failing publisher leaves them pending for a retry.
    """
    published = 0
    for aggregate in aggregates:
        for event in aggregate.events:
            publisher.publish(event)
            logger.debug("Published %s (%s)", event.event_type, event.event_id)
            published += 1
        aggregate.clear_events()
    return published
