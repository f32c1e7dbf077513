"""
Synchronous event fan-out to registered consumers.
"""

import logging
from typing import List, Protocol, Tuple, runtime_checkable

from models.events import VoteEvent
from .errors import ConsumerNotificationError

logger = logging.getLogger(__name__)


@runtime_checkable
class EventConsumer(Protocol):
    """Anything with an on_event(event) method can subscribe."""

    def on_event(self, event: VoteEvent) -> None:
        ...


class NotificationBus:
    """
    Delivers vote events to subscribed consumers, in subscription order.
    A failing consumer is logged and skipped; the others still receive the event.
    """

    def __init__(self):
        self._consumers: List[EventConsumer] = []

    def subscribe(self, consumer: EventConsumer) -> None:
        """
        Register a consumer. Subscribing twice has no effect.

        Raises:
            TypeError: consumer has no callable on_event
        """
        if not callable(getattr(consumer, "on_event", None)):
            raise TypeError(f"{type(consumer).__name__} has no callable on_event()")
        if any(c is consumer for c in self._consumers):
            return
        self._consumers.append(consumer)
        logger.info(f"Consumer registered: {type(consumer).__name__}")

    def unsubscribe(self, consumer: EventConsumer) -> None:
        """Remove a consumer. Unknown consumers are ignored."""
        for i, registered in enumerate(self._consumers):
            if registered is consumer:
                del self._consumers[i]
                logger.info(f"Consumer unregistered: {type(consumer).__name__}")
                return

    @property
    def consumers(self) -> Tuple[EventConsumer, ...]:
        """Currently subscribed consumers."""
        return tuple(self._consumers)

    def publish(self, event: VoteEvent) -> List[ConsumerNotificationError]:
        """
        Invoke on_event on every consumer.

        Returns:
            Failures from consumers that raised (already logged)
        """
        failures: List[ConsumerNotificationError] = []
        consumers = tuple(self._consumers)
        logger.debug(f"Publishing {event.kind.value} for {event.song_id} to {len(consumers)} consumers")

        for consumer in consumers:
            try:
                consumer.on_event(event)
            except Exception as e:
                failure = ConsumerNotificationError(consumer, event.kind.value, e)
                logger.error(str(failure), exc_info=e)
                failures.append(failure)

        return failures
