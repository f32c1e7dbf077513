"""Tests for event fan-out and consumer isolation."""

import logging

import pytest

from conftest import RecordingConsumer, make_song
from models.events import EventKind, VoteEvent
from services.errors import ConsumerNotificationError
from services.notification_bus import EventConsumer, NotificationBus


def make_event(kind: EventKind = EventKind.VOTE_UPDATE) -> VoteEvent:
    song = make_song("a", votes=1)
    return VoteEvent(kind=kind, song_id="a", new_vote_count=1, leader=song, roster=(song,))


class ExplodingConsumer:
    def __init__(self):
        self.calls = 0

    def on_event(self, event):
        self.calls += 1
        raise RuntimeError("boom")


class TestSubscribe:
    def test_any_object_with_on_event_is_accepted(self):
        bus = NotificationBus()
        consumer = RecordingConsumer()

        bus.subscribe(consumer)

        assert bus.consumers == (consumer,)
        assert isinstance(consumer, EventConsumer)

    def test_object_without_on_event_is_rejected(self):
        bus = NotificationBus()

        with pytest.raises(TypeError):
            bus.subscribe(object())

    def test_double_subscribe_delivers_once(self):
        bus = NotificationBus()
        consumer = RecordingConsumer()
        bus.subscribe(consumer)
        bus.subscribe(consumer)

        bus.publish(make_event())

        assert len(consumer.events) == 1

    def test_unsubscribe_stops_delivery(self):
        bus = NotificationBus()
        consumer = RecordingConsumer()
        bus.subscribe(consumer)
        bus.unsubscribe(consumer)

        bus.publish(make_event())

        assert consumer.events == []
        assert bus.consumers == ()

    def test_unsubscribe_unknown_is_ignored(self):
        NotificationBus().unsubscribe(RecordingConsumer())


class TestPublish:
    def test_delivers_in_subscription_order(self):
        bus = NotificationBus()
        order = []

        class Named:
            def __init__(self, name):
                self.name = name

            def on_event(self, event):
                order.append(self.name)

        for name in ("first", "second", "third"):
            bus.subscribe(Named(name))

        bus.publish(make_event())

        assert order == ["first", "second", "third"]

    def test_failing_consumer_does_not_block_others(self, caplog):
        bus = NotificationBus()
        broken = ExplodingConsumer()
        healthy = RecordingConsumer()
        bus.subscribe(broken)
        bus.subscribe(healthy)
        event = make_event(EventKind.VOTE_CHANGE)

        with caplog.at_level(logging.ERROR):
            failures = bus.publish(event)

        assert broken.calls == 1
        assert healthy.events == [event]
        assert len(failures) == 1
        assert isinstance(failures[0], ConsumerNotificationError)
        assert failures[0].consumer is broken
        assert isinstance(failures[0].cause, RuntimeError)
        assert "ExplodingConsumer" in caplog.text

    def test_publish_with_no_consumers(self):
        assert NotificationBus().publish(make_event()) == []

    def test_unsubscribe_during_publish_is_safe(self):
        bus = NotificationBus()
        late = RecordingConsumer()

        class Unsubscriber:
            def on_event(self, event):
                bus.unsubscribe(late)

        bus.subscribe(Unsubscriber())
        bus.subscribe(late)

        bus.publish(make_event())
        bus.publish(make_event())

        assert len(late.events) == 1
