"""Tests for the single-event publish/subscribe Channel."""

from __future__ import annotations

from mapissues.events import Channel


class TestChannelSubscribe:
    def test_publish_reaches_all_subscribers(self) -> None:
        channel: Channel[int] = Channel("reload")
        a: list[int] = []
        b: list[int] = []
        channel.subscribe(a.append)
        channel.subscribe(b.append)

        channel.publish(1)

        assert a == [1]
        assert b == [1]
        assert len(channel) == 2

    def test_named_subscription_replaces(self) -> None:
        channel: Channel[int] = Channel("reload")
        old: list[int] = []
        new: list[int] = []
        channel.subscribe(old.append, name="ui")
        channel.subscribe(new.append, name="ui")

        channel.publish(7)

        assert old == []
        assert new == [7]
        assert len(channel) == 1

    def test_subscribe_returns_handler(self) -> None:
        channel: Channel[str] = Channel("reload")
        received: list[str] = []

        @channel.subscribe
        def handler(payload: str) -> None:
            received.append(payload)

        channel.publish("x")
        assert received == ["x"]
        assert callable(handler)


class TestChannelUnsubscribe:
    def test_unsubscribe_by_handler(self) -> None:
        channel: Channel[int] = Channel("reload")
        seen: list[int] = []
        channel.subscribe(seen.append)

        assert channel.unsubscribe(seen.append) is True

        channel.publish(1)
        assert seen == []
        assert len(channel) == 0

    def test_unsubscribe_by_name(self) -> None:
        channel: Channel[int] = Channel("reload")
        seen: list[int] = []
        channel.subscribe(seen.append, name="ui")

        assert channel.unsubscribe("ui")
        channel.publish(1)
        assert seen == []

    def test_unsubscribe_unknown_is_noop(self) -> None:
        channel: Channel[int] = Channel("reload")
        assert not channel.unsubscribe("nobody")
        assert not channel.unsubscribe(lambda _payload: None)


class TestChannelReentrancy:
    def test_handler_can_unsubscribe_itself(self) -> None:
        channel: Channel[int] = Channel("reload")
        calls: list[int] = []

        def once(payload: int) -> None:
            calls.append(payload)
            channel.unsubscribe(once)

        channel.subscribe(once)
        channel.publish(1)
        channel.publish(2)

        assert calls == [1]

    def test_unsubscribing_another_takes_effect_next_publish(self) -> None:
        channel: Channel[int] = Channel("reload")
        later: list[int] = []

        def first(_payload: int) -> None:
            channel.unsubscribe("later")

        channel.subscribe(first)
        channel.subscribe(later.append, name="later")

        channel.publish(1)
        channel.publish(2)

        assert later == [1]

    def test_subscribe_during_publish_not_called_until_next(self) -> None:
        channel: Channel[int] = Channel("reload")
        added: list[int] = []

        def adder(_payload: int) -> None:
            channel.subscribe(added.append, name="added")

        channel.subscribe(adder)
        channel.publish(1)
        assert added == []

        channel.publish(2)
        assert added == [2]

    def test_repr(self) -> None:
        channel: Channel[int] = Channel("reload")
        assert repr(channel) == "Channel('reload', subscribers=0)"
