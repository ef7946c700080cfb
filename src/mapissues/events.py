"""Single-event publish/subscribe channel.

Usage::

    reload: Channel[list[Issue]] = Channel("reload")
    reload.subscribe(render_issue_list, name="ui")
    reload.publish(issues)
    reload.unsubscribe("ui")

A named subscription replaces any earlier subscription with the same name,
so a component can re-register itself without leaking handlers. Publishing
iterates over a snapshot of the subscriber list: handlers may subscribe or
unsubscribe (themselves or others) while the event is being delivered, and
those changes take effect from the next publish.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Handler = Callable[[T], None]


class Channel(Generic[T]):
    """A named event with one payload type and any number of observers."""

    def __init__(self, event: str) -> None:
        self.event = event
        self._subscribers: list[tuple[str | None, Handler[T]]] = []

    def subscribe(self, handler: Handler[T], *, name: str | None = None) -> Handler[T]:
        """Attach a handler. Returns the handler so it can be used as a decorator."""
        if name is not None:
            self._subscribers = [(n, h) for n, h in self._subscribers if n != name]
        self._subscribers = [*self._subscribers, (name, handler)]
        return handler

    def unsubscribe(self, handler_or_name: Handler[T] | str) -> bool:
        """Detach by handler or by subscription name.

        Returns:
            True if anything was removed. Unknown handlers are a no-op.
        """
        before = len(self._subscribers)
        if isinstance(handler_or_name, str):
            self._subscribers = [(n, h) for n, h in self._subscribers if n != handler_or_name]
        else:
            self._subscribers = [(n, h) for n, h in self._subscribers if h != handler_or_name]
        return len(self._subscribers) != before

    def publish(self, payload: T) -> None:
        for _name, handler in self._subscribers:
            handler(payload)

    def clear(self) -> None:
        self._subscribers = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Channel({self.event!r}, subscribers={len(self._subscribers)})"
