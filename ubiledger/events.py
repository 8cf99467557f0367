"""
events.py - Notification sinks

Notifications are fire-and-forget: observers outside the ledger consume
them. Token hands a sink only the notifications of applied actions;
those of rejected actions are discarded with the rest of the action.
"""

from __future__ import annotations
from typing import List, Protocol, runtime_checkable

from .core import Notification


@runtime_checkable
class EventSink(Protocol):
    """Receiver of notifications."""

    def emit(self, notification: Notification) -> None:
        ...


class EventLog:
    """
    EventSink that keeps every notification in order.

    Example:
        events = EventLog()
        token = Token(events=events)
        ...
        for n in events.of_kind("income"):
            print(n.params_dict["memo"])
    """

    def __init__(self):
        self.notifications: List[Notification] = []

    def emit(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def of_kind(self, kind: str) -> List[Notification]:
        return [n for n in self.notifications if n.kind == kind]

    def clear(self) -> None:
        self.notifications.clear()

    def __len__(self) -> int:
        return len(self.notifications)
