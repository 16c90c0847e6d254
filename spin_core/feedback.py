# FILE: spin_core/feedback.py
"""
Sound/haptic feedback as an injected capability.

The application shell builds one sink and hands it to whatever UI code needs
it. Engine modules never import this file.
"""
from __future__ import annotations
import logging
from typing import List, Protocol

logger = logging.getLogger(__name__)

SPIN_START = "spin_start"
TICK = "tick"
WIN = "win"
SHUFFLE = "shuffle"
ERROR = "error"

EVENTS = (SPIN_START, TICK, WIN, SHUFFLE, ERROR)


class FeedbackSink(Protocol):
    def play(self, event_name: str) -> None:
        ...


class NullFeedbackSink:
    """Used when the platform has no sound or vibration support."""

    def play(self, event_name: str) -> None:
        return None


class RecordingFeedbackSink:
    def __init__(self):
        self.events: List[str] = []

    def play(self, event_name: str) -> None:
        if event_name not in EVENTS:
            logger.debug("Unknown feedback event %r", event_name)
        self.events.append(event_name)
