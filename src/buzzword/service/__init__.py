"""Async service layer: collector, session, publisher and the server entry point."""

from .collector import Collector
from .events import EventStream, MessageReceived, SourceClosed, TimerFired
from .publisher import DeliveryResult, Publisher, PublishResult
from .server import serve
from .session import HealthMonitor, Session, SessionState, run_forever

__all__ = [
    "Collector",
    "EventStream",
    "MessageReceived",
    "SourceClosed",
    "TimerFired",
    "DeliveryResult",
    "Publisher",
    "PublishResult",
    "serve",
    "HealthMonitor",
    "Session",
    "SessionState",
    "run_forever",
]
