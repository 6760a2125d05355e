from __future__ import annotations
"""Ultra-lightweight pub/sub **EventBus** carrying metric events.

:class:`~slotflow.utils.metrics.EventMetricSink` publishes here; anything
interested in timings or counters (a progress display, a metrics exporter,
a test) subscribes.

Example
-------
```python
from slotflow.utils.events import subscribe, IntervalCompleted

@subscribe(IntervalCompleted)
def _on_interval(evt: IntervalCompleted):
    print(f"{evt.metric} took {evt.seconds:.3f}s")
```
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Type, TypeVar

__all__ = [
    "Event",
    "MetricIncremented",
    "IntervalCompleted",
    "IntervalCancelled",
    "subscribe",
    "unsubscribe",
    "publish",
]

T = TypeVar("T", bound="Event")
_Handler = Callable[[Any], None]
_REGISTRY: Dict[Type["Event"], List[_Handler]] = {}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, kw_only=True)
class Event:  # noqa: D101 (base event)
    ts: datetime = field(default_factory=_utcnow)


# --------------------------------------------------------------------------- #
# Concrete events
# --------------------------------------------------------------------------- #
@dataclass(slots=True)
class MetricIncremented(Event):
    metric: str


@dataclass(slots=True)
class IntervalCompleted(Event):
    metric: str
    seconds: float


@dataclass(slots=True)
class IntervalCancelled(Event):
    metric: str


# --------------------------------------------------------------------------- #
# API helpers
# --------------------------------------------------------------------------- #

def subscribe(event_type: Type[T]):  # noqa: D401
    """Decorator: register *func* to receive *event_type* events."""

    def _decorator(func: _Handler) -> _Handler:
        _REGISTRY.setdefault(event_type, []).append(func)
        return func

    return _decorator


def unsubscribe(event_type: Type[T], func: _Handler) -> None:
    handlers = _REGISTRY.get(event_type, [])
    if func in handlers:
        handlers.remove(func)


def publish(evt: Event) -> None:  # noqa: D401
    """Publish an event to all registered subscribers."""
    for func in list(_REGISTRY.get(type(evt), [])):
        try:
            func(evt)
        except Exception as e:  # noqa: BLE001
            # Failure to handle an event must never crash the main program.
            from slotflow.utils.logging import log

            log.warning("event handler %s failed: %s", func.__name__, e)
