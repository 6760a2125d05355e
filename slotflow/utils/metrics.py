from __future__ import annotations
"""Metric definitions and metric sinks.

The processor reports two kinds of metric:

* **count** metrics (``increment``): a module or graph was processed, a
  graph was copied, processing was cancelled;
* **interval** metrics (``begin`` / ``end`` / ``cancel_begin``): how long a
  module, a graph run or a graph copy took.

:class:`NullMetricSink` is the default. :class:`EventMetricSink` times
intervals and publishes the results on :mod:`slotflow.utils.events`.
"""
import time
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, List, Protocol, Tuple, runtime_checkable

from slotflow.utils.events import IntervalCancelled, IntervalCompleted, MetricIncremented, publish

__all__ = [
    "Metric",
    "CountMetric",
    "IntervalMetric",
    "ModuleProcessed",
    "ModuleProcessingTime",
    "ModuleGraphProcessed",
    "ModuleGraphProcessingTime",
    "ModuleGraphProcessingCancelled",
    "ModuleGraphCopied",
    "ModuleGraphCopyingTime",
    "MetricSink",
    "NullMetricSink",
    "EventMetricSink",
    "MemoryMetricSink",
]


@dataclass(frozen=True)
class Metric:  # noqa: D101
    name: str
    description: str


@dataclass(frozen=True)
class CountMetric(Metric):  # noqa: D101
    pass


@dataclass(frozen=True)
class IntervalMetric(Metric):  # noqa: D101
    pass


# --------------------------------------------------------------------------- #
# Concrete metrics
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class ModuleProcessed(CountMetric):  # noqa: D101
    name: str = "ModuleProcessed"
    description: str = "The number of modules processed"


@dataclass(frozen=True)
class ModuleProcessingTime(IntervalMetric):  # noqa: D101
    name: str = "ModuleProcessingTime"
    description: str = "The time taken to process a module"


@dataclass(frozen=True)
class ModuleGraphProcessed(CountMetric):  # noqa: D101
    name: str = "ModuleGraphProcessed"
    description: str = "The number of module graphs processed"


@dataclass(frozen=True)
class ModuleGraphProcessingTime(IntervalMetric):  # noqa: D101
    name: str = "ModuleGraphProcessingTime"
    description: str = "The time taken to process a module graph"


@dataclass(frozen=True)
class ModuleGraphProcessingCancelled(CountMetric):  # noqa: D101
    name: str = "ModuleGraphProcessingCancelled"
    description: str = "The number of times processing of a module graph was cancelled"


@dataclass(frozen=True)
class ModuleGraphCopied(CountMetric):  # noqa: D101
    name: str = "ModuleGraphCopied"
    description: str = "The number of module graphs copied"


@dataclass(frozen=True)
class ModuleGraphCopyingTime(IntervalMetric):  # noqa: D101
    name: str = "ModuleGraphCopyingTime"
    description: str = "The time taken to copy a module graph"


# --------------------------------------------------------------------------- #
# Sinks
# --------------------------------------------------------------------------- #

@runtime_checkable
class MetricSink(Protocol):  # noqa: D101
    def increment(self, metric: CountMetric) -> None: ...

    def begin(self, metric: IntervalMetric) -> None: ...

    def end(self, metric: IntervalMetric) -> None: ...

    def cancel_begin(self, metric: IntervalMetric) -> None: ...


class NullMetricSink:  # noqa: D101
    def increment(self, metric: CountMetric) -> None:
        return None

    def begin(self, metric: IntervalMetric) -> None:
        return None

    def end(self, metric: IntervalMetric) -> None:
        return None

    def cancel_begin(self, metric: IntervalMetric) -> None:
        return None


class EventMetricSink:
    """Time intervals with :func:`time.perf_counter` and publish the results.

    Nested intervals of the same metric (a module inside a module, which the
    processor never does, or two graphs on one sink) are kept on a stack per
    metric name.
    """

    def __init__(self) -> None:
        self._started: Dict[str, List[float]] = defaultdict(list)

    def increment(self, metric: CountMetric) -> None:
        publish(MetricIncremented(metric=metric.name))

    def begin(self, metric: IntervalMetric) -> None:
        self._started[metric.name].append(time.perf_counter())

    def end(self, metric: IntervalMetric) -> None:
        start = self._pop(metric, "end")
        publish(IntervalCompleted(metric=metric.name, seconds=time.perf_counter() - start))

    def cancel_begin(self, metric: IntervalMetric) -> None:
        self._pop(metric, "cancel_begin")
        publish(IntervalCancelled(metric=metric.name))

    # ------------------------------------------------------------------ #
    def _pop(self, metric: IntervalMetric, action: str) -> float:
        stack = self._started.get(metric.name)
        if not stack:
            raise ValueError(f"{action}() called for interval '{metric.name}' which was never begun.")
        return stack.pop()


class MemoryMetricSink:
    """Record every call as ``(action, metric_name)`` and keep counters."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []
        self.counts: Counter[str] = Counter()

    def increment(self, metric: CountMetric) -> None:
        self.calls.append(("increment", metric.name))
        self.counts[metric.name] += 1

    def begin(self, metric: IntervalMetric) -> None:
        self.calls.append(("begin", metric.name))

    def end(self, metric: IntervalMetric) -> None:
        self.calls.append(("end", metric.name))

    def cancel_begin(self, metric: IntervalMetric) -> None:
        self.calls.append(("cancel_begin", metric.name))
