import pytest

import slotflow.utils.events as ev
from slotflow.utils.events import IntervalCancelled, IntervalCompleted, MetricIncremented, publish, subscribe, unsubscribe
from slotflow.utils.metrics import (
    EventMetricSink,
    MemoryMetricSink,
    ModuleGraphProcessed,
    ModuleProcessingTime,
)


@pytest.fixture()
def received():
    ev._REGISTRY.clear()
    seen = []
    for event_type in (MetricIncremented, IntervalCompleted, IntervalCancelled):
        subscribe(event_type)(seen.append)
    yield seen
    ev._REGISTRY.clear()


def test_metric_definitions():
    metric = ModuleProcessingTime()
    assert metric.name == "ModuleProcessingTime"
    assert metric.description
    assert ModuleProcessingTime() == metric


def test_event_sink_publishes(received):
    sink = EventMetricSink()
    sink.increment(ModuleGraphProcessed())
    sink.begin(ModuleProcessingTime())
    sink.end(ModuleProcessingTime())
    sink.begin(ModuleProcessingTime())
    sink.cancel_begin(ModuleProcessingTime())

    assert [type(e) for e in received] == [MetricIncremented, IntervalCompleted, IntervalCancelled]
    assert received[0].metric == "ModuleGraphProcessed"
    assert received[1].seconds >= 0
    assert received[1].ts.tzinfo is not None


def test_event_sink_rejects_unbalanced_calls():
    sink = EventMetricSink()
    with pytest.raises(ValueError):
        sink.end(ModuleProcessingTime())
    with pytest.raises(ValueError):
        sink.cancel_begin(ModuleProcessingTime())


def test_failing_handler_does_not_break_publisher(received):
    def _boom(evt):
        raise RuntimeError("handler failure")

    subscribe(MetricIncremented)(_boom)
    publish(MetricIncremented(metric="x"))
    assert received[-1].metric == "x"
    unsubscribe(MetricIncremented, _boom)
    assert _boom not in ev._REGISTRY[MetricIncremented]


def test_memory_sink_counts():
    sink = MemoryMetricSink()
    sink.increment(ModuleGraphProcessed())
    sink.increment(ModuleGraphProcessed())
    sink.begin(ModuleProcessingTime())
    assert sink.counts["ModuleGraphProcessed"] == 2
    assert sink.calls[-1] == ("begin", "ModuleProcessingTime")
