from slotflow.core.graph import ModuleGraph
from slotflow.core.recurser import GraphRecurser
from slotflow.utils.logging import LogLevel, MemoryLogger

from helpers import Relay, Sink, Source, Terminal


class _Trace:
    """Collects every hook call as ``(hook, object)``."""

    def __init__(self):
        self.calls = []

    def recurser(self, logger=None):
        def hook(name):
            return lambda obj: self.calls.append((name, obj))

        return GraphRecurser(
            hook("circular"),
            hook("unlinked"),
            hook("unassigned"),
            hook("visit"),
            hook("output"),
            hook("post"),
            logger=logger,
        )

    def of(self, name):
        return [obj for hook, obj in self.calls if hook == name]


def _chain():
    graph = ModuleGraph()
    source, relay, terminal = Source(), Relay(), Terminal()
    for m in (source, relay, terminal):
        graph.add_module(m)
    graph.create_link(source.get_output_slot("first"), relay.get_input_slot("value"))
    graph.create_link(relay.get_output_slot("value"), terminal.get_input_slot("value"))
    return graph, source, relay, terminal


def test_parents_visited_first():
    graph, source, relay, terminal = _chain()
    trace = _Trace()
    trace.recurser().recurse(graph, stateless=False)
    assert trace.of("visit") == [source, relay, terminal]
    assert trace.of("post") == [source, relay, terminal]
    assert trace.of("circular") == []


def test_hook_order_for_one_module():
    graph = ModuleGraph()
    source = Source()
    graph.add_module(source)
    trace = _Trace()
    trace.recurser().recurse(graph, stateless=False)
    assert [hook for hook, _ in trace.calls] == ["visit", "output", "output", "post"]
    assert trace.of("output") == list(source.outputs)


def test_unlinked_and_unassigned_inputs_reported():
    graph = ModuleGraph()
    sink = Sink()
    graph.add_module(sink)
    sink.get_input_slot("second").value = 1
    trace = _Trace()
    trace.recurser().recurse(graph, stateless=False)
    first, second = sink.inputs
    assert trace.of("unlinked") == [first, second]
    assert trace.of("unassigned") == [first]


def test_linked_input_checked_after_upstream_visit():
    graph, source, relay, terminal = _chain()
    trace = _Trace()
    trace.recurser().recurse(graph, stateless=False)
    # nothing ran, so both linked inputs are still unassigned
    assert trace.of("unassigned") == [relay.get_input_slot("value"), terminal.get_input_slot("value")]
    visit_source = trace.calls.index(("visit", source))
    assert trace.calls.index(("unassigned", relay.get_input_slot("value"))) > visit_source


def test_shared_parent_visited_once():
    graph = ModuleGraph()
    source, sink = Source(), Sink()
    graph.add_module(source)
    graph.add_module(sink)
    graph.create_link(source.get_output_slot("first"), sink.get_input_slot("first"))
    graph.create_link(source.get_output_slot("second"), sink.get_input_slot("second"))
    trace = _Trace()
    trace.recurser().recurse(graph, stateless=False)
    assert trace.of("visit") == [source, sink]


def test_cycle_reported_once_per_reentry():
    graph = ModuleGraph()
    a, b, terminal = Relay(), Relay(), Terminal()
    for m in (a, b, terminal):
        graph.add_module(m)
    graph.create_link(a.get_output_slot("value"), b.get_input_slot("value"))
    graph.create_link(b.get_output_slot("value"), a.get_input_slot("value"))
    graph.create_link(b.get_output_slot("value"), terminal.get_input_slot("value"))
    trace = _Trace()
    trace.recurser().recurse(graph, stateless=False)
    assert trace.of("circular") == [b]
    assert trace.of("visit") == [a, b, terminal]


def test_long_chain_does_not_overflow():
    graph = ModuleGraph()
    previous = Source()
    graph.add_module(previous)
    out = previous.get_output_slot("first")
    for _ in range(5000):
        relay = Relay()
        graph.add_module(relay)
        graph.create_link(out, relay.get_input_slot("value"))
        out = relay.get_output_slot("value")
    trace = _Trace()
    trace.recurser().recurse(graph, stateless=True)
    assert len(trace.of("visit")) == 5001


def test_upstream_hops_logged_at_debug():
    graph, _, _, _ = _chain()
    logger = MemoryLogger()
    _Trace().recurser(logger=logger).recurse(graph, stateless=False)
    debug = logger.messages(LogLevel.DEBUG)
    assert debug == [
        "Recursing from module 'Terminal' to module 'Relay'.",
        "Recursing from module 'Relay' to module 'Source'.",
    ]


def test_state_cleared_between_runs():
    graph, source, _, _ = _chain()
    trace = _Trace()
    recurser = trace.recurser()
    recurser.recurse(graph, stateless=False)
    recurser.recurse(graph, stateless=False)
    assert trace.of("visit").count(source) == 2
