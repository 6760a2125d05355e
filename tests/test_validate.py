from slotflow.core.graph import ModuleGraph
from slotflow.core.processor import GraphProcessor
from slotflow.core.validation import CircularReference, EmptyGraph, UnlinkedInput, UnlinkedOutput

from helpers import Relay, Sink, Source, Terminal


def test_empty_graph():
    issues = GraphProcessor().validate(ModuleGraph())
    assert issues == [EmptyGraph()]
    assert "end points" in str(issues[0])


def test_unlinked_input_and_output():
    graph = ModuleGraph()
    relay = Relay()
    graph.add_module(relay)
    issues = GraphProcessor().validate(graph)
    assert issues == [UnlinkedInput(relay.get_input_slot("value")), UnlinkedOutput(relay.get_output_slot("value"))]
    assert issues[0].slot is relay.get_input_slot("value")
    assert issues[1].slot is relay.get_output_slot("value")
    assert str(issues[1]) == "Output slot 'value' on module 'Relay' is not referenced by a slot link."


def test_fully_linked_graph_has_no_issues():
    graph = ModuleGraph()
    source, sink = Source(), Sink()
    graph.add_module(source)
    graph.add_module(sink)
    graph.create_link(source.get_output_slot("first"), sink.get_input_slot("first"))
    graph.create_link(source.get_output_slot("second"), sink.get_input_slot("second"))
    assert GraphProcessor().validate(graph) == []
    # validation never mutates the graph
    assert len(graph) == 2 and len(graph.links) == 2


def test_unassigned_inputs_are_not_issues():
    graph = ModuleGraph()
    source, terminal = Source(), Terminal()
    graph.add_module(source)
    graph.add_module(terminal)
    graph.create_link(source.get_output_slot("first"), terminal.get_input_slot("value"))
    issues = GraphProcessor().validate(graph)
    assert issues == [UnlinkedOutput(source.get_output_slot("second"))]


def test_circular_reference_collected():
    graph = ModuleGraph()
    a, b, terminal = Relay(), Relay(), Terminal()
    for m in (a, b, terminal):
        graph.add_module(m)
    graph.create_link(a.get_output_slot("value"), b.get_input_slot("value"))
    graph.create_link(b.get_output_slot("value"), a.get_input_slot("value"))
    graph.create_link(b.get_output_slot("value"), terminal.get_input_slot("value"))
    issues = GraphProcessor().validate(graph)
    assert issues == [CircularReference(b)]
    assert "Relay" in issues[0].message


def test_multiple_issues_in_discovery_order():
    graph = ModuleGraph()
    sink, terminal = Sink(), Terminal()
    graph.add_module(sink)
    graph.add_module(terminal)
    issues = GraphProcessor().validate(graph)
    assert issues == [
        UnlinkedInput(sink.get_input_slot("first")),
        UnlinkedInput(sink.get_input_slot("second")),
        UnlinkedInput(terminal.get_input_slot("value")),
    ]
