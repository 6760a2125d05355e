from __future__ import annotations
"""Execute, copy and validate a :class:`~slotflow.core.graph.ModuleGraph`.

Execution consumes the graph: each module runs once its parents have run,
its output values are pushed through the outgoing links, and then both the
links and the module are removed. A successful run leaves the graph with
no end points.

```python
with GraphProcessor(logger=StdlibLogger()) as processor:
    problems = processor.validate(graph)
    if not problems:
        processor.execute(graph)
```
"""
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from slotflow.core.cancellation import CancellationSource
from slotflow.core.errors import (
    CircularDependencyError,
    ProcessingCancelledError,
    ProcessorClosedError,
    UnassignedInputError,
)
from slotflow.core.graph import ModuleGraph
from slotflow.core.module import Module
from slotflow.core.recurser import GraphRecurser
from slotflow.core.slot import InputSlot, OutputSlot
from slotflow.core.validation import (
    CircularReference,
    EmptyGraph,
    UnlinkedInput,
    UnlinkedOutput,
    ValidationIssue,
)
from slotflow.utils.logging import ApplicationLogger, LogLevel, NullLogger, StdlibLogger, get
from slotflow.utils.metrics import (
    EventMetricSink,
    MetricSink,
    ModuleGraphCopied,
    ModuleGraphCopyingTime,
    ModuleGraphProcessed,
    ModuleGraphProcessingCancelled,
    ModuleGraphProcessingTime,
    ModuleProcessed,
    ModuleProcessingTime,
    NullMetricSink,
)

if TYPE_CHECKING:  # pragma: no cover
    from slotflow.config import ProcessorSettings

__all__ = ["GraphProcessor"]

# (parent clone, output slot name, child clone, input slot name)
_PendingLink = Tuple[Module, str, Module, str]


def _name(module: Module) -> str:
    return type(module).__qualname__


class GraphProcessor:  # noqa: D101
    def __init__(
        self,
        logger: Optional[ApplicationLogger] = None,
        metric_sink: Optional[MetricSink] = None,
    ):
        self.logger: ApplicationLogger = logger if logger is not None else NullLogger()
        self.metric_sink: MetricSink = metric_sink if metric_sink is not None else NullMetricSink()
        self.allow_unassigned_inputs = False
        self._cancellation = CancellationSource()
        self._closed = False

    @classmethod
    def from_settings(cls, settings: "ProcessorSettings") -> "GraphProcessor":
        """Build a processor logging through Rich at ``settings.log_level``."""
        sink = EventMetricSink() if settings.metrics == "events" else NullMetricSink()
        processor = cls(logger=StdlibLogger(get(settings.log_level)), metric_sink=sink)
        processor.allow_unassigned_inputs = settings.allow_unassigned_inputs
        return processor

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the cancellation source. Closing twice is harmless."""
        if not self._closed:
            self._cancellation.close()
            self._closed = True

    def __enter__(self) -> "GraphProcessor":
        self._check_open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise ProcessorClosedError(type(self).__name__)

    # ------------------------------------------------------------------ #
    # Execute
    # ------------------------------------------------------------------ #
    def execute(self, graph: ModuleGraph, allow_unassigned_inputs: Optional[bool] = None) -> None:
        """Run every module of *graph* parents-first, consuming the graph.

        *allow_unassigned_inputs* defaults to the processor's setting
        (``False`` unless built with :meth:`from_settings`). Errors raised by
        modules propagate unchanged; the graph is left as it was when the
        error occurred.
        """
        self._check_open()
        allow = self.allow_unassigned_inputs if allow_unassigned_inputs is None else allow_unassigned_inputs
        # one cancellation flag per run
        self._cancellation = CancellationSource()
        token = self._cancellation.token

        def on_circular_reference(module: Module) -> None:
            raise CircularDependencyError(module)

        def on_unlinked_input(slot: InputSlot) -> None:
            return None

        def on_unassigned_input(slot: InputSlot) -> None:
            error = UnassignedInputError(slot)
            self.logger.log(self, LogLevel.WARNING, str(error))
            if not allow:
                raise error

        def on_visit(module: Module) -> None:
            module.logger = self.logger
            module.metric_sink = self.metric_sink
            module.cancellation_token = token
            self.logger.log(self, LogLevel.INFORMATION, f"Processing module '{_name(module)}'.")
            self.metric_sink.begin(ModuleProcessingTime())
            try:
                module.process()
            except ProcessingCancelledError:
                self.metric_sink.increment(ModuleGraphProcessingCancelled())
                self.logger.log(self, LogLevel.INFORMATION, f"Processing of module '{_name(module)}' cancelled.")
                self.metric_sink.cancel_begin(ModuleProcessingTime())
                raise
            except Exception:
                self.metric_sink.cancel_begin(ModuleProcessingTime())
                raise
            self.metric_sink.end(ModuleProcessingTime())
            self.metric_sink.increment(ModuleProcessed())

        def on_output_slot(slot: OutputSlot) -> None:
            # Snapshot before remove_link shrinks the underlying list.
            targets = list(graph.inputs_linked_from(slot))
            if not targets:
                self.logger.log(
                    self,
                    LogLevel.WARNING,
                    f"Output slot '{slot.name}' on module '{_name(slot.module)}' is not referenced by a slot link.",
                )
                return
            for target in targets:
                target.value = slot.value
                self.logger.log(
                    self,
                    LogLevel.DEBUG,
                    f"Removing slot link between output slot '{slot.name}' on module '{_name(slot.module)}' "
                    f"and input slot '{target.name}' on module '{_name(target.module)}' from the module graph.",
                )
                graph.remove_link(slot, target)

        def on_post_visit(module: Module) -> None:
            self.logger.log(self, LogLevel.DEBUG, f"Removing module '{_name(module)}' from the module graph.")
            graph.remove_module(module)

        recurser = GraphRecurser(
            on_circular_reference,
            on_unlinked_input,
            on_unassigned_input,
            on_visit,
            on_output_slot,
            on_post_visit,
            logger=self.logger,
        )

        self.logger.log(self, LogLevel.INFORMATION, "Starting module graph processing.")
        self.metric_sink.begin(ModuleGraphProcessingTime())
        try:
            recurser.recurse(graph, stateless=True)
        except Exception:
            self.metric_sink.cancel_begin(ModuleGraphProcessingTime())
            raise
        self.metric_sink.end(ModuleGraphProcessingTime())
        self.metric_sink.increment(ModuleGraphProcessed())
        self.logger.log(self, LogLevel.INFORMATION, "Module graph processing completed.")

    def cancel(self) -> None:
        """Ask the modules of the current run to stop; callable from any thread."""
        self._check_open()
        self._cancellation.cancel()

    # ------------------------------------------------------------------ #
    # Copy
    # ------------------------------------------------------------------ #
    def copy(self, graph: ModuleGraph) -> ModuleGraph:
        """Return a new graph with the same shape built from fresh modules.

        Each module is replaced by ``module.clone_shape()``; slot values and
        any other module state are not carried over. Shared parents stay
        shared. *graph* is not modified.
        """
        self._check_open()
        destination = ModuleGraph()
        self.metric_sink.begin(ModuleGraphCopyingTime())
        try:
            copied: Dict[Module, Module] = {}
            for module in graph.end_points:
                self._copy_module(module, graph, destination, copied)
        except Exception:
            self.metric_sink.cancel_begin(ModuleGraphCopyingTime())
            raise
        self.metric_sink.end(ModuleGraphCopyingTime())
        self.metric_sink.increment(ModuleGraphCopied())
        return destination

    def _copy_module(
        self,
        source: Module,
        graph: ModuleGraph,
        destination: ModuleGraph,
        copied: Dict[Module, Module],
    ) -> Module:
        """Copy *source* and every module upstream of it into *destination*.

        A parent is fully copied before the link to its child is created.
        Parents are chased on an explicit stack, so deep graphs do not
        exhaust the call stack.
        """
        if source in copied:
            self._log_already_copied(source)
            return copied[source]

        root = self._clone_into(source, destination, copied)
        # (destination module, remaining input slots, link to create when done)
        stack: List[Tuple[Module, Iterator[InputSlot], Optional[_PendingLink]]] = [
            (root, iter(source.inputs), None)
        ]
        while stack:
            clone, inputs, on_done = stack[-1]
            slot = next(inputs, None)
            if slot is None:
                stack.pop()
                if on_done is not None:
                    self._copy_link(destination, *on_done)
                continue
            if not graph.is_linked(slot):
                continue

            upstream = graph.linked_output_for(slot)
            parent = upstream.module
            if parent in copied:
                self._log_already_copied(parent)
                self._copy_link(destination, copied[parent], upstream.name, clone, slot.name)
                continue
            parent_clone = self._clone_into(parent, destination, copied)
            stack.append((parent_clone, iter(parent.inputs), (parent_clone, upstream.name, clone, slot.name)))
        return root

    def _log_already_copied(self, module: Module) -> None:
        self.logger.log(
            self, LogLevel.DEBUG, f"Module '{_name(module)}' has already been copied to the destination module graph."
        )

    def _clone_into(self, source: Module, destination: ModuleGraph, copied: Dict[Module, Module]) -> Module:
        clone = source.clone_shape()
        copied[source] = clone
        destination.add_module(clone)
        self.logger.log(self, LogLevel.DEBUG, f"Created a copy of module '{_name(source)}' in destination module graph.")
        return clone

    def _copy_link(self, destination: ModuleGraph, parent: Module, output_name: str, child: Module, input_name: str) -> None:
        output_slot = parent.get_output_slot(output_name)
        input_slot = child.get_input_slot(input_name)
        destination.create_link(output_slot, input_slot)
        self.logger.log(
            self,
            LogLevel.DEBUG,
            f"Created a slot link between output slot '{output_slot.name}' on module '{_name(parent)}' "
            f"and input slot '{input_slot.name}' on module '{_name(child)}' in destination module graph.",
        )

    # ------------------------------------------------------------------ #
    # Validate
    # ------------------------------------------------------------------ #
    def validate(self, graph: ModuleGraph) -> List[ValidationIssue]:
        """Return every structural issue found in *graph*, in discovery order."""
        self._check_open()
        if not graph.end_points:
            return [EmptyGraph()]

        issues: List[ValidationIssue] = []

        def on_output_slot(slot: OutputSlot) -> None:
            if not graph.inputs_linked_from(slot):
                issues.append(UnlinkedOutput(slot))

        def ignore(_obj: object) -> None:
            return None

        recurser = GraphRecurser(
            lambda module: issues.append(CircularReference(module)),
            lambda slot: issues.append(UnlinkedInput(slot)),
            ignore,
            ignore,
            on_output_slot,
            ignore,
            logger=self.logger,
        )
        recurser.recurse(graph, stateless=False)
        return issues
