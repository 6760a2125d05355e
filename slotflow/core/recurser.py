from __future__ import annotations
"""Generic parents-first traversal of a :class:`~slotflow.core.graph.ModuleGraph`.

:class:`GraphRecurser` walks upstream from every end point and calls six
hooks along the way. Execution and validation are both expressed as a
choice of hooks; the walk itself never changes.

Visiting order for one module::

    for each input slot:
        linked   -> visit the upstream module first
        unlinked -> on_unlinked_input(slot)
        never assigned -> on_unassigned_input(slot)
    on_visit(module)
    on_output_slot(slot) for each output slot
    on_post_visit(module)

Parent chasing runs on an explicit stack, so long dependency chains and
long cycles never hit the interpreter's recursion limit.
"""
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, List, Optional, Set

from slotflow.core.graph import ModuleGraph
from slotflow.core.module import Module
from slotflow.core.slot import InputSlot, OutputSlot
from slotflow.utils.logging import ApplicationLogger, LogLevel, NullLogger

__all__ = ["GraphRecurser"]

ModuleHook = Callable[[Module], None]
InputHook = Callable[[InputSlot], None]
OutputHook = Callable[[OutputSlot], None]


@dataclass(slots=True)
class _Frame:
    module: Module
    inputs: Iterator[InputSlot]
    # linked input whose assignment check waits for the upstream visit
    pending: Optional[InputSlot] = None


class GraphRecurser:  # noqa: D101
    def __init__(
        self,
        on_circular_reference: ModuleHook,
        on_unlinked_input: InputHook,
        on_unassigned_input: InputHook,
        on_visit: ModuleHook,
        on_output_slot: OutputHook,
        on_post_visit: ModuleHook,
        logger: Optional[ApplicationLogger] = None,
    ):
        self.on_circular_reference = on_circular_reference
        self.on_unlinked_input = on_unlinked_input
        self.on_unassigned_input = on_unassigned_input
        self.on_visit = on_visit
        self.on_output_slot = on_output_slot
        self.on_post_visit = on_post_visit
        self.logger: ApplicationLogger = logger if logger is not None else NullLogger()
        # keyed by module identity (Module hashes by id)
        self._on_path: Set[Module] = set()
        self._completed: Set[Module] = set()

    # ------------------------------------------------------------------ #
    def recurse(self, graph: ModuleGraph, stateless: bool) -> None:
        """Visit every module reachable upstream of *graph*'s end points.

        With *stateless* set, each module is forgotten once its post-visit
        hook returns. Use it when the hooks remove modules from *graph*.
        """
        self._on_path.clear()
        self._completed.clear()
        try:
            # Snapshot: hooks may shrink the graph while we walk it.
            queue: Deque[Module] = deque(graph.end_points)
            while queue:
                self._visit(queue.popleft(), graph, stateless)
        finally:
            self._on_path.clear()
            self._completed.clear()

    # ------------------------------------------------------------------ #
    def _visit(self, root: Module, graph: ModuleGraph, stateless: bool) -> None:
        if not self._enter(root):
            return

        stack: List[_Frame] = [_Frame(root, iter(root.inputs))]
        while stack:
            frame = stack[-1]
            if frame.pending is not None:
                slot, frame.pending = frame.pending, None
                self._check_assigned(slot)

            slot = next(frame.inputs, None)
            if slot is None:
                stack.pop()
                self._complete(frame.module, stateless)
                continue

            if not graph.is_linked(slot):
                self.on_unlinked_input(slot)
                self._check_assigned(slot)
                continue

            upstream = graph.linked_output_for(slot).module
            self.logger.log(
                self,
                LogLevel.DEBUG,
                f"Recursing from module '{type(frame.module).__qualname__}' "
                f"to module '{type(upstream).__qualname__}'.",
            )
            frame.pending = slot
            if self._enter(upstream):
                stack.append(_Frame(upstream, iter(upstream.inputs)))

    def _enter(self, module: Module) -> bool:
        """Mark *module* as on the current path; False when it must be skipped."""
        if module in self._completed:
            return False
        if module in self._on_path:
            self.on_circular_reference(module)
            return False
        self._on_path.add(module)
        return True

    def _check_assigned(self, slot: InputSlot) -> None:
        if not slot.value_assigned:
            self.on_unassigned_input(slot)

    def _complete(self, module: Module, stateless: bool) -> None:
        self.on_visit(module)
        self._completed.add(module)
        for slot in module.outputs:
            self.on_output_slot(slot)
        self.on_post_visit(module)
        if stateless:
            self._on_path.discard(module)
            self._completed.discard(module)
