from __future__ import annotations
"""Mutable module graph with bidirectional slot-link indices.

The graph keeps, per module, the links leaving its output slots and the
links arriving at its input slots, plus the set of *end points*: modules
with no outgoing links. End points are the entry set for every traversal
and are maintained incrementally by the mutation methods below.

Every mutation validates first and mutates second, so a call that raises
leaves the graph exactly as it was.
"""
from typing import Dict, List, Tuple

from slotflow.core.errors import (
    DuplicateModuleError,
    InputSlotAlreadyLinkedError,
    InputSlotNotLinkedError,
    LinkNotFoundError,
    ModuleHasIncomingLinksError,
    ModuleHasOutgoingLinksError,
    ModuleNotInGraphError,
    SelfLoopError,
    UnknownModuleError,
)
from slotflow.core.link import SlotLink
from slotflow.core.module import Module
from slotflow.core.slot import InputSlot, OutputSlot

__all__ = ["ModuleGraph"]


class ModuleGraph:  # noqa: D101
    def __init__(self) -> None:
        # dicts used as insertion-ordered sets
        self._modules: Dict[Module, None] = {}
        self._end_points: Dict[Module, None] = {}
        self._output_links: Dict[Module, List[SlotLink]] = {}
        self._input_links: Dict[Module, List[SlotLink]] = {}

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #
    @property
    def modules(self) -> Tuple[Module, ...]:
        return tuple(self._modules)

    @property
    def end_points(self) -> Tuple[Module, ...]:
        """Modules without outgoing links (snapshot; safe to hold while mutating)."""
        return tuple(self._end_points)

    @property
    def links(self) -> Tuple[SlotLink, ...]:
        return tuple(link for links in self._output_links.values() for link in links)

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module: object) -> bool:
        return module in self._modules

    # ------------------------------------------------------------------ #
    # Modules
    # ------------------------------------------------------------------ #
    def add_module(self, module: Module) -> None:
        if module in self._modules:
            raise DuplicateModuleError(module)
        self._modules[module] = None
        # A new module has no links, so it starts as an end point.
        self._end_points[module] = None

    def remove_module(self, module: Module) -> None:
        if module not in self._modules:
            raise UnknownModuleError(module)
        if module in self._input_links:
            raise ModuleHasIncomingLinksError(module)
        if module in self._output_links:
            raise ModuleHasOutgoingLinksError(module)
        self._end_points.pop(module, None)
        del self._modules[module]

    # ------------------------------------------------------------------ #
    # Links
    # ------------------------------------------------------------------ #
    def create_link(self, output_slot: OutputSlot, input_slot: InputSlot) -> SlotLink:
        self._check_owners_in_graph(output_slot, input_slot)
        if output_slot.module is input_slot.module:
            raise SelfLoopError(output_slot, input_slot)
        if self._link_into(input_slot) is not None:
            raise InputSlotAlreadyLinkedError(input_slot)
        link = SlotLink(output_slot, input_slot)  # may raise IncompatibleSlotTypesError

        source, target = output_slot.module, input_slot.module
        if source not in self._output_links:
            self._output_links[source] = []
            self._end_points.pop(source, None)
        self._output_links[source].append(link)
        self._input_links.setdefault(target, []).append(link)
        return link

    def remove_link(self, output_slot: OutputSlot, input_slot: InputSlot) -> None:
        source, target = output_slot.module, input_slot.module
        link = next(
            (l for l in self._output_links.get(source, ()) if l.connects(output_slot, input_slot)),
            None,
        )
        if link is None:
            raise LinkNotFoundError(output_slot, input_slot)

        outgoing = self._output_links[source]
        outgoing.remove(link)
        if not outgoing:
            del self._output_links[source]
            self._end_points[source] = None

        incoming = self._input_links[target]
        incoming.remove(link)
        if not incoming:
            # End-point status depends on outgoing links only.
            del self._input_links[target]

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    def linked_output_for(self, input_slot: InputSlot) -> OutputSlot:
        link = self._link_into(input_slot)
        if link is None:
            raise InputSlotNotLinkedError(input_slot)
        return link.output_slot

    def is_linked(self, input_slot: InputSlot) -> bool:
        return self._link_into(input_slot) is not None

    def inputs_linked_from(self, output_slot: OutputSlot) -> List[InputSlot]:
        return [
            link.input_slot
            for link in self._output_links.get(output_slot.module, ())
            if link.output_slot is output_slot
        ]

    # ------------------------------------------------------------------ #
    def _link_into(self, input_slot: InputSlot) -> SlotLink | None:
        for link in self._input_links.get(input_slot.module, ()):
            if link.input_slot is input_slot:
                return link
        return None

    def _check_owners_in_graph(self, output_slot: OutputSlot, input_slot: InputSlot) -> None:
        if output_slot.module not in self._modules:
            raise ModuleNotInGraphError(output_slot)
        if input_slot.module not in self._modules:
            raise ModuleNotInGraphError(input_slot)

    def __repr__(self) -> str:
        return f"ModuleGraph(modules={len(self._modules)}, links={len(self.links)}, end_points={len(self._end_points)})"
