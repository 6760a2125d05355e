from __future__ import annotations
"""Directed, type-checked edge from an output slot to an input slot."""
from dataclasses import dataclass

from slotflow.core.errors import IncompatibleSlotTypesError
from slotflow.core.slot import InputSlot, OutputSlot

__all__ = ["SlotLink"]


@dataclass(frozen=True, eq=False)
class SlotLink:  # noqa: D101
    output_slot: OutputSlot
    input_slot: InputSlot

    def __post_init__(self) -> None:
        # Input type must be the output type or one of its supertypes.
        if not issubclass(self.output_slot.data_type, self.input_slot.data_type):
            raise IncompatibleSlotTypesError(self.output_slot, self.input_slot)

    # Value-like: two links between the same slot objects are equal.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SlotLink):
            return NotImplemented
        return self.output_slot is other.output_slot and self.input_slot is other.input_slot

    def __hash__(self) -> int:
        return hash((id(self.output_slot), id(self.input_slot)))

    def connects(self, output_slot: OutputSlot, input_slot: InputSlot) -> bool:
        return self.output_slot is output_slot and self.input_slot is input_slot
