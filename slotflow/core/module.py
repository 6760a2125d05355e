from __future__ import annotations

"""Base Module class for the slotflow execution graph.

A *Module* is a unit of work with a fixed, ordered set of typed input and
output slots and a single-shot :meth:`Module.process`. Subclasses declare
their slots in ``__init__`` and implement :meth:`Module._process`::

    class Doubler(Module):
        def __init__(self):
            super().__init__()
            self.description = "Doubles an integer"
            self._add_input_slot("x", "Value to double", int)
            self._add_output_slot("y", "Twice the input", int)

        def _process(self):
            self.get_output_slot("y").value = self.get_input_slot("x").value * 2
"""

from typing import List, Tuple, TypeVar

from slotflow.core.cancellation import CancellationToken
from slotflow.core.errors import (
    DuplicateSlotError,
    InputSlotTypeError,
    ModuleAlreadyProcessedError,
    SlotNotFoundError,
)
from slotflow.core.slot import InputSlot, OutputSlot
from slotflow.utils.logging import ApplicationLogger, NullLogger
from slotflow.utils.metrics import MetricSink, NullMetricSink

__all__ = ["Module"]

M = TypeVar("M", bound="Module")


class Module:  # noqa: D101 (see module docstring)
    def __init__(self) -> None:
        self._description: str = type(self).__name__
        self._inputs: List[InputSlot] = []
        self._outputs: List[OutputSlot] = []
        self._processed = False
        self.logger: ApplicationLogger = NullLogger()
        self.metric_sink: MetricSink = NullMetricSink()
        self.cancellation_token: CancellationToken = CancellationToken.none()

    # Identity -------------------------------------------------------------- #
    # Modules are compared and hashed by reference; a graph may hold two
    # modules of the same type with the same configuration.
    __hash__ = object.__hash__

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, value: str) -> None:
        if not isinstance(value, str) or not value:
            raise ValueError("Module description must be a non-empty string.")
        self._description = value

    # Slots ----------------------------------------------------------------- #
    @property
    def inputs(self) -> Tuple[InputSlot, ...]:
        return tuple(self._inputs)

    @property
    def outputs(self) -> Tuple[OutputSlot, ...]:
        return tuple(self._outputs)

    def _add_input_slot(self, name: str, description: str, data_type: type) -> InputSlot:
        if any(s.name == name for s in self._inputs):
            raise DuplicateSlotError(self, name)
        slot = InputSlot(name, description, data_type, self)
        self._inputs.append(slot)
        return slot

    def _add_output_slot(self, name: str, description: str, data_type: type) -> OutputSlot:
        if any(s.name == name for s in self._outputs):
            raise DuplicateSlotError(self, name)
        slot = OutputSlot(name, description, data_type, self)
        self._outputs.append(slot)
        return slot

    def get_input_slot(self, name: str) -> InputSlot:
        for slot in self._inputs:
            if slot.name == name:
                return slot
        raise SlotNotFoundError(self, name, "input")

    def get_output_slot(self, name: str) -> OutputSlot:
        for slot in self._outputs:
            if slot.name == name:
                return slot
        raise SlotNotFoundError(self, name, "output")

    # Execution ------------------------------------------------------------- #
    @property
    def processed(self) -> bool:
        return self._processed

    def process(self) -> None:
        """Run the module once; a second call raises ModuleAlreadyProcessedError."""
        self._pre_process()
        self._process()
        self._processed = True

    def _process(self) -> None:
        """Do the actual work: read input slot values, write output slot values."""
        raise NotImplementedError

    def _pre_process(self) -> None:
        if self._processed:
            raise ModuleAlreadyProcessedError(self)
        for slot in self._inputs:
            if slot.value is not None and not isinstance(slot.value, slot.data_type):
                raise InputSlotTypeError(slot)

    # Cancellation ---------------------------------------------------------- #
    @property
    def is_cancellation_requested(self) -> bool:
        return self.cancellation_token.is_cancellation_requested

    def throw_if_cancellation_requested(self) -> None:
        self.cancellation_token.throw_if_cancellation_requested()

    # Copy support ---------------------------------------------------------- #
    def clone_shape(self: M) -> M:
        """Return a fresh, unconfigured module of the same concrete type.

        Only the slot layout carries over. Override when ``__init__`` takes
        required arguments.
        """
        return type(self)()

    # ------------------------------------------------------------------ #
    def __repr__(self) -> str:
        return f"{type(self).__name__}(inputs={[s.name for s in self._inputs]}, outputs={[s.name for s in self._outputs]})"
