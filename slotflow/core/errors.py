from __future__ import annotations
"""Exception hierarchy for slotflow.

Structural violations are raised synchronously by the graph / slot API.
Traversal problems are raised by :class:`~slotflow.core.processor.GraphProcessor`.
Every exception carries the offending objects so callers can react without
parsing messages.
"""
from typing import Any

__all__ = [
    "SlotflowError",
    "GraphStructureError",
    "SlotDefinitionError",
    "DuplicateSlotError",
    "SlotNotFoundError",
    "DuplicateModuleError",
    "UnknownModuleError",
    "ModuleHasIncomingLinksError",
    "ModuleHasOutgoingLinksError",
    "ModuleNotInGraphError",
    "SelfLoopError",
    "InputSlotAlreadyLinkedError",
    "IncompatibleSlotTypesError",
    "LinkNotFoundError",
    "InputSlotNotLinkedError",
    "CircularDependencyError",
    "UnassignedInputError",
    "ModuleAlreadyProcessedError",
    "InputSlotTypeError",
    "ProcessingCancelledError",
    "ProcessorClosedError",
]


def _type_name(obj: Any) -> str:
    return type(obj).__qualname__


class SlotflowError(Exception):
    """Base class for every error raised by slotflow."""


# --------------------------------------------------------------------------- #
# Graph / slot structure
# --------------------------------------------------------------------------- #


class GraphStructureError(SlotflowError, ValueError):  # noqa: D101
    pass


class SlotDefinitionError(GraphStructureError):
    """A slot was constructed with an empty name/description or a missing type/module."""


class DuplicateSlotError(GraphStructureError):  # noqa: D101
    def __init__(self, module: Any, name: str):
        self.module = module
        self.name = name
        super().__init__(
            f"Module '{_type_name(module)}' already contains a slot named '{name}'."
        )


class SlotNotFoundError(GraphStructureError, KeyError):  # noqa: D101
    def __init__(self, module: Any, name: str, kind: str):
        self.module = module
        self.name = name
        super().__init__(
            f"An {kind} slot with name '{name}' does not exist on module '{_type_name(module)}'."
        )

    def __str__(self) -> str:  # KeyError would quote the message
        return str(self.args[0])


class DuplicateModuleError(GraphStructureError):  # noqa: D101
    def __init__(self, module: Any):
        self.module = module
        super().__init__(f"Module '{_type_name(module)}' already exists in the graph.")


class UnknownModuleError(GraphStructureError):  # noqa: D101
    def __init__(self, module: Any):
        self.module = module
        super().__init__(f"Module '{_type_name(module)}' does not exist in the graph.")


class ModuleHasIncomingLinksError(GraphStructureError):  # noqa: D101
    def __init__(self, module: Any):
        self.module = module
        super().__init__(
            f"The graph contains slot links referencing the input slot(s) of module '{_type_name(module)}'."
        )


class ModuleHasOutgoingLinksError(GraphStructureError):  # noqa: D101
    def __init__(self, module: Any):
        self.module = module
        super().__init__(
            f"The graph contains slot links referencing the output slot(s) of module '{_type_name(module)}'."
        )


class ModuleNotInGraphError(GraphStructureError):  # noqa: D101
    def __init__(self, slot: Any):
        self.slot = slot
        super().__init__(
            f"Module '{_type_name(slot.module)}' owning slot '{slot.name}' does not exist in the graph."
        )


class SelfLoopError(GraphStructureError):  # noqa: D101
    def __init__(self, output_slot: Any, input_slot: Any):
        self.output_slot = output_slot
        self.input_slot = input_slot
        super().__init__(
            f"Linking output '{output_slot.name}' to input '{input_slot.name}' on the same module "
            f"'{_type_name(output_slot.module)}' would create a circular reference."
        )


class InputSlotAlreadyLinkedError(GraphStructureError):  # noqa: D101
    def __init__(self, input_slot: Any):
        self.input_slot = input_slot
        super().__init__(
            f"Input slot '{input_slot.name}' on module '{_type_name(input_slot.module)}' "
            "is already referenced by a slot link."
        )


class IncompatibleSlotTypesError(GraphStructureError):  # noqa: D101
    def __init__(self, output_slot: Any, input_slot: Any):
        self.output_slot = output_slot
        self.input_slot = input_slot
        super().__init__(
            f"Data type '{input_slot.data_type.__qualname__}' of input slot '{input_slot.name}' "
            f"on module '{_type_name(input_slot.module)}' is not assignable from data type "
            f"'{output_slot.data_type.__qualname__}' of output slot '{output_slot.name}' "
            f"on module '{_type_name(output_slot.module)}'."
        )


class LinkNotFoundError(GraphStructureError):  # noqa: D101
    def __init__(self, output_slot: Any, input_slot: Any):
        self.output_slot = output_slot
        self.input_slot = input_slot
        super().__init__(
            f"A slot link does not exist between output slot '{output_slot.name}' on module "
            f"'{_type_name(output_slot.module)}' and input slot '{input_slot.name}' on module "
            f"'{_type_name(input_slot.module)}'."
        )


class InputSlotNotLinkedError(GraphStructureError):  # noqa: D101
    def __init__(self, input_slot: Any):
        self.input_slot = input_slot
        super().__init__(
            f"Input slot '{input_slot.name}' on module '{_type_name(input_slot.module)}' "
            "is not referenced by a slot link."
        )


# --------------------------------------------------------------------------- #
# Traversal / execution
# --------------------------------------------------------------------------- #


class CircularDependencyError(SlotflowError):  # noqa: D101
    def __init__(self, module: Any):
        self.module = module
        super().__init__(
            f"Graph contains a circular reference involving module '{_type_name(module)}'."
        )


class UnassignedInputError(SlotflowError):  # noqa: D101
    def __init__(self, slot: Any):
        self.slot = slot
        super().__init__(
            f"Input slot '{slot.name}' on module '{_type_name(slot.module)}' "
            "does not have any data assigned to it."
        )


class ModuleAlreadyProcessedError(SlotflowError):  # noqa: D101
    def __init__(self, module: Any):
        self.module = module
        super().__init__(f"Module '{_type_name(module)}' has already been processed.")


class InputSlotTypeError(SlotflowError, TypeError):  # noqa: D101
    def __init__(self, slot: Any):
        self.slot = slot
        super().__init__(
            f"Input slot '{slot.name}' on module '{_type_name(slot.module)}' specifies data type "
            f"'{slot.data_type.__qualname__}', but contains data of type '{_type_name(slot.value)}'."
        )


class ProcessingCancelledError(SlotflowError):
    """Raised by a module that observed a cancellation request.

    Kept apart from the failure classes above so ``except`` clauses can tell
    cooperative cancellation from a genuine error.
    """


class ProcessorClosedError(SlotflowError, RuntimeError):  # noqa: D101
    def __init__(self, owner: str):
        super().__init__(f"Cannot use '{owner}' after it has been closed.")
