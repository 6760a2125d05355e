from __future__ import annotations
"""Issues reported by :meth:`GraphProcessor.validate`.

Issues are plain data: validation collects them and never raises.
"""
from dataclasses import dataclass

from slotflow.core.module import Module
from slotflow.core.slot import InputSlot, OutputSlot

__all__ = [
    "ValidationIssue",
    "EmptyGraph",
    "CircularReference",
    "UnlinkedInput",
    "UnlinkedOutput",
]


@dataclass(frozen=True)
class ValidationIssue:  # noqa: D101
    @property
    def message(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class EmptyGraph(ValidationIssue):  # noqa: D101
    @property
    def message(self) -> str:
        return "The module graph does not contain any end points."


@dataclass(frozen=True)
class CircularReference(ValidationIssue):  # noqa: D101
    module: Module

    @property
    def message(self) -> str:
        return f"Graph contains a circular reference involving module '{type(self.module).__qualname__}'."


@dataclass(frozen=True)
class UnlinkedInput(ValidationIssue):  # noqa: D101
    slot: InputSlot

    @property
    def message(self) -> str:
        return (
            f"Input slot '{self.slot.name}' on module '{type(self.slot.module).__qualname__}' "
            "is not referenced by a slot link."
        )


@dataclass(frozen=True)
class UnlinkedOutput(ValidationIssue):  # noqa: D101
    slot: OutputSlot

    @property
    def message(self) -> str:
        return (
            f"Output slot '{self.slot.name}' on module '{type(self.slot.module).__qualname__}' "
            "is not referenced by a slot link."
        )
