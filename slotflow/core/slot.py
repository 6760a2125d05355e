"""Typed, named single-value containers owned by a module.

A module declares its slots once (see :class:`slotflow.core.module.Module`);
graph links then move values from an :class:`OutputSlot` into one or more
:class:`InputSlot` objects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from slotflow.core.errors import SlotDefinitionError

if TYPE_CHECKING:  # pragma: no cover
    from slotflow.core.module import Module

__all__ = ["Slot", "InputSlot", "OutputSlot"]

class Slot:
    """Common base of input and output slots.

    ``name``, ``description``, ``data_type`` and ``module`` are fixed at
    construction; only ``value`` changes afterwards.
    """

    def __init__(self, name: str, description: str, data_type: type, module: "Module") -> None:
        if not isinstance(name, str) or not name:
            raise SlotDefinitionError("Parameter 'name' must be a non-empty string.")
        if not isinstance(description, str) or not description:
            raise SlotDefinitionError("Parameter 'description' must be a non-empty string.")
        if not isinstance(data_type, type):
            raise SlotDefinitionError("Parameter 'data_type' must be a type.")
        if module is None:
            raise SlotDefinitionError("Parameter 'module' must be non-None.")

        self._name = name
        self._description = description
        self._data_type = data_type
        self._module = module
        self._value: Any = None

    # ------------------------------------------------------------------ #
    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def data_type(self) -> type:
        return self._data_type

    @property
    def module(self) -> "Module":
        return self._module

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = value

    # ------------------------------------------------------------------ #
    def __repr__(self) -> str:
        return f"{type(self).__name__}({type(self._module).__name__}.{self._name}: {self._data_type.__name__})"


class InputSlot(Slot):
    """Slot receiving a value, either from a link or set directly by the caller."""

    def __init__(self, name: str, description: str, data_type: type, module: "Module") -> None:
        super().__init__(name, description, data_type, module)
        self._value_assigned = False

    @Slot.value.setter  # type: ignore[attr-defined]
    def value(self, value: Any) -> None:
        self._value = value
        # Assigning None still counts: the setter ran.
        self._value_assigned = True

    @property
    def value_assigned(self) -> bool:
        return self._value_assigned


class OutputSlot(Slot):
    """Slot written by its module during processing and read by links."""
