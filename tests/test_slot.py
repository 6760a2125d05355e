import pytest

from slotflow.core.errors import SlotDefinitionError
from slotflow.core.slot import InputSlot, OutputSlot

from helpers import Relay


def test_slot_properties():
    owner = Relay()
    slot = OutputSlot("total", "Running total", int, owner)
    assert slot.name == "total"
    assert slot.description == "Running total"
    assert slot.data_type is int
    assert slot.module is owner
    assert slot.value is None
    assert "total" in repr(slot)


@pytest.mark.parametrize(
    "name, description, data_type",
    [("", "desc", int), ("x", "", int), ("x", "desc", "int"), (None, "desc", int)],
)
def test_slot_rejects_bad_arguments(name, description, data_type):
    with pytest.raises(SlotDefinitionError):
        InputSlot(name, description, data_type, Relay())


def test_slot_requires_module():
    with pytest.raises(SlotDefinitionError):
        OutputSlot("x", "desc", int, None)


def test_input_value_assigned_tracks_setter():
    slot = InputSlot("x", "desc", int, Relay())
    assert slot.value_assigned is False
    slot.value = None  # assigning None still counts
    assert slot.value_assigned is True
    assert slot.value is None
    slot.value = 7
    assert slot.value == 7
