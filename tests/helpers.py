"""Concrete modules shared by the test suite."""
import threading

from slotflow.core.module import Module


class Source(Module):
    """No inputs, two int outputs."""

    def __init__(self, first: int = 3, second: int = 5):
        super().__init__()
        self.description = "Emits two integers"
        self.first = first
        self.second = second
        self._add_output_slot("first", "First value", int)
        self._add_output_slot("second", "Second value", int)

    def _process(self):
        self.get_output_slot("first").value = self.first
        self.get_output_slot("second").value = self.second


class Sink(Module):
    """Two int inputs, no outputs; keeps what it received."""

    def __init__(self):
        super().__init__()
        self.description = "Collects two integers"
        self._add_input_slot("first", "First value", int)
        self._add_input_slot("second", "Second value", int)
        self.received = None

    def _process(self):
        self.received = (self.get_input_slot("first").value, self.get_input_slot("second").value)


class Relay(Module):
    """One input, one output of the same type; passes the value through."""

    def __init__(self):
        super().__init__()
        self._add_input_slot("value", "Incoming value", int)
        self._add_output_slot("value", "Outgoing value", int)

    def _process(self):
        self.get_output_slot("value").value = self.get_input_slot("value").value


class Terminal(Module):
    """One int input, no outputs."""

    def __init__(self):
        super().__init__()
        self._add_input_slot("value", "Final value", int)
        self.received = None

    def _process(self):
        self.received = self.get_input_slot("value").value


class Emitter(Module):
    """Single ``object`` output carrying the payload given at construction."""

    def __init__(self, payload=None):
        super().__init__()
        self.payload = payload
        self._add_output_slot("payload", "Any value", object)

    def _process(self):
        self.get_output_slot("payload").value = self.payload


class Forward(Module):
    """Single ``object`` input and output; remembers what went through."""

    def __init__(self):
        super().__init__()
        self._add_input_slot("payload", "Any value", object)
        self._add_output_slot("payload", "Same value", object)
        self.seen = None

    def _process(self):
        self.seen = self.get_input_slot("payload").value
        self.get_output_slot("payload").value = self.seen


class Join(Module):
    """Two ``object`` inputs, no outputs."""

    def __init__(self):
        super().__init__()
        self._add_input_slot("left", "Left value", object)
        self._add_input_slot("right", "Right value", object)
        self.received = None

    def _process(self):
        self.received = (self.get_input_slot("left").value, self.get_input_slot("right").value)


class Failing(Module):
    """Raises from its process hook."""

    def __init__(self):
        super().__init__()
        self._add_output_slot("value", "Never produced", int)

    def _process(self):
        raise RuntimeError("module failed on purpose")


class Cancellable(Module):
    """Hands control to a cancelling thread, then waits for the token.

    ``started`` is set once processing begins; the module then blocks until
    cancellation is requested (or ``timeout`` elapses) and, when
    ``raise_if_cancelled`` is true, raises the cancellation outcome.
    """

    def __init__(self):
        super().__init__()
        self._add_input_slot("started", "Set once processing begins", threading.Event)
        self._add_input_slot("raise_if_cancelled", "Raise when cancellation was requested", bool)
        self._add_output_slot("cancel_was_requested", "Whether cancellation was observed", bool)
        self.timeout = 5.0

    def _process(self):
        self.get_input_slot("started").value.set()
        self.cancellation_token.wait(self.timeout)
        self.get_output_slot("cancel_was_requested").value = self.is_cancellation_requested
        if self.get_input_slot("raise_if_cancelled").value:
            self.throw_if_cancellation_requested()
