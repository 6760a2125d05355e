from __future__ import annotations
"""Cooperative cancellation shared between a processor and its modules.

A :class:`CancellationSource` owns exactly one :class:`CancellationToken`.
The processor hands the token to every module it runs; any thread may call
:meth:`CancellationSource.cancel`. Modules poll the token and raise
:class:`~slotflow.core.errors.ProcessingCancelledError` themselves.
"""
import threading
from typing import Optional

from slotflow.core.errors import ProcessingCancelledError, ProcessorClosedError

__all__ = ["CancellationToken", "CancellationSource"]


class CancellationToken:  # noqa: D101
    def __init__(self, event: Optional[threading.Event] = None):
        self._event = event if event is not None else threading.Event()

    @classmethod
    def none(cls) -> "CancellationToken":
        """Return a token that nobody can cancel."""
        return cls()

    # ------------------------------------------------------------------ #
    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def throw_if_cancellation_requested(self) -> None:
        if self._event.is_set():
            raise ProcessingCancelledError("The operation was cancelled.")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancellation is requested or *timeout* elapses."""
        return self._event.wait(timeout)


class CancellationSource:  # noqa: D101
    def __init__(self) -> None:
        self._event = threading.Event()
        self._token = CancellationToken(self._event)
        self._closed = False

    @property
    def token(self) -> CancellationToken:
        self._check_open()
        return self._token

    @property
    def closed(self) -> bool:
        return self._closed

    def cancel(self) -> None:
        self._check_open()
        self._event.set()

    def close(self) -> None:
        self._closed = True

    # ------------------------------------------------------------------ #
    def _check_open(self) -> None:
        if self._closed:
            raise ProcessorClosedError(type(self).__name__)
