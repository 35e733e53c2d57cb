"""Cooperative cancellation for long-running scans."""

import threading

from cleanctl.errors import CancelledError


class CancellationToken:
    """Shared flag checked between discrete units of work.

    Scanners consult the token between roots, definitions or folders,
    never in the middle of a single file. Setting the token is
    thread-safe and irreversible.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise CancelledError if cancellation was requested."""
        if self._event.is_set():
            msg = "Operation was cancelled"
            raise CancelledError(msg)


def is_cancelled(token: CancellationToken | None) -> bool:
    """Check an optional token."""
    return token is not None and token.cancelled
