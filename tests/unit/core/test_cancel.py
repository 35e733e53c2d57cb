"""Unit tests for cooperative cancellation."""

import pytest
from cleanctl.core.cancel import CancellationToken, is_cancelled
from cleanctl.errors import CancelledError


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_starts_live(self) -> None:
        """A new token is not cancelled."""
        token = CancellationToken()
        assert token.cancelled is False
        token.raise_if_cancelled()

    def test_cancel_is_sticky(self) -> None:
        """Cancelling is irreversible."""
        token = CancellationToken()
        token.cancel()
        token.cancel()
        assert token.cancelled is True

    def test_raise_if_cancelled(self) -> None:
        """A cancelled token raises on request."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(CancelledError):
            token.raise_if_cancelled()

    def test_is_cancelled_optional(self) -> None:
        """A missing token is never cancelled."""
        token = CancellationToken()
        assert is_cancelled(None) is False
        assert is_cancelled(token) is False
        token.cancel()
        assert is_cancelled(token) is True
