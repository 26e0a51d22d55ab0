"""
Unified exception hierarchy for chanlog.

Configuration problems surface synchronously from ``configure()``, handler
loading problems surface on the awaited ``Completion``. Calling a channel
that was never configured is never an error.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ChanlogError(Exception):
    """Base class for all chanlog errors.

    Carries a stable ``code`` and a ``details`` mapping so hosts can react
    without parsing the message.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# ================================
# Configuration Errors
# ================================


class ConfigurationError(ChanlogError):
    """A configuration entry can not be turned into a sink."""

    def __init__(
        self,
        *,
        channel: Optional[str],
        value: Any,
        reason: str,
    ) -> None:
        if channel is None:
            message = f"Invalid logger configuration: {reason}"
        else:
            message = f'Invalid logger configuration for the "{channel}" channel: {reason}'
        details = {
            "channel": channel,
            "value_type": type(value).__name__,
            "reason": reason,
        }
        super().__init__(message, code="INVALID_CONFIGURATION", details=details)


class ProtectedChannelError(ChanlogError, AttributeError):
    """Raised on attempts to remove or overwrite ``fatal_error`` / ``exit``."""

    def __init__(self, *, channel: str, operation: str) -> None:
        message = f'The "{channel}" channel is protected and can not be {operation}'
        details = {"channel": channel, "operation": operation}
        super().__init__(message, code="PROTECTED_CHANNEL", details=details)


# ================================
# Handler Loading Errors
# ================================


class HandlerLoadError(ChanlogError):
    """An external handler module could not be imported or is unusable."""

    def __init__(
        self,
        *,
        channel: str,
        path: str,
        reason: str,
        dropped: int = 0,
    ) -> None:
        message = f'Failed to load handler "{path}" for the "{channel}" channel: {reason}'
        details = {
            "channel": channel,
            "path": path,
            "reason": reason,
            "dropped": dropped,
        }
        super().__init__(message, code="HANDLER_LOAD_FAILED", details=details)
