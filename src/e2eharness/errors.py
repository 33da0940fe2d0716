"""
Exception types raised by the harness.

Element interactions fail in exactly two ways: the wait condition never held
(`WaitTimeout`) or the action itself threw once the element was ready
(`ActionFailure`). Both propagate to the calling test step; nothing here is
retried automatically.
"""
from typing import Any, Optional


class HarnessError(Exception):
    """Base class for every error raised by e2eharness."""


class ConfigError(HarnessError):
    """The configuration file is missing or does not validate."""


class WaitTimeout(HarnessError):
    """
    A wait condition did not become true within its bounded wait.

    Attributes:
        selector: The selector (or URL / text for session-level waits) waited on.
        condition: The `WaitCondition` that was not satisfied.
        elapsed_ms: How long the wait actually ran, in milliseconds.
    """

    def __init__(self, selector: str, condition: Any, elapsed_ms: float, message: Optional[str] = None):
        self.selector = selector
        self.condition = condition
        self.elapsed_ms = elapsed_ms
        label = getattr(condition, "value", condition)
        if message is None:
            message = f"'{selector}' not {label} after {elapsed_ms:.0f}ms"
        super().__init__(message)


class ActionFailure(HarnessError):
    """
    An action raised after its wait condition was satisfied.

    The original exception is kept on `cause` and chained as `__cause__`.
    """

    def __init__(self, selector: str, action: Any, cause: BaseException):
        self.selector = selector
        self.action = action
        self.cause = cause
        label = getattr(action, "value", action)
        super().__init__(f"{label} failed on '{selector}': {cause}")


class UnsupportedCommand(HarnessError):
    """The active backend cannot perform a session-level command."""

    def __init__(self, command: Any, backend: str):
        self.command = command
        self.backend = backend
        label = getattr(command, "value", command)
        super().__init__(f"{backend} does not support '{label}'")
