"""
Timeout policy for bounded waits.

Every operation kind has a fixed default in milliseconds; callers may pass an
explicit override per call.
"""
from enum import Enum
from typing import Optional


class OperationKind(str, Enum):
    EXISTENCE = "existence"
    DISPLAYED = "displayed"
    CLICKABLE = "clickable"
    LOADER = "loader"
    PRESENCE_QUERY = "presence_query"
    PAGE_LOAD = "page_load"
    URL = "url"


DEFAULT_TIMEOUTS_MS = {
    OperationKind.EXISTENCE: 10000,
    OperationKind.DISPLAYED: 10000,
    OperationKind.CLICKABLE: 10000,
    OperationKind.LOADER: 30000,
    OperationKind.PRESENCE_QUERY: 5000,
    OperationKind.PAGE_LOAD: 30000,
    OperationKind.URL: 10000,
}


def default_timeout(kind: OperationKind) -> int:
    """Returns the default wait, in milliseconds, for an operation kind."""
    return DEFAULT_TIMEOUTS_MS[OperationKind(kind)]


def effective_timeout(kind: OperationKind, override: Optional[float] = None) -> float:
    """
    Resolves the timeout an operation actually waits for.

    Args:
        kind: The operation kind whose default applies when no override is given.
        override: An explicit per-call timeout in milliseconds.

    Returns:
        The override if provided, otherwise the policy default.

    Raises:
        ValueError: If the override is not strictly positive.
    """
    if override is None:
        return default_timeout(kind)
    if override <= 0:
        raise ValueError(f"Timeout must be > 0 ms, got {override}")
    return override
