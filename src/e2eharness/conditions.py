from enum import Enum


class WaitCondition(str, Enum):
    """Predicate an element (or the session) must satisfy before an operation proceeds."""

    EXISTS = "exists"
    DISPLAYED = "displayed"
    CLICKABLE = "clickable"
    # Reverse of DISPLAYED: absent from the DOM or present but not visible.
    HIDDEN = "hidden"

    # Session-level waits.
    PAGE_READY = "page_ready"
    URL_CONTAINS = "url_contains"
