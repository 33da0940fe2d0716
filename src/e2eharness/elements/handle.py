from typing import Any, Optional

from ..backends.base_backend import Backend


class ElementHandle:
    """
    A re-locatable reference to a UI element.

    The handle owns only its selector. Every `resolve()` queries the current UI
    tree again, so a node found earlier is never reused after the page changes.
    """

    __slots__ = ("_selector", "_backend")

    def __init__(self, selector: str, backend: Backend):
        if not selector:
            raise ValueError("Selector must be a non-empty string")
        self._selector = selector
        self._backend = backend

    @property
    def selector(self) -> str:
        return self._selector

    @property
    def backend(self) -> Backend:
        return self._backend

    def resolve(self) -> Optional[Any]:
        """Returns the live node matching the selector right now, or None."""
        return self._backend.locate(self._selector)

    def __repr__(self) -> str:
        return f"ElementHandle({self._selector!r})"
