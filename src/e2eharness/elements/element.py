from typing import Optional

from .executor import BoundedWaitExecutor
from .facade import SafeInteractions
from .handle import ElementHandle
from ..backends.base_backend import Backend
from ..conditions import WaitCondition
from ..reporting import Reporter


class PageElement:
    """
    An element declared by a page object.

    Wraps one selector and exposes the bounded-wait operations on it. Nothing
    is located when the element is created; every operation resolves the
    selector again.

    Example:
        heading = PageElement("h1", backend)
        heading.wait_for_displayed()
        title = heading.get_text()
    """

    def __init__(self, selector: str, backend: Backend, reporter: Optional[Reporter] = None,
                 safe: Optional[SafeInteractions] = None):
        self._handle = ElementHandle(selector, backend)
        self._safe = safe or SafeInteractions(backend, reporter)
        self._executor: BoundedWaitExecutor = self._safe.executor

    @property
    def selector(self) -> str:
        return self._handle.selector

    @property
    def handle(self) -> ElementHandle:
        return self._handle

    def click(self, timeout: Optional[float] = None) -> None:
        self._executor.click(self._handle, timeout)

    def type(self, value: str, clear_first: bool = True, timeout: Optional[float] = None) -> None:
        self._executor.type(self._handle, value, clear_first, timeout)

    def get_text(self, timeout: Optional[float] = None) -> str:
        return self._executor.get_text(self._handle, timeout)

    def get_value(self, timeout: Optional[float] = None) -> str:
        return self._executor.get_value(self._handle, timeout)

    def get_attribute(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        return self._executor.get_attribute(self._handle, name, timeout)

    def get_css_property(self, name: str, timeout: Optional[float] = None) -> str:
        return self._executor.get_css_property(self._handle, name, timeout)

    def is_displayed(self, timeout: Optional[float] = None) -> bool:
        return self._executor.is_displayed(self._handle, timeout)

    def is_existing(self, timeout: Optional[float] = None) -> bool:
        return self._executor.is_existing(self._handle, timeout)

    def is_enabled(self, timeout: Optional[float] = None) -> bool:
        return self._executor.is_enabled(self._handle, timeout)

    def _wait_timeout(self, timeout: Optional[float]) -> Optional[float]:
        # Explicit waits default to the session profile, then to the timeout policy.
        return timeout if timeout is not None else self._handle.backend.wait_timeout_ms

    def wait_for_displayed(self, timeout: Optional[float] = None) -> None:
        self._executor.wait_for(self._handle, WaitCondition.DISPLAYED, self._wait_timeout(timeout))

    def wait_for_clickable(self, timeout: Optional[float] = None) -> None:
        self._executor.wait_for(self._handle, WaitCondition.CLICKABLE, self._wait_timeout(timeout))

    def wait_for_exist(self, timeout: Optional[float] = None) -> None:
        self._executor.wait_for(self._handle, WaitCondition.EXISTS, self._wait_timeout(timeout))

    def scroll_into_view(self, block: str = "center", timeout: Optional[float] = None) -> None:
        self._executor.scroll_into_view(self._handle, block, timeout)

    def select_by_visible_text(self, text: str, timeout: Optional[float] = None) -> None:
        self._executor.select_by_visible_text(self._handle, text, timeout)

    def select_by_value(self, value: str, timeout: Optional[float] = None) -> None:
        self._executor.select_by_value(self._handle, value, timeout)

    def select_by_index(self, index: int, timeout: Optional[float] = None) -> None:
        self._executor.select_by_index(self._handle, index, timeout)

    def safe_click(self, timeout: Optional[float] = None) -> None:
        self._safe.safe_click(self._handle, timeout)

    def safe_set_value(self, value: str, timeout: Optional[float] = None) -> None:
        self._safe.safe_set_value(self._handle, value, timeout)

    def __repr__(self) -> str:
        return f"PageElement({self.selector!r})"
