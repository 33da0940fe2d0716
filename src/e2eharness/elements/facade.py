from enum import Enum
from typing import Optional

from .executor import BoundedWaitExecutor
from .handle import ElementHandle
from ..backends.base_backend import Action, Backend
from ..conditions import WaitCondition
from ..errors import ActionFailure, WaitTimeout
from ..logger import get_logger
from ..reporting import Reporter
from ..timeouts import OperationKind, effective_timeout

logger = get_logger(__name__)

# Common loading indicators, checked in this order after every navigation.
LOADER_SELECTORS = (
    ".loading",
    ".spinner",
    ".loader",
    '[data-testid="loader"]',
    '[data-testid="loading"]',
    ".loader-overlay",
    ".loading-spinner",
    "#loading",
    ".MuiCircularProgress-root",  # Material UI
    ".ant-spin",  # Ant Design
)


class NavigationState(str, Enum):
    IDLE = "idle"
    NAVIGATING = "navigating"
    PAGE_READY = "page_ready"
    LOADERS_CLEARING = "loaders_clearing"
    READY = "ready"


class SafeInteractions:
    """
    Safe click / set value / navigate operations used by page objects.

    Composes the bounded-wait executor with the steps that come before an
    action (scrolling the element to the middle of the viewport, waiting for
    the page and its loaders). Any failing step aborts the whole operation and
    propagates; the failure is also recorded through the reporter, if any.
    """

    def __init__(self, backend: Backend, reporter: Optional[Reporter] = None, loader_selectors=LOADER_SELECTORS):
        """
        Args:
            backend: The session backend to drive.
            reporter: Optional reporter that receives failure records.
            loader_selectors: Loader selectors to clear after navigation, in order.
        """
        self.backend = backend
        self.executor = BoundedWaitExecutor(backend)
        self.reporter = reporter
        self.loader_selectors = tuple(loader_selectors)
        self.state = NavigationState.IDLE

    def _report(self, name: str, error: Exception) -> None:
        if self.reporter is None:
            return
        if isinstance(error, WaitTimeout):
            self.reporter.record_failure(
                name, error, selector=error.selector, condition=error.condition, elapsed_ms=round(error.elapsed_ms)
            )
        elif isinstance(error, ActionFailure):
            self.reporter.record_failure(name, error, selector=error.selector, action=error.action)
        else:
            self.reporter.record_failure(name, error)

    def _scroll_if_present(self, handle: ElementHandle, block: str = "center") -> bool:
        # Absence is not a failure here: the wait that follows owns the timeout.
        node = handle.resolve()
        if node is None:
            return False
        self.executor.act(handle, node, Action.SCROLL_INTO_VIEW, block)
        return True

    def safe_click(self, handle: ElementHandle, timeout: Optional[float] = None) -> None:
        """
        Scrolls the element into center view, waits until it is clickable, then clicks once.

        Args:
            handle: The element to click.
            timeout: Clickable wait in milliseconds (default 10000).

        Raises:
            WaitTimeout: The element never became clickable.
            ActionFailure: Scrolling or clicking threw.
        """
        try:
            scrolled = self._scroll_if_present(handle)
            node = self.executor.wait_for(handle, WaitCondition.CLICKABLE, timeout)
            if not scrolled:
                self.executor.act(handle, node, Action.SCROLL_INTO_VIEW, "center")
            self.executor.act(handle, node, Action.CLICK)
        except (WaitTimeout, ActionFailure) as e:
            logger.error(f"safe_click failed for element {handle.selector}: {e}")
            self._report(f"safe_click {handle.selector}", e)
            raise

    def safe_set_value(self, handle: ElementHandle, value: str, timeout: Optional[float] = None) -> None:
        """
        Scrolls into view, waits for existence, clears the current value and sets `value`.

        Args:
            handle: The input element.
            value: The new value. An empty string leaves the field empty.
            timeout: Existence wait in milliseconds (default 10000).
        """
        try:
            scrolled = self._scroll_if_present(handle)
            node = self.executor.wait_for(handle, WaitCondition.EXISTS, timeout)
            if not scrolled:
                self.executor.act(handle, node, Action.SCROLL_INTO_VIEW, "center")
            self.executor.act(handle, node, Action.CLEAR)
            if value:
                self.executor.act(handle, node, Action.SET_VALUE, value)
        except (WaitTimeout, ActionFailure) as e:
            logger.error(f"safe_set_value failed for element {handle.selector}: {e}")
            self._report(f"safe_set_value {handle.selector}", e)
            raise

    def safe_get_text(self, handle: ElementHandle, timeout: Optional[float] = None) -> str:
        try:
            return self.executor.get_text(handle, timeout)
        except (WaitTimeout, ActionFailure) as e:
            logger.error(f"safe_get_text failed for element {handle.selector}: {e}")
            self._report(f"safe_get_text {handle.selector}", e)
            raise

    def scroll_to_element(self, handle: ElementHandle, block: str = "center") -> None:
        self.executor.scroll_into_view(handle, block)

    def wait_for_page_load(self, timeout: Optional[float] = None) -> None:
        """
        Waits until document.readyState is "complete".

        Args:
            timeout: Maximum wait in milliseconds (default 30000).

        Raises:
            WaitTimeout: With the current URL as selector and PAGE_READY as condition.
        """
        timeout_ms = effective_timeout(OperationKind.PAGE_LOAD, timeout)
        started = self.backend.now()
        if not self.backend.wait_until(lambda: self.backend.ready_state() == "complete", timeout_ms):
            elapsed_ms = (self.backend.now() - started) * 1000
            raise WaitTimeout(
                self.backend.current_url(),
                WaitCondition.PAGE_READY,
                elapsed_ms,
                f"Page did not load within {timeout_ms:.0f}ms",
            )

    def wait_for_loader(self, timeout: Optional[float] = None) -> None:
        """
        Waits for every loading indicator currently in the DOM to disappear.

        Loader selectors are checked in order. A loader that is not present is
        skipped. A present loader gets up to `timeout` ms (default 30000) to
        stop being displayed; if it never does, WaitTimeout is raised.
        """
        timeout_ms = effective_timeout(OperationKind.LOADER, timeout)
        for selector in self.loader_selectors:
            handle = ElementHandle(selector, self.backend)
            if handle.resolve() is None:
                continue
            logger.debug(f"Waiting for loader '{selector}' to disappear")
            try:
                self.executor.wait_for(handle, WaitCondition.HIDDEN, timeout_ms, kind=OperationKind.LOADER)
            except WaitTimeout as e:
                raise WaitTimeout(
                    selector,
                    WaitCondition.HIDDEN,
                    e.elapsed_ms,
                    f'Loader "{selector}" did not disappear within {timeout_ms:.0f}ms',
                ) from e

    def safe_navigate(self, url: str) -> None:
        """
        Navigates to `url`, waits for the page to be ready, then for loaders to clear.

        States: IDLE -> NAVIGATING -> PAGE_READY -> LOADERS_CLEARING -> READY.
        LOADERS_CLEARING is skipped when no loader is present. Any failure,
        including one raised by the driver itself, returns the state to IDLE,
        is recorded through the reporter and propagates.
        """
        logger.info(f"🌐 Navigating to: {url}")
        self._transition(NavigationState.NAVIGATING)
        try:
            self.backend.navigate(url)
            self.wait_for_page_load()
            self._transition(NavigationState.PAGE_READY)
            if self._loader_present():
                self._transition(NavigationState.LOADERS_CLEARING)
                self.wait_for_loader()
        except Exception as e:
            logger.error(f"safe_navigate failed for {url}: {e}")
            self._transition(NavigationState.IDLE)
            self._report(f"safe_navigate {url}", e)
            raise
        self._transition(NavigationState.READY)

    def _loader_present(self) -> bool:
        return any(self.backend.locate(selector) is not None for selector in self.loader_selectors)

    def _transition(self, state: NavigationState) -> None:
        logger.debug(f"Navigation {self.state.value} -> {state.value}")
        self.state = state

    def wait_for_url_contains(self, text: str, timeout: Optional[float] = None) -> None:
        """
        Polls the current URL until it contains `text`.

        Raises:
            WaitTimeout: With `text` as selector and URL_CONTAINS as condition.
        """
        timeout_ms = effective_timeout(OperationKind.URL, timeout)
        started = self.backend.now()
        if not self.backend.wait_until(lambda: text in self.backend.current_url(), timeout_ms):
            elapsed_ms = (self.backend.now() - started) * 1000
            error = WaitTimeout(
                text,
                WaitCondition.URL_CONTAINS,
                elapsed_ms,
                f'URL did not contain "{text}" within {timeout_ms:.0f}ms',
            )
            self._report(f"wait_for_url_contains {text}", error)
            raise error
