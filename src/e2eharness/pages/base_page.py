import re
import time
from pathlib import Path
from typing import Optional, Pattern, Union

from ..backends.base_backend import Backend, Command
from ..conditions import WaitCondition
from ..config import Config, resolve_path
from ..elements import PageElement, SafeInteractions
from ..errors import WaitTimeout
from ..logger import get_logger
from ..reporting import Reporter
from ..timeouts import OperationKind, effective_timeout
from .capabilities import Target, as_handle

logger = get_logger(__name__)

# Collapses repeated slashes without touching the "//" after the scheme.
DUPLICATE_SLASHES = re.compile(r"(?<!:)/{2,}")


class BasePage:
    """
    Base class for page objects.

    Holds the backend, the configuration and a `SafeInteractions` facade shared
    by every element the page declares. Subclasses declare their elements as
    properties built with `self.element(selector)` and override `wait_for_load`
    when the page has its own readiness signal.
    """

    def __init__(self, backend: Backend, config: Optional[Config] = None, url: str = "",
                 reporter: Optional[Reporter] = None):
        """
        Args:
            backend: The started session backend.
            config: Harness configuration; supplies the base URL and screenshot directory.
            url: The page URL used by `open`.
            reporter: Optional reporter for interaction failures.
        """
        self.backend = backend
        self.config = config
        self.url = url
        self.reporter = reporter
        self.safe = SafeInteractions(backend, reporter)

    def element(self, selector: str) -> PageElement:
        return PageElement(selector, self.backend, safe=self.safe)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def open(self, path: str = "") -> None:
        """Opens the page URL (plus an optional path) and waits for it to load."""
        full_url = f"{self.url}{path}" if path else self.url
        logger.info(f"🌐 Navigating to: {full_url}")
        self.backend.navigate(full_url)
        self.wait_for_load()

    def navigate_to(self, path: str) -> None:
        """
        Navigates to `path` under the configured environment's base URL.

        The page load and any loading indicators are waited for before returning.
        """
        base = self.config.base_url() if self.config else self.url
        url = DUPLICATE_SLASHES.sub("/", f"{base}/{path}")
        self.safe.safe_navigate(url)

    def wait_for_load(self) -> None:
        """Waits for document.readyState to be complete, then settles for 500ms."""
        self.safe.wait_for_page_load()
        self.pause(500)

    def wait_for_url(self, expected: Union[str, Pattern], timeout: Optional[float] = None) -> None:
        """
        Waits until the current URL contains `expected` or, for a compiled
        pattern, until the pattern matches it.

        Raises:
            WaitTimeout: If the URL did not match in time (default 10000ms).
        """
        timeout_ms = effective_timeout(OperationKind.URL, timeout)
        if isinstance(expected, str):
            matches = lambda url: expected in url
            label = expected
        else:
            matches = lambda url: expected.search(url) is not None
            label = expected.pattern

        started = self.backend.now()
        if not self.backend.wait_until(lambda: matches(self.backend.current_url()), timeout_ms):
            elapsed_ms = (self.backend.now() - started) * 1000
            raise WaitTimeout(
                label, WaitCondition.URL_CONTAINS, elapsed_ms, f"URL did not match {label} within {timeout_ms:.0f}ms"
            )

    def wait_for_url_contains(self, text: str, timeout: Optional[float] = None) -> None:
        self.safe.wait_for_url_contains(text, timeout)

    def get_current_url(self) -> str:
        return self.backend.current_url()

    def get_title(self) -> str:
        return self.backend.execute(Command.TITLE)

    def take_screenshot(self, name: Optional[str] = None) -> Path:
        """
        Saves a PNG of the current viewport into the screenshot directory.

        Returns:
            The path of the saved file, `{name}_{timestamp}.png`.
        """
        directory = resolve_path(self.config.reporting.screenshot_dir if self.config else "screenshots")
        filename = f"{name or 'screenshot'}_{int(time.time() * 1000)}.png"
        path = directory / filename
        self.backend.execute(Command.SCREENSHOT, str(path))
        logger.info(f"📸 Screenshot saved: {path}")
        return path

    def pause(self, ms: float) -> None:
        self.backend.sleep(ms / 1000)

    # ------------------------------------------------------------------
    # Element shortcuts
    # ------------------------------------------------------------------

    def safe_click(self, target: Target, timeout: Optional[float] = None) -> None:
        """Safe-clicks the element, then waits for any loader the click triggered."""
        self.safe.safe_click(as_handle(target, self.backend), timeout)
        self.safe.wait_for_loader()

    def set_value(self, target: Target, value: str, timeout: Optional[float] = None) -> None:
        self.safe.safe_set_value(as_handle(target, self.backend), value, timeout)

    def get_text(self, target: Target, timeout: Optional[float] = None) -> str:
        return self.safe.safe_get_text(as_handle(target, self.backend), timeout)

    def is_displayed(self, target: Target, timeout: Optional[float] = None) -> bool:
        return self.safe.executor.is_displayed(as_handle(target, self.backend), timeout)

    def is_existing(self, target: Target, timeout: Optional[float] = None) -> bool:
        return self.safe.executor.is_existing(as_handle(target, self.backend), timeout)

    def wait_for_element(self, target: Target, timeout: Optional[float] = None) -> None:
        if timeout is None:
            timeout = self.backend.wait_timeout_ms
        self.safe.executor.wait_for(as_handle(target, self.backend), WaitCondition.DISPLAYED, timeout)
