from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from selenium import webdriver
from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.client_config import ClientConfig
from selenium.webdriver.remote.file_detector import LocalFileDetector
from selenium.webdriver.support.ui import Select, WebDriverWait

from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager

from .base_backend import Action, Backend, Command
from ..config import Config
from ..errors import UnsupportedCommand
from ..logger import get_logger
from ..profiles import DriverProfile, build_profile

logger = get_logger(__name__)

SCROLL_INTO_VIEW_JS = "arguments[0].scrollIntoView({block: arguments[1], behavior: 'smooth'});"

# Key names as used in test code (W3C key values) mapped to Selenium Keys.
NAMED_KEYS = {
    "Enter": Keys.ENTER,
    "Tab": Keys.TAB,
    "Escape": Keys.ESCAPE,
    "Backspace": Keys.BACKSPACE,
    "Delete": Keys.DELETE,
    "Space": Keys.SPACE,
    "Home": Keys.HOME,
    "End": Keys.END,
    "PageUp": Keys.PAGE_UP,
    "PageDown": Keys.PAGE_DOWN,
    "ArrowUp": Keys.ARROW_UP,
    "ArrowDown": Keys.ARROW_DOWN,
    "ArrowLeft": Keys.ARROW_LEFT,
    "ArrowRight": Keys.ARROW_RIGHT,
}


class SeleniumBackend(Backend):
    """
    A backend implementation using Selenium WebDriver.

    One instance owns one browser session. Selectors are opaque strings:
    anything starting with "/" or "(" is treated as XPath, everything else as
    a CSS selector.
    """
    def __init__(self, config: Config, profile: Optional[DriverProfile] = None):
        """
        Initializes the SeleniumBackend.

        Args:
            config: The harness configuration.
            profile: The session profile. Built from the configured execution
                mode when omitted.
        """
        self.config = config
        self.profile = profile or build_profile(config)
        self.wait_timeout_ms = self.profile.wait_timeout_ms
        self.driver = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start(self):
        """
        Starts the WebDriver session described by the profile.

        - Remote profiles (cloud) connect to the profile's endpoint, retrying
          the connection up to `connection_retry_count` times.
        - Local profiles use webdriver-manager to fetch the driver binary and
          fall back to Selenium's own driver resolution if that fails.
        - Session timeouts are applied from the `timeouts` config section.
        """
        if self.profile.remote_url:
            self.driver = self._start_remote()
        else:
            self.driver = self._start_local()

        timeouts = self.config.timeouts
        self.driver.set_page_load_timeout(timeouts.page_load / 1000)
        self.driver.set_script_timeout(timeouts.script / 1000)
        self.driver.implicitly_wait(timeouts.implicit / 1000)
        logger.info(f"✅ {self.profile.browser} session started ({self.profile.mode.value} mode)")

    def _build_options(self):
        browser = self.profile.browser.lower()
        if browser == "firefox":
            options = webdriver.FirefoxOptions()
            if self.profile.headless:
                options.add_argument("-headless")
        elif browser == "safari":
            options = webdriver.SafariOptions()
        else:
            options = webdriver.ChromeOptions()
            for arg in self.profile.arguments:
                options.add_argument(arg)

        if self.profile.accept_insecure_certs:
            options.accept_insecure_certs = True
        for name, value in self.profile.capabilities.items():
            options.set_capability(name, value)
        return options

    def _start_local(self):
        options = self._build_options()
        browser = self.profile.browser.lower()
        if browser == "safari":
            return webdriver.Safari(options=options)

        try:
            if browser == "firefox":
                service = webdriver.FirefoxService(GeckoDriverManager().install())
                return webdriver.Firefox(service=service, options=options)
            service = webdriver.ChromeService(ChromeDriverManager().install())
            return webdriver.Chrome(service=service, options=options)
        except Exception as e:
            logger.error(f"Failed to initialize {browser} driver with webdriver-manager: {e}")
            logger.info("Falling back to default webdriver initialization.")
            if browser == "firefox":
                return webdriver.Firefox(options=options)
            return webdriver.Chrome(options=options)

    def _start_remote(self):
        options = self._build_options()
        # connection_retry_timeout_ms bounds every HTTP request to the remote end.
        client_config = ClientConfig(
            remote_server_addr=self.profile.remote_url,
            timeout=self.profile.connection_retry_timeout_ms // 1000,
        )
        last_error = None
        for attempt in range(1, self.profile.connection_retry_count + 1):
            try:
                driver = webdriver.Remote(
                    command_executor=self.profile.remote_url, options=options, client_config=client_config
                )
                driver.file_detector = LocalFileDetector()
                return driver
            except WebDriverException as e:
                last_error = e
                logger.warning(
                    f"Remote session attempt {attempt}/{self.profile.connection_retry_count} "
                    f"to {self.profile.remote_url} failed: {e}"
                )
        raise last_error

    def stop(self):
        """Quits the WebDriver and closes all associated browser windows."""
        if self.driver:
            self.driver.quit()
            self.driver = None

    # ------------------------------------------------------------------
    # Core primitives
    # ------------------------------------------------------------------

    def _locator(self, selector: str) -> Tuple[str, str]:
        if selector.startswith("/") or selector.startswith("("):
            return By.XPATH, selector
        return By.CSS_SELECTOR, selector

    def locate(self, selector: str) -> Optional[Any]:
        elements = self.driver.find_elements(*self._locator(selector))
        return elements[0] if elements else None

    def wait_until(self, predicate: Callable[[], Any], timeout_ms: float) -> bool:
        """
        Polls `predicate` with `WebDriverWait` until it holds or the timeout elapses.

        Stale or vanished nodes during a poll count as "not yet" rather than errors.
        """
        wait = WebDriverWait(
            self.driver,
            timeout_ms / 1000,
            poll_frequency=self.poll_interval,
            ignored_exceptions=(StaleElementReferenceException, NoSuchElementException),
        )
        try:
            wait.until(lambda d: predicate())
            return True
        except TimeoutException:
            return False

    def current_url(self) -> str:
        return self.driver.current_url

    def ready_state(self) -> str:
        return self.driver.execute_script("return document.readyState")

    def navigate(self, url: str) -> None:
        self.driver.get(url)

    def act(self, node: Any, action: Action, *args) -> Any:
        handler = self._actions().get(Action(action))
        if handler is None:
            raise UnsupportedCommand(action, type(self).__name__)
        return handler(node, *args)

    def execute(self, command: Command, *args) -> Any:
        handler = self._commands().get(Command(command))
        if handler is None:
            raise UnsupportedCommand(command, type(self).__name__)
        return handler(*args)

    # ------------------------------------------------------------------
    # Element actions
    # ------------------------------------------------------------------

    def _actions(self) -> Dict[Action, Callable]:
        return {
            Action.CLICK: lambda node: node.click(),
            Action.CLEAR: lambda node: node.clear(),
            Action.SET_VALUE: lambda node, value: node.send_keys(value),
            Action.GET_TEXT: lambda node: node.text,
            Action.GET_VALUE: self._get_value,
            Action.GET_ATTRIBUTE: lambda node, name: node.get_attribute(name),
            Action.GET_CSS_PROPERTY: lambda node, name: node.value_of_css_property(name) or "",
            Action.IS_DISPLAYED: lambda node: node.is_displayed(),
            Action.IS_ENABLED: lambda node: node.is_enabled(),
            Action.SCROLL_INTO_VIEW: self._scroll_into_view,
            Action.SELECT_BY_TEXT: lambda node, text: Select(node).select_by_visible_text(text),
            Action.SELECT_BY_VALUE: lambda node, value: Select(node).select_by_value(value),
            Action.SELECT_BY_INDEX: lambda node, index: Select(node).select_by_index(index),
            Action.HOVER: lambda node: ActionChains(self.driver).move_to_element(node).perform(),
            Action.DOUBLE_CLICK: lambda node: ActionChains(self.driver).double_click(node).perform(),
            Action.RIGHT_CLICK: lambda node: ActionChains(self.driver).context_click(node).perform(),
            Action.DRAG_TO: lambda node, target: ActionChains(self.driver).drag_and_drop(node, target).perform(),
            Action.UPLOAD_FILE: lambda node, path: node.send_keys(str(Path(path).resolve())),
            Action.LOCATION: lambda node: node.location,
            Action.SIZE: lambda node: node.size,
            Action.TAP: lambda node: node.click(),
            Action.LONG_PRESS: self._long_press,
        }

    def _get_value(self, node):
        value = node.get_property("value")
        if value is None:
            value = node.get_attribute("value")
        return value if value is not None else ""

    def _scroll_into_view(self, node, block: str = "center"):
        self.driver.execute_script(SCROLL_INTO_VIEW_JS, node, block)

    def _long_press(self, node, duration_ms: int = 1000):
        ActionChains(self.driver).click_and_hold(node).pause(duration_ms / 1000).release().perform()

    # ------------------------------------------------------------------
    # Session commands
    # ------------------------------------------------------------------

    def _commands(self) -> Dict[Command, Callable]:
        d = self.driver
        return {
            Command.TITLE: lambda: d.title,
            Command.REFRESH: d.refresh,
            Command.BACK: d.back,
            Command.FORWARD: d.forward,
            Command.EXECUTE_SCRIPT: d.execute_script,
            Command.EXECUTE_ASYNC_SCRIPT: d.execute_async_script,
            Command.SCREENSHOT: self._screenshot,
            Command.SWITCH_TO_FRAME: lambda frame: d.switch_to.frame(frame),
            Command.SWITCH_TO_PARENT_FRAME: lambda: d.switch_to.parent_frame(),
            Command.SWITCH_TO_WINDOW: lambda handle: d.switch_to.window(handle),
            Command.WINDOW_HANDLES: lambda: list(d.window_handles),
            Command.CLOSE_WINDOW: d.close,
            Command.ACCEPT_ALERT: lambda: d.switch_to.alert.accept(),
            Command.DISMISS_ALERT: lambda: d.switch_to.alert.dismiss(),
            Command.ALERT_TEXT: lambda: d.switch_to.alert.text,
            Command.SEND_ALERT_TEXT: lambda text: d.switch_to.alert.send_keys(text),
            Command.GET_COOKIES: self._get_cookies,
            Command.ADD_COOKIE: d.add_cookie,
            Command.DELETE_COOKIE: d.delete_cookie,
            Command.DELETE_ALL_COOKIES: d.delete_all_cookies,
            Command.GET_WINDOW_SIZE: d.get_window_size,
            Command.SET_WINDOW_SIZE: d.set_window_size,
            Command.MAXIMIZE_WINDOW: d.maximize_window,
            Command.PRESS_KEY: self._press_key,
        }

    def _screenshot(self, path: Optional[str] = None):
        """Returns PNG bytes, or saves to `path` and returns the path."""
        if path is None:
            return self.driver.get_screenshot_as_png()
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self.driver.save_screenshot(str(path))
        return str(path)

    def _get_cookies(self, name: Optional[str] = None):
        if name is None:
            return self.driver.get_cookies()
        cookie = self.driver.get_cookie(name)
        return [cookie] if cookie else []

    def _press_key(self, key: str):
        # Named keys ("Enter") and exact Keys attribute names ("ENTER", "F5");
        # anything else, single characters included, is typed as text.
        if key in NAMED_KEYS:
            value = NAMED_KEYS[key]
        elif len(key) > 1 and key.isupper() and isinstance(getattr(Keys, key, None), str):
            value = getattr(Keys, key)
        else:
            value = key
        ActionChains(self.driver).send_keys(value).perform()
