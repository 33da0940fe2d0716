from typing import Any, Callable, Dict, Optional, Tuple

from appium import webdriver as appium_webdriver
from appium.options.android import UiAutomator2Options
from appium.options.ios import XCUITestOptions
from appium.webdriver.client_config import AppiumClientConfig
from appium.webdriver.common.appiumby import AppiumBy
from selenium.common.exceptions import WebDriverException

from .base_backend import Command
from .selenium_backend import SeleniumBackend
from ..logger import get_logger

logger = get_logger(__name__)

class AppiumBackend(SeleniumBackend):
    """
    A backend for mobile web and native apps driven through an Appium server.

    Element actions are inherited from the Selenium backend (the Appium client
    is a Selenium driver); this class adds the mobile selector strategies and
    the device-level commands.

    Extra selector prefixes:
        "~name"            accessibility id
        "android=..."      UiAutomator selector
        "-ios predicate string:..."  iOS predicate
    """

    def start(self):
        """Connects to the Appium server with platform-specific options."""
        caps = dict(self.profile.capabilities)
        if caps.get("platformName", "").lower() == "ios":
            options = XCUITestOptions().load_capabilities(caps)
        else:
            options = UiAutomator2Options().load_capabilities(caps)

        client_config = AppiumClientConfig(
            remote_server_addr=self.profile.remote_url,
            timeout=self.profile.connection_retry_timeout_ms // 1000,
        )
        last_error = None
        for attempt in range(1, self.profile.connection_retry_count + 1):
            try:
                self.driver = appium_webdriver.Remote(
                    self.profile.remote_url, options=options, client_config=client_config
                )
                break
            except WebDriverException as e:
                last_error = e
                logger.warning(
                    f"Appium session attempt {attempt}/{self.profile.connection_retry_count} "
                    f"to {self.profile.remote_url} failed: {e}"
                )
        else:
            raise last_error

        self.driver.implicitly_wait(self.config.timeouts.implicit / 1000)
        logger.info(f"📱 {caps.get('platformName')} session started on {self.profile.remote_url}")

    @property
    def is_ios(self) -> bool:
        return self.profile.capabilities.get("platformName", "").lower() == "ios"

    def _locator(self, selector: str) -> Tuple[str, str]:
        if selector.startswith("~"):
            return AppiumBy.ACCESSIBILITY_ID, selector[1:]
        if selector.startswith("android="):
            return AppiumBy.ANDROID_UIAUTOMATOR, selector[len("android="):]
        if selector.startswith("-ios predicate string:"):
            return AppiumBy.IOS_PREDICATE, selector[len("-ios predicate string:"):]
        return super()._locator(selector)

    def _commands(self) -> Dict[Command, Callable]:
        commands = super()._commands()
        d = self.driver
        commands.update({
            Command.SWIPE: self._swipe,
            Command.HIDE_KEYBOARD: self._hide_keyboard,
            Command.IS_KEYBOARD_SHOWN: d.is_keyboard_shown,
            Command.GET_ORIENTATION: lambda: d.orientation,
            Command.SET_ORIENTATION: self._set_orientation,
            Command.ACTIVATE_APP: d.activate_app,
            Command.TERMINATE_APP: d.terminate_app,
            Command.BACKGROUND_APP: d.background_app,
            Command.INSTALL_APP: d.install_app,
            Command.REMOVE_APP: d.remove_app,
            Command.IS_APP_INSTALLED: d.is_app_installed,
            Command.DEVICE_TIME: d.get_device_time,
        })
        return commands

    def _swipe(self, start_x: float, start_y: float, end_x: float, end_y: float, duration_ms: int = 100):
        self.driver.swipe(int(start_x), int(start_y), int(end_x), int(end_y), duration_ms)

    def _hide_keyboard(self):
        if self.is_ios:
            self.driver.hide_keyboard(strategy="pressKey", key="Done")
        else:
            self.driver.hide_keyboard()

    def _set_orientation(self, orientation: str):
        self.driver.orientation = orientation.upper()
