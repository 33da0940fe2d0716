import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional


class Action(str, Enum):
    """Element-level actions a backend performs on a resolved node."""
    CLICK = "click"
    CLEAR = "clear"
    SET_VALUE = "set_value"
    GET_TEXT = "get_text"
    GET_VALUE = "get_value"
    GET_ATTRIBUTE = "get_attribute"
    GET_CSS_PROPERTY = "get_css_property"
    IS_DISPLAYED = "is_displayed"
    IS_ENABLED = "is_enabled"
    SCROLL_INTO_VIEW = "scroll_into_view"
    SELECT_BY_TEXT = "select_by_text"
    SELECT_BY_VALUE = "select_by_value"
    SELECT_BY_INDEX = "select_by_index"
    HOVER = "hover"
    DOUBLE_CLICK = "double_click"
    RIGHT_CLICK = "right_click"
    DRAG_TO = "drag_to"
    UPLOAD_FILE = "upload_file"
    LOCATION = "location"
    SIZE = "size"
    TAP = "tap"
    LONG_PRESS = "long_press"


class Command(str, Enum):
    """Session-level commands that do not target a single element."""
    TITLE = "title"
    REFRESH = "refresh"
    BACK = "back"
    FORWARD = "forward"
    EXECUTE_SCRIPT = "execute_script"
    EXECUTE_ASYNC_SCRIPT = "execute_async_script"
    SCREENSHOT = "screenshot"
    SWITCH_TO_FRAME = "switch_to_frame"
    SWITCH_TO_PARENT_FRAME = "switch_to_parent_frame"
    SWITCH_TO_WINDOW = "switch_to_window"
    WINDOW_HANDLES = "window_handles"
    CLOSE_WINDOW = "close_window"
    ACCEPT_ALERT = "accept_alert"
    DISMISS_ALERT = "dismiss_alert"
    ALERT_TEXT = "alert_text"
    SEND_ALERT_TEXT = "send_alert_text"
    GET_COOKIES = "get_cookies"
    ADD_COOKIE = "add_cookie"
    DELETE_COOKIE = "delete_cookie"
    DELETE_ALL_COOKIES = "delete_all_cookies"
    GET_WINDOW_SIZE = "get_window_size"
    SET_WINDOW_SIZE = "set_window_size"
    MAXIMIZE_WINDOW = "maximize_window"
    PRESS_KEY = "press_key"
    # Mobile only.
    SWIPE = "swipe"
    HIDE_KEYBOARD = "hide_keyboard"
    IS_KEYBOARD_SHOWN = "is_keyboard_shown"
    GET_ORIENTATION = "get_orientation"
    SET_ORIENTATION = "set_orientation"
    ACTIVATE_APP = "activate_app"
    TERMINATE_APP = "terminate_app"
    BACKGROUND_APP = "background_app"
    INSTALL_APP = "install_app"
    REMOVE_APP = "remove_app"
    IS_APP_INSTALLED = "is_app_installed"
    DEVICE_TIME = "device_time"


class Backend(ABC):
    """
    The automation-driver boundary the interaction core is written against.

    A backend owns exactly one automation session. The wait/act core only
    needs `locate`, `wait_until`, `act` and `current_url`/`ready_state`;
    everything else supports page-level capabilities.
    """

    poll_interval: float = 0.1
    # Default for explicit element waits (wait_for_displayed and friends), in
    # milliseconds. None falls back to the timeout policy.
    wait_timeout_ms: Optional[int] = None

    @abstractmethod
    def start(self):
        """Start the automation session."""
        pass

    @abstractmethod
    def stop(self):
        """End the session and release the browser or device."""
        pass

    @abstractmethod
    def locate(self, selector: str) -> Optional[Any]:
        """Return the first node matching selector right now, or None."""
        pass

    @abstractmethod
    def act(self, node: Any, action: Action, *args) -> Any:
        """Perform one action on a node previously returned by `locate`."""
        pass

    @abstractmethod
    def current_url(self) -> str:
        pass

    @abstractmethod
    def ready_state(self) -> str:
        """Return document.readyState of the current page."""
        pass

    @abstractmethod
    def navigate(self, url: str) -> None:
        pass

    @abstractmethod
    def execute(self, command: Command, *args) -> Any:
        """Run a session-level command. Raises UnsupportedCommand when not available."""
        pass

    def now(self) -> float:
        """Monotonic clock, in seconds, used to time waits."""
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def wait_until(self, predicate: Callable[[], Any], timeout_ms: float) -> bool:
        """
        Polls `predicate` until it returns a truthy value or the timeout elapses.

        Args:
            predicate: A zero-argument callable evaluated on every poll.
            timeout_ms: The maximum time to keep polling, in milliseconds.

        Returns:
            True if the predicate held before the deadline, False otherwise.
            On False at least `timeout_ms` has elapsed.
        """
        deadline = self.now() + timeout_ms / 1000
        while True:
            if predicate():
                return True
            if self.now() >= deadline:
                return False
            self.sleep(self.poll_interval)
