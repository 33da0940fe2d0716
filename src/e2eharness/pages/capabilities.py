"""
Page capabilities.

Each capability is a small object bound to one backend that page objects hold
as an attribute (`page.alerts.accept()`, `page.touch.swipe_screen("up")`).
Pages pick the capabilities they need instead of inheriting them.
"""
from typing import Any, Dict, List, Optional, Union

from ..backends.base_backend import Action, Backend, Command
from ..conditions import WaitCondition
from ..config import Config
from ..elements import ElementHandle, PageElement, SafeInteractions
from ..errors import ConfigError, HarnessError
from ..logger import get_logger

logger = get_logger(__name__)

Target = Union[str, PageElement, ElementHandle]


def as_handle(target: Target, backend: Backend) -> ElementHandle:
    """Accepts a selector string, a PageElement or an ElementHandle."""
    if isinstance(target, ElementHandle):
        return target
    if isinstance(target, PageElement):
        return target.handle
    return ElementHandle(target, backend)


class Navigation:
    """Browser history. Every move waits for the page and its loaders."""

    def __init__(self, backend: Backend, safe: SafeInteractions):
        self.backend = backend
        self.safe = safe

    def _settle(self):
        self.safe.wait_for_page_load()
        self.safe.wait_for_loader()

    def refresh(self) -> None:
        self.backend.execute(Command.REFRESH)
        self._settle()

    def back(self) -> None:
        self.backend.execute(Command.BACK)
        self._settle()

    def forward(self) -> None:
        self.backend.execute(Command.FORWARD)
        self._settle()


class Scrolling:
    def __init__(self, backend: Backend, safe: SafeInteractions):
        self.backend = backend
        self.safe = safe

    def to_top(self) -> None:
        self.backend.execute(Command.EXECUTE_SCRIPT, "window.scrollTo(0, 0);")

    def to_bottom(self) -> None:
        self.backend.execute(Command.EXECUTE_SCRIPT, "window.scrollTo(0, document.body.scrollHeight);")

    def to_element(self, target: Target, block: str = "center") -> None:
        self.safe.scroll_to_element(as_handle(target, self.backend), block)


class Alerts:
    def __init__(self, backend: Backend):
        self.backend = backend

    def accept(self) -> None:
        self.backend.execute(Command.ACCEPT_ALERT)

    def dismiss(self) -> None:
        self.backend.execute(Command.DISMISS_ALERT)

    def text(self) -> str:
        return self.backend.execute(Command.ALERT_TEXT)

    def send_text(self, text: str) -> None:
        self.backend.execute(Command.SEND_ALERT_TEXT, text)


class Frames:
    def __init__(self, backend: Backend, safe: SafeInteractions):
        self.backend = backend
        self.safe = safe

    def switch_to(self, frame: Union[int, Target]) -> None:
        """
        Switches into an iframe.

        Args:
            frame: The frame index, or the iframe element (selector or element).
        """
        if isinstance(frame, int):
            self.backend.execute(Command.SWITCH_TO_FRAME, frame)
            return
        handle = as_handle(frame, self.backend)
        node = self.safe.executor.wait_for(handle, WaitCondition.EXISTS)
        self.backend.execute(Command.SWITCH_TO_FRAME, node)

    def switch_to_parent(self) -> None:
        self.backend.execute(Command.SWITCH_TO_PARENT_FRAME)


class Windows:
    def __init__(self, backend: Backend):
        self.backend = backend

    def handles(self) -> List[str]:
        return self.backend.execute(Command.WINDOW_HANDLES)

    def switch_to(self, handle_or_index: Union[str, int]) -> None:
        """
        Switches to a window by handle, or by its index in the handle list.

        Raises:
            IndexError: If the index is out of range.
        """
        if isinstance(handle_or_index, int):
            handles = self.handles()
            if not 0 <= handle_or_index < len(handles):
                raise IndexError(f"Window index {handle_or_index} out of range ({len(handles)} windows)")
            handle_or_index = handles[handle_or_index]
        self.backend.execute(Command.SWITCH_TO_WINDOW, handle_or_index)

    def close(self) -> None:
        """Closes the current window and returns to the first remaining one."""
        self.backend.execute(Command.CLOSE_WINDOW)
        handles = self.handles()
        if handles:
            self.backend.execute(Command.SWITCH_TO_WINDOW, handles[0])

    def size(self) -> Dict[str, int]:
        return self.backend.execute(Command.GET_WINDOW_SIZE)

    def set_size(self, width: int, height: int) -> None:
        self.backend.execute(Command.SET_WINDOW_SIZE, width, height)

    def maximize(self) -> None:
        self.backend.execute(Command.MAXIMIZE_WINDOW)


class Cookies:
    def __init__(self, backend: Backend):
        self.backend = backend

    def get(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.backend.execute(Command.GET_COOKIES, name)

    def set(self, name: str, value: str, **attributes) -> None:
        cookie = {"name": name, "value": value}
        cookie.update(attributes)
        self.backend.execute(Command.ADD_COOKIE, cookie)

    def delete(self, name: str) -> None:
        self.backend.execute(Command.DELETE_COOKIE, name)

    def delete_all(self) -> None:
        self.backend.execute(Command.DELETE_ALL_COOKIES)


class Scripts:
    def __init__(self, backend: Backend):
        self.backend = backend

    def execute(self, script: str, *args) -> Any:
        return self.backend.execute(Command.EXECUTE_SCRIPT, script, *args)

    def execute_async(self, script: str, *args) -> Any:
        return self.backend.execute(Command.EXECUTE_ASYNC_SCRIPT, script, *args)


# Screen swipe start/end as fractions of the window size.
SCREEN_SWIPES = {
    "up": ((0.5, 0.8), (0.5, 0.2)),
    "down": ((0.5, 0.2), (0.5, 0.8)),
    "left": ((0.8, 0.5), (0.2, 0.5)),
    "right": ((0.2, 0.5), (0.8, 0.5)),
}


class Touch:
    """
    Touch gestures and device/app commands for mobile sessions.

    App lifecycle commands act on `appium.app_id` from the configuration
    unless an explicit id is passed.
    """

    def __init__(self, backend: Backend, safe: SafeInteractions, config: Optional[Config] = None):
        self.backend = backend
        self.safe = safe
        self.config = config

    def tap(self, target: Target, timeout: Optional[float] = None) -> None:
        handle = as_handle(target, self.backend)
        self.safe.executor.perform(handle, WaitCondition.DISPLAYED, Action.TAP, timeout=timeout)

    def long_press(self, target: Target, duration_ms: int = 1000) -> None:
        handle = as_handle(target, self.backend)
        self.safe.executor.perform(handle, WaitCondition.DISPLAYED, Action.LONG_PRESS, duration_ms)

    def swipe(self, target: Target, direction: str, distance: float = 0.5) -> None:
        """
        Swipes across an element, centred on it.

        Args:
            target: The element to swipe on.
            direction: "up", "down", "left" or "right".
            distance: Swipe length as a fraction (0-1) of the element size.
        """
        if direction not in SCREEN_SWIPES:
            raise ValueError(f"Unknown swipe direction: {direction}")
        handle = as_handle(target, self.backend)
        executor = self.safe.executor
        node = executor.wait_for(handle, WaitCondition.DISPLAYED)
        location = executor.act(handle, node, Action.LOCATION)
        size = executor.act(handle, node, Action.SIZE)

        center_x = location["x"] + size["width"] / 2
        center_y = location["y"] + size["height"] / 2
        dx = size["width"] * distance / 2
        dy = size["height"] * distance / 2
        start_x, start_y, end_x, end_y = center_x, center_y, center_x, center_y
        if direction == "up":
            start_y, end_y = center_y + dy, center_y - dy
        elif direction == "down":
            start_y, end_y = center_y - dy, center_y + dy
        elif direction == "left":
            start_x, end_x = center_x + dx, center_x - dx
        else:
            start_x, end_x = center_x - dx, center_x + dx
        self.backend.execute(Command.SWIPE, start_x, start_y, end_x, end_y)

    def swipe_screen(self, direction: str) -> None:
        if direction not in SCREEN_SWIPES:
            raise ValueError(f"Unknown swipe direction: {direction}")
        size = self.backend.execute(Command.GET_WINDOW_SIZE)
        (sx, sy), (ex, ey) = SCREEN_SWIPES[direction]
        width, height = size["width"], size["height"]
        self.backend.execute(Command.SWIPE, width * sx, height * sy, width * ex, height * ey)

    def scroll_to_element(self, target: Target, max_swipes: int = 10) -> None:
        """
        Swipes the screen up until the element is displayed.

        Raises:
            HarnessError: If the element is still not displayed after `max_swipes` swipes.
        """
        handle = as_handle(target, self.backend)
        executor = self.safe.executor
        for _ in range(max_swipes):
            if executor.holds(handle.resolve(), WaitCondition.DISPLAYED):
                return
            self.swipe_screen("up")
        raise HarnessError(f"Element {handle.selector} not found after {max_swipes} scroll attempts")

    def hide_keyboard(self) -> None:
        self.backend.execute(Command.HIDE_KEYBOARD)

    def is_keyboard_shown(self) -> bool:
        return bool(self.backend.execute(Command.IS_KEYBOARD_SHOWN))

    def orientation(self) -> str:
        return self.backend.execute(Command.GET_ORIENTATION)

    def set_orientation(self, orientation: str) -> None:
        if orientation.upper() not in ("PORTRAIT", "LANDSCAPE"):
            raise ValueError(f"Orientation must be PORTRAIT or LANDSCAPE, got {orientation}")
        self.backend.execute(Command.SET_ORIENTATION, orientation)

    def _app_id(self, app_id: Optional[str]) -> str:
        app_id = app_id or (self.config.appium.app_id if self.config else None)
        if not app_id:
            raise ConfigError("No app id given and appium.app_id is not configured")
        return app_id

    def launch_app(self, app_id: Optional[str] = None) -> None:
        self.backend.execute(Command.ACTIVATE_APP, self._app_id(app_id))

    def close_app(self, app_id: Optional[str] = None) -> None:
        self.backend.execute(Command.TERMINATE_APP, self._app_id(app_id))

    def reset_app(self, app_id: Optional[str] = None) -> None:
        """Closes the app, waits one second and launches it again."""
        app_id = self._app_id(app_id)
        logger.info(f"🔄 Resetting app {app_id}")
        self.close_app(app_id)
        self.backend.sleep(1)
        self.launch_app(app_id)

    def background_app(self, seconds: int = 3) -> None:
        self.backend.execute(Command.BACKGROUND_APP, seconds)

    def install_app(self, app_path: str) -> None:
        self.backend.execute(Command.INSTALL_APP, app_path)

    def remove_app(self, app_id: Optional[str] = None) -> None:
        self.backend.execute(Command.REMOVE_APP, self._app_id(app_id))

    def is_app_installed(self, app_id: Optional[str] = None) -> bool:
        return bool(self.backend.execute(Command.IS_APP_INSTALLED, self._app_id(app_id)))

    def device_time(self) -> str:
        return self.backend.execute(Command.DEVICE_TIME)
