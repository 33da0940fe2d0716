from typing import Optional

from ..backends.base_backend import Action, Backend, Command
from ..conditions import WaitCondition
from ..config import Config
from ..reporting import Reporter
from .base_page import BasePage
from .capabilities import Alerts, Cookies, Frames, Navigation, Scripts, Scrolling, Target, Windows, as_handle


class WebPage(BasePage):
    """
    A desktop browser page.

    Browser-level operations live on capability attributes:

        page.nav.refresh()
        page.windows.switch_to(1)
        page.cookies.set("session", "abc")
    """

    def __init__(self, backend: Backend, config: Optional[Config] = None, url: str = "",
                 reporter: Optional[Reporter] = None):
        super().__init__(backend, config, url, reporter)
        self.nav = Navigation(backend, self.safe)
        self.scroll = Scrolling(backend, self.safe)
        self.alerts = Alerts(backend)
        self.frames = Frames(backend, self.safe)
        self.windows = Windows(backend)
        self.cookies = Cookies(backend)
        self.scripts = Scripts(backend)

    def _perform(self, target: Target, condition: WaitCondition, action: Action, *args):
        return self.safe.executor.perform(as_handle(target, self.backend), condition, action, *args)

    def hover(self, target: Target) -> None:
        self._perform(target, WaitCondition.DISPLAYED, Action.HOVER)

    def double_click(self, target: Target) -> None:
        self._perform(target, WaitCondition.CLICKABLE, Action.DOUBLE_CLICK)

    def right_click(self, target: Target) -> None:
        self._perform(target, WaitCondition.CLICKABLE, Action.RIGHT_CLICK)

    def drag_and_drop(self, source: Target, target: Target) -> None:
        """Drags `source` onto `target`; both must be displayed."""
        executor = self.safe.executor
        source_handle = as_handle(source, self.backend)
        target_node = executor.wait_for(as_handle(target, self.backend), WaitCondition.DISPLAYED)
        source_node = executor.wait_for(source_handle, WaitCondition.DISPLAYED)
        executor.act(source_handle, source_node, Action.DRAG_TO, target_node)

    def select_by_value(self, target: Target, value: str) -> None:
        self.safe.executor.select_by_value(as_handle(target, self.backend), value)

    def select_by_text(self, target: Target, text: str) -> None:
        self.safe.executor.select_by_visible_text(as_handle(target, self.backend), text)

    def select_by_index(self, target: Target, index: int) -> None:
        self.safe.executor.select_by_index(as_handle(target, self.backend), index)

    def upload_file(self, target: Target, file_path: str) -> None:
        self._perform(target, WaitCondition.EXISTS, Action.UPLOAD_FILE, file_path)

    def press_key(self, key: str) -> None:
        self.backend.execute(Command.PRESS_KEY, key)

    def clear_value(self, target: Target) -> None:
        self._perform(target, WaitCondition.DISPLAYED, Action.CLEAR)
