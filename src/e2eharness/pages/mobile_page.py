from typing import Optional

from ..backends.base_backend import Backend
from ..config import Config
from ..reporting import Reporter
from .base_page import BasePage
from .capabilities import Alerts, Scrolling, Touch


class MobilePage(BasePage):
    """
    A page in a mobile browser or native app driven through Appium.

    Gestures and device commands are on `self.touch`; platform flags come from
    the configuration.
    """

    def __init__(self, backend: Backend, config: Optional[Config] = None, url: str = "",
                 reporter: Optional[Reporter] = None):
        super().__init__(backend, config, url, reporter)
        self.touch = Touch(backend, self.safe, config)
        self.alerts = Alerts(backend)
        self.scroll = Scrolling(backend, self.safe)

    @property
    def is_android(self) -> bool:
        return bool(self.config and self.config.is_android)

    @property
    def is_ios(self) -> bool:
        return bool(self.config and self.config.is_ios)
