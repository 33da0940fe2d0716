from typing import Optional

from ..backends.base_backend import Backend
from ..config import Config
from ..elements import PageElement
from ..reporting import Reporter
from .web_page import WebPage


class ExamplePage(WebPage):
    """Page object for https://example.com."""

    URL = "https://example.com"

    def __init__(self, backend: Backend, config: Optional[Config] = None, reporter: Optional[Reporter] = None):
        super().__init__(backend, config, self.URL, reporter)

    @property
    def heading(self) -> PageElement:
        return self.element("h1")

    @property
    def paragraph(self) -> PageElement:
        return self.element("p")

    @property
    def more_info_link(self) -> PageElement:
        return self.element("a")

    def wait_for_load(self) -> None:
        super().wait_for_load()
        self.heading.wait_for_displayed()

    def get_heading_text(self) -> str:
        return self.heading.get_text()

    def get_paragraph_text(self) -> str:
        return self.paragraph.get_text()

    def click_more_info(self) -> None:
        self.more_info_link.click()

    def is_more_info_link_displayed(self) -> bool:
        return self.more_info_link.is_displayed()
