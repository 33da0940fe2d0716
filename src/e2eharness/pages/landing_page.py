from typing import Optional
from urllib.parse import urlparse

from ..backends.base_backend import Backend
from ..config import Config
from ..errors import HarnessError
from ..logger import get_logger
from ..reporting import Reporter
from .web_page import WebPage

logger = get_logger(__name__)

# Selector lists cover the usual theme markups; the first match wins.
LOGO = ".logo img, header img, img[alt*='logo' i]"
NAVIGATION = "nav, .navigation, .menu, header nav"
HERO = ".hero, .banner, .main-banner, section:first-of-type"
PHONE = "a[href^='tel:'], .phone, .contact-phone"
SOCIAL = ".social, .social-icons, .social-media, a[href*='facebook'], a[href*='instagram']"


class LandingPage(WebPage):
    """
    A marketing home page: logo, navigation menu, hero banner, phone link and
    social icons.

    Opens the configured environment's base URL unless a URL is given.
    """

    def __init__(self, backend: Backend, config: Optional[Config] = None, url: Optional[str] = None,
                 reporter: Optional[Reporter] = None):
        if url is None:
            url = config.base_url() if config else "https://example.com"
        super().__init__(backend, config, url, reporter)

    def open(self, path: str = "") -> None:
        super().open(path)
        logger.info("✅ Landing page opened")

    def _check(self, name: str, selector: str) -> bool:
        displayed = self.is_displayed(selector)
        logger.info(f"🔍 {name} displayed: {displayed}")
        return displayed

    def is_logo_displayed(self) -> bool:
        return self._check("Logo", LOGO)

    def is_navigation_displayed(self) -> bool:
        return self._check("Navigation menu", NAVIGATION)

    def is_hero_section_displayed(self) -> bool:
        return self._check("Hero section", HERO)

    def is_phone_number_displayed(self) -> bool:
        return self._check("Phone number", PHONE)

    def are_social_icons_displayed(self) -> bool:
        return self._check("Social icons", SOCIAL)

    def verify_page_loaded(self) -> None:
        """
        Checks that the landing page is up.

        The URL must be on the page's host; a missing logo or navigation menu
        only logs a warning since themes differ in markup.

        Raises:
            HarnessError: If the browser is on a different host.
        """
        self.wait_for_load()

        host = urlparse(self.url).netloc
        current_url = self.get_current_url()
        if host not in current_url:
            raise HarnessError(f"❌ Unexpected URL: {current_url} (expected host {host})")
        logger.info(f"📄 Page title: {self.get_title()}")

        if not self.is_logo_displayed():
            logger.warning("⚠️ Logo not displayed (selector may need adjusting)")
        if not self.is_navigation_displayed():
            logger.warning("⚠️ Navigation menu not displayed (selector may need adjusting)")
        logger.info("✅ Landing page loaded")
