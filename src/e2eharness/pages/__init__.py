from .base_page import BasePage
from .capabilities import Alerts, Cookies, Frames, Navigation, Scripts, Scrolling, Touch, Windows
from .web_page import WebPage
from .mobile_page import MobilePage
from .example_page import ExamplePage
from .landing_page import LandingPage

__all__ = [
    "BasePage",
    "WebPage",
    "MobilePage",
    "ExamplePage",
    "LandingPage",
    "Navigation",
    "Scrolling",
    "Alerts",
    "Frames",
    "Windows",
    "Cookies",
    "Scripts",
    "Touch",
]
