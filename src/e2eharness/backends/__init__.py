from .base_backend import Action, Backend, Command
from .selenium_backend import SeleniumBackend
from .appium_backend import AppiumBackend

from ..config import Config, ExecutionMode


def create_backend(config: Config) -> Backend:
    """Returns an unstarted backend for the configured execution mode."""
    if config.main.execution_mode == ExecutionMode.MOBILE:
        return AppiumBackend(config)
    return SeleniumBackend(config)


# This makes the classes available for import from the 'backends' package
__all__ = ["Action", "Backend", "Command", "SeleniumBackend", "AppiumBackend", "create_backend"]
