from .handle import ElementHandle
from .executor import BoundedWaitExecutor
from .facade import LOADER_SELECTORS, NavigationState, SafeInteractions
from .element import PageElement

__all__ = [
    "ElementHandle",
    "BoundedWaitExecutor",
    "SafeInteractions",
    "NavigationState",
    "LOADER_SELECTORS",
    "PageElement",
]
