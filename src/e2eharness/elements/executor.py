"""
Bounded-wait operation executor.

Every element operation is one wait followed by one action:

1. pick the effective timeout (explicit argument, else the policy default);
2. poll a fresh resolution of the handle until the wait condition holds or
   the timeout elapses;
3. perform the action once on the node that satisfied the condition.

A condition that never holds raises `WaitTimeout`; an action that throws
raises `ActionFailure`. Nothing is retried on top of the wait. Presence
queries (`is_displayed`, `is_existing`) use the short query timeout and
answer False instead of raising.
"""
from typing import Any, Optional

from .handle import ElementHandle
from ..backends.base_backend import Action, Backend
from ..conditions import WaitCondition
from ..errors import ActionFailure, HarnessError, WaitTimeout
from ..logger import get_logger
from ..timeouts import OperationKind, effective_timeout

logger = get_logger(__name__)

CONDITION_KINDS = {
    WaitCondition.EXISTS: OperationKind.EXISTENCE,
    WaitCondition.DISPLAYED: OperationKind.DISPLAYED,
    WaitCondition.CLICKABLE: OperationKind.CLICKABLE,
    WaitCondition.HIDDEN: OperationKind.DISPLAYED,
}


class BoundedWaitExecutor:
    def __init__(self, backend: Backend):
        self.backend = backend

    def holds(self, node: Any, condition: WaitCondition) -> bool:
        """Evaluates a wait condition against a freshly resolved node (or None)."""
        if condition == WaitCondition.EXISTS:
            return node is not None
        if condition == WaitCondition.HIDDEN:
            return node is None or not self.backend.act(node, Action.IS_DISPLAYED)
        if node is None:
            return False
        displayed = bool(self.backend.act(node, Action.IS_DISPLAYED))
        if condition == WaitCondition.DISPLAYED:
            return displayed
        if condition == WaitCondition.CLICKABLE:
            return displayed and bool(self.backend.act(node, Action.IS_ENABLED))
        raise ValueError(f"{condition} is not an element wait condition")

    def wait_for(
        self,
        handle: ElementHandle,
        condition: WaitCondition,
        timeout: Optional[float] = None,
        kind: Optional[OperationKind] = None,
    ) -> Any:
        """
        Waits until `condition` holds for the element behind `handle`.

        Args:
            handle: The element to wait on. Resolved again on every poll.
            condition: The condition to wait for.
            timeout: Explicit timeout in milliseconds. Defaults to the policy
                value for `kind`.
            kind: Operation kind used for the default timeout. Derived from the
                condition when omitted.

        Returns:
            The node that satisfied the condition (None for HIDDEN when the
            element is absent).

        Raises:
            WaitTimeout: If the condition did not hold before the timeout.
        """
        condition = WaitCondition(condition)
        timeout_ms = effective_timeout(kind or CONDITION_KINDS[condition], timeout)
        matched = {}

        def condition_holds():
            node = handle.resolve()
            if self.holds(node, condition):
                matched["node"] = node
                return True
            return False

        started = self.backend.now()
        if not self.backend.wait_until(condition_holds, timeout_ms):
            elapsed_ms = (self.backend.now() - started) * 1000
            logger.error(f"❌ Element not {condition.value} within {timeout_ms:.0f}ms: {handle.selector}")
            raise WaitTimeout(handle.selector, condition, elapsed_ms)
        return matched.get("node")

    def act(self, handle: ElementHandle, node: Any, action: Action, *args) -> Any:
        """Performs one action on an already-waited-for node, wrapping failures."""
        try:
            return self.backend.act(node, action, *args)
        except HarnessError:
            raise
        except Exception as e:
            logger.error(f"❌ Failed to {Action(action).value} element: {handle.selector}")
            raise ActionFailure(handle.selector, action, e) from e

    def perform(
        self,
        handle: ElementHandle,
        condition: WaitCondition,
        action: Action,
        *args,
        timeout: Optional[float] = None,
    ) -> Any:
        """One bounded wait for `condition`, then `action` exactly once."""
        node = self.wait_for(handle, condition, timeout)
        return self.act(handle, node, action, *args)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def click(self, handle: ElementHandle, timeout: Optional[float] = None) -> None:
        self.perform(handle, WaitCondition.CLICKABLE, Action.CLICK, timeout=timeout)

    def type(self, handle: ElementHandle, value: str, clear_first: bool = True, timeout: Optional[float] = None) -> None:
        """Types into a displayed element, clearing its current value first unless told otherwise."""
        node = self.wait_for(handle, WaitCondition.DISPLAYED, timeout)
        if clear_first:
            self.act(handle, node, Action.CLEAR)
        self.act(handle, node, Action.SET_VALUE, value)

    def get_text(self, handle: ElementHandle, timeout: Optional[float] = None) -> str:
        return self.perform(handle, WaitCondition.EXISTS, Action.GET_TEXT, timeout=timeout)

    def get_value(self, handle: ElementHandle, timeout: Optional[float] = None) -> str:
        return self.perform(handle, WaitCondition.EXISTS, Action.GET_VALUE, timeout=timeout)

    def get_attribute(self, handle: ElementHandle, name: str, timeout: Optional[float] = None) -> Optional[str]:
        return self.perform(handle, WaitCondition.EXISTS, Action.GET_ATTRIBUTE, name, timeout=timeout)

    def get_css_property(self, handle: ElementHandle, name: str, timeout: Optional[float] = None) -> str:
        return self.perform(handle, WaitCondition.EXISTS, Action.GET_CSS_PROPERTY, name, timeout=timeout) or ""

    def is_enabled(self, handle: ElementHandle, timeout: Optional[float] = None) -> bool:
        return bool(self.perform(handle, WaitCondition.EXISTS, Action.IS_ENABLED, timeout=timeout))

    def scroll_into_view(self, handle: ElementHandle, block: str = "center", timeout: Optional[float] = None) -> None:
        self.perform(handle, WaitCondition.EXISTS, Action.SCROLL_INTO_VIEW, block, timeout=timeout)

    def select_by_visible_text(self, handle: ElementHandle, text: str, timeout: Optional[float] = None) -> None:
        self.perform(handle, WaitCondition.DISPLAYED, Action.SELECT_BY_TEXT, text, timeout=timeout)

    def select_by_value(self, handle: ElementHandle, value: str, timeout: Optional[float] = None) -> None:
        self.perform(handle, WaitCondition.DISPLAYED, Action.SELECT_BY_VALUE, value, timeout=timeout)

    def select_by_index(self, handle: ElementHandle, index: int, timeout: Optional[float] = None) -> None:
        self.perform(handle, WaitCondition.DISPLAYED, Action.SELECT_BY_INDEX, index, timeout=timeout)

    # ------------------------------------------------------------------
    # Presence queries: never raise
    # ------------------------------------------------------------------

    def is_displayed(self, handle: ElementHandle, timeout: Optional[float] = None) -> bool:
        try:
            self.wait_for(handle, WaitCondition.DISPLAYED, timeout, kind=OperationKind.PRESENCE_QUERY)
            return True
        except Exception as e:
            logger.debug(f"{handle.selector} not displayed: {e}")
            return False

    def is_existing(self, handle: ElementHandle, timeout: Optional[float] = None) -> bool:
        try:
            self.wait_for(handle, WaitCondition.EXISTS, timeout, kind=OperationKind.PRESENCE_QUERY)
            return True
        except Exception as e:
            logger.debug(f"{handle.selector} not existing: {e}")
            return False
