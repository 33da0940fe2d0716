import unittest
from pathlib import Path

# Adjust path to import from src
import sys
src_path = Path(__file__).resolve().parent.parent / 'src'
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from fakes import FakeBackend

from e2eharness.backends.base_backend import Action
from e2eharness.conditions import WaitCondition
from e2eharness.elements.executor import BoundedWaitExecutor
from e2eharness.elements.handle import ElementHandle
from e2eharness.errors import ActionFailure, UnsupportedCommand, WaitTimeout
from e2eharness.timeouts import OperationKind


class TestElementHandle(unittest.TestCase):

    def test_resolve_queries_every_time(self):
        """A node removed after a first resolve is not returned by the next one."""
        backend = FakeBackend()
        backend.add("#item", removed_at=100)
        handle = ElementHandle("#item", backend)
        self.assertIsNotNone(handle.resolve())
        backend.sleep(0.1)
        self.assertIsNone(handle.resolve())

    def test_empty_selector_rejected(self):
        with self.assertRaises(ValueError):
            ElementHandle("", FakeBackend())

    def test_selector_is_read_only(self):
        handle = ElementHandle("#a", FakeBackend())
        with self.assertRaises(AttributeError):
            handle.selector = "#b"


class TestBoundedWaitExecutor(unittest.TestCase):

    def setUp(self):
        self.backend = FakeBackend()
        self.executor = BoundedWaitExecutor(self.backend)

    def handle(self, selector):
        return ElementHandle(selector, self.backend)

    def test_wait_returns_once_element_appears(self):
        """The wait ends on the first poll where the condition holds."""
        node = self.backend.add("#late", appear_at=300)
        result = self.executor.wait_for(self.handle("#late"), WaitCondition.EXISTS)
        self.assertIs(result, node)
        self.assertEqual(self.backend.clock_ms, 300)

    def test_timeout_reports_selector_condition_and_elapsed(self):
        with self.assertRaises(WaitTimeout) as ctx:
            self.executor.wait_for(self.handle("#missing"), WaitCondition.DISPLAYED, 2000)
        error = ctx.exception
        self.assertEqual(error.selector, "#missing")
        self.assertEqual(error.condition, WaitCondition.DISPLAYED)
        self.assertGreaterEqual(error.elapsed_ms, 2000)
        self.assertLess(error.elapsed_ms, 2200)

    def test_default_timeout_comes_from_policy(self):
        with self.assertRaises(WaitTimeout) as ctx:
            self.executor.wait_for(self.handle("#missing"), WaitCondition.CLICKABLE)
        self.assertGreaterEqual(ctx.exception.elapsed_ms, 10000)
        self.assertLess(ctx.exception.elapsed_ms, 10200)

    def test_kind_overrides_condition_default(self):
        with self.assertRaises(WaitTimeout) as ctx:
            self.executor.wait_for(self.handle("#missing"), WaitCondition.EXISTS, kind=OperationKind.LOADER)
        self.assertGreaterEqual(ctx.exception.elapsed_ms, 30000)

    def test_clickable_requires_displayed_and_enabled(self):
        node = self.backend.add("#btn", visible_at=200, enabled_at=400)
        self.executor.click(self.handle("#btn"))
        self.assertEqual(node.clicks, 1)
        self.assertEqual(self.backend.clock_ms, 400)

    def test_hidden_holds_for_absent_or_invisible(self):
        self.backend.add("#ghost", displayed=False)
        self.assertTrue(self.executor.holds(None, WaitCondition.HIDDEN))
        self.assertTrue(self.executor.holds(self.backend.locate("#ghost"), WaitCondition.HIDDEN))

    def test_action_performed_exactly_once(self):
        node = self.backend.add("#btn")
        self.executor.click(self.handle("#btn"))
        self.assertEqual(node.clicks, 1)
        self.assertEqual(self.backend.actions_on("#btn").count(Action.CLICK), 1)

    def test_action_error_wrapped_without_retry(self):
        """An action that throws after the wait is reported once as ActionFailure."""
        cause = RuntimeError("element click intercepted")
        self.backend.add("#btn", fail_on={Action.CLICK: cause})
        with self.assertRaises(ActionFailure) as ctx:
            self.executor.click(self.handle("#btn"))
        self.assertIs(ctx.exception.cause, cause)
        self.assertIs(ctx.exception.__cause__, cause)
        self.assertEqual(ctx.exception.selector, "#btn")
        self.assertEqual(self.backend.actions_on("#btn").count(Action.CLICK), 1)

    def test_harness_errors_pass_through_unwrapped(self):
        self.backend.add("#btn", fail_on={Action.CLICK: UnsupportedCommand(Action.CLICK, "FakeBackend")})
        with self.assertRaises(UnsupportedCommand):
            self.executor.click(self.handle("#btn"))

    def test_type_clears_first_by_default(self):
        node = self.backend.add("#input", value="old")
        self.executor.type(self.handle("#input"), "new")
        self.assertEqual(node.value, "new")

    def test_type_can_append(self):
        node = self.backend.add("#input", value="old")
        self.executor.type(self.handle("#input"), "-new", clear_first=False)
        self.assertEqual(node.value, "old-new")

    def test_getters(self):
        self.backend.add(
            "#field", text="Hello", value="v1", attributes={"href": "/about"}, css={"color": "rgb(0, 0, 0)"}
        )
        h = self.handle("#field")
        self.assertEqual(self.executor.get_text(h), "Hello")
        self.assertEqual(self.executor.get_value(h), "v1")
        self.assertEqual(self.executor.get_attribute(h, "href"), "/about")
        self.assertIsNone(self.executor.get_attribute(h, "title"))
        self.assertEqual(self.executor.get_css_property(h, "color"), "rgb(0, 0, 0)")
        self.assertEqual(self.executor.get_css_property(h, "margin"), "")

    def test_is_enabled(self):
        self.backend.add("#on")
        self.backend.add("#off", enabled=False)
        self.assertTrue(self.executor.is_enabled(self.handle("#on")))
        self.assertFalse(self.executor.is_enabled(self.handle("#off")))

    def test_select_operations_wait_for_display(self):
        node = self.backend.add("select#country", visible_at=100)
        h = self.handle("select#country")
        self.executor.select_by_visible_text(h, "Vietnam")
        self.assertEqual(node.selected, "Vietnam")
        self.executor.select_by_value(h, "vn")
        self.assertEqual(node.selected, "vn")
        self.executor.select_by_index(h, 2)
        self.assertEqual(node.selected, 2)

    def test_scroll_into_view_passes_block(self):
        self.backend.add("#footer")
        self.executor.scroll_into_view(self.handle("#footer"), "start")
        self.assertIn(("#footer", Action.SCROLL_INTO_VIEW, ("start",)), self.backend.actions)

    def test_is_displayed_false_after_presence_timeout(self):
        """An absent element answers False after the 5s presence-query wait, without raising."""
        self.assertFalse(self.executor.is_displayed(self.handle("#nope")))
        self.assertGreaterEqual(self.backend.clock_ms, 5000)
        self.assertLess(self.backend.clock_ms, 5200)

    def test_is_displayed_true_for_visible_element(self):
        self.backend.add("#here")
        self.assertTrue(self.executor.is_displayed(self.handle("#here")))
        self.assertEqual(self.backend.clock_ms, 0)

    def test_is_displayed_false_when_check_throws(self):
        self.backend.add("#broken", fail_on={Action.IS_DISPLAYED: RuntimeError("stale")})
        self.assertFalse(self.executor.is_displayed(self.handle("#broken"), 500))

    def test_is_existing(self):
        self.backend.add("#hidden", displayed=False)
        self.assertTrue(self.executor.is_existing(self.handle("#hidden")))
        self.assertFalse(self.executor.is_existing(self.handle("#absent"), 1000))
        self.assertGreaterEqual(self.backend.clock_ms, 1000)


if __name__ == '__main__':
    unittest.main()
