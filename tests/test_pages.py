import re
import shutil
import unittest
from pathlib import Path

# Adjust path to import from src
import sys
src_path = Path(__file__).resolve().parent.parent / 'src'
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from fakes import FakeBackend

from e2eharness.backends.base_backend import Action, Command
from e2eharness.config import Config
from e2eharness.errors import ConfigError, HarnessError, WaitTimeout
from e2eharness.pages import BasePage, ExamplePage, LandingPage, MobilePage, WebPage
from e2eharness.pages import landing_page


class TestBasePage(unittest.TestCase):

    def setUp(self):
        self.test_dir = Path("tests/temp_test_files")
        self.backend = FakeBackend()
        self.config = Config(
            main={"env": "staging"},
            urls={"base": "https://example.com", "staging": "https://staging.app.test"},
            reporting={"screenshot_dir": str(self.test_dir.resolve() / "shots")},
        )
        self.page = BasePage(self.backend, self.config, url="https://app.test")

    def tearDown(self):
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_open_joins_path_and_settles(self):
        self.page.open("/login")
        self.assertEqual(self.backend.navigations, ["https://app.test/login"])
        self.assertEqual(self.backend.clock_ms, 500)

    def test_navigate_to_uses_environment_base_url(self):
        self.page.navigate_to("/pricing")
        self.assertEqual(self.backend.navigations, ["https://staging.app.test/pricing"])

    def test_navigate_to_collapses_duplicate_slashes(self):
        self.page.navigate_to("//docs//intro")
        self.assertEqual(self.backend.navigations, ["https://staging.app.test/docs/intro"])

    def test_wait_for_url_substring_and_regex(self):
        self.backend.url = "https://app.test/orders/42"
        self.page.wait_for_url("/orders/")
        self.page.wait_for_url(re.compile(r"/orders/\d+$"))

    def test_wait_for_url_timeout(self):
        self.backend.url = "https://app.test/login"
        with self.assertRaises(WaitTimeout) as ctx:
            self.page.wait_for_url(re.compile(r"/home"), timeout=800)
        self.assertEqual(ctx.exception.selector, "/home")
        self.assertGreaterEqual(ctx.exception.elapsed_ms, 800)

    def test_title_and_url(self):
        self.backend.command_results[Command.TITLE] = "Example Domain"
        self.backend.url = "https://app.test/"
        self.assertEqual(self.page.get_title(), "Example Domain")
        self.assertEqual(self.page.get_current_url(), "https://app.test/")

    def test_take_screenshot_into_configured_directory(self):
        path = self.page.take_screenshot("checkout")
        self.assertEqual(path.parent, self.test_dir.resolve() / "shots")
        self.assertTrue(path.name.startswith("checkout_"))
        self.assertTrue(path.name.endswith(".png"))
        self.assertEqual(self.backend.commands_named(Command.SCREENSHOT), [(str(path),)])

    def test_safe_click_waits_for_loader_after_click(self):
        button = self.backend.add("#save")
        self.backend.add(".spinner", removed_at=400)
        self.page.safe_click("#save")
        self.assertEqual(button.clicks, 1)
        self.assertGreaterEqual(self.backend.clock_ms, 400)

    def test_element_shortcuts(self):
        self.backend.add("#name")
        self.backend.add("h2", text="Welcome")
        self.page.set_value("#name", "Ada")
        self.assertEqual(self.page.get_text("h2"), "Welcome")
        self.assertTrue(self.page.is_displayed("h2"))
        self.assertTrue(self.page.is_existing(self.page.element("#name")))
        self.assertFalse(self.page.is_existing("#absent", timeout=200))

    def test_wait_for_element_defaults_to_profile_wait_timeout(self):
        self.backend.wait_timeout_ms = 2000
        with self.assertRaises(WaitTimeout) as ctx:
            self.page.wait_for_element("#never")
        self.assertGreaterEqual(ctx.exception.elapsed_ms, 2000)
        self.assertLess(ctx.exception.elapsed_ms, 2200)

    def test_pause_uses_backend_clock(self):
        self.page.pause(1500)
        self.assertEqual(self.backend.clock_ms, 1500)


class TestWebPage(unittest.TestCase):

    def setUp(self):
        self.backend = FakeBackend()
        self.page = WebPage(self.backend, Config())

    def test_history_waits_for_page(self):
        self.page.nav.refresh()
        self.page.nav.back()
        self.page.nav.forward()
        commands = [cmd for cmd, _ in self.backend.commands]
        self.assertEqual(commands, [Command.REFRESH, Command.BACK, Command.FORWARD])

    def test_refresh_with_stuck_loader_fails(self):
        self.backend.add(".loading")
        with self.assertRaises(WaitTimeout):
            self.page.nav.refresh()

    def test_switch_window_by_index_and_handle(self):
        self.backend.command_results[Command.WINDOW_HANDLES] = ["main", "popup"]
        self.page.windows.switch_to(1)
        self.page.windows.switch_to("main")
        self.assertEqual(self.backend.commands_named(Command.SWITCH_TO_WINDOW), [("popup",), ("main",)])

    def test_switch_window_index_out_of_range(self):
        self.backend.command_results[Command.WINDOW_HANDLES] = ["main"]
        with self.assertRaises(IndexError):
            self.page.windows.switch_to(3)

    def test_close_window_returns_to_first(self):
        self.backend.command_results[Command.WINDOW_HANDLES] = ["main"]
        self.page.windows.close()
        self.assertEqual(self.backend.commands_named(Command.CLOSE_WINDOW), [()])
        self.assertEqual(self.backend.commands_named(Command.SWITCH_TO_WINDOW), [("main",)])

    def test_cookies(self):
        self.page.cookies.set("session", "abc", path="/")
        self.page.cookies.delete("session")
        self.page.cookies.delete_all()
        self.assertEqual(
            self.backend.commands_named(Command.ADD_COOKIE), [({"name": "session", "value": "abc", "path": "/"},)]
        )
        self.assertEqual(self.backend.commands_named(Command.DELETE_COOKIE), [("session",)])
        self.assertEqual(len(self.backend.commands_named(Command.DELETE_ALL_COOKIES)), 1)

    def test_alerts(self):
        self.backend.command_results[Command.ALERT_TEXT] = "Are you sure?"
        self.assertEqual(self.page.alerts.text(), "Are you sure?")
        self.page.alerts.accept()
        self.page.alerts.send_text("yes")
        self.assertEqual(self.backend.commands_named(Command.SEND_ALERT_TEXT), [("yes",)])

    def test_switch_to_frame_by_element(self):
        node = self.backend.add("iframe#payment")
        self.page.frames.switch_to("iframe#payment")
        self.page.frames.switch_to(0)
        self.page.frames.switch_to_parent()
        self.assertEqual(self.backend.commands_named(Command.SWITCH_TO_FRAME), [(node,), (0,)])

    def test_scroll_and_scripts(self):
        self.page.scroll.to_top()
        self.page.scroll.to_bottom()
        self.page.scripts.execute("return 1 + 1;")
        scripts = [args[0] for args in self.backend.commands_named(Command.EXECUTE_SCRIPT)]
        self.assertEqual(scripts[0], "window.scrollTo(0, 0);")
        self.assertIn("scrollHeight", scripts[1])
        self.assertEqual(scripts[2], "return 1 + 1;")

    def test_pointer_actions(self):
        self.backend.add("#menu")
        self.backend.add("#card")
        self.backend.add("#lane")
        self.page.hover("#menu")
        self.page.double_click("#card")
        self.page.right_click("#card")
        self.page.drag_and_drop("#card", "#lane")
        self.assertIn(Action.HOVER, self.backend.actions_on("#menu"))
        card_actions = self.backend.actions_on("#card")
        self.assertIn(Action.DOUBLE_CLICK, card_actions)
        self.assertIn(Action.RIGHT_CLICK, card_actions)
        drag = [args for sel, action, args in self.backend.actions if action == Action.DRAG_TO]
        self.assertIs(drag[0][0], self.backend.nodes["#lane"])

    def test_form_helpers(self):
        select = self.backend.add("select#size")
        field = self.backend.add("#note", value="draft")
        self.backend.add("input[type=file]", displayed=False)
        self.page.select_by_text("select#size", "Large")
        self.assertEqual(select.selected, "Large")
        self.page.select_by_value("select#size", "m")
        self.page.select_by_index("select#size", 0)
        self.assertEqual(select.selected, 0)
        self.page.clear_value("#note")
        self.assertEqual(field.value, "")
        self.page.upload_file("input[type=file]", "fixtures/avatar.png")
        self.assertIn(Action.UPLOAD_FILE, self.backend.actions_on("input[type=file]"))
        self.page.press_key("Enter")
        self.assertEqual(self.backend.commands_named(Command.PRESS_KEY), [("Enter",)])


class TestMobilePage(unittest.TestCase):

    def setUp(self):
        self.backend = FakeBackend()
        self.config = Config(
            main={"execution_mode": "mobile"},
            appium={"platform": "android", "app_id": "com.example.shop"},
        )
        self.page = MobilePage(self.backend, self.config)

    def test_platform_flags(self):
        self.assertTrue(self.page.is_android)
        self.assertFalse(self.page.is_ios)
        self.assertFalse(MobilePage(self.backend).is_android)

    def test_tap_waits_for_display(self):
        node = self.backend.add("~Login", visible_at=300)
        self.page.touch.tap("~Login")
        self.assertEqual(node.clicks, 1)
        self.assertEqual(self.backend.clock_ms, 300)

    def test_long_press_default_duration(self):
        self.backend.add("~Item")
        self.page.touch.long_press("~Item")
        self.assertIn(("~Item", Action.LONG_PRESS, (1000,)), self.backend.actions)

    def test_swipe_on_element(self):
        self.backend.add("~Carousel", location={"x": 0, "y": 100}, size={"width": 200, "height": 400})
        self.page.touch.swipe("~Carousel", "up")
        self.page.touch.swipe("~Carousel", "right", distance=1.0)
        swipes = self.backend.commands_named(Command.SWIPE)
        self.assertEqual(swipes[0], (100.0, 400.0, 100.0, 200.0))
        self.assertEqual(swipes[1], (0.0, 300.0, 200.0, 300.0))

    def test_swipe_screen(self):
        self.backend.command_results[Command.GET_WINDOW_SIZE] = {"width": 1000, "height": 2000}
        self.page.touch.swipe_screen("up")
        self.assertEqual(self.backend.commands_named(Command.SWIPE), [(500.0, 1600.0, 500.0, 400.0)])

    def test_swipe_rejects_unknown_direction(self):
        with self.assertRaises(ValueError):
            self.page.touch.swipe_screen("diagonal")

    def test_scroll_to_visible_element_does_not_swipe(self):
        self.backend.add("~Footer")
        self.page.touch.scroll_to_element("~Footer")
        self.assertEqual(self.backend.commands_named(Command.SWIPE), [])

    def test_scroll_to_element_gives_up(self):
        self.backend.command_results[Command.GET_WINDOW_SIZE] = {"width": 400, "height": 800}
        with self.assertRaises(HarnessError):
            self.page.touch.scroll_to_element("~Missing", max_swipes=4)
        self.assertEqual(len(self.backend.commands_named(Command.SWIPE)), 4)

    def test_app_lifecycle_uses_configured_app_id(self):
        self.page.touch.launch_app()
        self.page.touch.reset_app()
        commands = [(cmd, args) for cmd, args in self.backend.commands]
        self.assertEqual(commands, [
            (Command.ACTIVATE_APP, ("com.example.shop",)),
            (Command.TERMINATE_APP, ("com.example.shop",)),
            (Command.ACTIVATE_APP, ("com.example.shop",)),
        ])
        self.assertEqual(self.backend.clock_ms, 1000)

    def test_app_lifecycle_without_app_id(self):
        page = MobilePage(self.backend, Config())
        with self.assertRaises(ConfigError):
            page.touch.close_app()

    def test_device_commands(self):
        self.backend.command_results[Command.IS_KEYBOARD_SHOWN] = True
        self.assertTrue(self.page.touch.is_keyboard_shown())
        self.page.touch.hide_keyboard()
        self.page.touch.set_orientation("landscape")
        self.page.touch.background_app()
        self.assertEqual(self.backend.commands_named(Command.SET_ORIENTATION), [("landscape",)])
        self.assertEqual(self.backend.commands_named(Command.BACKGROUND_APP), [(3,)])
        with self.assertRaises(ValueError):
            self.page.touch.set_orientation("sideways")


class TestExamplePage(unittest.TestCase):

    def test_open_and_read(self):
        backend = FakeBackend()
        backend.add("h1", text="Example Domain", visible_at=800)
        backend.add("p", text="This domain is for use in illustrative examples.")
        backend.add("a", text="More information...")
        page = ExamplePage(backend)
        page.open()
        self.assertEqual(backend.navigations, ["https://example.com"])
        self.assertGreaterEqual(backend.clock_ms, 800)
        self.assertEqual(page.get_heading_text(), "Example Domain")
        self.assertIn("illustrative", page.get_paragraph_text())
        self.assertTrue(page.is_more_info_link_displayed())
        page.click_more_info()
        self.assertEqual(backend.nodes["a"].clicks, 1)


class TestLandingPage(unittest.TestCase):

    def test_url_defaults_to_environment_base(self):
        config = Config(main={"env": "prod"}, urls={"production": "https://www.clinic.test/vi"})
        page = LandingPage(FakeBackend(), config)
        self.assertEqual(page.url, "https://www.clinic.test/vi")

    def test_verify_page_loaded(self):
        backend = FakeBackend()
        backend.add(landing_page.LOGO)
        backend.add(landing_page.NAVIGATION)
        backend.command_results[Command.TITLE] = "Clinic"
        page = LandingPage(backend, url="https://www.clinic.test/vi")
        page.open()
        page.verify_page_loaded()
        self.assertTrue(page.is_logo_displayed())

    def test_verify_page_loaded_wrong_host(self):
        backend = FakeBackend(url="https://elsewhere.test/")
        page = LandingPage(backend, url="https://www.clinic.test/vi")
        with self.assertRaises(HarnessError):
            page.verify_page_loaded()

    def test_missing_sections_only_warn(self):
        backend = FakeBackend(url="https://www.clinic.test/vi")
        page = LandingPage(backend, url="https://www.clinic.test/vi")
        page.verify_page_loaded()
        self.assertFalse(page.is_hero_section_displayed())
        self.assertFalse(page.is_phone_number_displayed())
        self.assertFalse(page.are_social_icons_displayed())


if __name__ == '__main__':
    unittest.main()
