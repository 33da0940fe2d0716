import unittest
from unittest.mock import patch
from pathlib import Path
import shutil
import toml
import os

# Adjust path to import from src
import sys
src_path = Path(__file__).resolve().parent.parent / 'src'
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from e2eharness.config import Config, ExecutionMode, load_config, resolve_path
from e2eharness.errors import ConfigError

class TestConfig(unittest.TestCase):
    """
    Unit tests for the configuration loading logic.

    These tests verify that `load_config` reads a TOML file into the Pydantic
    models, that environment variables override the file, and that invalid
    input surfaces as ConfigError.
    """

    def setUp(self):
        """Set up a temporary directory and a config.toml file for each test."""
        self.test_dir = Path("tests/temp_test_files")
        self.test_dir.mkdir(parents=True, exist_ok=True)
        self.config_path = self.test_dir / "test_config.toml"

        self.config_data = {
            "main": {
                "env": "staging",
                "execution_mode": "local",
                "browser": "firefox",
                "headless": True,
                "workers": 2,
            },
            "urls": {
                "base": "https://example.com",
                "staging": "https://staging.example.com",
            },
            "timeouts": {
                "page_load": 45000,
            },
            "email": {
                "recipients_failed": ["qa@example.com", "dev@example.com"],
            },
            "logging": {
                "level": "INFO",
                "log_dir": str(self.test_dir / "logs"),
            },
        }

        with open(self.config_path, "w") as f:
            toml.dump(self.config_data, f)

    def tearDown(self):
        """Clean up and remove the temporary directory and files after each test."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_load_config_successfully(self):
        """
        Verify that `load_config` can successfully parse a valid TOML file
        and create a `Config` object with the correct values.
        """
        config = load_config(str(self.config_path))
        self.assertIsInstance(config, Config)
        self.assertEqual(config.main.browser, "firefox")
        self.assertEqual(config.main.execution_mode, ExecutionMode.LOCAL)
        self.assertTrue(config.main.headless)
        self.assertEqual(config.main.workers, 2)
        self.assertEqual(config.timeouts.page_load, 45000)
        self.assertEqual(config.email.recipients_failed, ["qa@example.com", "dev@example.com"])
        self.assertEqual(config.logging.level, "INFO")

    def test_unset_sections_use_defaults(self):
        config = load_config(str(self.config_path))
        self.assertEqual(config.timeouts.script, 30000)
        self.assertEqual(config.appium.port, 4723)
        self.assertEqual(config.reporting.retention_days, 30)
        self.assertEqual(config.cloud.region, "us")

    def test_environment_overrides_file(self):
        """HARNESS_-prefixed variables win over values from the TOML file."""
        with patch.dict(os.environ, {"HARNESS_MAIN__EXECUTION_MODE": "fast", "HARNESS_MAIN__BROWSER": "chrome"}):
            config = load_config(str(self.config_path))
        self.assertEqual(config.main.execution_mode, ExecutionMode.FAST)
        self.assertEqual(config.main.browser, "chrome")
        # Untouched keys still come from the file.
        self.assertEqual(config.main.workers, 2)

    def test_missing_file_raises_config_error(self):
        with self.assertRaises(ConfigError):
            load_config(str(self.test_dir / "nope.toml"))

    def test_invalid_toml_raises_config_error(self):
        self.config_path.write_text("[main\nenv = ")
        with self.assertRaises(ConfigError):
            load_config(str(self.config_path))

    def test_invalid_values_raise_config_error(self):
        self.config_data["main"]["workers"] = 0
        self.config_data["main"]["execution_mode"] = "grid"
        with open(self.config_path, "w") as f:
            toml.dump(self.config_data, f)
        with self.assertRaises(ConfigError) as ctx:
            load_config(str(self.config_path))
        self.assertIn("execution_mode", str(ctx.exception))

    def test_base_url_follows_environment(self):
        config = load_config(str(self.config_path))
        self.assertEqual(config.base_url(), "https://staging.example.com")

    def test_base_url_aliases_and_fallback(self):
        urls = {"base": "https://example.com", "production": "https://www.example.com", "staging": ""}
        self.assertEqual(Config(main={"env": "prod"}, urls=urls).base_url(), "https://www.example.com")
        self.assertEqual(Config(main={"env": "stg"}, urls=urls).base_url(), "https://example.com")
        self.assertEqual(Config(main={"env": "qa-7"}, urls=urls).base_url(), "https://example.com")

    def test_mobile_flags(self):
        config = Config(main={"execution_mode": "mobile"}, appium={"platform": "ios"})
        self.assertTrue(config.is_mobile)
        self.assertTrue(config.is_ios)
        self.assertFalse(config.is_android)
        self.assertFalse(Config().is_mobile)

    def test_resolve_path(self):
        """Relative paths resolve against the project root; absolute ones are kept."""
        self.assertEqual(resolve_path("screenshots"), (Path.cwd() / "screenshots").resolve())
        absolute = Path("/tmp/reports").resolve()
        self.assertEqual(resolve_path(str(absolute)), absolute)

if __name__ == '__main__':
    unittest.main()
