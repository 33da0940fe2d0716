import re
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from ..config import PROJECT_ROOT, Config, ExecutionMode
from ..logger import get_logger

logger = get_logger(__name__)

MIN_PYTHON = (3, 9)


@dataclass
class CheckResult:
    passed: bool
    message: str


def mask(secret: str, visible: int = 4) -> str:
    """Keeps the first `visible` characters and stars out the rest."""
    return secret[:visible] + "*" * max(len(secret) - visible, 0)


class EnvironmentValidator:
    """
    Pre-flight checks for a test run.

    Usage:
        validator = EnvironmentValidator(config)
        ok = validator.validate()
        validator.print_results()
    """

    def __init__(self, config: Config, root: Optional[Path] = None):
        self.config = config
        self.root = Path(root) if root is not None else PROJECT_ROOT
        self.results: List[CheckResult] = []

    def _add(self, passed: bool, message: str) -> None:
        self.results.append(CheckResult(passed, message))

    def validate(self) -> bool:
        """Runs every check. Returns True only if all of them passed."""
        self.results = []
        self.check_java()
        self.check_python_version()
        self.check_env_file()
        self.check_email_credentials()
        self.check_execution_mode()
        self.check_service_credentials()
        self.check_base_url()
        return all(r.passed for r in self.results)

    def check_java(self) -> None:
        # Allure's report generator runs on the JVM.
        try:
            completed = subprocess.run(["java", "-version"], capture_output=True, text=True, check=True)
        except (OSError, subprocess.CalledProcessError):
            self._add(False, "Java not found (required for Allure CLI)")
            return
        match = re.search(r'version "(.+?)"', completed.stderr or completed.stdout)
        self._add(True, f"Java installed ({match.group(1) if match else 'unknown'})")

    def check_python_version(self) -> None:
        version = ".".join(str(part) for part in sys.version_info[:3])
        if sys.version_info[:2] >= MIN_PYTHON:
            self._add(True, f"Python version {version}")
        else:
            self._add(False, f"Python version {version} (requires >= {MIN_PYTHON[0]}.{MIN_PYTHON[1]})")

    def check_env_file(self) -> None:
        env_file = self.root / f".env.{self.config.main.env}"
        if env_file.exists():
            self._add(True, f"Environment file found: {env_file.name}")
        else:
            self._add(False, f"Environment file not found: {env_file.name}")

    def check_email_credentials(self) -> None:
        email = self.config.email
        if email.smtp_user and email.smtp_password:
            self._add(True, f"SMTP credentials configured ({email.smtp_user}, {mask(email.smtp_password)})")
        else:
            self._add(False, "SMTP credentials missing (email.smtp_user, email.smtp_password)")

    def check_execution_mode(self) -> None:
        valid = [mode.value for mode in ExecutionMode]
        mode = getattr(self.config.main.execution_mode, "value", self.config.main.execution_mode)
        if mode in valid:
            self._add(True, f"Execution mode: {mode}")
        else:
            self._add(False, f"Invalid execution mode: {mode} (must be: {', '.join(valid)})")

    def check_service_credentials(self) -> None:
        mode = self.config.main.execution_mode
        if mode == ExecutionMode.CLOUD:
            cloud = self.config.cloud
            if cloud.username and cloud.access_key:
                self._add(True, f"Sauce Labs credentials configured ({cloud.username}, {mask(cloud.access_key)})")
            else:
                self._add(False, "Sauce Labs credentials required for cloud mode (cloud.username, cloud.access_key)")
        elif mode == ExecutionMode.MOBILE:
            appium = self.config.appium
            if appium.host and appium.port:
                self._add(True, f"Appium configuration: {appium.host}:{appium.port}")
            else:
                self._add(False, "Appium configuration required for mobile mode (appium.host, appium.port)")

    def check_base_url(self) -> None:
        base_url = self.config.base_url()
        parsed = urlparse(base_url)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            self._add(True, f"Base URL: {base_url}")
        else:
            self._add(False, f"Invalid base URL for env '{self.config.main.env}': {base_url!r}")

    def print_results(self) -> None:
        print("-" * 60)
        for result in self.results:
            if result.passed:
                logger.info(f"✓ {result.message}")
            else:
                logger.error(f"✗ {result.message}")
        passed = sum(1 for r in self.results if r.passed)
        total = len(self.results)
        print("-" * 60)
        print(f"\n{passed}/{total} checks passed\n")
        if passed == total:
            logger.info("✅ Environment validation passed!")
        else:
            logger.error("❌ Environment validation failed!")
