"""
pytest fixtures for e2eharness.

Enable in a project's conftest.py:

    pytest_plugins = ["e2eharness.pytest_plugin"]

This module provides:
- `harness_config`: the loaded configuration (--harness-config or HARNESS_CONFIG)
- `backend`: one started browser/device session per worker process
- `reporter`: Allure reporter when enabled, log reporter otherwise
- `safe`: the safe-interaction facade bound to the session
- a failure screenshot, saved and attached, for every failed test that used `backend`

Usage:
    def test_homepage(backend, harness_config, reporter):
        page = ExamplePage(backend, harness_config, reporter)
        page.open()
        assert page.get_heading_text() == "Example Domain"
"""
import os
import time
from typing import Generator

import pytest

from .backends import Backend, Command, create_backend
from .config import Config, load_config, resolve_path
from .elements import SafeInteractions
from .logger import get_logger
from .reporting import AllureReporter, LogReporter, Reporter

logger = get_logger(__name__)


def pytest_addoption(parser):
    group = parser.getgroup("e2eharness")
    group.addoption(
        "--harness-config",
        default=os.environ.get("HARNESS_CONFIG"),
        help="Path to the harness TOML config (default: $HARNESS_CONFIG)",
    )


@pytest.fixture(scope="session")
def harness_config(request) -> Config:
    return load_config(request.config.getoption("--harness-config"))


@pytest.fixture(scope="session")
def backend(harness_config: Config) -> Generator[Backend, None, None]:
    """Starts one session for the worker process and quits it at the end of the run."""
    session = create_backend(harness_config)
    session.start()
    yield session
    session.stop()


@pytest.fixture
def reporter(harness_config: Config) -> Reporter:
    if harness_config.reporting.allure_enabled:
        return AllureReporter()
    return LogReporter()


@pytest.fixture
def safe(backend: Backend, reporter: Reporter) -> SafeInteractions:
    return SafeInteractions(backend, reporter)


def capture_failure_screenshot(item, backend: Backend, config: Config, reporter: Reporter) -> None:
    """Saves a screenshot named after the failed test and attaches it to the report."""
    directory = resolve_path(config.reporting.screenshot_dir)
    directory.mkdir(parents=True, exist_ok=True)
    name = item.name.replace("/", "_").replace("[", "_").replace("]", "")
    path = directory / f"{name}_{int(time.time() * 1000)}.png"

    png = backend.execute(Command.SCREENSHOT)
    path.write_bytes(png)
    reporter.attach(f"{item.name} failure screenshot", png, "image/png")
    logger.info(f"📸 Failure screenshot saved: {path}")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when != "call" or not report.failed:
        return

    funcargs = getattr(item, "funcargs", {})
    session = funcargs.get("backend")
    config = funcargs.get("harness_config")
    if session is None or config is None or not config.reporting.screenshot_on_failure:
        return

    try:
        capture_failure_screenshot(item, session, config, funcargs.get("reporter") or LogReporter())
    except Exception as e:
        # The test already failed; a broken session must not mask that failure.
        logger.warning(f"Could not capture failure screenshot for {item.name}: {e}")
