"""
Execution-mode profiles.

A profile describes how to start one browser or device session for a given
execution mode: which browser, which arguments, where the WebDriver endpoint
lives and which capabilities to send. Backends turn it into real driver
options.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import Config, ExecutionMode

CHROME_ARGS = [
    "--disable-gpu",
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--window-size=1920,1080",
]

SAUCE_ENDPOINTS = {
    "us": "https://ondemand.us-west-1.saucelabs.com/wd/hub",
    "eu": "https://ondemand.eu-central-1.saucelabs.com/wd/hub",
}

CLOUD_PLATFORMS = {
    "chrome": "Windows 11",
    "firefox": "Windows 11",
    "safari": "macOS 13",
}


@dataclass
class DriverProfile:
    mode: ExecutionMode
    browser: str
    arguments: List[str] = field(default_factory=list)
    # None means a local driver binary.
    remote_url: Optional[str] = None
    capabilities: Dict[str, Any] = field(default_factory=dict)
    # Default element wait for this mode, in milliseconds.
    wait_timeout_ms: int = 10000
    connection_retry_timeout_ms: int = 120000
    connection_retry_count: int = 3
    accept_insecure_certs: bool = False
    headless: bool = False


def local_profile(config: Config) -> DriverProfile:
    args = list(CHROME_ARGS)
    if config.main.headless:
        args.insert(0, "--headless=new")
    return DriverProfile(
        mode=ExecutionMode.LOCAL,
        browser=config.main.browser,
        arguments=args,
        accept_insecure_certs=True,
        headless=config.main.headless,
    )


def fast_profile(config: Config) -> DriverProfile:
    # Headless Chrome with short waits, meant for smoke runs and PR checks.
    return DriverProfile(
        mode=ExecutionMode.FAST,
        browser="chrome",
        arguments=["--headless=new"] + CHROME_ARGS,
        wait_timeout_ms=5000,
        connection_retry_timeout_ms=60000,
        headless=True,
    )


def cloud_profile(config: Config) -> DriverProfile:
    browser = config.main.browser.lower()
    region = config.cloud.region.lower()
    if region not in SAUCE_ENDPOINTS:
        raise ValueError(f"Unknown Sauce Labs region '{config.cloud.region}' (expected us or eu)")

    capabilities = {
        "browserVersion": "latest",
        "platformName": CLOUD_PLATFORMS.get(browser, "Windows 11"),
        "sauce:options": {
            "username": config.cloud.username,
            "accessKey": config.cloud.access_key,
            "build": f"{config.cloud.build_name}-{int(time.time() * 1000)}",
            "name": f"{config.cloud.project_name} - {browser.capitalize()}",
            "screenResolution": "1920x1080",
        },
    }
    return DriverProfile(
        mode=ExecutionMode.CLOUD,
        browser=browser,
        remote_url=SAUCE_ENDPOINTS[region],
        capabilities=capabilities,
        connection_retry_timeout_ms=180000,
    )


def mobile_profile(config: Config) -> DriverProfile:
    appium = config.appium
    if appium.platform.lower() == "ios":
        browser = "safari"
        capabilities = {
            "platformName": "iOS",
            "appium:deviceName": appium.ios_device_name,
            "appium:platformVersion": appium.ios_platform_version,
            "appium:automationName": "XCUITest",
            "appium:browserName": "Safari",
            "appium:newCommandTimeout": 240,
            "appium:wdaLaunchTimeout": 120000,
            "appium:wdaConnectionTimeout": 120000,
        }
    else:
        browser = "chrome"
        capabilities = {
            "platformName": "Android",
            "appium:deviceName": appium.android_device_name,
            "appium:platformVersion": appium.android_platform_version,
            "appium:automationName": "UiAutomator2",
            "appium:browserName": "Chrome",
            "appium:newCommandTimeout": 240,
        }
    return DriverProfile(
        mode=ExecutionMode.MOBILE,
        browser=browser,
        remote_url=f"http://{appium.host}:{appium.port}",
        capabilities=capabilities,
        wait_timeout_ms=15000,
        connection_retry_timeout_ms=180000,
    )


PROFILE_BUILDERS = {
    ExecutionMode.LOCAL: local_profile,
    ExecutionMode.FAST: fast_profile,
    ExecutionMode.CLOUD: cloud_profile,
    ExecutionMode.MOBILE: mobile_profile,
}


def build_profile(config: Config) -> DriverProfile:
    """Builds the session profile for the configured execution mode."""
    return PROFILE_BUILDERS[config.main.execution_mode](config)
