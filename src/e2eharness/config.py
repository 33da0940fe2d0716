import toml
from enum import Enum
from pathlib import Path
from typing import Optional, List, Tuple, Type

from pydantic import Field, ValidationError, BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .errors import ConfigError
from .logger import configure_root_logger, get_logger

PROJECT_ROOT = Path.cwd()  # harness commands are always started from the project root

def resolve_path(path_str: str) -> Path:
    """
    Resolves a string path into an absolute Path object.

    If the path is relative, it is resolved against the project's root directory.
    If it's already absolute, it's returned as is.

    Args:
        path_str: The path string from the configuration file.

    Returns:
        An absolute Path object.
    """
    path = Path(path_str)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path.resolve()

class ExecutionMode(str, Enum):
    """Where and how browser sessions are started."""
    LOCAL = "local"
    FAST = "fast"
    CLOUD = "cloud"
    MOBILE = "mobile"

class MainConfig(BaseModel):
    """
    General run settings: target environment, execution mode and browser.
    """
    # Target environment name (dev, staging, production or an alias).
    env: str = "dev"
    project_name: str = "e2e-test-automation"
    # One of local, fast, cloud, mobile.
    execution_mode: ExecutionMode = ExecutionMode.LOCAL
    # Browser used by local, fast and cloud modes (chrome, firefox, safari).
    browser: str = "chrome"
    # Forces headless even in local mode. The fast profile is always headless.
    headless: bool = False
    # Number of parallel test workers, each with its own session.
    workers: int = Field(4, gt=0)
    # Test-level retries, left to the test runner.
    retry: int = 0

class UrlsConfig(BaseModel):
    """Base URLs per environment. Empty entries fall back to `base`."""
    base: str = "https://example.com"
    development: str = "http://localhost:3000"
    staging: str = ""
    production: str = ""

class TimeoutsConfig(BaseModel):
    """Session-level timeouts in milliseconds."""
    page_load: int = Field(60000, gt=0)
    script: int = Field(30000, gt=0)
    implicit: int = Field(0, ge=0)

class Account(BaseModel):
    """A login used by tests."""
    username: str = ""
    password: str = ""

class CredentialsConfig(BaseModel):
    admin: Account = Field(default_factory=Account)
    user: Account = Field(default_factory=Account)
    manager: Account = Field(default_factory=Account)

class CloudConfig(BaseModel):
    """Sauce Labs settings for the cloud execution mode."""
    username: Optional[str] = None
    access_key: Optional[str] = None
    # "us" or "eu".
    region: str = "us"
    build_name: str = "E2E Test Build"
    project_name: str = "E2E Automation"

class AppiumConfig(BaseModel):
    """Appium server and device settings for the mobile execution mode."""
    host: str = "localhost"
    port: int = 4723
    # "android" or "ios".
    platform: str = "android"
    android_device_name: str = "Android Emulator"
    android_platform_version: str = "13.0"
    ios_device_name: str = "iPhone 14"
    ios_platform_version: str = "16.0"
    # Bundle id (iOS) or package name (Android) used by app lifecycle commands.
    app_id: Optional[str] = None

class EmailConfig(BaseModel):
    """SMTP settings for the e-mail test report."""
    enabled: bool = False
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    sender: Optional[str] = None
    recipients_passed: List[str] = []
    recipients_failed: List[str] = []
    company_name: str = "QA Team"
    company_website: str = ""
    company_logo_url: str = ""
    template_dir: str = "config/views"

class ReportingConfig(BaseModel):
    """Reporter, screenshot and report-retention settings."""
    allure_enabled: bool = True
    screenshot_on_failure: bool = True
    screenshot_dir: str = "screenshots"
    junit_path: str = "junit/results.xml"
    report_url: str = ""
    retention_days: int = Field(30, gt=0)
    report_dirs: List[str] = ["allure-results", "allure-report", "junit", "screenshots", "logs"]

class LoggingConfig(BaseModel):
    """Configuration settings for logging."""
    # The logging level (e.g., "DEBUG", "INFO", "WARNING").
    level: str = "INFO"
    log_dir: str = "logs"

ENV_ALIASES = {
    "production": "production",
    "prod": "production",
    "staging": "staging",
    "stg": "staging",
    "development": "development",
    "dev": "development",
}

class Config(BaseSettings):
    """
    The main configuration model that aggregates all other configuration sections.

    Values come from, in decreasing priority: environment variables prefixed
    with "HARNESS_" (nested with "__", e.g. HARNESS_MAIN__EXECUTION_MODE), a
    `.env` file, then the TOML file passed to `load_config`.
    """
    model_config = SettingsConfigDict(
        env_prefix="HARNESS_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    main: MainConfig = Field(default_factory=MainConfig)
    urls: UrlsConfig = Field(default_factory=UrlsConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    cloud: CloudConfig = Field(default_factory=CloudConfig)
    appium: AppiumConfig = Field(default_factory=AppiumConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # The TOML file arrives as init kwargs; CI overrides it through the environment.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    def base_url(self) -> str:
        """
        Returns the base URL for the configured environment.

        Known environment names and their short aliases map to the matching
        URL; unknown names, or environments without a URL, use `urls.base`.
        """
        target = ENV_ALIASES.get(self.main.env.lower())
        if target is None:
            return self.urls.base
        return getattr(self.urls, target) or self.urls.base

    @property
    def is_mobile(self) -> bool:
        return self.main.execution_mode == ExecutionMode.MOBILE

    @property
    def is_android(self) -> bool:
        return self.is_mobile and self.appium.platform.lower() == "android"

    @property
    def is_ios(self) -> bool:
        return self.is_mobile and self.appium.platform.lower() == "ios"

def load_config(path: Optional[str] = None) -> Config:
    """
    Loads configuration from a TOML file and the environment, and sets up logging.

    Args:
        path: The path to the TOML configuration file. When omitted, only
            defaults, the environment and `.env` are used.

    Returns:
        A fully validated Config object.

    Raises:
        ConfigError: If the file does not exist or the values do not validate.
    """
    data = {}
    if path is not None:
        try:
            with open(path, "r") as f:
                data = toml.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Config file {path} is not valid TOML: {e}") from e

    logging_section = data.get("logging", {})
    configure_root_logger(
        logging_section.get("level", "INFO"),
        resolve_path(logging_section.get("log_dir", "logs")),
    )
    logger = get_logger("config")

    try:
        config = Config(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug(f"Configuration loaded for env '{config.main.env}' in {config.main.execution_mode.value} mode")
    return config
