import logging
import sys
import time
from pathlib import Path

def configure_root_logger(level: str = "INFO", log_dir: Path = None) -> None:
    """Configure the root logger with a console handler and a per-run log file."""
    root = logging.getLogger()

    level_value = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(level_value)

    if not root.handlers:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

        if log_dir is None:
            log_dir = Path.cwd() / "logs"

        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"harness_log_{int(time.time())}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        root.info(f"Logging to file: {log_file}")

    # Driver plumbing is chatty at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("selenium.webdriver.remote").setLevel(logging.INFO)
    logging.getLogger("WDM").setLevel(logging.WARNING)

def get_logger(name: str = "e2eharness") -> logging.Logger:
    """Get a named logger that inherits settings from root."""
    return logging.getLogger(name)
