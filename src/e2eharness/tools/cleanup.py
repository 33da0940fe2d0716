import shutil
import time
from pathlib import Path
from typing import Iterable, Optional, Union

from ..config import resolve_path
from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_RETENTION_DAYS = 30
REPORT_DIRS = ["allure-results", "allure-report", "junit", "screenshots", "logs"]


def cleanup_directory(directory: Union[str, Path], retention_days: int = DEFAULT_RETENTION_DAYS,
                      now: Optional[float] = None) -> int:
    """
    Removes entries in `directory` last modified more than `retention_days` ago.

    Only direct children are inspected; an old subdirectory is removed with
    everything in it. Entries that cannot be removed are logged and skipped.

    Returns:
        The number of entries removed.
    """
    directory = Path(directory)
    if not directory.exists():
        logger.warning(f"Directory not found: {directory}")
        return 0

    cutoff = (now if now is not None else time.time()) - retention_days * 24 * 60 * 60
    removed = 0
    for entry in directory.iterdir():
        try:
            # lstat: a dangling symlink is judged by the link itself.
            if entry.lstat().st_mtime >= cutoff:
                continue
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError as e:
            logger.error(f"Failed to remove: {entry}: {e}")
            continue
        removed += 1
        logger.debug(f"Removed: {entry}")

    if removed:
        logger.info(f"✅ Cleaned {removed} files from {directory}")
    else:
        logger.info(f"No old files to clean in {directory}")
    return removed


def cleanup_reports(dirs: Iterable[str] = REPORT_DIRS, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Applies the retention policy to every report directory. Returns the total removed."""
    logger.info(f"🧹 Report cleanup, retention policy: {retention_days} days")
    total = sum(cleanup_directory(resolve_path(d), retention_days) for d in dirs)
    logger.info("✅ Cleanup completed!")
    return total
