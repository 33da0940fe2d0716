from .ci_detector import CIInfo, detect_ci, is_ci
from .cleanup import cleanup_directory, cleanup_reports
from .email_report import EmailService, TestStats, parse_junit_results, send_test_report
from .validate_env import CheckResult, EnvironmentValidator

__all__ = [
    "CIInfo",
    "detect_ci",
    "is_ci",
    "cleanup_directory",
    "cleanup_reports",
    "EmailService",
    "TestStats",
    "parse_junit_results",
    "send_test_report",
    "CheckResult",
    "EnvironmentValidator",
]
