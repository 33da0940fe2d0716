"""
Command-line interface for the e2e harness support tools.

Subcommands:
    validate-env      run the pre-flight environment checks
    cleanup-reports   delete report artifacts past the retention period
    send-report       e-mail the result of the last test run
"""
import argparse
import sys
from pathlib import Path

# Add the project's 'src' directory to the Python path so the script also runs
# from a source checkout without installing the package.
src_path = Path(__file__).resolve().parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from e2eharness.config import load_config
from e2eharness.errors import ConfigError
from e2eharness.logger import get_logger
from e2eharness.tools.cleanup import cleanup_reports
from e2eharness.tools.email_report import send_test_report
from e2eharness.tools.validate_env import EnvironmentValidator

logger = get_logger("e2eharness.cli")


def validate_env(config, args) -> int:
    validator = EnvironmentValidator(config)
    ok = validator.validate()
    validator.print_results()
    return 0 if ok else 1


def cleanup(config, args) -> int:
    retention = args.retention_days or config.reporting.retention_days
    cleanup_reports(config.reporting.report_dirs, retention)
    return 0


def send_report(config, args) -> int:
    if not config.email.enabled and not args.force:
        logger.info("E-mail reporting is disabled (email.enabled = false), skipping")
        return 0
    send_test_report(config)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="e2eharness", description="E2E test harness tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("validate-env", help="Check the environment before a test run")
    p.set_defaults(func=validate_env)

    p = subparsers.add_parser("cleanup-reports", help="Delete old report artifacts")
    p.add_argument("--retention-days", type=int, help="Override reporting.retention_days")
    p.set_defaults(func=cleanup)

    p = subparsers.add_parser("send-report", help="E-mail the last test run's report")
    p.add_argument("--force", action="store_true", help="Send even if email.enabled is false")
    p.set_defaults(func=send_report)

    for sub in subparsers.choices.values():
        sub.add_argument("--config", help="Path to config file (TOML)")
    return parser


def main(argv=None) -> int:
    """
    Parses command-line arguments and runs the selected subcommand.

    Returns:
        The process exit code: 0 on success, 1 on failed checks or errors.
    """
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
        return args.func(config, args)
    except ConfigError as e:
        logger.error(f"❌ {e}")
        return 1
    except Exception as e:
        logger.error(f"❌ {args.command} failed: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
