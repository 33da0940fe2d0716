"""
E-mail test report.

Reads the JUnit summary written by the test run, renders an HTML report with
Jinja2 and sends it over SMTP (STARTTLS) to the recipients configured for a
passing or a failing run.
"""
import os
import smtplib
import xml.etree.ElementTree as ET
from dataclasses import asdict, dataclass
from datetime import datetime
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from jinja2 import Environment

from ..config import Config, EmailConfig, resolve_path
from ..errors import ConfigError
from ..logger import get_logger
from .ci_detector import detect_ci

logger = get_logger(__name__)

TEMPLATE_NAME = "test-report.html"


@dataclass
class TestStats:
    __test__ = False  # not a pytest test class

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0


def parse_junit_results(path: Union[str, Path]) -> TestStats:
    """
    Reads the test counts from a JUnit XML report.

    Handles both a `<testsuites>` root and a single `<testsuite>` root; the
    first element carrying a `tests` attribute wins. Failures and errors are
    both counted as failed. A missing or unreadable file yields all zeros.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"JUnit results not found at {path}, using default stats")
        return TestStats()

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        logger.error(f"Failed to parse JUnit results: {e}")
        return TestStats()

    node = root if "tests" in root.attrib else root.find(".//testsuite[@tests]")
    if node is None:
        return TestStats()
    total = int(node.get("tests", 0))
    failed = int(node.get("failures", 0)) + int(node.get("errors", 0))
    skipped = int(node.get("skipped", 0))
    return TestStats(total=total, passed=total - failed - skipped, failed=failed, skipped=skipped)


class EmailService:
    """Sends HTML e-mails through the configured SMTP server."""

    def __init__(self, settings: EmailConfig):
        if not settings.smtp_user or not settings.smtp_password:
            raise ConfigError("SMTP credentials not configured (email.smtp_user, email.smtp_password)")
        self.settings = settings
        self.jinja = Environment(autoescape=True)

    def _connect(self) -> smtplib.SMTP:
        smtp = smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30)
        smtp.starttls()
        smtp.login(self.settings.smtp_user, self.settings.smtp_password)
        return smtp

    def verify_connection(self) -> bool:
        try:
            with self._connect() as smtp:
                smtp.noop()
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP connection to {self.settings.smtp_host} failed: {e}")
            return False
        logger.info(f"✅ SMTP connection to {self.settings.smtp_host} verified")
        return True

    def render(self, context: Dict[str, Any]) -> str:
        """Renders the report template, preferring a copy in `email.template_dir`."""
        custom = resolve_path(self.settings.template_dir) / TEMPLATE_NAME
        source = custom.read_text(encoding="utf-8") if custom.exists() else DEFAULT_TEMPLATE
        return self.jinja.from_string(source).render(**context)

    def send_email(self, to: List[str], subject: str, html: str) -> None:
        message = EmailMessage()
        message["From"] = f'"{self.settings.company_name} QA" <{self.settings.sender or self.settings.smtp_user}>'
        message["To"] = ", ".join(to)
        message["Subject"] = subject
        message.set_content("This report requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")

        try:
            with self._connect() as smtp:
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {e}")
            raise
        logger.info(f"📧 Email sent to: {', '.join(to)}")


def build_report_context(config: Config, stats: TestStats, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    ci = detect_ci(env)
    report_url = config.reporting.report_url
    if not report_url and ci.platform == "gitlab":
        report_url = (
            f"https://{env.get('CI_PROJECT_NAMESPACE')}.gitlab.io/"
            f"{env.get('CI_PROJECT_NAME')}/reports/{env.get('CI_PIPELINE_ID')}"
        )
    email = config.email
    return {
        "passed": stats.failed == 0,
        "stats": asdict(stats),
        "execution_mode": config.main.execution_mode.value,
        "environment": config.main.env,
        "browser": config.main.browser,
        "platform": ci.platform,
        "build_number": ci.build_number or "N/A",
        "build_url": ci.build_url or "#",
        "branch": ci.branch or "N/A",
        "report_url": report_url or "#",
        "company_name": email.company_name,
        "company_website": email.company_website,
        "company_logo": email.company_logo_url,
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }


def report_subject(context: Dict[str, Any]) -> str:
    status = "PASSED ✅" if context["passed"] else "FAILED ❌"
    return f"[{context['execution_mode'].upper()}] Test Report - {status} - {context['environment']}"


def send_test_report(config: Config, environ: Optional[Mapping[str, str]] = None,
                     service: Optional[EmailService] = None) -> bool:
    """
    Sends the test report e-mail for the last run.

    Args:
        config: Harness configuration (e-mail, reporting and run settings).
        environ: Environment used for CI detection. Defaults to `os.environ`.
        service: E-mail service to use. Built from `config.email` when omitted.

    Returns:
        True if the e-mail was sent; False when skipped (no recipients for
        the outcome, or the SMTP server is unreachable).
    """
    stats = parse_junit_results(resolve_path(config.reporting.junit_path))
    passed = stats.failed == 0
    logger.info(f"Test Results: {stats.passed}/{stats.total} passed")

    recipients = config.email.recipients_passed if passed else config.email.recipients_failed
    recipients = [r.strip() for r in recipients if r.strip()]
    if not recipients:
        logger.warning("No email recipients configured, skipping email")
        return False

    service = service or EmailService(config.email)
    if not service.verify_connection():
        logger.error("Email service not available")
        return False

    context = build_report_context(config, stats, environ)
    service.send_email(recipients, report_subject(context), service.render(context))
    logger.info("✅ Email sent successfully!")
    return True


DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        body { font-family: Arial, sans-serif; color: #333; }
        .header { padding: 16px; color: #fff; background: {% if passed %}#2e7d32{% else %}#c62828{% endif %}; }
        table { border-collapse: collapse; margin: 16px 0; }
        td { padding: 6px 12px; border-bottom: 1px solid #eee; }
        .footer { font-size: 12px; color: #888; }
    </style>
</head>
<body>
    <div class="header">
        {% if company_logo %}<img src="{{ company_logo }}" alt="{{ company_name }}" height="32">{% endif %}
        <h2>Test Report: {% if passed %}PASSED{% else %}FAILED{% endif %}</h2>
    </div>
    <table>
        <tr><td>Total</td><td>{{ stats.total }}</td></tr>
        <tr><td>Passed</td><td>{{ stats.passed }}</td></tr>
        <tr><td>Failed</td><td>{{ stats.failed }}</td></tr>
        <tr><td>Skipped</td><td>{{ stats.skipped }}</td></tr>
    </table>
    <table>
        <tr><td>Execution mode</td><td>{{ execution_mode }}</td></tr>
        <tr><td>Environment</td><td>{{ environment }}</td></tr>
        <tr><td>Browser</td><td>{{ browser }}</td></tr>
        <tr><td>CI platform</td><td>{{ platform }}</td></tr>
        <tr><td>Build</td><td><a href="{{ build_url }}">{{ build_number }}</a></td></tr>
        <tr><td>Branch</td><td>{{ branch }}</td></tr>
    </table>
    <p><a href="{{ report_url }}">Open the full report</a></p>
    <p class="footer">
        {{ company_name }}{% if company_website %} · <a href="{{ company_website }}">{{ company_website }}</a>{% endif %}
        · {{ timestamp }}
    </p>
</body>
</html>
"""
