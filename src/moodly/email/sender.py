"""Email sender for recap digests via SMTP."""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from moodly.digest.report import DigestReport

    from .config import EmailConfig

logger = logging.getLogger(__name__)


@dataclass
class EmailResult:
    """Result of email send operation."""

    success: bool
    error_message: str | None = None

    @classmethod
    def ok(cls) -> EmailResult:
        """Create success result."""
        return cls(success=True)

    @classmethod
    def not_configured(cls) -> EmailResult:
        """Create failure result for missing configuration."""
        return cls(success=False, error_message="Email is not configured.")

    @classmethod
    def nothing_to_send(cls) -> EmailResult:
        """Create failure result for an empty recap."""
        return cls(success=False, error_message="No entries to report.")

    @classmethod
    def auth_failed(cls) -> EmailResult:
        """Create failure result for authentication error."""
        return cls(success=False, error_message="Could not authenticate with email server.")

    @classmethod
    def connection_failed(cls) -> EmailResult:
        """Create failure result for connection error."""
        return cls(success=False, error_message="Could not connect to email server.")

    @classmethod
    def send_failed(cls) -> EmailResult:
        """Create failure result for send error."""
        return cls(success=False, error_message="Failed to send email.")


class SMTPEmailSender:
    """Sends emails via SMTP."""

    def __init__(self, config: EmailConfig) -> None:
        """Initialize with email configuration.

        Args:
            config: SMTP configuration from environment.
        """
        self._config = config

    def send_digest(self, report: DigestReport | None) -> EmailResult:
        """Send a recap digest.

        Args:
            report: Rendered recap, or None when the period was empty.

        Returns:
            EmailResult with success/failure status.
        """
        if report is None or report.stats.total_entries == 0:
            return EmailResult.nothing_to_send()

        return self.send_html(report.subject, report.html, self._format_plain_text(report))

    def send_html(self, subject: str, html: str, text: str = "") -> EmailResult:
        """Send an HTML email with an optional plain-text alternative.

        Returns:
            EmailResult with success/failure status.
        """
        if not self._config.is_valid():
            return EmailResult.not_configured()

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._config.from_address
        msg["To"] = self._config.recipient_address
        if text:
            msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

        try:
            logger.info(f"Sending '{subject}' to {self._config.recipient_address}")
            context = ssl.create_default_context()

            with smtplib.SMTP(
                self._config.smtp_host,
                self._config.smtp_port,
                timeout=30,
            ) as server:
                server.starttls(context=context)
                server.login(self._config.smtp_user, self._config.smtp_pass)
                server.send_message(msg)

            logger.info("Email sent successfully")
            return EmailResult.ok()

        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {e}")
            return EmailResult.auth_failed()

        except smtplib.SMTPConnectError as e:
            logger.error(f"SMTP connection failed: {e}")
            return EmailResult.connection_failed()

        except smtplib.SMTPException as e:
            logger.error(f"SMTP send failed: {e}")
            return EmailResult.send_failed()

        # SMTPException derives from OSError, so plain socket errors come last
        except (OSError, TimeoutError) as e:
            logger.error(f"SMTP connection failed: {e}")
            return EmailResult.connection_failed()

    @staticmethod
    def _format_plain_text(report: DigestReport) -> str:
        """Plain-text fallback for mail clients without HTML.

        Args:
            report: Rendered recap.

        Returns:
            Formatted text body.
        """
        stats = report.stats
        lines = [
            f"Your {report.period.label} Moodly Recap",
            f"{report.start.isoformat()} - {report.end.isoformat()}",
            "",
            f"Entries: {stats.total_entries}",
            f"Average mood: {stats.avg_mood}/5",
            f"Average energy: {stats.avg_energy}/5",
            f"Average sleep: {stats.avg_sleep}/5",
            f"Average focus: {stats.avg_focus}/5",
        ]
        if report.insights:
            lines.append("")
            lines.extend(f"• {insight.text}" for insight in report.insights)

        lines.append("\n---\nSent by Moodly")
        return "\n".join(lines)
