"""
Outgoing mail (Gmail SMTP with an app password)

Only plain text mails are sent; callers get MailerError on any failure.
"""
import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


class MailerError(Exception):
    """Mail could not be sent"""


class Mailer:
    """Gmail SMTP sender"""

    def __init__(
        self,
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        from_email: Optional[str] = None,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.from_email = from_email or smtp_user

    @property
    def configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    def send(self, to_email: str, subject: str, body: str) -> None:
        """
        Send a plain text mail.

        Raises:
            MailerError: credentials missing or SMTP failure
        """
        if not self.configured:
            logger.warning("Mail not configured. GMAIL_USER / GMAIL_APP_PASSWORD missing.")
            raise MailerError("Email service is not configured")

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to_email

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, [to_email], msg.as_string())
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed. Check GMAIL_APP_PASSWORD.")
            raise MailerError("SMTP authentication failed") from e
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error sending to {to_email}: {e}")
            raise MailerError(str(e)) from e

        logger.info(f"📧 Mail sent to {to_email}: {subject}")


def build_mailer() -> Mailer:
    """Mailer from settings"""
    return Mailer(
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.GMAIL_USER,
        smtp_password=settings.GMAIL_APP_PASSWORD,
    )
