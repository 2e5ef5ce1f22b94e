"""
Outbound email over SMTP, plus the branded HTML layout used by every message.
"""

import html
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, Optional

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str


class EmailSender:
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        sender: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.user = user if user is not None else settings.smtp_user
        self.password = password if password is not None else settings.smtp_password
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.sender = sender or settings.mail_sender
        self.timeout = timeout or settings.smtp_timeout_seconds

    def send(self, to: str, subject: str, html_body: str) -> Dict[str, Any]:
        """Send one HTML message. Raises on any SMTP failure."""
        if not self.sender:
            raise RuntimeError("No sender address configured (SMTP_USER or MAIL_FROM)")

        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
            refused = server.sendmail(self.sender, [to], msg.as_string())

        return {"accepted": [to] if to not in refused else [], "rejected": list(refused.keys())}


def send_mail_in_background(sender: EmailSender, message: EmailMessage) -> None:
    """
    Background task body: deliver and log.
    Failures are logged and dropped so they never reach the request that queued them.
    """
    try:
        info = sender.send(message.to, message.subject, message.html)
        logger.info(f"Email '{message.subject}' delivered: {info}")
    except Exception as e:
        logger.error(f"Failed to deliver email '{message.subject}' to {message.to}: {e}")


def render_email(title: str, name: str, content_html: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; background: #f4f4f4; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background: #fff; padding: 24px; border-radius: 8px;">
      <h1 style="color: #333;">{html.escape(title)}</h1>
      <p>Hi {html.escape(name.strip() or "there")},</p>
      {content_html}
      <p style="color: #999; font-size: 12px;">TrooPay</p>
    </div>
  </body>
</html>
"""


def get_email_sender() -> EmailSender:
    return EmailSender()
