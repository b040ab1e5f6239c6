"""
Notification transports. The dispatcher decides who gets a message;
a transport only delivers it.
"""
import logging
import smtplib
from email.message import EmailMessage
from typing import List, Dict, Any

from eventportal.errors import NotificationError

logger = logging.getLogger(__name__)


class LogTransport:
    """Logs messages instead of delivering them."""

    def send(self, recipients: List[str], subject: str, html_body: str) -> None:
        logger.info("Mail not configured; would send '%s' to %d recipient(s)", subject, len(recipients))


class OutboxTransport:
    """Keeps sent messages in memory."""

    def __init__(self):
        self.messages: List[Dict[str, Any]] = []

    def send(self, recipients: List[str], subject: str, html_body: str) -> None:
        self.messages.append({
            'recipients': list(recipients),
            'subject': subject,
            'html_body': html_body,
        })


class SmtpTransport:
    """
    Sends one message over SMTP over SSL. The sender is the visible
    recipient and the audience is blind-copied.
    """

    def __init__(self, host: str, port: int, user: str, password: str, timeout: int = 10):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout = timeout

    def send(self, recipients: List[str], subject: str, html_body: str) -> None:
        msg = EmailMessage()
        msg['Subject'] = subject
        msg['From'] = self.user
        msg['To'] = self.user
        msg['Bcc'] = ', '.join(recipients)
        msg.set_content(html_body, subtype='html')

        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' via %s: %s", subject, self.host, e)
            raise NotificationError(str(e)) from e


def build_transport(config: Dict[str, Any]):
    """Pick SMTP when credentials are configured, else log only."""
    if config.get('SMTP_USER') and config.get('SMTP_PASSWORD'):
        return SmtpTransport(
            config['SMTP_HOST'], config['SMTP_PORT'],
            config['SMTP_USER'], config['SMTP_PASSWORD']
        )
    return LogTransport()
