import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from .notifier import DeliveryFailure, NotificationMessage, Notifier


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailNotifier(Notifier):
    """Send alerts as plain-text email through an SMTP relay.

    Opens one SMTP connection per notify call.
    """

    host: str = ""
    port: int = 587
    username: str = ""
    password: str = ""
    use_tls: bool = True
    timeout_seconds: int = 10

    def _deliver(self, message: NotificationMessage) -> None:
        if not self.sender:
            raise DeliveryFailure("No sender bound to email notifier")

        try:
            # Header assignment rejects CR/LF in recipient, sender or subject
            email = EmailMessage()
            email["From"] = message.sender
            email["To"] = message.recipient
            email["Subject"] = message.subject
            email.set_content(message.body)

            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise DeliveryFailure(f"SMTP delivery to {message.recipient} failed: {e}", raw_error=e)

        logger.info(f"Email alert sent to {message.recipient}")
