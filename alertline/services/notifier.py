import logging
from dataclasses import dataclass, replace
from typing import Optional


logger = logging.getLogger(__name__)


class DeliveryFailure(Exception):
    """Raised when a transport rejects or cannot deliver a notification.

    ``raw_error`` keeps whatever the transport reported (SDK exception,
    status object, SMTP error) for diagnostics.
    """

    def __init__(self, message: str, raw_error: Optional[object] = None):
        super().__init__(message)
        self.raw_error = raw_error


@dataclass(frozen=True)
class NotificationMessage:
    recipient: str
    sender: str
    subject: str
    body: str


@dataclass(frozen=True)
class Notifier:
    """Base notifier: bound recipient and sender plus a transport hook.

    ``with_recipient`` and ``with_sender`` return new instances; the
    original is never mutated, so one notifier can be shared by concurrent
    requests. Subclasses implement ``_deliver``; the base class has no
    transport and fails every delivery.
    """

    recipient: str = ""
    sender: str = ""

    def with_recipient(self, to: str) -> "Notifier":
        return replace(self, recipient=to)

    def with_sender(self, sender: str) -> "Notifier":
        return replace(self, sender=sender)

    def notify(self, subject: str, body: str) -> None:
        """Make one delivery attempt. Raises DeliveryFailure on any transport error."""
        if not self.recipient:
            raise DeliveryFailure("No recipient bound to notifier")
        message = NotificationMessage(
            recipient=self.recipient,
            sender=self.sender,
            subject=subject,
            body=body,
        )
        self._deliver(message)

    def _deliver(self, message: NotificationMessage) -> None:
        raise DeliveryFailure("No transport configured")


@dataclass(frozen=True)
class LogNotifier(Notifier):
    """Development transport: writes the alert to the log instead of sending it."""

    level: int = logging.WARNING

    def _deliver(self, message: NotificationMessage) -> None:
        logger.log(
            self.level,
            f"ALERT to={message.recipient} from={message.sender or '-'} "
            f"subject={message.subject!r} body={message.body!r}",
        )
