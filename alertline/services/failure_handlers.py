import logging
from typing import Optional

from ..core.failures import FRAMEWORK, Failure
from .notifier import DeliveryFailure, Notifier


logger = logging.getLogger(__name__)


class NotifyFailureHandler:
    """Forward a failure to a notifier and defer the response.

    The subject is the optional prefix plus the kind's display name and the
    body is the failure message. Errors from the notifier are logged here
    and never reach the dispatch chain or the request that raised the
    original failure. ``handle`` always returns None.
    """

    def __init__(self, notifier: Notifier, subject_prefix: str = ""):
        self.notifier = notifier
        self.subject_prefix = subject_prefix

    def subject_for(self, failure: Failure) -> str:
        return f"{self.subject_prefix}{failure.kind.name}"

    def handle(self, failure: Failure) -> None:
        subject = self.subject_for(failure)
        try:
            self.notifier.notify(subject, failure.message)
        except DeliveryFailure as e:
            logger.error(f"Alert delivery failed for {failure.kind.name}: {e} (raw: {e.raw_error!r})")
        except Exception as e:
            logger.error(f"Alert delivery crashed for {failure.kind.name}: {e}", exc_info=True)
        return None

    __call__ = handle


class LogFailureHandler:
    """Log the failure with its causal chain, then defer.

    Framework failures (not-found, validation) are routine client errors and
    go out at WARNING; everything else at ERROR.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def handle(self, failure: Failure) -> None:
        chain = " <- ".join(f"{type(c).__name__}: {c}" for c in failure.causes())
        suffix = f" (caused by {chain})" if chain else ""
        level = logging.WARNING if failure.kind.is_a(FRAMEWORK) else logging.ERROR
        self.log.log(level, f"{failure.kind.name}: {failure.message}{suffix}")
        return None

    __call__ = handle
