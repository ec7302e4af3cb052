"""Startup wiring: notifier, failure handlers and dispatch chain.

The AlertContext is built once when the application starts, is read-only
afterwards, and is handed to request code explicitly (``app.state`` plus
the ``get_context`` dependency) rather than living in module globals.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from fastapi import Request

from ..services.failure_handlers import LogFailureHandler, NotifyFailureHandler
from ..services.notifier import LogNotifier, Notifier
from ..services.smtp_email import EmailNotifier
from ..services.tencent_sms import SmsNotifier
from .config import Config
from .dispatch import DispatchChain, Handler, Matcher, any_kind, kind_is
from .failures import APPLICATION, Failure


logger = logging.getLogger(__name__)

Responder = Tuple[Matcher, Handler]


def build_notifier(config: Config) -> Notifier:
    """Create the notifier selected by NOTIFIER_DRIVER with default sender and recipient bound."""
    driver = config.NOTIFIER_DRIVER
    notifier: Notifier
    if driver == "sms":
        notifier = SmsNotifier(
            secret_id=config.TENCENT_SECRET_ID,
            secret_key=config.TENCENT_SECRET_KEY,
            region=config.TENCENT_SMS_REGION,
            app_id=config.TENCENT_SMS_APP_ID,
            sign_name=config.TENCENT_SMS_SIGN_NAME,
            template_id=config.TENCENT_SMS_TEMPLATE_ID,
            timeout_seconds=config.NOTIFY_TIMEOUT_SECONDS,
        )
    elif driver == "email":
        notifier = EmailNotifier(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
            timeout_seconds=config.NOTIFY_TIMEOUT_SECONDS,
        )
    elif driver == "log":
        notifier = LogNotifier()
    else:
        raise ValueError(f"Unknown notifier driver: {driver}")
    return notifier.with_sender(config.ALERT_FROM).with_recipient(config.ALERT_TO)


@dataclass(frozen=True)
class AlertContext:
    config: Config
    notifier: Notifier
    chain: DispatchChain

    def dispatch(self, failure: Failure) -> Optional[Any]:
        return self.chain.dispatch(failure)


def build_context(
    config: Optional[Config] = None,
    notifier: Optional[Notifier] = None,
    responders: Iterable[Responder] = (),
) -> AlertContext:
    """Compose the dispatch chain for the application.

    Order: log every failure, alert on application failures, then the
    response-producing ``responders`` in the order given. Responders must be
    passed most specific first. The chain is frozen before returning.
    """
    config = config or Config()
    config.validate()
    if notifier is None:
        notifier = build_notifier(config)

    chain = DispatchChain()
    chain.register(any_kind, LogFailureHandler(), label="log")
    if config.ALERTS_ENABLED:
        handler = NotifyFailureHandler(notifier, subject_prefix=f"[{config.APP_NAME}] ")
        chain.register(kind_is(APPLICATION), handler, label="notify")
    else:
        logger.warning("Alerts are disabled; application failures will only be logged")
    for matcher, responder in responders:
        chain.register(matcher, responder)
    chain.freeze()

    return AlertContext(config=config, notifier=notifier, chain=chain)


def get_context(request: Request) -> AlertContext:
    """FastAPI dependency returning the context built at startup."""
    return request.app.state.context
