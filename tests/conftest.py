from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pytest

from alertline.core.config import Config
from alertline.services.notifier import DeliveryFailure, NotificationMessage, Notifier


@dataclass(frozen=True)
class RecordingNotifier(Notifier):
    """Captures delivered messages in a shared outbox instead of sending them."""

    outbox: List[NotificationMessage] = field(default_factory=list)

    def _deliver(self, message: NotificationMessage) -> None:
        self.outbox.append(message)


@dataclass(frozen=True)
class BrokenNotifier(Notifier):
    def _deliver(self, message: NotificationMessage) -> None:
        raise DeliveryFailure("gateway unavailable", raw_error={"code": "Unavailable"})


def make_config(**overrides) -> Config:
    values = {
        "ENVIRONMENT": "production",
        "APP_NAME": "shop",
        "ALERTS_ENABLED": True,
        "NOTIFIER_DRIVER": "log",
        "ALERT_FROM": "ops-bot",
        "ALERT_TO": "+15550001111",
    }
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def recording_notifier() -> RecordingNotifier:
    return RecordingNotifier(recipient="+15550001111", sender="ops-bot")


@pytest.fixture
def broken_notifier() -> BrokenNotifier:
    return BrokenNotifier(recipient="+15550001111", sender="ops-bot")
