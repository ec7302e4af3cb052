import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


NOTIFIER_DRIVERS = ("log", "sms", "email")


@dataclass(frozen=True)
class Config:
    """Application configuration loaded from environment variables.

    Read once at startup and never mutated afterwards. Each field falls back
    to its environment variable when not passed explicitly, so tests can
    build a Config with overrides without touching the process environment.
    """

    ENVIRONMENT: str = field(default_factory=lambda: _env("ENVIRONMENT", "production"))
    APP_NAME: str = field(default_factory=lambda: _env("APP_NAME", "alertline"))
    LOG_LEVEL: str = field(default_factory=lambda: _env("LOG_LEVEL", "WARNING"))

    ALERTS_ENABLED: bool = field(default_factory=lambda: _env_flag("ALERTS_ENABLED"))
    NOTIFIER_DRIVER: str = field(default_factory=lambda: _env("NOTIFIER_DRIVER", "log"))
    ALERT_FROM: str = field(default_factory=lambda: _env("ALERT_FROM"))
    ALERT_TO: str = field(default_factory=lambda: _env("ALERT_TO"))
    NOTIFY_TIMEOUT_SECONDS: int = field(default_factory=lambda: int(_env("NOTIFY_TIMEOUT_SECONDS", "10")))

    # Tencent Cloud SMS
    TENCENT_SECRET_ID: str = field(default_factory=lambda: _env("TENCENT_SECRET_ID"))
    TENCENT_SECRET_KEY: str = field(default_factory=lambda: _env("TENCENT_SECRET_KEY"))
    TENCENT_SMS_REGION: str = field(default_factory=lambda: _env("TENCENT_SMS_REGION", "ap-guangzhou"))
    TENCENT_SMS_APP_ID: str = field(default_factory=lambda: _env("TENCENT_SMS_APP_ID"))
    TENCENT_SMS_SIGN_NAME: str = field(default_factory=lambda: _env("TENCENT_SMS_SIGN_NAME"))
    TENCENT_SMS_TEMPLATE_ID: str = field(default_factory=lambda: _env("TENCENT_SMS_TEMPLATE_ID"))

    # SMTP relay
    SMTP_HOST: str = field(default_factory=lambda: _env("SMTP_HOST"))
    SMTP_PORT: int = field(default_factory=lambda: int(_env("SMTP_PORT", "587")))
    SMTP_USERNAME: str = field(default_factory=lambda: _env("SMTP_USERNAME"))
    SMTP_PASSWORD: str = field(default_factory=lambda: _env("SMTP_PASSWORD"))
    SMTP_USE_TLS: bool = field(default_factory=lambda: _env_flag("SMTP_USE_TLS"))

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    def validate(self) -> None:
        if self.NOTIFIER_DRIVER not in NOTIFIER_DRIVERS:
            raise ValueError(f"NOTIFIER_DRIVER must be one of: {', '.join(NOTIFIER_DRIVERS)}")
        if not self.ALERTS_ENABLED:
            return
        if not self.ALERT_TO:
            raise ValueError("ALERT_TO environment variable is required when alerts are enabled")
        if self.NOTIFIER_DRIVER == "sms":
            if not self.TENCENT_SECRET_ID or not self.TENCENT_SECRET_KEY:
                raise ValueError("TENCENT_SECRET_ID and TENCENT_SECRET_KEY environment variables are required")
            if not self.TENCENT_SMS_APP_ID:
                raise ValueError("TENCENT_SMS_APP_ID environment variable is required")
            if not self.TENCENT_SMS_TEMPLATE_ID:
                raise ValueError("TENCENT_SMS_TEMPLATE_ID environment variable is required")
        if self.NOTIFIER_DRIVER == "email":
            if not self.SMTP_HOST:
                raise ValueError("SMTP_HOST environment variable is required")
            if not self.ALERT_FROM:
                raise ValueError("ALERT_FROM environment variable is required for email alerts")
