"""Application failure dispatch and operator alerting."""

from .core.context import AlertContext, build_context, build_notifier
from .core.dispatch import DispatchChain, HandlerEntry, any_kind, kind_is
from .core.failures import APPLICATION, EXCEPTION, FRAMEWORK, Failure, FailureKind
from .services.failure_handlers import LogFailureHandler, NotifyFailureHandler
from .services.notifier import DeliveryFailure, NotificationMessage, Notifier

__all__ = [
    "AlertContext",
    "APPLICATION",
    "DeliveryFailure",
    "DispatchChain",
    "EXCEPTION",
    "FRAMEWORK",
    "Failure",
    "FailureKind",
    "HandlerEntry",
    "LogFailureHandler",
    "NotificationMessage",
    "Notifier",
    "NotifyFailureHandler",
    "any_kind",
    "build_context",
    "build_notifier",
    "kind_is",
]
