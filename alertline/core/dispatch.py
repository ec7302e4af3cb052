import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .failures import Failure, FailureKind


logger = logging.getLogger(__name__)

Matcher = Callable[[FailureKind], bool]
Handler = Callable[[Failure], Optional[Any]]


def kind_is(kind: FailureKind) -> Matcher:
    """Build a matcher accepting ``kind`` and all of its descendants."""

    def _matches(candidate: FailureKind) -> bool:
        return candidate.is_a(kind)

    _matches.__name__ = f"kind_is({kind.name})"
    return _matches


def any_kind(kind: FailureKind) -> bool:
    return True


@dataclass(frozen=True)
class HandlerEntry:
    matcher: Matcher
    handler: Handler
    label: str = ""


class DispatchChain:
    """Ordered (matcher, handler) registry walked until a handler claims a failure.

    Entries are evaluated in registration order and the first handler that
    returns something other than ``None`` wins. Nothing reorders entries:
    a general matcher registered ahead of a specific one shadows it, so
    register specific responders first.

    Handlers that only produce side effects return ``None`` and the walk
    continues. Registration ends with ``freeze()``; a frozen chain is safe to
    dispatch from concurrent requests.
    """

    def __init__(self) -> None:
        self._entries: List[HandlerEntry] = []
        self._frozen = False

    @property
    def entries(self) -> Tuple[HandlerEntry, ...]:
        return tuple(self._entries)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, matcher: Matcher, handler: Handler, label: Optional[str] = None) -> None:
        if self._frozen:
            raise RuntimeError("Cannot register handlers after the dispatch chain is frozen")
        entry_label = label or getattr(handler, "__name__", None) or type(handler).__name__
        self._entries.append(HandlerEntry(matcher=matcher, handler=handler, label=entry_label))

    def freeze(self) -> None:
        self._frozen = True

    def dispatch(self, failure: Failure) -> Optional[Any]:
        """Return the first non-None handler result, or None when unhandled."""
        for entry in self._entries:
            if not entry.matcher(failure.kind):
                continue
            try:
                result = entry.handler(failure)
            except Exception as e:
                # A broken handler defers; the walk never re-raises
                logger.error(f"Handler {entry.label} failed on {failure.kind.name}: {e}", exc_info=True)
                continue
            if result is not None:
                return result
        return None

    def __len__(self) -> int:
        return len(self._entries)
