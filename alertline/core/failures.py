"""Failure kinds and the raisable Failure type.

Kinds are tagged values linked to their parent, not exception subclasses.
Routing asks ``kind.is_a(other)``, which walks the parent links, so a
``payment-failed`` failure is also routable as ``application`` and as
``exception``.
"""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class FailureKind:
    """A named failure variant with an optional parent kind.

    ``name`` is the stable display name used verbatim in alert subjects.
    """

    name: str
    parent: Optional["FailureKind"] = None

    def child(self, name: str) -> "FailureKind":
        return FailureKind(name, parent=self)

    def lineage(self) -> Iterator["FailureKind"]:
        kind: Optional[FailureKind] = self
        while kind is not None:
            yield kind
            kind = kind.parent

    def is_a(self, other: "FailureKind") -> bool:
        return any(kind == other for kind in self.lineage())

    def __str__(self) -> str:
        return self.name


EXCEPTION = FailureKind("exception")

# Business-logic hierarchy
APPLICATION = EXCEPTION.child("application")
PAYMENT_FAILED = APPLICATION.child("payment-failed")
SYNC_TIMEOUT = APPLICATION.child("sync-timeout")

# Web-layer hierarchy, disjoint from APPLICATION
FRAMEWORK = EXCEPTION.child("framework")
HTTP = FRAMEWORK.child("http")
NOT_FOUND = HTTP.child("not-found")
VALIDATION = FRAMEWORK.child("validation")

# Raw Python exceptions that reached the web layer without being a Failure
UNCAUGHT = EXCEPTION.child("uncaught")


class Failure(Exception):
    """An error occurrence tagged with a FailureKind.

    Attributes are read-only after construction. ``cause`` is the wrapped
    lower-level exception, if any; it is also set as ``__cause__`` so
    tracebacks show the chain.
    """

    def __init__(self, kind: FailureKind, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self._kind = kind
        self._message = message
        self._cause = cause
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def wrap(cls, kind: FailureKind, exc: BaseException, message: Optional[str] = None) -> "Failure":
        return cls(kind, message if message is not None else str(exc), cause=exc)

    @property
    def kind(self) -> FailureKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    def causes(self) -> Iterator[BaseException]:
        """Yield the wrapped exceptions, innermost last."""
        seen = {id(self)}
        current = self._cause
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            yield current
            current = current.cause if isinstance(current, Failure) else current.__cause__

    def __repr__(self) -> str:
        return f"Failure(kind={self._kind.name!r}, message={self._message!r})"
