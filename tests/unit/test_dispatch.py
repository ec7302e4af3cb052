from __future__ import annotations

import pytest

from alertline.core.dispatch import DispatchChain, any_kind, kind_is
from alertline.core.failures import APPLICATION, EXCEPTION, NOT_FOUND, PAYMENT_FAILED, SYNC_TIMEOUT, Failure
from alertline.services.failure_handlers import NotifyFailureHandler


def responder(value, calls=None):
    def _respond(failure):
        if calls is not None:
            calls.append(value)
        return value

    return _respond


def test_empty_chain_returns_none():
    assert DispatchChain().dispatch(Failure(PAYMENT_FAILED, "card declined")) is None


def test_unmatched_failure_returns_none():
    chain = DispatchChain()
    chain.register(kind_is(NOT_FOUND), responder("R404"))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) is None


def test_general_matcher_registered_first_shadows_specific():
    chain = DispatchChain()
    chain.register(kind_is(APPLICATION), responder("R1"))
    chain.register(kind_is(PAYMENT_FAILED), responder("R2"))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) == "R1"


def test_specific_matcher_registered_first_wins():
    chain = DispatchChain()
    chain.register(kind_is(PAYMENT_FAILED), responder("R2"))
    chain.register(kind_is(APPLICATION), responder("R1"))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) == "R2"
    assert chain.dispatch(Failure(SYNC_TIMEOUT, "sync stalled")) == "R1"
    assert chain.dispatch(Failure(APPLICATION, "generic")) == "R1"


def test_deferring_handler_does_not_halt_chain():
    calls = []
    chain = DispatchChain()
    chain.register(any_kind, lambda failure: calls.append("side-effect"))
    chain.register(kind_is(EXCEPTION), responder("R", calls))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) == "R"
    assert calls == ["side-effect", "R"]


def test_chain_of_only_deferring_handlers_returns_none():
    chain = DispatchChain()
    chain.register(any_kind, lambda failure: None)
    chain.register(kind_is(APPLICATION), lambda failure: None)

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) is None


def test_handlers_after_claim_are_not_invoked():
    calls = []
    chain = DispatchChain()
    chain.register(any_kind, responder("first", calls))
    chain.register(any_kind, responder("second", calls))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) == "first"
    assert calls == ["first"]


def test_duplicate_matchers_first_registered_wins():
    chain = DispatchChain()
    matcher = kind_is(PAYMENT_FAILED)
    chain.register(matcher, responder("first"))
    chain.register(matcher, responder("second"))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) == "first"


def test_falsy_but_not_none_result_claims():
    chain = DispatchChain()
    chain.register(any_kind, responder(""))
    chain.register(any_kind, responder("later"))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) == ""


def test_raising_handler_is_treated_as_deferral():
    def broken(failure):
        raise RuntimeError("renderer exploded")

    chain = DispatchChain()
    chain.register(any_kind, broken)
    chain.register(any_kind, responder("R"))

    assert chain.dispatch(Failure(PAYMENT_FAILED, "card declined")) == "R"


def test_register_after_freeze_raises():
    chain = DispatchChain()
    chain.register(any_kind, responder("R"))
    chain.freeze()

    with pytest.raises(RuntimeError):
        chain.register(any_kind, responder("late"))
    assert len(chain) == 1
    assert chain.frozen


def test_entries_are_labelled_in_registration_order():
    chain = DispatchChain()
    chain.register(any_kind, responder("R"), label="generic")
    chain.register(kind_is(NOT_FOUND), responder("R404"))

    labels = [entry.label for entry in chain.entries]
    assert labels == ["generic", "_respond"]
    assert isinstance(chain.entries, tuple)


def test_payment_failure_is_alerted_then_rendered_by_generic_responder(recording_notifier):
    not_found_calls = []
    chain = DispatchChain()
    chain.register(kind_is(APPLICATION), NotifyFailureHandler(recording_notifier))
    chain.register(any_kind, responder("generic-500"))
    chain.register(kind_is(NOT_FOUND), responder("404", not_found_calls))

    result = chain.dispatch(Failure(PAYMENT_FAILED, "card declined"))

    assert result == "generic-500"
    assert len(recording_notifier.outbox) == 1
    assert "payment-failed" in recording_notifier.outbox[0].subject
    assert recording_notifier.outbox[0].body == "card declined"
    assert not_found_calls == []


def test_not_found_shadowed_by_generic_responder_registered_first():
    chain = DispatchChain()
    chain.register(any_kind, responder("generic-500"))
    chain.register(kind_is(NOT_FOUND), responder("404"))

    assert chain.dispatch(Failure(NOT_FOUND, "no such order")) == "generic-500"
