from __future__ import annotations

import pytest

from alertline.core.failures import (
    APPLICATION,
    EXCEPTION,
    FRAMEWORK,
    NOT_FOUND,
    PAYMENT_FAILED,
    SYNC_TIMEOUT,
    Failure,
    FailureKind,
)


def test_kind_is_itself_and_its_ancestors():
    assert PAYMENT_FAILED.is_a(PAYMENT_FAILED)
    assert PAYMENT_FAILED.is_a(APPLICATION)
    assert PAYMENT_FAILED.is_a(EXCEPTION)


def test_kind_is_not_a_sibling_or_descendant():
    assert not PAYMENT_FAILED.is_a(SYNC_TIMEOUT)
    assert not APPLICATION.is_a(PAYMENT_FAILED)


def test_application_and_framework_hierarchies_are_disjoint():
    assert not NOT_FOUND.is_a(APPLICATION)
    assert not PAYMENT_FAILED.is_a(FRAMEWORK)


def test_declared_child_kind_is_routable_as_parent():
    refund_failed = APPLICATION.child("refund-failed")

    assert refund_failed.name == "refund-failed"
    assert refund_failed.is_a(APPLICATION)
    assert [k.name for k in refund_failed.lineage()] == ["refund-failed", "application", "exception"]


def test_kinds_with_same_name_and_parent_are_equal():
    assert APPLICATION.child("payment-failed") == PAYMENT_FAILED
    assert FailureKind("payment-failed") != PAYMENT_FAILED


def test_failure_attributes_are_read_only():
    failure = Failure(PAYMENT_FAILED, "card declined")

    assert failure.kind is PAYMENT_FAILED
    assert failure.message == "card declined"
    assert str(failure) == "card declined"
    with pytest.raises(AttributeError):
        failure.kind = SYNC_TIMEOUT


def test_wrap_keeps_cause_and_sets_exception_chain():
    original = TimeoutError("upstream took 30s")
    failure = Failure.wrap(SYNC_TIMEOUT, original)

    assert failure.message == "upstream took 30s"
    assert failure.cause is original
    assert failure.__cause__ is original


def test_causes_walks_nested_chain():
    root = ConnectionError("reset by peer")
    middle = Failure.wrap(SYNC_TIMEOUT, root, message="sync stalled")
    outer = Failure.wrap(PAYMENT_FAILED, middle, message="charge aborted")

    assert list(outer.causes()) == [middle, root]


def test_failure_without_cause_has_empty_chain():
    assert list(Failure(PAYMENT_FAILED, "card declined").causes()) == []
