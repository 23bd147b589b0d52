"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, cascade to children, late link of child after
parent cancel, deadlines, and raise_if_cancelled behavior.
"""
from __future__ import annotations

import time

import pytest

from llm_gateway.base.cancellation import (
    CancellationToken,
    CancelledError,
    DeadlineExceededError,
)


def test_cancel_cascades_to_children_and_is_idempotent():
    parent = CancellationToken()
    child1 = parent.child()
    child2 = parent.child()

    parent.cancel(reason="stop")
    # idempotent second call
    parent.cancel(reason="ignored")

    assert parent.cancelled is True and parent.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child1.cancelled is True and child1.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child2.cancelled is True and child2.reason == "stop"  # nosec B101 - pytest assert in tests


def test_cancelling_child_leaves_parent_untouched():
    parent = CancellationToken()
    child = parent.child()
    child.cancel("closed")
    assert child.cancelled and not parent.cancelled  # nosec B101 - pytest assert in tests


def test_link_child_after_parent_cancel_immediately_cancels_child():
    parent = CancellationToken()
    parent.cancel("done")
    late_child = CancellationToken(parent=parent)
    assert late_child.cancelled is True and late_child.reason == "done"  # nosec B101 - pytest assert in tests


def test_raise_if_cancelled_raises_custom_error():
    token = CancellationToken()
    token.cancel("terminate")
    with pytest.raises(CancelledError, match="terminate"):
        token.raise_if_cancelled()


def test_deadline_cancels_token_and_raises_deadline_error():
    token = CancellationToken(timeout=0.01)
    assert token.remaining() is not None  # nosec B101 - pytest assert in tests
    time.sleep(0.03)
    assert token.cancelled and token.deadline_exceeded  # nosec B101 - pytest assert in tests
    assert token.remaining() == 0.0  # nosec B101 - pytest assert in tests
    with pytest.raises(DeadlineExceededError):
        token.raise_if_cancelled()


def test_wait_returns_promptly_once_cancelled():
    token = CancellationToken()
    assert token.wait(0.01) is False  # nosec B101 - pytest assert in tests
    token.cancel()
    assert token.wait(5) is True  # nosec B101 - pytest assert in tests
    assert CancellationToken().remaining() is None  # nosec B101 - pytest assert in tests
