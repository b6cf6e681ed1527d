from __future__ import annotations

import asyncio
import logging

import pytest

from bookmark_mirror.core.async_utils import attempt_send, raise_if_cancelled


def test_raise_if_cancelled_reraises_cancellation():
    with pytest.raises(asyncio.CancelledError):
        raise_if_cancelled(asyncio.CancelledError())


def test_raise_if_cancelled_ignores_other_errors():
    raise_if_cancelled(ValueError("boom"))


def test_attempt_send_delivers_message():
    received: list[int] = []

    assert attempt_send(received.append, 7) is True
    assert received == [7]


def test_attempt_send_logs_failing_receiver(caplog):
    def broken(_message: str) -> None:
        raise RuntimeError("receiver gone")

    with caplog.at_level(logging.WARNING, logger="bookmark_mirror.core.async_utils"):
        assert attempt_send(broken, "hello") is False

    assert any(record.getMessage() == "message_delivery_failed" for record in caplog.records)
