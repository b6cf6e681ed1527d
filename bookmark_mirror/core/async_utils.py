"""Helpers for code that runs many independent coroutines side by side."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def raise_if_cancelled(exc: BaseException) -> None:
    """Let cancellation through broad ``except Exception`` handlers."""
    if isinstance(exc, asyncio.CancelledError):  # pragma: no cover - simple guard
        raise exc


def attempt_send(send: Callable[[T], object], message: T) -> bool:
    """Deliver ``message``; a failing receiver is logged, never raised.

    Returns:
        True when the message was handed over.
    """
    try:
        send(message)
    except Exception as exc:
        raise_if_cancelled(exc)
        logger.warning(
            "message_delivery_failed",
            extra={"message_type": type(message).__name__, "error": str(exc)},
        )
        return False
    return True
