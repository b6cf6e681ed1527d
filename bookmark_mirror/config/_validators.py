from __future__ import annotations

from typing import Any


def _parse_bounded_int(
    value: Any,
    *,
    name: str,
    default: int,
    minimum: int,
    maximum: int | None = None,
) -> int:
    raw = default if value in (None, "") else value
    try:
        parsed = int(str(raw))
    except ValueError as exc:
        msg = f"{name} must be a valid integer"
        raise ValueError(msg) from exc
    if parsed < minimum:
        msg = f"{name} must be at least {minimum}"
        raise ValueError(msg)
    if maximum is not None and parsed > maximum:
        msg = f"{name} must be {maximum} or fewer"
        raise ValueError(msg)
    return parsed


def _parse_bounded_float(
    value: Any,
    *,
    name: str,
    default: float,
    minimum: float,
    maximum: float | None = None,
    inclusive_minimum: bool = True,
) -> float:
    raw = default if value in (None, "") else value
    try:
        parsed = float(str(raw))
    except ValueError as exc:
        msg = f"{name} must be a valid number"
        raise ValueError(msg) from exc
    too_small = parsed < minimum if inclusive_minimum else parsed <= minimum
    if too_small:
        qualifier = "at least" if inclusive_minimum else "greater than"
        msg = f"{name} must be {qualifier} {minimum}"
        raise ValueError(msg)
    if maximum is not None and parsed > maximum:
        msg = f"{name} must be {maximum} or less"
        raise ValueError(msg)
    return parsed


def _ensure_http_url(value: Any, *, name: str) -> str:
    url = str(value or "").strip()
    if not url:
        msg = f"{name} cannot be empty"
        raise ValueError(msg)
    if not url.startswith(("http://", "https://")):
        msg = f"{name} must be an http(s) URL"
        raise ValueError(msg)
    if any(ch.isspace() for ch in url):
        msg = f"{name} cannot contain whitespace"
        raise ValueError(msg)
    return url
