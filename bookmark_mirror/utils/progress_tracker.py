"""Progress accounting for bookmark scans.

``WeightedProgress`` folds several independently reported phase fractions
into one overall fraction. ``CompletionCounter`` is the shared counter that
concurrent acquisition workers bump as they finish.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from bookmark_mirror.services.errors import ProgressArityError

logger = logging.getLogger(__name__)


class WeightedProgress:
    """Weighted mean of sub-progress values, reported to 4 decimal places.

    Example:
        ```python
        tracker = WeightedProgress(2, weights=[0.1, 0.9])
        tracker.update([1.0, 0.5])  # -> 0.55
        ```
    """

    def __init__(self, num_values: int, weights: Sequence[float] | None = None) -> None:
        if num_values <= 0:
            msg = "At least one progress value must be tracked"
            raise ProgressArityError(msg)

        if weights is None:
            self._weights = [1.0] * num_values
        else:
            if len(weights) != num_values:
                msg = "Weights do not match the number of progress values to track"
                raise ProgressArityError(msg)
            if any(weight < 0 for weight in weights) or sum(weights) <= 0:
                msg = "Weights must be non-negative with a positive total"
                raise ValueError(msg)
            self._weights = [float(weight) for weight in weights]

        self._values = [0.0] * num_values

    @property
    def values(self) -> list[float]:
        return list(self._values)

    @property
    def weights(self) -> list[float]:
        return list(self._weights)

    def reset(self) -> float:
        self._values = [0.0] * len(self._weights)
        return self.total()

    def update(self, values: Sequence[float]) -> float:
        """Replace the sub-progress vector and return the overall fraction."""
        if len(values) != len(self._weights):
            msg = (
                f"Expected {len(self._weights)} progress values, got {len(values)}"
            )
            raise ProgressArityError(msg)

        self._values = [float(value) for value in values]
        return self.total()

    def total(self) -> float:
        numerator = sum(value * weight for value, weight in zip(self._values, self._weights))
        denominator = sum(self._weights)
        return round(numerator / denominator, 4)


class CompletionCounter:
    """Atomic increment-and-read counter shared by concurrent workers."""

    def __init__(self, total: int) -> None:
        self.total = total
        self._completed = 0
        self._lock = asyncio.Lock()

    async def increment(self) -> int:
        """Increment and return the new count; two callers never see the same value."""
        async with self._lock:
            self._completed += 1
            return self._completed

    @property
    def completed(self) -> int:
        return self._completed

    def fraction(self, completed: int) -> float:
        if self.total <= 0:
            return 1.0
        return min(1.0, completed / self.total)
