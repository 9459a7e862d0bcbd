"""Customer-facing order numbers.

Format: prefix + last 8 digits of the millisecond timestamp + a
zero-padded 3-digit random number, e.g. ``ZE48213377042``.
"""

from __future__ import annotations

import random
from datetime import datetime

from storefront.domain.exceptions import OrderNumberCollisionError
from storefront.domain.repository.order_repository import OrderRepository


def generate_order_number(
    now: datetime,
    prefix: str = "ZE",
    rng: random.Random | None = None,
) -> str:
    rng = rng or random.Random()
    millis = str(int(now.timestamp() * 1000))[-8:]
    return f"{prefix}{millis}{rng.randrange(1000):03d}"


class OrderNumberAllocator:
    """Hands out order numbers not yet used by any stored order."""

    def __init__(
        self,
        order_repo: OrderRepository,
        prefix: str = "ZE",
        max_attempts: int = 5,
        rng: random.Random | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._prefix = prefix
        self._max_attempts = max_attempts
        self._rng = rng or random.Random()

    def allocate(self, now: datetime) -> str:
        for _ in range(self._max_attempts):
            number = generate_order_number(now, self._prefix, self._rng)
            if self._order_repo.get_by_order_number(number) is None:
                return number
        raise OrderNumberCollisionError(
            f"Could not allocate an unused order number in {self._max_attempts} attempts"
        )
