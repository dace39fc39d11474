from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LendingPolicy:
    loan_days: int = 14
    daily_rate: Decimal = Decimal("5.00")
    retention_years: int = 2
    # seconds to wait for a per-book lock before giving up with a conflict
    lock_timeout: float = 5.0


DEFAULT_POLICY = LendingPolicy()
