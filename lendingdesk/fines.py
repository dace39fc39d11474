from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from .errors import ValidationError

DAILY_RATE = Decimal("5.00")
_CENTS = Decimal("0.01")


def _is_day(value: object) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def overdue_days(due_date: date, return_date: Optional[date], today: date) -> int:
    """Whole days between the due date and the return date (or ``today``), floored at 0."""
    end = return_date if return_date is not None else today
    return max(0, (end - due_date).days)


def calculate_fine(
    due_date: date,
    return_date: Optional[date],
    today: date,
    daily_rate: Decimal = DAILY_RATE,
) -> Decimal:
    """
    Overdue charge for a lending record.

    Pure: the only notion of "now" is the explicit ``today`` argument, which
    is used when the book has not been returned yet.
    """
    for name, value in (("due_date", due_date), ("today", today)):
        if not _is_day(value):
            raise ValidationError(f"{name} must be a date, got {value!r}")
    if return_date is not None and not _is_day(return_date):
        raise ValidationError(f"return_date must be a date, got {return_date!r}")
    rate = Decimal(daily_rate)
    if rate < 0:
        raise ValidationError("daily_rate cannot be negative")

    days = overdue_days(due_date, return_date, today)
    return (rate * days).quantize(_CENTS)
