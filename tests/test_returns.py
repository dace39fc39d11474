from __future__ import annotations
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from lendingdesk import (
    ConflictError,
    InvalidTransition,
    LendingStatus,
    TransactionNotFound,
    ValidationError,
)

from conftest import available


def test_return_restores_copy_and_sets_fine(system, b1, today) -> None:
    txn = system.issue_book(1, b1.book_id, today)
    due = today + timedelta(days=14)

    record = system.return_book(txn, due + timedelta(days=5))

    assert record.status == LendingStatus.RETURNED
    assert record.return_date == due + timedelta(days=5)
    assert record.fine_amount == Decimal("25.00")
    assert system.log.get(txn).fine_amount == Decimal("25.00")
    assert available(system, b1.book_id) == 3


def test_second_return_is_refused_and_counts_once(system, b1, today) -> None:
    txn = system.issue_book(1, b1.book_id, today)
    system.return_book(txn, today + timedelta(days=2))

    with pytest.raises(InvalidTransition):
        system.return_book(txn, today + timedelta(days=2))
    with pytest.raises(InvalidTransition):
        system.return_book(txn, today + timedelta(days=9))

    assert available(system, b1.book_id) == 3
    assert system.log.get(txn).return_date == today + timedelta(days=2)


def test_return_before_issue_is_rejected(system, b1, today) -> None:
    txn = system.issue_book(1, b1.book_id, today)
    with pytest.raises(ValidationError):
        system.return_book(txn, today - timedelta(days=1))
    assert system.get_transaction(txn, today).status == LendingStatus.PENDING
    assert available(system, b1.book_id) == 2


def test_unknown_transaction(system, today) -> None:
    with pytest.raises(TransactionNotFound):
        system.return_book(77, today)


def test_overflowing_shelf_rolls_back_status(system, today) -> None:
    # book 1 is seeded with 3 of 5 copies; fill the shelf behind the ledger's back
    txn = system.issue_book(1, 1, today)
    system.books.increment_available(1)
    system.books.increment_available(1)
    system.books.increment_available(1)
    assert available(system, 1) == 5

    with pytest.raises(ConflictError):
        system.return_book(txn, today)

    record = system.log.get(txn)
    assert record.status == LendingStatus.PENDING
    assert record.return_date is None
    assert record.fine_amount == Decimal("0.00")


def test_overdue_record_can_be_returned(system, b1, today) -> None:
    txn = system.issue_book(1, b1.book_id, today)
    later = today + timedelta(days=20)
    assert system.mark_overdue(later) == [txn]
    assert system.log.get(txn).status == LendingStatus.OVERDUE

    record = system.return_book(txn, later)
    assert record.status == LendingStatus.RETURNED
    assert record.fine_amount == Decimal("30.00")


def test_compute_fine_for_open_and_closed_records(system, b1) -> None:
    issued = date(2025, 5, 27)
    txn = system.issue_book(1, b1.book_id, issued)
    assert system.compute_fine(txn, date(2025, 6, 10)) == Decimal("0.00")
    assert system.compute_fine(txn, date(2025, 6, 12)) == Decimal("10.00")

    system.return_book(txn, date(2025, 6, 15))
    assert system.compute_fine(txn, date(2026, 1, 1)) == Decimal("25.00")


def test_datetime_return_date_is_a_validation_error(system, b1, today) -> None:
    txn = system.issue_book(1, b1.book_id, today)
    with pytest.raises(ValidationError):
        system.return_book(txn, datetime(2025, 6, 3, 12, 0))
    assert system.log.get(txn).status == LendingStatus.PENDING
    assert available(system, b1.book_id) == 2
