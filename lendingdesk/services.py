from __future__ import annotations
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional
import logging

from .config import DEFAULT_POLICY, LendingPolicy
from .domain import LendingRecord, LendingStatus
from .errors import (
    BookNotFound,
    BookUnavailable,
    LendingError,
    MemberNotFound,
    TransactionNotFound,
    ValidationError,
)
from .fines import calculate_fine
from .locks import KeyedLocks, UnitOfWork
from .repositories import ArchiveRepo, BookRepo, LendingLog, MemberRepo

logger = logging.getLogger(__name__)


def _require_date(value: object, name: str) -> date:
    if not isinstance(value, date) or isinstance(value, datetime):
        raise ValidationError(f"{name} must be a date, got {value!r}")
    return value


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year - years, day=28)


class CheckoutService:
    """
    Issues books. The availability check and the decrement happen under the
    book's lock, and the record insert plus the decrement form one unit of
    work while the id counter is held.
    """

    def __init__(
        self,
        members: MemberRepo,
        books: BookRepo,
        log: LendingLog,
        book_locks: KeyedLocks,
        policy: LendingPolicy = DEFAULT_POLICY,
    ) -> None:
        self.members = members
        self.books = books
        self.log = log
        self.book_locks = book_locks
        self.policy = policy

    def issue(self, member_id: int, book_id: int, today: Optional[date] = None) -> LendingRecord:
        today = _require_date(today or date.today(), "today")
        try:
            if self.members.get(member_id) is None:
                raise MemberNotFound(member_id)
            # only catalog ids get a lock
            if self.books.get_book(book_id) is None:
                raise BookNotFound(book_id)
            with self.book_locks.hold(book_id):
                book = self.books.get_book(book_id)
                if book.available_copies <= 0:
                    raise BookUnavailable(book_id)

                with self.log.allocation() as transaction_id:
                    with UnitOfWork("checkout") as uow:
                        record = LendingRecord(
                            transaction_id=transaction_id,
                            member_id=member_id,
                            book_id=book_id,
                            issue_date=today,
                            due_date=today + timedelta(days=self.policy.loan_days),
                        )
                        self.log.insert(record)
                        uow.on_rollback(lambda: self.log.discard(transaction_id))
                        left = self.books.decrement_available(book_id)
                        uow.on_rollback(lambda: self.books.increment_available(book_id))
        except LendingError as exc:
            logger.warning(
                "checkout refused | member_id=%s book_id=%s code=%s", member_id, book_id, exc.code
            )
            raise

        logger.info(
            "book issued | transaction_id=%s member_id=%s book_id=%s due=%s available=%s",
            record.transaction_id, member_id, book_id, record.due_date, left,
        )
        return record


class ReturnService:
    """
    Records returns. The status change, the fine and the copy coming back on
    the shelf commit together; a second return of the same record is refused
    by the ledger before any copy is added.
    """

    def __init__(
        self,
        books: BookRepo,
        log: LendingLog,
        book_locks: KeyedLocks,
        policy: LendingPolicy = DEFAULT_POLICY,
    ) -> None:
        self.books = books
        self.log = log
        self.book_locks = book_locks
        self.policy = policy

    def return_book(self, transaction_id: int, return_date: Optional[date] = None) -> LendingRecord:
        return_date = _require_date(return_date or date.today(), "return_date")
        record = self.log.get(transaction_id)
        if record is None:
            raise TransactionNotFound(transaction_id)

        try:
            with self.book_locks.hold(record.book_id):
                with UnitOfWork("return") as uow:
                    snapshot = self.log.get(transaction_id)
                    updated = self.log.update_status(
                        transaction_id, LendingStatus.RETURNED, return_date
                    )
                    uow.on_rollback(lambda: self.log.restore(snapshot))
                    fine = calculate_fine(
                        updated.due_date, return_date, return_date, self.policy.daily_rate
                    )
                    self.log.set_fine(transaction_id, fine)
                    available = self.books.increment_available(updated.book_id)
        except LendingError as exc:
            logger.warning("return refused | transaction_id=%s code=%s", transaction_id, exc.code)
            raise

        logger.info(
            "book returned | transaction_id=%s book_id=%s fine=%s available=%s",
            transaction_id, updated.book_id, fine, available,
        )
        updated.fine_amount = fine
        return updated


class FineService:
    def __init__(
        self, log: LendingLog, archive: ArchiveRepo, policy: LendingPolicy = DEFAULT_POLICY
    ) -> None:
        self.log = log
        self.archive = archive
        self.policy = policy

    def compute_fine(self, transaction_id: int, as_of: Optional[date] = None) -> Decimal:
        as_of = _require_date(as_of or date.today(), "as_of")
        record = self.log.get(transaction_id) or self.archive.get(transaction_id)
        if record is None:
            raise TransactionNotFound(transaction_id)
        return calculate_fine(record.due_date, record.return_date, as_of, self.policy.daily_rate)

    def project(self, record: LendingRecord, as_of: date) -> LendingRecord:
        """The record as reported on ``as_of``: derived status and fine filled in."""
        return replace(
            record,
            status=record.effective_status(as_of),
            fine_amount=calculate_fine(
                record.due_date, record.return_date, as_of, self.policy.daily_rate
            ),
        )

    def refresh_fines(self, today: Optional[date] = None) -> int:
        """Store the current fine on every live record; returns how many changed."""
        today = _require_date(today or date.today(), "today")
        changed = 0
        for record in self.log.list_all():
            if self.log.refresh_fine(record.transaction_id, today, self.policy.daily_rate):
                changed += 1
        logger.info("fines refreshed | as_of=%s changed=%d", today, changed)
        return changed


class ArchiveService:
    def __init__(
        self, log: LendingLog, archive: ArchiveRepo, policy: LendingPolicy = DEFAULT_POLICY
    ) -> None:
        self.log = log
        self.archive = archive
        self.policy = policy

    def archive_returned(self, today: Optional[date] = None) -> List[int]:
        """Move Returned records older than the retention window out of the live ledger."""
        today = _require_date(today or date.today(), "today")
        cutoff = _years_before(today, self.policy.retention_years)
        moved: List[int] = []
        for record in self.log.list_all():
            if record.status != LendingStatus.RETURNED or record.return_date is None:
                continue
            if record.return_date >= cutoff:
                continue
            try:
                with UnitOfWork("archive") as uow:
                    removed = self.log.remove(record.transaction_id)
                    uow.on_rollback(lambda: self.log.restore(removed))
                    self.archive.add(removed)
            except TransactionNotFound:
                logger.info(
                    "skipping transaction %s: already left the live ledger", record.transaction_id
                )
                continue
            moved.append(record.transaction_id)
        logger.info("archived %d record(s) returned before %s", len(moved), cutoff)
        return moved
