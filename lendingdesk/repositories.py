from __future__ import annotations
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from decimal import Decimal
from threading import Lock, RLock
from typing import Dict, Iterator, List, Optional

from .domain import Book, LendingRecord, LendingStatus, Member
from .errors import (
    BookNotFound,
    ConflictError,
    DuplicateBook,
    DuplicateMember,
    InvalidTransition,
    TransactionNotFound,
    ValidationError,
)
from .fines import calculate_fine


class MemberRepo:
    def __init__(self) -> None:
        self._members: Dict[int, Member] = {}
        self._lock = Lock()

    def add(self, member: Member) -> None:
        with self._lock:
            if member.member_id in self._members:
                raise DuplicateMember(f"Member id {member.member_id} is already registered.")
            email = member.email.lower()
            for m in self._members.values():
                if m.email.lower() == email:
                    raise DuplicateMember(f"Email {member.email} is already registered.")
                if m.phone == member.phone:
                    raise DuplicateMember(f"Phone {member.phone} is already registered.")
            self._members[member.member_id] = member

    def get(self, member_id: int) -> Optional[Member]:
        return self._members.get(member_id)

    def list_all(self) -> List[Member]:
        return list(self._members.values())


class BookRepo:
    """
    Catalog store. Sole writer of ``available_copies``; every counter change
    is checked against ``0 <= available <= total``.
    """

    def __init__(self) -> None:
        self._books: Dict[int, Book] = {}
        self._lock = Lock()

    def add_book(self, book: Book) -> None:
        if book.total_copies < 0:
            raise ValidationError("total_copies cannot be negative")
        if not 0 <= book.available_copies <= book.total_copies:
            raise ValidationError(
                f"available_copies must be between 0 and {book.total_copies}, "
                f"got {book.available_copies}"
            )
        with self._lock:
            if book.book_id in self._books:
                raise DuplicateBook(f"Book id {book.book_id} is already in the catalog.")
            if any(b.isbn == book.isbn for b in self._books.values()):
                raise DuplicateBook(f"ISBN {book.isbn} is already in the catalog.")
            self._books[book.book_id] = replace(book)

    def get_book(self, book_id: int) -> Optional[Book]:
        with self._lock:
            book = self._books.get(book_id)
            return replace(book) if book else None

    def list_books(self) -> List[Book]:
        with self._lock:
            return [replace(b) for b in self._books.values()]

    def decrement_available(self, book_id: int) -> int:
        with self._lock:
            book = self._require(book_id)
            if book.available_copies <= 0:
                raise ConflictError(f"Book {book_id} has no copy left to take.")
            book.available_copies -= 1
            return book.available_copies

    def increment_available(self, book_id: int) -> int:
        with self._lock:
            book = self._require(book_id)
            if book.available_copies >= book.total_copies:
                raise ConflictError(
                    f"Book {book_id} already has all {book.total_copies} copies on the shelf."
                )
            book.available_copies += 1
            return book.available_copies

    def _require(self, book_id: int) -> Book:
        book = self._books.get(book_id)
        if book is None:
            raise BookNotFound(book_id)
        return book


_TRANSITIONS = {
    LendingStatus.PENDING: {LendingStatus.OVERDUE, LendingStatus.RETURNED},
    LendingStatus.OVERDUE: {LendingStatus.RETURNED},
    LendingStatus.RETURNED: set(),
}


class LendingLog:
    """
    Live ledger of lending records.

    Owns identifier assignment: ids come from a high-water mark that only
    moves forward, so archiving old records never frees a number for reuse.
    Getters hand out copies; status changes go through ``update_status``.
    """

    def __init__(self) -> None:
        self._records: Dict[int, LendingRecord] = {}
        self._high_water = 0
        self._lock = RLock()

    # ids
    def next_id(self) -> int:
        with self._lock:
            return self._high_water + 1

    @contextmanager
    def allocation(self) -> Iterator[int]:
        """
        Hold the id counter while a new record is written.

        The yielded id is only consumed by ``insert``; if the caller rolls
        back (``discard``) before leaving the block, the counter is restored
        before anybody else can allocate.
        """
        with self._lock:
            yield self._high_water + 1

    def insert(self, record: LendingRecord) -> None:
        with self._lock:
            expected = self._high_water + 1
            if record.transaction_id != expected:
                raise ConflictError(
                    f"Transaction id {record.transaction_id} was not allocated by the log "
                    f"(next id is {expected})."
                )
            self._records[record.transaction_id] = replace(record)
            self._high_water = record.transaction_id

    def discard(self, transaction_id: int) -> None:
        with self._lock:
            self._records.pop(transaction_id, None)
            if transaction_id == self._high_water:
                self._high_water -= 1

    # status
    def update_status(
        self,
        transaction_id: int,
        new_status: LendingStatus,
        return_date: Optional[date] = None,
    ) -> LendingRecord:
        with self._lock:
            record = self._require(transaction_id)
            if record.status == LendingStatus.RETURNED:
                if return_date is not None and return_date != record.return_date:
                    raise InvalidTransition(
                        f"Transaction {transaction_id} was returned on {record.return_date}; "
                        "the return date cannot be changed."
                    )
                raise InvalidTransition(f"Transaction {transaction_id} is already returned.")
            if new_status not in _TRANSITIONS[record.status]:
                raise InvalidTransition(
                    f"Transaction {transaction_id} cannot move from "
                    f"{record.status.value} to {new_status.value}."
                )
            if new_status == LendingStatus.RETURNED:
                if return_date is None:
                    raise ValidationError("A return needs a return date.")
                if return_date < record.issue_date:
                    raise ValidationError(
                        f"Return date {return_date} is before issue date {record.issue_date}."
                    )
                record.return_date = return_date
            elif return_date is not None:
                raise ValidationError("Only a return may set the return date.")
            record.status = new_status
            return replace(record)

    def refresh_fine(self, transaction_id: int, today: date, daily_rate: Decimal) -> bool:
        """Recompute the stored fine from the current record; False if unchanged or gone."""
        with self._lock:
            record = self._records.get(transaction_id)
            if record is None:
                return False
            fine = calculate_fine(record.due_date, record.return_date, today, daily_rate)
            if fine == record.fine_amount:
                return False
            record.fine_amount = fine
            return True

    def set_fine(self, transaction_id: int, amount: Decimal) -> None:
        if amount < 0:
            raise ValidationError("fine_amount cannot be negative")
        with self._lock:
            self._require(transaction_id).fine_amount = amount

    def restore(self, snapshot: LendingRecord) -> None:
        with self._lock:
            self._records[snapshot.transaction_id] = replace(snapshot)

    def remove(self, transaction_id: int) -> LendingRecord:
        with self._lock:
            record = self._require(transaction_id)
            del self._records[transaction_id]
            return record

    # queries
    def get(self, transaction_id: int) -> Optional[LendingRecord]:
        with self._lock:
            record = self._records.get(transaction_id)
            return replace(record) if record else None

    def list_all(self) -> List[LendingRecord]:
        with self._lock:
            return [replace(r) for _, r in sorted(self._records.items())]

    def list_by_member(self, member_id: int) -> List[LendingRecord]:
        return [r for r in self.list_all() if r.member_id == member_id]

    def list_by_book(self, book_id: int) -> List[LendingRecord]:
        return [r for r in self.list_all() if r.book_id == book_id]

    def list_overdue(self, as_of: date) -> List[LendingRecord]:
        return [r for r in self.list_all() if r.is_overdue(as_of)]

    def _require(self, transaction_id: int) -> LendingRecord:
        record = self._records.get(transaction_id)
        if record is None:
            raise TransactionNotFound(transaction_id)
        return record


class ArchiveRepo:
    """Completed records moved out of the live ledger; same shape, disjoint ids."""

    def __init__(self) -> None:
        self._records: Dict[int, LendingRecord] = {}
        self._lock = Lock()

    def add(self, record: LendingRecord) -> None:
        with self._lock:
            if record.transaction_id in self._records:
                raise ConflictError(f"Transaction {record.transaction_id} is already archived.")
            self._records[record.transaction_id] = replace(record)

    def get(self, transaction_id: int) -> Optional[LendingRecord]:
        with self._lock:
            record = self._records.get(transaction_id)
            return replace(record) if record else None

    def list_all(self) -> List[LendingRecord]:
        with self._lock:
            return [replace(r) for _, r in sorted(self._records.items())]

    def list_by_member(self, member_id: int) -> List[LendingRecord]:
        return [r for r in self.list_all() if r.member_id == member_id]
