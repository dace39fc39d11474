from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from .config import DEFAULT_POLICY, LendingPolicy
from .domain import Book, LendingRecord, LendingStatus, Member
from .errors import InvalidTransition
from .locks import KeyedLocks
from .repositories import ArchiveRepo, BookRepo, LendingLog, MemberRepo
from .services import ArchiveService, CheckoutService, FineService, ReturnService


class LibrarySystem:
    """
    A simple facade that wires repos + services and offers the lending API.
    """

    def __init__(self, policy: LendingPolicy = DEFAULT_POLICY) -> None:
        self.policy = policy

        # repos
        self.members = MemberRepo()
        self.books = BookRepo()
        self.log = LendingLog()
        self.archive = ArchiveRepo()
        self.book_locks = KeyedLocks(timeout=policy.lock_timeout)

        # services
        self.checkout = CheckoutService(
            self.members, self.books, self.log, self.book_locks, policy
        )
        self.returns = ReturnService(self.books, self.log, self.book_locks, policy)
        self.fines = FineService(self.log, self.archive, policy)
        self.archiver = ArchiveService(self.log, self.archive, policy)

    # ---- catalog / membership loading
    def add_book(self, book: Book) -> Book:
        self.books.add_book(book)
        return book

    def register_member(self, member: Member) -> Member:
        self.members.add(member)
        return member

    # ---- lending
    def issue_book(self, member_id: int, book_id: int, today: Optional[date] = None) -> int:
        return self.checkout.issue(member_id, book_id, today).transaction_id

    def return_book(self, transaction_id: int, return_date: Optional[date] = None) -> LendingRecord:
        return self.returns.return_book(transaction_id, return_date)

    def get_transaction(
        self, transaction_id: int, as_of: Optional[date] = None
    ) -> Optional[LendingRecord]:
        """Live record as reported on ``as_of``, with derived status and fine."""
        record = self.log.get(transaction_id)
        if record is None:
            return None
        return self.fines.project(record, as_of or date.today())

    # ---- fines
    def compute_fine(self, transaction_id: int, as_of: Optional[date] = None) -> Decimal:
        return self.fines.compute_fine(transaction_id, as_of)

    def refresh_fines(self, today: Optional[date] = None) -> int:
        return self.fines.refresh_fines(today)

    # ---- overdue
    def list_overdue(self, as_of: Optional[date] = None) -> List[LendingRecord]:
        as_of = as_of or date.today()
        return [self.fines.project(r, as_of) for r in self.log.list_overdue(as_of)]

    def mark_overdue(self, as_of: Optional[date] = None) -> List[int]:
        """Persist Overdue on every Pending record past its due date."""
        marked: List[int] = []
        for record in self.log.list_overdue(as_of or date.today()):
            if record.status != LendingStatus.PENDING:
                continue
            try:
                self.log.update_status(record.transaction_id, LendingStatus.OVERDUE)
            except InvalidTransition:
                # returned concurrently since the listing
                continue
            marked.append(record.transaction_id)
        return marked

    # ---- maintenance
    def archive_returned(self, today: Optional[date] = None) -> List[int]:
        return self.archiver.archive_returned(today)

    # ---- reporting
    def report_inventory(self) -> List[Tuple[Book, int, int]]:
        """
        Returns tuples of (Book, total_copies, available_copies)
        """
        return [(b, b.total_copies, b.available_copies) for b in self.books.list_books()]
