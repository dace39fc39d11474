from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class MembershipType(Enum):
    STUDENT = "Student"
    FACULTY = "Faculty"
    STAFF = "Staff"


@dataclass
class Member:
    member_id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str = ""
    membership_date: Optional[date] = None
    membership_type: MembershipType = MembershipType.STUDENT

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Book:
    book_id: int
    title: str
    author: str
    isbn: str
    publisher: str = ""
    publication_year: Optional[int] = None
    category: str = ""
    total_copies: int = 1
    available_copies: int = 1
    price: Decimal = Decimal("0.00")


class LendingStatus(Enum):
    PENDING = "Pending"
    OVERDUE = "Overdue"
    RETURNED = "Returned"


@dataclass
class LendingRecord:
    """One issue/return transaction in the lending ledger."""

    transaction_id: int
    member_id: int
    book_id: int
    issue_date: date
    due_date: date
    return_date: Optional[date] = None
    fine_amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    status: LendingStatus = LendingStatus.PENDING

    def is_overdue(self, as_of: date) -> bool:
        return self.return_date is None and as_of > self.due_date

    def effective_status(self, as_of: date) -> LendingStatus:
        """Status as seen on ``as_of``; unreturned past-due records read as Overdue."""
        if self.status == LendingStatus.PENDING and self.is_overdue(as_of):
            return LendingStatus.OVERDUE
        return self.status
