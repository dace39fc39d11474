"""
Error taxonomy for the lending engine.

Every failure surfaced to callers is a ``LendingError`` subclass carrying a
stable ``code`` so a CLI or service layer can render a specific message.
"""

from __future__ import annotations
from typing import Dict


class LendingError(Exception):
    """Base class for all lending failures."""

    code = "lending_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "detail": self.detail}


class NotFoundError(LendingError):
    code = "not_found"


class MemberNotFound(NotFoundError):
    code = "member_not_found"

    def __init__(self, member_id: int) -> None:
        super().__init__(f"Member {member_id} does not exist.")
        self.member_id = member_id


class BookNotFound(NotFoundError):
    code = "book_not_found"

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book {book_id} does not exist.")
        self.book_id = book_id


class TransactionNotFound(NotFoundError):
    code = "transaction_not_found"

    def __init__(self, transaction_id: int) -> None:
        super().__init__(f"Transaction {transaction_id} does not exist.")
        self.transaction_id = transaction_id


class BookUnavailable(LendingError):
    code = "unavailable"

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book {book_id} is not available for issuing.")
        self.book_id = book_id


class ConflictError(LendingError):
    """Lost a race for a lock or counter; the caller may retry."""

    code = "conflict"


class InvalidTransition(LendingError):
    code = "invalid_transition"


class ValidationError(LendingError):
    code = "validation_error"


class DuplicateMember(LendingError):
    code = "duplicate_member"


class DuplicateBook(LendingError):
    code = "duplicate_book"
