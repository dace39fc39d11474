from __future__ import annotations

import pytest

from lendingdesk import Book, BookRepo, ConflictError, DuplicateBook, DuplicateMember, Member, ValidationError


def test_member_email_and_phone_are_unique(system) -> None:
    with pytest.raises(DuplicateMember):
        system.register_member(Member(50, "Eve", "X", "ALICE@example.com", "099"))
    with pytest.raises(DuplicateMember):
        system.register_member(Member(51, "Eve", "X", "eve@example.com", "01234567891"))
    with pytest.raises(DuplicateMember):
        system.register_member(Member(1, "Eve", "X", "eve@example.com", "099"))
    system.register_member(Member(52, "Eve", "X", "eve@example.com", "099"))
    assert system.members.get(52).name == "Eve X"


def test_catalog_rejects_bad_counts_and_duplicates() -> None:
    repo = BookRepo()
    with pytest.raises(ValidationError):
        repo.add_book(Book(1, "T", "A", "I1", total_copies=2, available_copies=3))
    with pytest.raises(ValidationError):
        repo.add_book(Book(1, "T", "A", "I1", total_copies=-1, available_copies=0))
    repo.add_book(Book(1, "T", "A", "I1", total_copies=1, available_copies=1))
    with pytest.raises(DuplicateBook):
        repo.add_book(Book(2, "T", "A", "I1"))
    with pytest.raises(DuplicateBook):
        repo.add_book(Book(1, "T", "A", "I2"))


def test_counter_stays_within_bounds() -> None:
    repo = BookRepo()
    repo.add_book(Book(1, "T", "A", "I1", total_copies=1, available_copies=1))
    with pytest.raises(ConflictError):
        repo.increment_available(1)
    assert repo.decrement_available(1) == 0
    with pytest.raises(ConflictError):
        repo.decrement_available(1)


def test_inventory_report(system) -> None:
    rows = {book.book_id: (total, avail) for book, total, avail in system.report_inventory()}
    assert rows[1] == (5, 3)
    assert rows[5] == (3, 1)
