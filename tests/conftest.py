from __future__ import annotations
from datetime import date

import pytest

from lendingdesk import Book, LibrarySystem, seed_demo_data

TODAY = date(2025, 6, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def system() -> LibrarySystem:
    sys = LibrarySystem()
    seed_demo_data(sys)
    return sys


@pytest.fixture
def b1(system: LibrarySystem) -> Book:
    """A book with three copies, all on the shelf."""
    return system.add_book(
        Book(book_id=101, title="Digital Logic", author="Morris Mano", isbn="ISBN007",
             total_copies=3, available_copies=3)
    )


def available(system: LibrarySystem, book_id: int) -> int:
    book = system.books.get_book(book_id)
    assert book is not None
    return book.available_copies
