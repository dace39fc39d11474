from __future__ import annotations
from datetime import date
from decimal import Decimal

from .api import LibrarySystem
from .domain import Book, Member, MembershipType

_BOOKS = [
    (1, "Data Science 101", "John Smith", "TechPub", 2020, "ISBN001", "Technology", 5, 3, "49.99"),
    (2, "The Great Gatsby", "F. Scott", "Scribner", 1925, "ISBN002", "Fiction", 3, 2, "19.99"),
    (3, "Python Basics", "Guido Rossum", "CodeHouse", 2018, "ISBN003", "Programming", 6, 5, "29.99"),
    (4, "Calculus Made Easy", "Silvanus P.", "MathBooks", 2005, "ISBN004", "Mathematics", 4, 2, "39.99"),
    (5, "Shakespeare Plays", "William S.", "LitWorld", 1999, "ISBN010", "Literature", 3, 1, "29.99"),
]

_MEMBERS = [
    (1, "Alice", "Johnson", "alice@example.com", "01234567891", "Dhaka, BD", date(2022, 1, 1), MembershipType.STUDENT),
    (2, "Bob", "Smith", "bob@example.com", "01234567892", "Chittagong, BD", date(2022, 2, 1), MembershipType.FACULTY),
    (3, "Charlie", "Brown", "charlie@example.com", "01234567893", "Rajshahi, BD", date(2022, 3, 1), MembershipType.STUDENT),
    (4, "David", "Lee", "david@example.com", "01234567894", "Khulna, BD", date(2022, 4, 1), MembershipType.STAFF),
]


def seed_demo_data(system: LibrarySystem) -> None:
    for book_id, title, author, publisher, year, isbn, category, total, available, price in _BOOKS:
        system.add_book(
            Book(
                book_id=book_id,
                title=title,
                author=author,
                isbn=isbn,
                publisher=publisher,
                publication_year=year,
                category=category,
                total_copies=total,
                available_copies=available,
                price=Decimal(price),
            )
        )
    for member_id, first, last, email, phone, address, joined, kind in _MEMBERS:
        system.register_member(
            Member(
                member_id=member_id,
                first_name=first,
                last_name=last,
                email=email,
                phone=phone,
                address=address,
                membership_date=joined,
                membership_type=kind,
            )
        )
