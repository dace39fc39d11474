from __future__ import annotations
from datetime import date, timedelta
import logging

from lendingdesk import BookUnavailable, InvalidTransition, LibrarySystem, seed_demo_data


def demo_flow() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    sys = LibrarySystem()
    seed_demo_data(sys)
    today = date.today()

    # Inventory
    print("\n[demo] inventory:")
    for book, total, available in sys.report_inventory():
        print(f"  - {book.title}: total={total}, available={available}")

    # Drain the single copy of "Shakespeare Plays"
    txn = sys.issue_book(1, 5, today - timedelta(days=20))
    print(f"\n[demo] issued book 5 to member 1, transaction {txn}")
    try:
        sys.issue_book(2, 5, today)
    except BookUnavailable as exc:
        print(f"[demo] second checkout refused: {exc.detail}")

    # Overdue listing and fine
    print("[demo] overdue:", [r.transaction_id for r in sys.list_overdue(today)])
    print(f"[demo] fine so far: {sys.compute_fine(txn, today)}")

    # Return, then try again
    record = sys.return_book(txn, today)
    print(f"[demo] returned transaction {txn}, fine charged: {record.fine_amount}")
    try:
        sys.return_book(txn, today)
    except InvalidTransition as exc:
        print(f"[demo] second return refused: {exc.detail}")

    # Archive far-future view
    moved = sys.archive_returned(today + timedelta(days=3 * 365))
    print("[demo] archived:", moved, "next id:", sys.log.next_id())


if __name__ == "__main__":
    demo_flow()
