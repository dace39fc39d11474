"""
Lending desk: issue/return/fine engine for a library.

Exports key modules for convenient imports.
"""

from .domain import (
    MembershipType,
    Member,
    Book,
    LendingStatus,
    LendingRecord,
)

from .errors import (
    LendingError,
    NotFoundError,
    MemberNotFound,
    BookNotFound,
    TransactionNotFound,
    BookUnavailable,
    ConflictError,
    InvalidTransition,
    ValidationError,
    DuplicateMember,
    DuplicateBook,
)

from .config import LendingPolicy, DEFAULT_POLICY
from .fines import calculate_fine

from .repositories import (
    MemberRepo,
    BookRepo,
    LendingLog,
    ArchiveRepo,
)

from .services import (
    CheckoutService,
    ReturnService,
    FineService,
    ArchiveService,
)

from .api import LibrarySystem
from .seed import seed_demo_data

__all__ = [
    # domain
    "MembershipType",
    "Member",
    "Book",
    "LendingStatus",
    "LendingRecord",
    # errors
    "LendingError",
    "NotFoundError",
    "MemberNotFound",
    "BookNotFound",
    "TransactionNotFound",
    "BookUnavailable",
    "ConflictError",
    "InvalidTransition",
    "ValidationError",
    "DuplicateMember",
    "DuplicateBook",
    # config
    "LendingPolicy",
    "DEFAULT_POLICY",
    # fines
    "calculate_fine",
    # repos
    "MemberRepo",
    "BookRepo",
    "LendingLog",
    "ArchiveRepo",
    # services
    "CheckoutService",
    "ReturnService",
    "FineService",
    "ArchiveService",
    # api
    "LibrarySystem",
    # seed
    "seed_demo_data",
]
