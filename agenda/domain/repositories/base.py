"""
Base Repository Interface.
Row access shared by the customer, catalog and appointment repositories.
"""

from typing import Any, Optional, Protocol, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Single-row operations; listing queries live on each repository."""

    db: Session

    def get_by_id(self, id: int) -> Optional[T]:
        ...

    def create(self, obj_in: Any, commit: bool = True) -> T:
        """Insert a row. With commit=False it is only flushed, so the caller's
        transaction decides whether it survives."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Apply a dict or pydantic model of changes and commit."""
        ...

    def delete(self, id: int) -> Optional[T]:
        """Delete and commit; None when the id does not exist."""
        ...
