# backend/dialoom/repositories/user_repository.py
"""User lookups used by the booking pipeline and host verification."""

from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for platform users."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_id(self, id: str, for_update: bool = False) -> Optional[User]:
        """
        Fetch a user by id.

        With ``for_update`` the row is locked until the transaction ends, which
        serializes concurrent booking attempts against the same host. SQLite
        ignores the lock clause.
        """
        try:
            query = self.db.query(User).filter(User.id == id)
            if for_update:
                query = query.with_for_update()
            return cast(Optional[User], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve User: {str(e)}")

    def list_by_verification_status(self, status: str) -> List[User]:
        query = (
            self.db.query(User)
            .filter(User.host_verification_status == status)
            .order_by(User.created_at.asc())
        )
        return self._execute_query(query)
