# backend/dialoom/repositories/base_repository.py
"""
Base Repository Pattern for the Dialoom booking API.

Provides the foundation for all repository classes with:
- Common CRUD operations
- Type safety with generics
- Transaction support (managed by services)

Repositories never commit on their own; services decide transaction scope.
"""

from abc import ABC, abstractmethod
import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

# Type variable for generic model support
T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """
    Abstract repository interface defining core data access methods.

    All repositories must implement these methods to ensure consistency
    across the application.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """
        Retrieve an entity by its primary key.

        Returns:
            The entity if found, None otherwise
        """

    @abstractmethod
    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Raises:
            RepositoryException: If creation fails
        """

    @abstractmethod
    def delete(self, id: str) -> bool:
        """
        Delete an entity by its primary key.

        Returns:
            True if deleted, False if not found
        """


class BaseRepository(IRepository[T]):
    """
    Concrete base repository implementation with common data access patterns.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str) -> Optional[T]:
        try:
            return self._build_query().filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting {self.model.__name__} by id {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}: {str(e)}")

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()  # Get ID without committing
            return entity
        except IntegrityError as exc:
            self.logger.error(
                "Integrity error creating %s: %s", self.model.__name__, exc, exc_info=True
            )
            raise RepositoryException(f"Integrity constraint violated: {exc}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating {self.model.__name__}: {str(e)}")
            raise RepositoryException(f"Failed to create {self.model.__name__}: {str(e)}") from e

    def delete(self, id: str) -> bool:
        try:
            entity = self.get_by_id(id)
            if not entity:
                return False

            self.db.delete(entity)
            self.db.flush()
            return True
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting {self.model.__name__} {id}: {str(e)}")
            raise RepositoryException(f"Failed to delete {self.model.__name__}: {str(e)}") from e

    # Protected helper methods for use by subclasses

    def _build_query(self) -> Query:
        """Get base query for the model."""
        return self.db.query(self.model)

    def _execute_query(self, query: Query) -> List[T]:
        """Execute query with error handling."""
        try:
            return query.all()
        except SQLAlchemyError as e:
            self.logger.error(f"Query execution error: {str(e)}")
            raise RepositoryException(f"Query failed: {str(e)}")
