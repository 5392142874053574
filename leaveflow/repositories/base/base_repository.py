"""
Base repository with standardized CRUD operations and error handling.

Repositories never commit: services own the transaction boundary and
call ``flush()`` to surface constraint and version conflicts early.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from leaveflow.config.logging import get_logger
from leaveflow.core.exceptions import (
    ConcurrentModificationError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    RepositoryError,
)
from leaveflow.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Provides create / read helpers and conflict translation for all
    domain repositories.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Write Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """
        Stage a new entity and flush it.

        Raises:
            EntityAlreadyExistsError: If a unique constraint rejects the row
        """
        self.db.add(entity)
        try:
            self.flush()
        except EntityAlreadyExistsError:
            self.db.expunge(entity)
            raise
        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    def flush(self) -> None:
        """
        Flush pending changes, translating conflicts.

        Raises:
            ConcurrentModificationError: If a versioned row changed underneath
            EntityAlreadyExistsError: If a unique constraint was violated
            RepositoryError: For any other database failure
        """
        try:
            self.db.flush()
        except StaleDataError as e:
            raise ConcurrentModificationError(self.model.__name__) from e
        except IntegrityError as e:
            raise EntityAlreadyExistsError(
                f"{self.model.__name__} already exists",
                details={"error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Flush failed: {str(e)}") from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """
        Find entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None
        """
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by ID failed: {str(e)}") from e

    def get_by_id(self, id: str) -> ModelType:
        """
        Get entity by ID or raise exception.

        Raises:
            EntityNotFoundError: If entity not found
        """
        entity = self.find_by_id(id)
        if entity is None:
            raise EntityNotFoundError(self.model.__name__, id)
        return entity
