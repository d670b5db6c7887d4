"""
Base repository for the data access layer.
Repositories keep SQLAlchemy queries out of the services; each one owns a
single mapped class.
"""

from typing import Generic, TypeVar, Optional, Type
from uuid import UUID
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Common write operations shared by all repositories.

    ``create``, ``update`` and ``remove`` commit immediately. Methods that
    leave the commit to the caller say so in their docstring.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by primary key.

        Subclasses override this with their own key column (plan_id,
        list_id, item_id, ...).
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement get_by_id()"
        )

    def create(self, entity: ModelType) -> ModelType:
        """Insert entity and reload server-generated columns"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Commit pending changes on entity and reload it"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def remove(self, entity: ModelType) -> None:
        """Delete a loaded entity"""
        self.db.delete(entity)
        self.db.commit()
