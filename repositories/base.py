"""
Shared repository base for the SchoolMeals data access layer.
Repositories wrap one SQLAlchemy session and leave transaction boundaries to
the services, except for the single-row helpers below.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """Session holder with lookup-by-primary-key helpers"""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    @abstractmethod
    def get_by_id(self, entity_id: int) -> Optional[ModelType]:
        """Fetch one row by its integer key (meal_id, plan_id, ...)"""

    def delete(self, entity_id: int) -> bool:
        """Delete and commit; False when there was nothing to delete"""
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True
