"""Thin persistence layer over a SQLAlchemy session."""

import logging
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.services.errors import Conflict

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class EntityRepository:
    """Query and mutate entities; unique-constraint violations become Conflict."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, model: type[ModelT], entity_id: int) -> ModelT | None:
        return self.db.get(model, entity_id)

    def find_one(self, model: type[ModelT], **filters: Any) -> ModelT | None:
        return self.db.query(model).filter_by(**filters).first()

    def find_many(self, model: type[ModelT], order_by: Any = None, **filters: Any) -> list[ModelT]:
        query = self.db.query(model).filter_by(**filters)
        if order_by is not None:
            query = query.order_by(order_by)
        return query.all()

    def create(self, entity: ModelT, conflict_message: str = "Conflict.") -> ModelT:
        self.db.add(entity)
        return self.save(entity, conflict_message)

    def save(self, entity: ModelT, conflict_message: str = "Conflict.") -> ModelT:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Unique constraint rejected {type(entity).__name__}: {e.orig}")
            raise Conflict(conflict_message) from e
        self.db.refresh(entity)
        return entity

    def delete(self, entity: Any) -> None:
        self.db.delete(entity)
        self.db.commit()
