import logging
from typing import Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError

M = TypeVar("M")


class BaseService:
    """Holds the request's session; subclasses implement one domain each."""

    not_found_message = "Resource not found"

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__module__)

    def get_or_404(self, model: Type[M], entity_id: str, message: str = None) -> M:
        entity = self.db.get(model, entity_id)
        if entity is None:
            raise NotFoundError(message or self.not_found_message)
        return entity

    def commit(self, conflict_message: str = "Resource already exists") -> None:
        """Commit, translating uniqueness violations into 409."""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            self.logger.warning("Integrity error on commit", exc_info=True)
            raise ConflictError(conflict_message)
