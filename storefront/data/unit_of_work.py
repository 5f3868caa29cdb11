# storefront/data/unit_of_work.py
from sqlalchemy.orm import Session

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UnitOfWork:
    """
    A group of writes that commit or roll back together.

        with UnitOfWork(db) as uow:
            ...writes through repos...
        # committed here, or rolled back if the block raised

    Repositories only flush; the unit of work owns the commit decision.
    """

    def __init__(self, db: Session, name: str = "unit-of-work"):
        self.db = db
        self.name = name
        self._done = False

    def __enter__(self) -> "UnitOfWork":
        self._done = False
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        else:
            logger.info(f"{self.name}: rolling back after {exc_type.__name__}")
            self.rollback()
        return False

    def commit(self):
        if self._done:
            return
        self.db.commit()
        self._done = True

    def rollback(self):
        if self._done:
            return
        self.db.rollback()
        self._done = True
