import logging

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from nurul_iman.errors import NotFoundError, PersistenceError
from nurul_iman.models.study_rundown import StudyRundown
from nurul_iman.utils.pagination import Scope

logger = logging.getLogger(__name__)


class StudyRundownRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(StudyRundown).options(joinedload(StudyRundown.user))

    def save(self, rundown: StudyRundown) -> StudyRundown:
        try:
            self.db.add(rundown)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Study rundown save failed: %s", e)
            raise PersistenceError("Failed to save study rundown") from e
        self.db.refresh(rundown)
        return rundown

    def find_by_id(self, rundown_id: int) -> StudyRundown:
        item = self._query().filter(StudyRundown.id == rundown_id).first()
        if item is None:
            raise NotFoundError("Study rundown not found")
        return item

    def find_all(self, scope: Scope) -> tuple[list[StudyRundown], int]:
        base = self._query().order_by(desc(StudyRundown.created_at), desc(StudyRundown.id))
        items = scope(base).all()
        total = self.db.query(func.count(StudyRundown.id)).scalar() or 0
        return items, total

    def delete(self, rundown: StudyRundown) -> None:
        try:
            self.db.delete(rundown)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Study rundown %s delete failed: %s", rundown.id, e)
            raise PersistenceError("Failed to delete study rundown") from e
