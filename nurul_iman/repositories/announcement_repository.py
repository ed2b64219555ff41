"""
Announcement persistence. Owning user is always loaded in the same query
(joinedload), list included, so formatting never triggers per-row lookups.
"""
import logging

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from nurul_iman.errors import NotFoundError, PersistenceError, StorageError
from nurul_iman.models.announcement import Announcement
from nurul_iman.utils.pagination import Scope

logger = logging.getLogger(__name__)


class AnnouncementRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Announcement).options(joinedload(Announcement.user))

    def add_announcement(self, announcement: Announcement) -> Announcement:
        try:
            self.db.add(announcement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Announcement insert failed: %s", e)
            raise PersistenceError("Failed to add announcement") from e
        self.db.refresh(announcement)
        return announcement

    def detail_announcement(self, announcement_id: int) -> Announcement:
        item = self._query().filter(Announcement.id == announcement_id).first()
        if item is None:
            raise NotFoundError("Announcement not found")
        return item

    def get_list_announcement(self, scope: Scope) -> tuple[list[Announcement], int]:
        """(page of rows newest first, total row count ignoring the scope)."""
        base = self._query().order_by(desc(Announcement.created_at), desc(Announcement.id))
        items = scope(base).all()
        total = self.db.query(func.count(Announcement.id)).scalar() or 0
        return items, total

    def update(self, announcement: Announcement) -> Announcement:
        """Persist the (already modified) entity as a whole."""
        try:
            self.db.add(announcement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Announcement %s update failed: %s", announcement.id, e)
            raise PersistenceError("Failed to update announcement") from e
        self.db.refresh(announcement)
        return announcement

    def delete_announcement(self, announcement_id: int, storage) -> None:
        """
        Delete the row and its banner together: the row delete is flushed, the banner
        removed, then the transaction committed. A storage failure rolls the row back.
        """
        item = self.detail_announcement(announcement_id)
        images = item.images
        try:
            self.db.delete(item)
            self.db.flush()
            storage.delete(images)
            self.db.commit()
        except StorageError:
            self.db.rollback()
            logger.error("Announcement %s kept: banner %s could not be deleted", announcement_id, images)
            raise StorageError("Delete failed")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Announcement %s delete failed: %s", announcement_id, e)
            raise PersistenceError("Delete failed") from e
