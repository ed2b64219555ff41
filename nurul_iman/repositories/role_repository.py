import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from nurul_iman.errors import PersistenceError, ValidationError
from nurul_iman.models.role import Role
from nurul_iman.models.user import User

logger = logging.getLogger(__name__)


class RoleRepository:
    def __init__(self, db: Session):
        self.db = db

    def save(self, role: Role) -> Role:
        try:
            self.db.add(role)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Role save rejected: %s", e.orig)
            raise ValidationError("Role already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Role save failed: %s", e)
            raise PersistenceError("Failed to save role") from e
        self.db.refresh(role)
        return role

    def find_by_id(self, role_id: int) -> Role | None:
        return self.db.query(Role).filter(Role.id == role_id).first()

    def find_by_name(self, role_name: str) -> Role | None:
        return self.db.query(Role).filter(Role.role_name == role_name).first()

    def find_all(self) -> list[Role]:
        return self.db.query(Role).order_by(Role.id).all()

    def count_users(self, role_id: int) -> int:
        return self.db.query(func.count(User.id)).filter(User.role_id == role_id).scalar() or 0

    def delete(self, role: Role) -> None:
        try:
            self.db.delete(role)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Role delete failed: %s", e)
            raise PersistenceError("Failed to delete role") from e
