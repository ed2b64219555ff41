"""User persistence. Role is always joined (User.role is lazy="joined")."""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from nurul_iman.errors import PersistenceError, ValidationError
from nurul_iman.models.role import Role
from nurul_iman.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def save(self, user: User) -> User:
        """Insert or update, commit, refresh."""
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("User save rejected: %s", e.orig)
            raise ValidationError("Email already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User save failed: %s", e)
            raise PersistenceError("Failed to save user") from e
        self.db.refresh(user)
        return user

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def find_all(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

    def find_by_role_name(self, role_name: str) -> list[User]:
        return (
            self.db.query(User)
            .join(Role, User.role_id == Role.id)
            .filter(Role.role_name == role_name)
            .order_by(User.name)
            .all()
        )

    def delete(self, user: User) -> None:
        try:
            self.db.delete(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("User delete rejected: %s", e.orig)
            raise ValidationError("User still owns announcements or study rundowns") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User delete failed: %s", e)
            raise PersistenceError("Failed to delete user") from e
