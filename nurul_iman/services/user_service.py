"""Registration, login and admin management of user accounts."""
import logging

from nurul_iman.auth import hash_password, verify_password
from nurul_iman.errors import NotFoundError, ValidationError
from nurul_iman.models.role import Role, RoleName
from nurul_iman.models.user import User
from nurul_iman.repositories.role_repository import RoleRepository
from nurul_iman.repositories.user_repository import UserRepository
from nurul_iman.schemas.user import LoginRequest, RegisterRequest, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repository: UserRepository, role_repository: RoleRepository, default_role: str = RoleName.USER):
        self._repo = repository
        self._roles = role_repository
        self._default_role = default_role

    def register_user(self, body: RegisterRequest) -> User:
        if self._repo.find_by_email(body.email):
            raise ValidationError("Email already registered")
        role = self._roles.find_by_name(self._default_role)
        if role is None:
            role = self._roles.save(Role(role_name=self._default_role))
        user = User(
            name=body.name.strip(),
            email=body.email.strip().lower(),
            password=hash_password(body.password),
            role_id=role.id,
        )
        user = self._repo.save(user)
        logger.info("Registered user id=%s role=%s", user.id, role.role_name)
        return user

    def login(self, body: LoginRequest) -> User:
        user = self._repo.find_by_email(body.email)
        if not user or not verify_password(body.password, user.password):
            raise ValidationError("Login failed, wrong email or password")
        return user

    def get_user_by_id(self, user_id: int) -> User:
        user = self._repo.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self) -> list[User]:
        return self._repo.find_all()

    def list_ustadz(self) -> list[User]:
        return self._repo.find_by_role_name(RoleName.USTADZ)

    def update_user(self, user_id: int, body: UserUpdate) -> User:
        user = self.get_user_by_id(user_id)
        if body.name is not None:
            user.name = body.name.strip()
        if body.role_id is not None:
            if self._roles.find_by_id(body.role_id) is None:
                raise NotFoundError("Role not found")
            user.role_id = body.role_id
        return self._repo.save(user)

    def delete_user(self, user_id: int, acting_user: User) -> None:
        user = self.get_user_by_id(user_id)
        if user.id == acting_user.id:
            raise ValidationError("You cannot delete your own account")
        self._repo.delete(user)
