from nurul_iman.errors import NotFoundError, ValidationError
from nurul_iman.models.role import Role
from nurul_iman.repositories.role_repository import RoleRepository
from nurul_iman.schemas.role import RoleInput


class RoleService:
    def __init__(self, repository: RoleRepository):
        self._repo = repository

    def save_role(self, body: RoleInput) -> Role:
        name = body.role_name.strip().lower()
        if self._repo.find_by_name(name):
            raise ValidationError("Role already exists")
        return self._repo.save(Role(role_name=name))

    def get_roles(self) -> list[Role]:
        return self._repo.find_all()

    def get_role(self, role_id: int) -> Role:
        role = self._repo.find_by_id(role_id)
        if role is None:
            raise NotFoundError("Role not found")
        return role

    def update_role(self, role_id: int, body: RoleInput) -> Role:
        role = self.get_role(role_id)
        name = body.role_name.strip().lower()
        other = self._repo.find_by_name(name)
        if other is not None and other.id != role.id:
            raise ValidationError("Role already exists")
        role.role_name = name
        return self._repo.save(role)

    def delete_role(self, role_id: int) -> None:
        role = self.get_role(role_id)
        if self._repo.count_users(role.id):
            raise ValidationError("Role is still assigned to users")
        self._repo.delete(role)
