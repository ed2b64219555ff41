"""FastAPI providers wiring repositories and services to the objects kept on app.state."""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from nurul_iman.auth import current_user
from nurul_iman.config import Settings
from nurul_iman.database import get_db
from nurul_iman.models.user import User
from nurul_iman.policy import AuthorizationPolicy
from nurul_iman.repositories.announcement_repository import AnnouncementRepository
from nurul_iman.repositories.role_repository import RoleRepository
from nurul_iman.repositories.study_rundown_repository import StudyRundownRepository
from nurul_iman.repositories.user_repository import UserRepository
from nurul_iman.services.announcement_service import AnnouncementService
from nurul_iman.services.role_service import RoleService
from nurul_iman.services.study_rundown_service import StudyRundownService
from nurul_iman.services.user_service import UserService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_policy(request: Request) -> AuthorizationPolicy:
    return request.app.state.policy


def get_user_service(
    settings: Settings = Depends(get_app_settings),
    db: Session = Depends(get_db),
) -> UserService:
    return UserService(UserRepository(db), RoleRepository(db), default_role=settings.default_role)


def get_role_service(db: Session = Depends(get_db)) -> RoleService:
    return RoleService(RoleRepository(db))


def get_announcement_service(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    policy: AuthorizationPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> AnnouncementService:
    return AnnouncementService(AnnouncementRepository(db), request.app.state.storage, policy, settings)


def get_study_rundown_service(
    policy: AuthorizationPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> StudyRundownService:
    return StudyRundownService(StudyRundownRepository(db), UserRepository(db), policy)


def require(action: str):
    """Dependency factory: current user must be allowed `action` by the policy table."""

    def dependency(
        user: User = Depends(current_user),
        policy: AuthorizationPolicy = Depends(get_policy),
    ) -> User:
        policy.check(action, user.role_name)
        return user

    return dependency
