"""Entity -> response projections."""
from nurul_iman.models.announcement import Announcement
from nurul_iman.models.role import Role
from nurul_iman.models.study_rundown import StudyRundown
from nurul_iman.models.user import User
from nurul_iman.schemas.announcement import AnnouncementResponse
from nurul_iman.schemas.role import RoleResponse
from nurul_iman.schemas.study_rundown import StudyRundownResponse
from nurul_iman.schemas.user import UserResponse, UstadzResponse


def user_format(user: User, token: str | None = None) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role_name,
        token=token,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def role_format(role: Role) -> RoleResponse:
    return RoleResponse.model_validate(role)


def announcement_format(item: Announcement) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=item.id,
        title=item.title,
        description=item.description,
        images=item.images or "",
        slug=item.slug,
        user_id=item.user_id,
        created_by=item.user.name if item.user else "",
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def announcements_format(items: list[Announcement]) -> list[AnnouncementResponse]:
    return [announcement_format(x) for x in items]


def study_response_format(rundown: StudyRundown) -> StudyRundownResponse:
    return StudyRundownResponse(
        id=rundown.id,
        title=rundown.title,
        on_scheduled=rundown.on_scheduled,
        date=rundown.schedule_date or "",
        time=rundown.time,
        ustadz_name=rundown.user.name if rundown.user else "",
    )


def list_rundown_format(rundowns: list[StudyRundown]) -> list[StudyRundownResponse]:
    return [study_response_format(r) for r in rundowns]


def list_ustadz_format(users: list[User]) -> list[UstadzResponse]:
    return [UstadzResponse(id=u.id, name=u.name) for u in users]
