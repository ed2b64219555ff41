import logging

from nurul_iman.errors import NotFoundError
from nurul_iman.models.study_rundown import StudyRundown
from nurul_iman.models.user import User
from nurul_iman.policy import RUNDOWN_ADD, RUNDOWN_DELETE, RUNDOWN_UPDATE, AuthorizationPolicy
from nurul_iman.repositories.study_rundown_repository import StudyRundownRepository
from nurul_iman.repositories.user_repository import UserRepository
from nurul_iman.schemas.study_rundown import StudyRundownInput, StudyRundownUpdateInput
from nurul_iman.utils.pagination import Scope

logger = logging.getLogger(__name__)


class StudyRundownService:
    def __init__(
        self,
        repository: StudyRundownRepository,
        user_repository: UserRepository,
        policy: AuthorizationPolicy,
    ):
        self._repo = repository
        self._users = user_repository
        self._policy = policy

    def _require_presenter(self, user_id: int) -> None:
        if self._users.find_by_id(user_id) is None:
            raise NotFoundError("Ustadz not found")

    def add_study(self, body: StudyRundownInput, user: User) -> StudyRundown:
        self._policy.check(RUNDOWN_ADD, user.role_name)
        self._require_presenter(body.user_id)
        rundown = StudyRundown(
            title=body.title,
            on_scheduled=body.on_scheduled,
            schedule_date=body.schedule_date,
            time=body.time,
            user_id=body.user_id,
        )
        rundown = self._repo.save(rundown)
        logger.info("Study rundown %s added by user %s", rundown.id, user.id)
        return rundown

    def get_all_rundown(self, scope: Scope) -> tuple[list[StudyRundown], int]:
        return self._repo.find_all(scope)

    def get_detail_rundown(self, rundown_id: int) -> StudyRundown:
        return self._repo.find_by_id(rundown_id)

    def update_study_rundown(self, rundown_id: int, body: StudyRundownUpdateInput, user: User) -> StudyRundown:
        """Partial update: only fields sent in the form change."""
        self._policy.check(RUNDOWN_UPDATE, user.role_name)
        rundown = self._repo.find_by_id(rundown_id)
        if body.user_id is not None:
            self._require_presenter(body.user_id)
            rundown.user_id = body.user_id
        if body.title is not None:
            rundown.title = body.title
        if body.on_scheduled is not None:
            rundown.on_scheduled = body.on_scheduled
        if body.schedule_date is not None:
            rundown.schedule_date = body.schedule_date
        if body.time is not None:
            rundown.time = body.time
        return self._repo.save(rundown)

    def delete_study_rundown(self, rundown_id: int, user: User) -> None:
        self._policy.check(RUNDOWN_DELETE, user.role_name)
        rundown = self._repo.find_by_id(rundown_id)
        self._repo.delete(rundown)
        logger.info("Study rundown %s deleted by user %s", rundown_id, user.id)
