from nurul_iman.models.role import Role, RoleName
from nurul_iman.models.user import User
from nurul_iman.models.announcement import Announcement
from nurul_iman.models.study_rundown import StudyRundown
from nurul_iman.models.category import Category
from nurul_iman.models.article import Article
from nurul_iman.models.study_video import StudyVideo

__all__ = [
    "Role", "RoleName", "User", "Announcement", "StudyRundown",
    "Category", "Article", "StudyVideo",
]
