"""
Announcement orchestration: authorization, banner validation, key naming and the
banner/row ordering.

Add:    upload banner -> insert row; insert failure removes the new banner.
Update: upload new banner -> save row -> remove old banner (only if it changed);
        save failure removes the new banner, the old one is left untouched.
Delete: see AnnouncementRepository.delete_announcement.
"""
import logging
import mimetypes
import uuid
from datetime import date
from pathlib import Path

from nurul_iman.config import Settings
from nurul_iman.errors import PersistenceError, StorageError, ValidationError
from nurul_iman.models.announcement import Announcement
from nurul_iman.models.user import User
from nurul_iman.policy import (
    ANNOUNCEMENT_ADD,
    ANNOUNCEMENT_DELETE,
    ANNOUNCEMENT_UPDATE,
    ANNOUNCEMENT_UPDATE_BANNER,
    AuthorizationPolicy,
)
from nurul_iman.repositories.announcement_repository import AnnouncementRepository
from nurul_iman.schemas.announcement import AnnouncementInput, BannerUpload
from nurul_iman.utils.pagination import Scope
from nurul_iman.utils.slug import slugify

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


def banner_key(slug: str, filename: str, today: date | None = None) -> str:
    """announcement-<slug>-<YYYY-MM-DD>-<8 hex>.<ext>; the hex part keeps same-day uploads apart."""
    ext = Path(filename or "").suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Banner must be an image (png, jpg, jpeg, gif, webp)")
    day = (today or date.today()).isoformat()
    return f"announcement-{slug}-{day}-{uuid.uuid4().hex[:8]}{ext}"


class AnnouncementService:
    def __init__(
        self,
        repository: AnnouncementRepository,
        storage,
        policy: AuthorizationPolicy,
        settings: Settings,
    ):
        self._repo = repository
        self._storage = storage
        self._policy = policy
        self._max_banner_bytes = settings.max_banner_bytes

    def _slug(self, body: AnnouncementInput) -> str:
        slug = slugify(body.slug) or slugify(body.title)
        if not slug:
            raise ValidationError("Slug cannot be generated from title")
        return slug

    def _upload_banner(self, slug: str, banner: BannerUpload) -> str:
        if len(banner.data) > self._max_banner_bytes:
            raise ValidationError("Image too large, max 1MB")
        key = banner_key(slug, banner.filename)
        content_type = banner.content_type or mimetypes.guess_type(banner.filename)[0]
        return self._storage.upload(key, banner.data, content_type)

    def _discard(self, reference: str) -> None:
        """Best-effort removal of a banner no row points to."""
        try:
            self._storage.delete(reference)
        except StorageError:
            logger.warning("Orphaned banner left in storage: %s", reference)

    def add_announcement(self, body: AnnouncementInput, banner: BannerUpload | None, user: User) -> Announcement:
        self._policy.check(ANNOUNCEMENT_ADD, user.role_name)
        if banner is None or not banner.filename:
            raise ValidationError("Failed to upload banner image")
        slug = self._slug(body)
        location = self._upload_banner(slug, banner)
        item = Announcement(
            title=body.title,
            description=body.description,
            images=location,
            slug=slug,
            user_id=user.id,
        )
        try:
            item = self._repo.add_announcement(item)
        except PersistenceError:
            self._discard(location)
            raise
        logger.info("Announcement %s added by user %s", item.id, user.id)
        return item

    def get_list_announcement(self, scope: Scope) -> tuple[list[Announcement], int]:
        return self._repo.get_list_announcement(scope)

    def get_detail_announcement(self, announcement_id: int) -> Announcement:
        return self._repo.detail_announcement(announcement_id)

    def update_announcement(
        self,
        announcement_id: int,
        body: AnnouncementInput,
        banner: BannerUpload | None,
        user: User,
    ) -> Announcement:
        has_banner = banner is not None and bool(banner.filename)
        self._policy.check(ANNOUNCEMENT_UPDATE_BANNER if has_banner else ANNOUNCEMENT_UPDATE, user.role_name)
        item = self._repo.detail_announcement(announcement_id)
        slug = self._slug(body)
        previous = item.images
        location = self._upload_banner(slug, banner) if has_banner else previous

        item.title = body.title
        item.description = body.description
        item.slug = slug
        item.images = location
        try:
            item = self._repo.update(item)
        except PersistenceError:
            if location != previous:
                self._discard(location)
            raise

        if previous and location != previous:
            try:
                self._storage.delete(previous)
            except StorageError:
                logger.warning("Announcement %s updated but old banner %s was not removed", item.id, previous)
        return item

    def delete_announcement(self, announcement_id: int, user: User) -> None:
        self._policy.check(ANNOUNCEMENT_DELETE, user.role_name)
        self._repo.delete_announcement(announcement_id, self._storage)
        logger.info("Announcement %s deleted by user %s", announcement_id, user.id)
