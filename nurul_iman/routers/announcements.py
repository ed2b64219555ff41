from fastapi import APIRouter, Depends, UploadFile, File, Form
from nurul_iman.auth import authenticate, current_user
from nurul_iman.config import Settings
from nurul_iman.deps import get_announcement_service, get_app_settings
from nurul_iman.formatters import announcement_format, announcements_format
from nurul_iman.models.user import User
from nurul_iman.schemas.announcement import AnnouncementInput, BannerUpload
from nurul_iman.services.announcement_service import AnnouncementService
from nurul_iman.utils.pagination import paginate, parse_page
from nurul_iman.utils.response import api_response, api_response_list

router = APIRouter(prefix="/api/v1", tags=["announcements"])


def _read_banner(file: UploadFile | None, limit: int) -> BannerUpload | None:
    """Read at most limit+1 bytes: enough to tell an oversized banner apart."""
    if file is None or not file.filename:
        return None
    data = file.file.read(limit + 1)
    return BannerUpload(filename=file.filename, content_type=file.content_type, data=data)


@router.post("/announcement/add", dependencies=[Depends(authenticate)])
def add_announcement(
    title: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    slug: str = Form(""),
    banner: UploadFile | None = File(None),
    user: User = Depends(current_user),
    settings: Settings = Depends(get_app_settings),
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Form: title, description, slug (optional, generated from title), banner (image, max 1MB)."""
    body = AnnouncementInput(title=title, description=description, slug=slug)
    item = service.add_announcement(body, _read_banner(banner, settings.max_banner_bytes), user)
    return api_response("Success to add announcement", 200, "success", announcement_format(item))


@router.get("/announcements")
def get_all_announcement(
    page: str | None = None,
    per_page: str | None = None,
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Newest first. ?page=1&per_page=10; total counts every announcement."""
    page_num, page_size = parse_page(page, per_page)
    items, total = service.get_list_announcement(paginate(page_num, page_size))
    return api_response_list(
        "List Announcement", 200, "success", page_num, page_size, total, announcements_format(items)
    )


@router.get("/announcements/{announcement_id}")
def get_detail_announcement(
    announcement_id: int,
    service: AnnouncementService = Depends(get_announcement_service),
):
    item = service.get_detail_announcement(announcement_id)
    return api_response("Announcement Detail", 200, "success", announcement_format(item))


@router.put("/announcements/{announcement_id}", dependencies=[Depends(authenticate)])
def update_announcement(
    announcement_id: int,
    title: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    slug: str = Form(""),
    banner: UploadFile | None = File(None),
    user: User = Depends(current_user),
    settings: Settings = Depends(get_app_settings),
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Overwrites title/description/slug. A new banner replaces (and removes) the old one."""
    body = AnnouncementInput(title=title, description=description, slug=slug)
    item = service.update_announcement(
        announcement_id, body, _read_banner(banner, settings.max_banner_bytes), user
    )
    return api_response("Success to update announcement", 200, "success", announcement_format(item))


@router.delete("/announcements/{announcement_id}", dependencies=[Depends(authenticate)])
def delete_announcement(
    announcement_id: int,
    user: User = Depends(current_user),
    service: AnnouncementService = Depends(get_announcement_service),
):
    service.delete_announcement(announcement_id, user)
    return api_response("Delete Success", 200, "success", None)
