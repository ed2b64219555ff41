from dataclasses import dataclass
from datetime import datetime
from pydantic import BaseModel


class AnnouncementInput(BaseModel):
    """Form fields of add/update. slug empty -> generated from title."""
    title: str
    description: str
    slug: str = ""


@dataclass
class BannerUpload:
    filename: str
    content_type: str | None
    data: bytes


class AnnouncementResponse(BaseModel):
    id: int
    title: str
    description: str
    images: str
    slug: str
    user_id: int
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
