from datetime import datetime
from pydantic import BaseModel, Field


class RoleInput(BaseModel):
    role_name: str = Field(min_length=1, max_length=50)


class RoleResponse(BaseModel):
    id: int
    role_name: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
