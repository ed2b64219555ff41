from pydantic import BaseModel


class StudyRundownInput(BaseModel):
    title: str
    on_scheduled: bool = False
    schedule_date: str = ""
    user_id: int
    time: str


class StudyRundownUpdateInput(BaseModel):
    title: str | None = None
    on_scheduled: bool | None = None
    schedule_date: str | None = None
    user_id: int | None = None
    time: str | None = None


class StudyRundownResponse(BaseModel):
    id: int
    title: str
    on_scheduled: bool
    date: str
    time: str
    ustadz_name: str
