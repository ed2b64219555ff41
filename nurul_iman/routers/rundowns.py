"""Study rundowns (scheduled study sessions) and the ustadz picker."""
from fastapi import APIRouter, Depends, Form
from nurul_iman.auth import authenticate, current_user
from nurul_iman.deps import get_study_rundown_service
from nurul_iman.formatters import list_rundown_format, study_response_format
from nurul_iman.models.user import User
from nurul_iman.schemas.study_rundown import StudyRundownInput, StudyRundownUpdateInput
from nurul_iman.services.study_rundown_service import StudyRundownService
from nurul_iman.utils.pagination import paginate, parse_page
from nurul_iman.utils.response import api_response, api_response_list

router = APIRouter(prefix="/api/v1", tags=["rundown"])


@router.post("/rundown/add", dependencies=[Depends(authenticate)])
def add_study(
    title: str = Form(..., min_length=1),
    on_scheduled: bool = Form(False),
    schedule_date: str = Form(""),
    user_id: int = Form(...),
    time: str = Form(..., min_length=1),
    user: User = Depends(current_user),
    service: StudyRundownService = Depends(get_study_rundown_service),
):
    body = StudyRundownInput(
        title=title,
        on_scheduled=on_scheduled,
        schedule_date=schedule_date,
        user_id=user_id,
        time=time,
    )
    rundown = service.add_study(body, user)
    return api_response("Success to add study rundown", 200, "success", study_response_format(rundown))


@router.get("/rundown")
def get_all_rundown(
    page: str | None = None,
    per_page: str | None = None,
    service: StudyRundownService = Depends(get_study_rundown_service),
):
    page_num, page_size = parse_page(page, per_page)
    rundowns, total = service.get_all_rundown(paginate(page_num, page_size))
    return api_response_list(
        "List Study Rundown", 200, "success", page_num, page_size, total, list_rundown_format(rundowns)
    )


@router.get("/rundown/{rundown_id}")
def get_detail_study_rundown(
    rundown_id: int,
    service: StudyRundownService = Depends(get_study_rundown_service),
):
    rundown = service.get_detail_rundown(rundown_id)
    return api_response("Study Rundown Detail", 200, "success", study_response_format(rundown))


@router.put("/rundown/{rundown_id}", dependencies=[Depends(authenticate)])
def update_study_rundown(
    rundown_id: int,
    title: str | None = Form(None),
    on_scheduled: bool | None = Form(None),
    schedule_date: str | None = Form(None),
    user_id: int | None = Form(None),
    time: str | None = Form(None),
    user: User = Depends(current_user),
    service: StudyRundownService = Depends(get_study_rundown_service),
):
    """Partial update: omitted fields keep their value."""
    body = StudyRundownUpdateInput(
        title=title or None,
        on_scheduled=on_scheduled,
        schedule_date=schedule_date,
        user_id=user_id,
        time=time or None,
    )
    rundown = service.update_study_rundown(rundown_id, body, user)
    return api_response("Success to update study rundown", 200, "success", study_response_format(rundown))


@router.delete("/rundown/{rundown_id}", dependencies=[Depends(authenticate)])
def delete_study_rundown(
    rundown_id: int,
    user: User = Depends(current_user),
    service: StudyRundownService = Depends(get_study_rundown_service),
):
    service.delete_study_rundown(rundown_id, user)
    return api_response("Delete Success", 200, "success", None)
