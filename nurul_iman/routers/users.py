from fastapi import APIRouter, Depends
from nurul_iman.auth import authenticate
from nurul_iman.deps import get_user_service, require
from nurul_iman.formatters import list_ustadz_format, user_format
from nurul_iman.models.user import User
from nurul_iman.policy import USER_MANAGE
from nurul_iman.schemas.user import UserUpdate
from nurul_iman.services.user_service import UserService
from nurul_iman.utils.response import api_response

router = APIRouter(prefix="/api/v1", tags=["users"], dependencies=[Depends(authenticate)])


@router.get("/user/ustadz")
def get_list_ustadz_name(service: UserService = Depends(get_user_service)):
    """Users with the ustadz role, for picking a study rundown presenter."""
    return api_response("List Ustadz", 200, "success", list_ustadz_format(service.list_ustadz()))


@router.get("/users", dependencies=[Depends(require(USER_MANAGE))])
def get_all_users(service: UserService = Depends(get_user_service)):
    users = service.list_users()
    return api_response("List User", 200, "success", [user_format(u) for u in users])


@router.get("/users/{user_id}", dependencies=[Depends(require(USER_MANAGE))])
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return api_response("User Detail", 200, "success", user_format(service.get_user_by_id(user_id)))


@router.put("/users/{user_id}", dependencies=[Depends(require(USER_MANAGE))])
def update_user(user_id: int, body: UserUpdate, service: UserService = Depends(get_user_service)):
    user = service.update_user(user_id, body)
    return api_response("Success to update user", 200, "success", user_format(user))


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    admin: User = Depends(require(USER_MANAGE)),
    service: UserService = Depends(get_user_service),
):
    service.delete_user(user_id, admin)
    return api_response("Delete Success", 200, "success", None)
