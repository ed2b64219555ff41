from fastapi import APIRouter, Depends
from nurul_iman.auth import authenticate
from nurul_iman.deps import get_role_service, require
from nurul_iman.formatters import role_format
from nurul_iman.policy import ROLE_MANAGE, ROLE_READ
from nurul_iman.schemas.role import RoleInput
from nurul_iman.services.role_service import RoleService
from nurul_iman.utils.response import api_response

router = APIRouter(prefix="/api/v1", tags=["roles"], dependencies=[Depends(authenticate)])


@router.post("/role/add", dependencies=[Depends(require(ROLE_MANAGE))])
def save_role(body: RoleInput, service: RoleService = Depends(get_role_service)):
    role = service.save_role(body)
    return api_response("Success to add role", 200, "success", role_format(role))


@router.get("/roles", dependencies=[Depends(require(ROLE_READ))])
def get_roles(service: RoleService = Depends(get_role_service)):
    roles = service.get_roles()
    return api_response("List Role", 200, "success", [role_format(r) for r in roles])


@router.get("/roles/{role_id}", dependencies=[Depends(require(ROLE_READ))])
def get_role(role_id: int, service: RoleService = Depends(get_role_service)):
    return api_response("Role Detail", 200, "success", role_format(service.get_role(role_id)))


@router.put("/roles/{role_id}", dependencies=[Depends(require(ROLE_MANAGE))])
def update_role(role_id: int, body: RoleInput, service: RoleService = Depends(get_role_service)):
    role = service.update_role(role_id, body)
    return api_response("Success to update role", 200, "success", role_format(role))


@router.delete("/roles/{role_id}", dependencies=[Depends(require(ROLE_MANAGE))])
def delete_role(role_id: int, service: RoleService = Depends(get_role_service)):
    service.delete_role(role_id)
    return api_response("Delete Success", 200, "success", None)
