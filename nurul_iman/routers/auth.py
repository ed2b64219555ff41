from fastapi import APIRouter, Depends
from nurul_iman.auth import authenticate, create_access_token, current_user
from nurul_iman.config import Settings
from nurul_iman.deps import get_app_settings, get_user_service
from nurul_iman.formatters import user_format
from nurul_iman.models.user import User
from nurul_iman.schemas.user import LoginRequest, RegisterRequest
from nurul_iman.services.user_service import UserService
from nurul_iman.utils.response import api_response

router = APIRouter(prefix="/api/v1/user", tags=["auth"])


@router.post("/register")
def register_user(
    body: RegisterRequest,
    service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
):
    """Self-registration; the account gets the default role."""
    user = service.register_user(body)
    token = create_access_token(user.id, settings)
    return api_response("Account has been registered", 200, "success", user_format(user, token))


@router.post("/login")
def login_user(
    body: LoginRequest,
    service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
):
    user = service.login(body)
    token = create_access_token(user.id, settings)
    return api_response("Successfully logged in", 200, "success", user_format(user, token))


@router.get("/me", dependencies=[Depends(authenticate)])
def get_me(user: User = Depends(current_user)):
    return api_response("Current user", 200, "success", user_format(user))
