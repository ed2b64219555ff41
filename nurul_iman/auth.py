from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from nurul_iman.config import Settings
from nurul_iman.database import get_db
from nurul_iman.errors import AuthError
from nurul_iman.models.user import User
from nurul_iman.repositories.user_repository import UserRepository
from nurul_iman.schemas.user import TokenPayload

security = HTTPBearer(auto_error=False)

CURRENT_USER_KEY = "current_user"

# Use Argon2 for password hashing
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: int, settings: Settings) -> str:
    expire = datetime.utcnow() + timedelta(
        minutes=settings.access_token_expire_minutes
    )
    payload = {
        "user_id": user_id,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str, settings: Settings) -> TokenPayload | None:
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return TokenPayload(
            user_id=payload["user_id"],
            exp=payload["exp"],
        )
    except (JWTError, KeyError, TypeError, ValueError):
        return None


def authenticate(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Route dependency: Bearer token -> User (with role), published on request.state.
    Every failure is the same 401 so clients cannot probe which step failed.
    """
    if not credentials or not credentials.credentials:
        raise AuthError("Unauthorized")

    payload = decode_token(credentials.credentials, request.app.state.settings)
    if not payload:
        raise AuthError("Unauthorized")

    user = UserRepository(db).find_by_id(payload.user_id)
    if not user:
        raise AuthError("Unauthorized")

    setattr(request.state, CURRENT_USER_KEY, user)
    return user


def current_user(request: Request) -> User:
    """Typed accessor for the user set by `authenticate`. AuthError (401) when absent."""
    user = getattr(request.state, CURRENT_USER_KEY, None)
    if not isinstance(user, User):
        raise AuthError("Unauthorized")
    return user
