import secrets

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.errors import AuthError
from app.storage import DatabaseStorage, MemoryStorage, Storage

_memory_storage: MemoryStorage | None = None


def get_memory_storage() -> MemoryStorage:
    global _memory_storage
    if _memory_storage is None:
        _memory_storage = MemoryStorage()
    return _memory_storage


def get_storage(db: Session = Depends(get_db)) -> Storage:
    if get_settings().STORAGE_BACKEND == "memory":
        return get_memory_storage()
    return DatabaseStorage(db)


def current_user(request: Request) -> dict | None:
    user_id = request.session.get("user_id")
    if not user_id:
        return None
    return {
        "id": user_id,
        "username": request.session.get("username", ""),
        "is_admin": request.session.get("is_admin", False),
    }


bearer_scheme = HTTPBearer(auto_error=False)


def _has_api_token(credentials: HTTPAuthorizationCredentials | None) -> bool:
    token = get_settings().API_TOKEN
    if not token or credentials is None:
        return False
    return secrets.compare_digest(credentials.credentials.encode(), token.encode())


def is_authenticated(
    request: Request, credentials: HTTPAuthorizationCredentials | None = None
) -> bool:
    """A logged-in session or a bearer token matching API_TOKEN."""
    return current_user(request) is not None or _has_api_token(credentials)


def require_login(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
):
    if not is_authenticated(request, credentials):
        raise AuthError()
    return current_user(request)
