import logging

from fastapi import APIRouter, Depends, Request

from app.deps import current_user, get_storage
from app.errors import AuthError
from app.schemas.user import LoginRequest, UserOut
from app.services.auth import authenticate
from app.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=UserOut)
async def login(
    request: Request,
    credentials: LoginRequest,
    storage: Storage = Depends(get_storage),
):
    user = authenticate(storage, credentials.username, credentials.password)
    if not user:
        raise AuthError("Invalid username or password")
    request.session["user_id"] = user.id
    request.session["username"] = user.username
    request.session["is_admin"] = user.is_admin
    logger.info("User %s logged in", user.username)
    return UserOut(id=user.id, username=user.username, is_admin=user.is_admin)


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@router.get("/user", response_model=UserOut)
async def get_current_user(request: Request, storage: Storage = Depends(get_storage)):
    session_user = current_user(request)
    if not session_user:
        raise AuthError()
    user = storage.get_user(session_user["id"])
    if not user:
        request.session.clear()
        raise AuthError()
    return UserOut(id=user.id, username=user.username, is_admin=user.is_admin)
