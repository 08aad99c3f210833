from pydantic import BaseModel

from app.schemas.build import CamelModel


class LoginRequest(BaseModel):
    username: str
    password: str


class UserCreate(CamelModel):
    username: str
    # Already hashed; storage treats it as opaque
    password_hash: str
    is_admin: bool = False


class UserRecord(CamelModel):
    id: int
    username: str
    password_hash: str
    is_admin: bool = False


class UserOut(CamelModel):
    id: int
    username: str
    is_admin: bool = False
