from passlib.hash import bcrypt

from app.schemas.user import UserRecord
from app.storage import Storage


def hash_password(password: str) -> str:
    return bcrypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.verify(password, password_hash)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def authenticate(storage: Storage, username: str, password: str) -> UserRecord | None:
    user = storage.get_user_by_username(username)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user
