import datetime as dt
from abc import ABC, abstractmethod

from app.models.build import utcnow
from app.schemas.bot_settings import BotSettingsIn, BotSettingsOut
from app.schemas.build import BuildCreate, BuildOut, BuildUpdate
from app.schemas.user import UserCreate, UserRecord

ALIAS_IN_USE = "Command alias already in use"
USERNAME_IN_USE = "Username already exists"


def next_updated_at(previous: dt.datetime) -> dt.datetime:
    """A fresh timestamp strictly later than ``previous``."""
    now = utcnow()
    if now <= previous:
        return previous + dt.timedelta(microseconds=1)
    return now


class Storage(ABC):
    """Persistence contract shared by the memory and database backends.

    Lookups return ``None`` for missing records. Writes raise
    ``ConflictError`` on uniqueness violations and ``PersistenceError`` when
    the backing store fails.
    """

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> UserRecord | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> UserRecord | None: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> UserRecord: ...

    # Builds

    @abstractmethod
    def get_builds(self) -> list[BuildOut]: ...

    @abstractmethod
    def get_build(self, build_id: int) -> BuildOut | None: ...

    @abstractmethod
    def get_build_by_alias(self, alias: str) -> BuildOut | None: ...

    @abstractmethod
    def get_builds_by_activity_type(self, activity_type: str) -> list[BuildOut]: ...

    @abstractmethod
    def create_build(self, data: BuildCreate) -> BuildOut: ...

    @abstractmethod
    def update_build(self, build_id: int, data: BuildUpdate) -> BuildOut | None: ...

    @abstractmethod
    def delete_build(self, build_id: int) -> bool: ...

    # Bot settings

    @abstractmethod
    def get_bot_settings(self) -> BotSettingsOut | None: ...

    @abstractmethod
    def upsert_bot_settings(self, data: BotSettingsIn) -> BotSettingsOut: ...
