from app.errors import ConflictError
from app.models.build import utcnow
from app.schemas.bot_settings import BotSettingsIn, BotSettingsOut
from app.schemas.build import BuildCreate, BuildOut, BuildUpdate
from app.schemas.user import UserCreate, UserRecord
from app.storage.base import ALIAS_IN_USE, USERNAME_IN_USE, Storage, next_updated_at


class MemoryStorage(Storage):
    """Dict-backed storage for tests and single-process demos.

    Records are copied on the way in and out so callers never hold a
    reference into the store.
    """

    def __init__(self):
        self._users: dict[int, UserRecord] = {}
        self._builds: dict[int, BuildOut] = {}
        self._bot_settings: BotSettingsOut | None = None
        self._next_user_id = 1
        self._next_build_id = 1

    def get_user(self, user_id):
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def get_user_by_username(self, username):
        for user in self._users.values():
            if user.username == username:
                return user.model_copy()
        return None

    def create_user(self, data: UserCreate) -> UserRecord:
        if self.get_user_by_username(data.username):
            raise ConflictError(USERNAME_IN_USE)
        user = UserRecord(id=self._next_user_id, **data.model_dump())
        self._next_user_id += 1
        self._users[user.id] = user
        return user.model_copy()

    def get_builds(self):
        return [self._builds[key].model_copy(deep=True) for key in sorted(self._builds)]

    def get_build(self, build_id):
        build = self._builds.get(build_id)
        return build.model_copy(deep=True) if build else None

    def _find_alias(self, alias: str) -> BuildOut | None:
        for build in self._builds.values():
            if build.command_alias == alias:
                return build
        return None

    def get_build_by_alias(self, alias):
        build = self._find_alias(alias)
        return build.model_copy(deep=True) if build else None

    def get_builds_by_activity_type(self, activity_type):
        return [b for b in self.get_builds() if b.activity_type == activity_type]

    def create_build(self, data: BuildCreate) -> BuildOut:
        if self._find_alias(data.command_alias):
            raise ConflictError(ALIAS_IN_USE)
        now = utcnow()
        fields = {name: getattr(data, name) for name in BuildCreate.model_fields}
        build = BuildOut(id=self._next_build_id, created_at=now, updated_at=now, **fields)
        self._next_build_id += 1
        self._builds[build.id] = build.model_copy(deep=True)
        return build

    def update_build(self, build_id: int, data: BuildUpdate) -> BuildOut | None:
        existing = self._builds.get(build_id)
        if existing is None:
            return None
        changes = data.changes()
        alias = changes.get("command_alias")
        if alias and alias != existing.command_alias:
            other = self._find_alias(alias)
            if other and other.id != build_id:
                raise ConflictError(ALIAS_IN_USE)
        changes["updated_at"] = next_updated_at(existing.updated_at)
        updated = existing.model_copy(update=changes, deep=True)
        self._builds[build_id] = updated.model_copy(deep=True)
        return updated

    def delete_build(self, build_id):
        return self._builds.pop(build_id, None) is not None

    def get_bot_settings(self):
        return self._bot_settings.model_copy() if self._bot_settings else None

    def upsert_bot_settings(self, data: BotSettingsIn) -> BotSettingsOut:
        self._bot_settings = BotSettingsOut(id=1, **data.model_dump())
        return self._bot_settings.model_copy()
