import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import ConflictError, PersistenceError
from app.models.bot_settings import BotSettings
from app.models.build import Build, utcnow
from app.models.user import User
from app.schemas.bot_settings import BotSettingsIn, BotSettingsOut
from app.schemas.build import BuildCreate, BuildOut, BuildUpdate
from app.schemas.user import UserCreate, UserRecord
from app.storage.base import ALIAS_IN_USE, USERNAME_IN_USE, Storage, next_updated_at

logger = logging.getLogger(__name__)

BOT_SETTINGS_ID = 1

# Largest value an SQLite INTEGER primary key can hold
MAX_ROW_ID = 2**63 - 1


def _build_to_out(build: Build) -> BuildOut:
    """Convert a Build row to the API record."""
    return BuildOut(
        id=build.id,
        name=build.name,
        description=build.description,
        activity_type=build.activity_type,
        command_alias=build.command_alias,
        tier=build.tier,
        img_url=build.img_url,
        estimated_cost=build.estimated_cost,
        equipment=build.equipment,
        alternatives=build.alternatives,
        is_meta=bool(build.is_meta),
        tags=build.tags,
        created_at=build.created_at,
        updated_at=build.updated_at,
    )


def _user_to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        is_admin=bool(user.is_admin),
    )


def _column_values(fields: dict) -> dict:
    """Nested models become camelCase JSON documents."""
    values = dict(fields)
    for key in ("equipment", "alternatives"):
        if values.get(key) is not None:
            values[key] = values[key].model_dump(by_alias=True, exclude_none=True)
    return values


class DatabaseStorage(Storage):
    """SQLAlchemy-backed storage bound to one request's session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _errors(self, conflict_message: str = ALIAS_IN_USE):
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(conflict_message) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Database operation failed")
            raise PersistenceError("Database operation failed") from exc

    # Users

    def get_user(self, user_id):
        with self._errors():
            user = self.db.get(User, user_id)
        return _user_to_record(user) if user else None

    def get_user_by_username(self, username):
        with self._errors():
            user = self.db.query(User).filter(User.username == username).first()
        return _user_to_record(user) if user else None

    def create_user(self, data: UserCreate) -> UserRecord:
        if self.get_user_by_username(data.username):
            raise ConflictError(USERNAME_IN_USE)
        with self._errors(USERNAME_IN_USE):
            user = User(**data.model_dump())
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        return _user_to_record(user)

    # Builds

    def _get_build_row(self, build_id: int) -> Build | None:
        if build_id > MAX_ROW_ID:
            return None
        with self._errors():
            return self.db.get(Build, build_id)

    def get_builds(self):
        with self._errors():
            builds = self.db.query(Build).order_by(Build.id).all()
        return [_build_to_out(b) for b in builds]

    def get_build(self, build_id):
        build = self._get_build_row(build_id)
        return _build_to_out(build) if build else None

    def _find_alias(self, alias: str) -> Build | None:
        with self._errors():
            return self.db.query(Build).filter(Build.command_alias == alias).first()

    def get_build_by_alias(self, alias):
        build = self._find_alias(alias)
        return _build_to_out(build) if build else None

    def get_builds_by_activity_type(self, activity_type):
        with self._errors():
            builds = (
                self.db.query(Build)
                .filter(Build.activity_type == activity_type)
                .order_by(Build.id)
                .all()
            )
        return [_build_to_out(b) for b in builds]

    def create_build(self, data: BuildCreate) -> BuildOut:
        if self._find_alias(data.command_alias):
            raise ConflictError(ALIAS_IN_USE)
        fields = {name: getattr(data, name) for name in BuildCreate.model_fields}
        with self._errors():
            build = Build(**_column_values(fields))
            now = utcnow()
            build.created_at = now
            build.updated_at = now
            self.db.add(build)
            self.db.commit()
            self.db.refresh(build)
        return _build_to_out(build)

    def update_build(self, build_id: int, data: BuildUpdate) -> BuildOut | None:
        build = self._get_build_row(build_id)
        if build is None:
            return None
        changes = data.changes()
        alias = changes.get("command_alias")
        if alias and alias != build.command_alias:
            other = self._find_alias(alias)
            if other and other.id != build_id:
                raise ConflictError(ALIAS_IN_USE)
        with self._errors():
            for field, value in _column_values(changes).items():
                setattr(build, field, value)
            build.updated_at = next_updated_at(build.updated_at)
            self.db.commit()
            self.db.refresh(build)
        return _build_to_out(build)

    def delete_build(self, build_id):
        build = self._get_build_row(build_id)
        if build is None:
            return False
        with self._errors():
            self.db.delete(build)
            self.db.commit()
        return True

    # Bot settings

    def get_bot_settings(self):
        with self._errors():
            row = self.db.get(BotSettings, BOT_SETTINGS_ID)
        if row is None:
            return None
        return BotSettingsOut(
            id=row.id,
            token=row.token,
            client_id=row.client_id,
            guild_id=row.guild_id,
            prefix=row.prefix or "/",
        )

    def upsert_bot_settings(self, data: BotSettingsIn) -> BotSettingsOut:
        with self._errors():
            row = self.db.get(BotSettings, BOT_SETTINGS_ID)
            if row is None:
                row = BotSettings(id=BOT_SETTINGS_ID)
                self.db.add(row)
            row.token = data.token
            row.client_id = data.client_id
            row.guild_id = data.guild_id
            row.prefix = data.prefix or "/"
            self.db.commit()
        return self.get_bot_settings()
