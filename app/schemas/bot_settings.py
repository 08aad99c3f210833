from pydantic import field_validator

from app.schemas.build import CamelModel


class BotSettingsIn(CamelModel):
    token: str | None = None
    client_id: str | None = None
    guild_id: str | None = None
    prefix: str | None = "/"

    @field_validator("prefix")
    @classmethod
    def _default_prefix(cls, value):
        return value or "/"


class BotSettingsOut(CamelModel):
    id: int | None = None
    token: str | None = ""
    client_id: str | None = ""
    guild_id: str | None = ""
    prefix: str = "/"


class BotPreviewRequest(CamelModel):
    command: str
    options: dict[str, str] = {}
