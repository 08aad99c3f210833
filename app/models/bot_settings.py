from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class BotSettings(Base):
    """Chat bot credentials. At most one row, id 1."""

    __tablename__ = "bot_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    token: Mapped[str | None] = mapped_column(String(256), nullable=True)
    client_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    guild_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    prefix: Mapped[str] = mapped_column(String(16), default="/")
