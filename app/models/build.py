import datetime as dt

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def utcnow() -> dt.datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Build(Base):
    __tablename__ = "builds"
    # Never hand out an id twice, even after deletes
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    activity_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    command_alias: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    tier: Mapped[str] = mapped_column(String(16), default="T8")
    img_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    estimated_cost: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Stored with camelCase keys, as sent on the wire
    equipment: Mapped[dict] = mapped_column(JSON, nullable=False)
    alternatives: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    is_meta: Mapped[bool] = mapped_column(Boolean, default=False)
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<Build {self.id}: {self.command_alias}>"
