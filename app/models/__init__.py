from app.models.bot_settings import BotSettings
from app.models.build import Build
from app.models.user import User

__all__ = [
    "Build",
    "User",
    "BotSettings",
]
