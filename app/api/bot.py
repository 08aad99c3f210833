import logging

from fastapi import APIRouter, Depends

from app.bot.commands import command_definitions, dispatch
from app.config import get_settings
from app.deps import get_storage, require_login
from app.schemas.bot_settings import BotPreviewRequest, BotSettingsIn, BotSettingsOut
from app.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/bot-settings", response_model=BotSettingsOut)
async def get_bot_settings(
    user=Depends(require_login),
    storage: Storage = Depends(get_storage),
):
    return storage.get_bot_settings() or BotSettingsOut()


@router.post("/bot-settings", response_model=BotSettingsOut)
async def update_bot_settings(
    data: BotSettingsIn,
    user=Depends(require_login),
    storage: Storage = Depends(get_storage),
):
    """Replace the bot settings record."""
    settings = storage.upsert_bot_settings(data)
    logger.info(
        "Bot settings updated (client_id=%s, guild_id=%s)",
        settings.client_id,
        settings.guild_id or "global",
    )
    return settings


@router.get("/bot/commands")
async def list_bot_commands(user=Depends(require_login)):
    """Command definitions for registering with the chat platform."""
    return command_definitions()


@router.post("/bot/preview")
async def preview_bot_command(
    data: BotPreviewRequest,
    user=Depends(require_login),
    storage: Storage = Depends(get_storage),
):
    """Run a bot command against the store and return its reply."""
    return dispatch(storage, data.command, data.options, get_settings().PUBLIC_URL)
