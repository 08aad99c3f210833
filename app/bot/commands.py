"""Slash command handlers for the chat bot.

Handlers take a storage backend and the command's options and return a
message payload (``content``/``embeds``/``components``). Registering the
commands and delivering replies is left to the bot SDK.
"""
import logging
from collections import defaultdict

from app.bot.formatting import EMBED_COLOR, format_build_message
from app.schemas.build import ACTIVITY_TYPES, BuildOut
from app.storage import Storage

logger = logging.getLogger(__name__)

HELP_COMMAND = "albion-help"

# Discord application command option types / component types
_STRING_OPTION = 3
_ACTION_ROW = 1
_BUTTON = 2
_LINK_STYLE = 5


def command_definitions() -> list[dict]:
    """Command schema in the shape the registration endpoint expects."""
    return [
        {
            "name": "build",
            "description": "Show an Albion Online build",
            "options": [
                {
                    "type": _STRING_OPTION,
                    "name": "name",
                    "description": "The name or alias of the build",
                    "required": True,
                    "autocomplete": True,
                }
            ],
        },
        {
            "name": "builds",
            "description": "List available Albion Online builds",
            "options": [
                {
                    "type": _STRING_OPTION,
                    "name": "activity",
                    "description": "Filter builds by activity type",
                    "required": False,
                    "choices": [{"name": a, "value": a} for a in ACTIVITY_TYPES],
                }
            ],
        },
        {
            "name": HELP_COMMAND,
            "description": "Show help information for the Albion Online Bot",
        },
    ]


def find_build(storage: Storage, query: str) -> BuildOut | None:
    """Exact alias first, then a case-insensitive match on name or alias."""
    build = storage.get_build_by_alias(query)
    if build:
        return build
    needle = query.lower()
    for candidate in storage.get_builds():
        if needle in candidate.name.lower() or needle in candidate.command_alias.lower():
            return candidate
    return None


def build_command(storage: Storage, query: str, public_url: str = "") -> dict:
    build = find_build(storage, query)
    if build is None:
        return {"content": f"No build found with name or alias: {query}"}

    link = {
        "type": _BUTTON,
        "style": _LINK_STYLE,
        "label": "View on Website",
        "url": f"{public_url.rstrip('/')}/builds/{build.id}",
    }
    return {
        "embeds": [format_build_message(build, public_url)],
        "components": [{"type": _ACTION_ROW, "components": [link]}],
    }


def builds_command(storage: Storage, activity: str | None = None) -> dict:
    if activity:
        builds = storage.get_builds_by_activity_type(activity)
    else:
        builds = storage.get_builds()

    if not builds:
        suffix = f" for activity: {activity}" if activity else ""
        return {"content": f"No builds found{suffix}"}

    grouped: dict[str, list[BuildOut]] = defaultdict(list)
    for build in builds:
        grouped[build.activity_type].append(build)

    fields = []
    for activity_type, group in grouped.items():
        lines = [
            f"• **{b.name}** *({b.command_alias})*{' 🌟' if b.is_meta else ''}"
            for b in group
        ]
        fields.append({"name": activity_type, "value": "\n".join(lines), "inline": False})

    title = "Albion Online Builds" + (f" for {activity}" if activity else "")
    embed = {
        "title": title,
        "color": EMBED_COLOR,
        "description": "Use `/build <name>` to view details of a specific build",
        "fields": fields,
    }
    return {"embeds": [embed]}


def help_command() -> dict:
    embed = {
        "title": "Albion Online Bot - Help",
        "color": EMBED_COLOR,
        "description": "The Albion Online Bot provides equipment builds and "
        "recommendations for various activities in Albion Online.",
        "fields": [
            {"name": "/build <name>", "value": "Show a specific build by its name or alias", "inline": False},
            {
                "name": "/builds [activity]",
                "value": "List all available builds, optionally filtered by activity type",
                "inline": False,
            },
            {"name": f"/{HELP_COMMAND}", "value": "Show this help message", "inline": False},
        ],
        "footer": {"text": "Managed through the Albion Online Bot web interface"},
    }
    return {"embeds": [embed]}


def dispatch(storage: Storage, command: str, options: dict | None = None, public_url: str = "") -> dict:
    """Route a command invocation to its handler."""
    options = options or {}
    if command == "build":
        return build_command(storage, options.get("name", ""), public_url)
    if command == "builds":
        return builds_command(storage, options.get("activity"))
    if command == HELP_COMMAND:
        return help_command()
    logger.error("No command matching %s was found", command)
    return {"content": "There was an error while executing this command!"}
