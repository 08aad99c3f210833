import pytest

from app.bot.commands import (
    HELP_COMMAND,
    build_command,
    builds_command,
    command_definitions,
    dispatch,
    find_build,
    help_command,
)
from app.bot.formatting import EMBED_COLOR, format_build_message, format_piece
from app.schemas.build import EquipmentPiece
from app.services.bootstrap import seed_sample_builds
from app.services.validation import validate_build_input
from app.storage import MemoryStorage

PUBLIC_URL = "https://builds.example.com"


@pytest.fixture
def seeded():
    storage = MemoryStorage()
    seed_sample_builds(storage)
    return storage


def _fields(embed) -> dict:
    return {f["name"]: f["value"] for f in embed["fields"]}


def test_format_piece():
    assert format_piece(EquipmentPiece(name="Great Axe", tier="T8", quality="Exceptional")) == "Great Axe (T8 Exceptional)"
    assert format_piece(EquipmentPiece(name="Torch", tier="T8")) == "Torch (T8)"
    assert format_piece(EquipmentPiece(name="Torch")) == "Torch"


def test_format_build_message(seeded):
    build = seeded.get_build_by_alias("greataxe-solo")
    embed = format_build_message(build, PUBLIC_URL)

    assert embed["title"] == "Great Axe Solo Build"
    assert embed["color"] == EMBED_COLOR
    assert embed["footer"] == {"text": f"Build ID: #{build.id}"}
    assert embed["timestamp"] == build.updated_at.isoformat()
    assert "image" not in embed

    fields = _fields(embed)
    assert fields["Activity Type"] == "Solo PvP"
    assert fields["Meta Build"] == "No"
    assert fields["Estimated Cost"] == "1.2M Silver"
    assert fields["⚔️ Weapon"] == "Great Axe (T8 Exceptional)"
    assert fields["🛡️ Off-Hand"] == "Torch (T8)"
    assert fields["🍖 Food"] == "Beef Stew (T8)"
    assert "Mount" not in fields
    assert "**Weapon Alternatives**\n• Halberd - For more range but less mobility." in fields["Alternative Options"]
    assert embed["fields"][-1] == {
        "name": "Command Usage",
        "value": "`/build greataxe-solo`",
        "inline": False,
    }


def test_format_minimal_build(make_payload):
    storage = MemoryStorage()
    build = storage.create_build(validate_build_input(make_payload(isMeta=True)))
    embed = format_build_message(build, PUBLIC_URL)

    assert embed["description"] == "No description available"
    names = [f["name"] for f in embed["fields"]]
    assert names == ["Activity Type", "Meta Build", "Equipment", "⚔️ Weapon", "Command Usage"]
    assert _fields(embed)["Meta Build"] == "Yes ⭐"


def test_format_skips_unnamed_slots(make_payload):
    storage = MemoryStorage()
    payload = make_payload(
        equipment={"weapon": {"name": "Axe", "tier": "T8"}, "cape": {"tier": "T8"}, "mount": {"name": "Swiftclaw"}}
    )
    embed = format_build_message(storage.create_build(validate_build_input(payload)))
    fields = _fields(embed)
    assert "🧣 Cape" not in fields
    assert fields["🐎 Mount"] == "Swiftclaw"


@pytest.mark.parametrize(
    "img_url, expected",
    [
        ("/uploads/image-1.png", f"{PUBLIC_URL}/uploads/image-1.png"),
        ("https://cdn.example.com/axe.png", "https://cdn.example.com/axe.png"),
    ],
)
def test_format_image(make_payload, img_url, expected):
    storage = MemoryStorage()
    build = storage.create_build(validate_build_input(make_payload(imgUrl=img_url)))
    assert format_build_message(build, PUBLIC_URL + "/")["image"] == {"url": expected}


def test_find_build_prefers_alias_then_substring(seeded):
    assert find_build(seeded, "arcane-zvz").name == "Arcane ZvZ Support"
    assert find_build(seeded, "GATHERER").command_alias == "gatherer-nature"
    assert find_build(seeded, "zvz").command_alias == "arcane-zvz"
    assert find_build(seeded, "nothing-like-it") is None


def test_build_command(seeded):
    reply = build_command(seeded, "greataxe-solo", PUBLIC_URL)
    assert reply["embeds"][0]["title"] == "Great Axe Solo Build"
    [row] = reply["components"]
    assert row["components"][0]["label"] == "View on Website"
    assert row["components"][0]["url"] == f"{PUBLIC_URL}/builds/1"


def test_build_command_not_found(seeded):
    assert build_command(seeded, "mystery") == {"content": "No build found with name or alias: mystery"}


def test_builds_command_groups_by_activity(seeded):
    reply = builds_command(seeded)
    [embed] = reply["embeds"]
    assert embed["title"] == "Albion Online Builds"
    fields = _fields(embed)
    assert list(fields) == ["Solo PvP", "Group PvP", "Gathering"]
    assert fields["Group PvP"] == "• **Arcane ZvZ Support** *(arcane-zvz)* 🌟"


def test_builds_command_filtered(seeded):
    reply = builds_command(seeded, "Gathering")
    assert reply["embeds"][0]["title"] == "Albion Online Builds for Gathering"
    assert builds_command(seeded, "Avalon") == {"content": "No builds found for activity: Avalon"}
    assert builds_command(MemoryStorage()) == {"content": "No builds found"}


def test_help_and_definitions():
    names = [f["name"] for f in help_command()["embeds"][0]["fields"]]
    assert names == ["/build <name>", "/builds [activity]", f"/{HELP_COMMAND}"]

    definitions = {d["name"]: d for d in command_definitions()}
    activity = definitions["builds"]["options"][0]
    assert {"name": "Gathering", "value": "Gathering"} in activity["choices"]
    assert definitions["build"]["options"][0]["required"] is True


def test_dispatch(seeded):
    assert dispatch(seeded, "builds", {"activity": "Solo PvP"})["embeds"][0]["fields"][0]["name"] == "Solo PvP"
    assert dispatch(seeded, HELP_COMMAND) == help_command()
    assert dispatch(seeded, "unknown") == {"content": "There was an error while executing this command!"}
