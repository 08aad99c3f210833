"""Render builds as chat embed payloads.

The payloads follow Discord's embed JSON shape so they can be handed to the
bot SDK as-is. Everything here is a pure function of its arguments.
"""
from app.schemas.build import BuildOut, EquipmentPiece, WeaponPiece

EMBED_COLOR = 0xD4AF37
SEPARATOR = "---------------------"

SLOT_EMOJIS = {
    "weapon": "⚔️",
    "off_hand": "🛡️",
    "head": "🧢",
    "chest": "👕",
    "shoes": "👟",
    "cape": "🧣",
    "food": "🍖",
    "potion": "🧪",
    "mount": "🐎",
}

GEAR_SLOTS = [
    ("weapon", "Weapon"),
    ("off_hand", "Off-Hand"),
    ("head", "Head"),
    ("chest", "Chest"),
    ("shoes", "Shoes"),
    ("cape", "Cape"),
]
CONSUMABLE_SLOTS = [("food", "Food"), ("potion", "Potion")]

ALTERNATIVE_SECTIONS = [
    ("weapons", "Weapon Alternatives"),
    ("armor", "Armor Alternatives"),
    ("consumables", "Consumable Alternatives"),
]


def _field(name: str, value: str, inline: bool = False) -> dict:
    return {"name": name, "value": value, "inline": inline}


def format_piece(piece: EquipmentPiece | WeaponPiece) -> str:
    """``name (tier quality)``, leaving out whatever is missing."""
    value = piece.name or ""
    if piece.tier:
        detail = piece.tier
        if piece.quality:
            detail += f" {piece.quality}"
        value += f" ({detail})"
    return value


def format_equipment_field(slot: str, label: str, piece) -> dict:
    emoji = SLOT_EMOJIS.get(slot, "❓")
    return _field(f"{emoji} {label}", format_piece(piece), inline=True)


def _slot_fields(build: BuildOut, slots) -> list[dict]:
    fields = []
    for slot, label in slots:
        piece = getattr(build.equipment, slot)
        if piece is not None and piece.name:
            fields.append(format_equipment_field(slot, label, piece))
    return fields


def format_alternatives(build: BuildOut) -> str:
    if build.alternatives is None:
        return ""
    sections = []
    for key, heading in ALTERNATIVE_SECTIONS:
        options = getattr(build.alternatives, key) or []
        if not options:
            continue
        lines = [f"**{heading}**"]
        for option in options:
            suffix = f" - {option.description}" if option.description else ""
            lines.append(f"• {option.name}{suffix}")
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def image_url(img_url: str | None, public_url: str) -> str | None:
    if not img_url:
        return None
    if img_url.startswith("http"):
        return img_url
    return public_url.rstrip("/") + img_url


def format_build_message(build: BuildOut, public_url: str = "") -> dict:
    """Map a build onto an embed payload."""
    fields = [
        _field("Activity Type", build.activity_type, inline=True),
        _field("Meta Build", "Yes ⭐" if build.is_meta else "No", inline=True),
    ]
    if build.estimated_cost:
        fields.append(_field("Estimated Cost", build.estimated_cost, inline=True))

    fields.append(_field("Equipment", SEPARATOR))
    fields.extend(_slot_fields(build, GEAR_SLOTS))

    consumables = _slot_fields(build, CONSUMABLE_SLOTS)
    if consumables:
        fields.append(_field("Consumables", SEPARATOR))
        fields.extend(consumables)

    mount = _slot_fields(build, [("mount", "Mount")])
    if mount:
        fields.append(_field("Mount", SEPARATOR))
        fields.extend(mount)

    alternatives = format_alternatives(build)
    if alternatives:
        fields.append(_field("Alternative Options", alternatives))

    fields.append(_field("Command Usage", f"`/build {build.command_alias}`"))

    embed = {
        "title": build.name,
        "description": build.description or "No description available",
        "color": EMBED_COLOR,
        "timestamp": build.updated_at.isoformat(),
        "footer": {"text": f"Build ID: #{build.id}"},
        "fields": fields,
    }
    url = image_url(build.img_url, public_url)
    if url:
        embed["image"] = {"url": url}
    return embed
