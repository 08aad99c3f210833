import logging

from app.config import Settings
from app.errors import ConflictError
from app.schemas.user import UserCreate
from app.services.auth import hash_password
from app.services.validation import validate_build_input
from app.storage import Storage

logger = logging.getLogger(__name__)

SAMPLE_BUILDS = [
    {
        "name": "Great Axe Solo Build",
        "description": "A high-damage, mobile build for solo PvP engagements. "
        "Great for ganking and small-scale fights.",
        "activityType": "Solo PvP",
        "commandAlias": "greataxe-solo",
        "tier": "T8",
        "estimatedCost": "1.2M Silver",
        "equipment": {
            "weapon": {"name": "Great Axe", "tier": "T8", "quality": "Exceptional"},
            "offHand": {"name": "Torch", "tier": "T8"},
            "head": {"name": "Mercenary Hood", "tier": "T8"},
            "chest": {"name": "Stalker Jacket", "tier": "T8"},
            "shoes": {"name": "Scholar Sandals", "tier": "T8"},
            "cape": {"name": "Thetford Cape", "tier": "T8"},
            "food": {"name": "Beef Stew", "tier": "T8"},
            "potion": {"name": "Resistance Potion", "tier": "T8"},
        },
        "alternatives": {
            "weapons": [
                {"name": "Halberd", "description": "For more range but less mobility."},
                {"name": "Carrioncaller", "description": "For sustained fights with healing reduction."},
            ],
            "armor": [
                {"name": "Hellion Jacket", "description": "For more sustain through lifesteal."},
                {"name": "Hunter Shoes", "description": "For extra mobility with Rush."},
            ],
            "consumables": [
                {"name": "Omelette", "description": "For cheaper food option with less stats."},
                {"name": "Gigantify Potion", "description": "For CC resistance when needed."},
            ],
        },
        "isMeta": False,
        "tags": ["ganking", "physical dps", "solo"],
    },
    {
        "name": "Arcane ZvZ Support",
        "description": "Support build for large-scale fights, focusing on crowd control and utility.",
        "activityType": "Group PvP",
        "commandAlias": "arcane-zvz",
        "tier": "T8",
        "estimatedCost": "2.5M Silver",
        "equipment": {
            "weapon": {"name": "Locus", "tier": "T8"},
            "offHand": {"name": "Tome", "tier": "T8"},
            "head": {"name": "Royal Cowl", "tier": "T8"},
            "chest": {"name": "Cleric Robe", "tier": "T8"},
            "shoes": {"name": "Royal Sandals", "tier": "T8"},
            "cape": {"name": "Martlock Cape", "tier": "T8"},
            "food": {"name": "Cabbage Soup", "tier": "T8"},
            "potion": {"name": "Energy Potion", "tier": "T8"},
        },
        "isMeta": True,
        "tags": ["zvz", "support", "group play"],
    },
    {
        "name": "Nature Gatherer",
        "description": "Escape-focused build for safe resource gathering in high-risk zones.",
        "activityType": "Gathering",
        "commandAlias": "gatherer-nature",
        "tier": "T8",
        "estimatedCost": "1.8M Silver",
        "equipment": {
            "weapon": {"name": "Blight Staff", "tier": "T8"},
            "head": {"name": "Harvester Cap", "tier": "T8"},
            "chest": {"name": "Gatherer Jacket", "tier": "T8"},
            "shoes": {"name": "Gatherer Workboots", "tier": "T8"},
            "cape": {"name": "Fort Sterling Cape", "tier": "T8"},
            "food": {"name": "Fish", "tier": "T8"},
            "potion": {"name": "Invisibility Potion", "tier": "T8"},
            "mount": {"name": "Swiftclaw", "tier": "T8"},
        },
        "isMeta": False,
        "tags": ["gathering", "escape", "economy"],
    },
]


def ensure_default_admin(storage: Storage, settings: Settings) -> bool:
    """Create the configured admin account if it does not exist yet."""
    if storage.get_user_by_username(settings.DEFAULT_ADMIN_USERNAME):
        return False
    storage.create_user(
        UserCreate(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            is_admin=True,
        )
    )
    logger.info("Created default admin user '%s'", settings.DEFAULT_ADMIN_USERNAME)
    return True


def seed_sample_builds(storage: Storage) -> int:
    """Insert the sample builds whose aliases are still free."""
    created = 0
    for payload in SAMPLE_BUILDS:
        build = validate_build_input(payload)
        try:
            storage.create_build(build)
        except ConflictError:
            continue
        created += 1
    logger.info("Seeded %d sample builds (%d already existed)", created, len(SAMPLE_BUILDS) - created)
    return created


def bootstrap(storage: Storage, settings: Settings) -> None:
    ensure_default_admin(storage, settings)
    if settings.SEED_SAMPLE_BUILDS:
        seed_sample_builds(storage)
