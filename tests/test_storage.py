import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.errors import ConflictError, PersistenceError
from app.schemas.bot_settings import BotSettingsIn
from app.schemas.user import UserCreate
from app.services.validation import validate_build_input, validate_build_update
from app.storage import DatabaseStorage, MemoryStorage


def _create(storage, make_payload, **overrides):
    return storage.create_build(validate_build_input(make_payload(**overrides)))


def test_create_then_lookup_by_alias(storage, make_payload):
    created = _create(storage, make_payload, description="Dive and burst", tags=["solo"])
    assert created.id >= 1
    assert created.created_at == created.updated_at

    found = storage.get_build_by_alias("axe-1")
    assert found == created
    assert found.description == "Dive and burst"
    assert found.equipment.weapon.name == "Axe"


def test_lookups_return_none_when_missing(storage):
    assert storage.get_build(999) is None
    assert storage.get_build_by_alias("nope") is None
    assert storage.get_builds() == []


def test_duplicate_alias_conflicts(storage, make_payload):
    results = []
    for name in ("First", "Second"):
        try:
            results.append(_create(storage, make_payload, name=name))
        except ConflictError as exc:
            results.append(exc)

    assert [type(r).__name__ for r in results] == ["BuildOut", "ConflictError"]
    assert [b.name for b in storage.get_builds()] == ["First"]


def test_empty_update_only_touches_updated_at(storage, make_payload):
    created = _create(
        storage,
        make_payload,
        equipment={
            "weapon": {"name": "Axe", "tier": "T8", "quality": "Outstanding"},
            "cape": {"name": "Thetford Cape", "tier": "T6"},
        },
        alternatives={"armor": [{"name": "Hellion Jacket", "description": "Lifesteal"}]},
    )
    before = storage.get_build(created.id)

    after = storage.update_build(created.id, validate_build_update({}))

    assert after.updated_at > before.updated_at
    assert after.model_dump(exclude={"updated_at"}) == before.model_dump(exclude={"updated_at"})
    assert storage.get_build(created.id) == after


def test_update_merges_supplied_fields(storage, make_payload):
    created = _create(storage, make_payload, description="Original")
    updated = storage.update_build(created.id, validate_build_update({"tier": "T7", "isMeta": True}))

    assert updated.tier == "T7"
    assert updated.is_meta is True
    assert updated.description == "Original"
    assert updated.created_at == created.created_at
    assert updated.updated_at >= updated.created_at


def test_update_can_clear_optional_fields(storage, make_payload):
    created = _create(storage, make_payload, estimatedCost="1.2M Silver")
    updated = storage.update_build(created.id, validate_build_update({"estimatedCost": None}))
    assert updated.estimated_cost is None


def test_out_of_range_ids_are_missing(storage):
    huge = 2**64
    assert storage.get_build(huge) is None
    assert storage.update_build(huge, validate_build_update({"name": "X"})) is None
    assert storage.delete_build(huge) is False


def test_update_missing_returns_none(storage):
    assert storage.update_build(999, validate_build_update({"tier": "T7"})) is None


def test_update_alias_collision(storage, make_payload):
    _create(storage, make_payload, commandAlias="taken")
    mine = _create(storage, make_payload, commandAlias="mine")

    with pytest.raises(ConflictError):
        storage.update_build(mine.id, validate_build_update({"commandAlias": "taken"}))
    assert storage.get_build(mine.id).command_alias == "mine"

    # Re-submitting its own alias is not a collision
    same = storage.update_build(mine.id, validate_build_update({"commandAlias": "mine"}))
    assert same.command_alias == "mine"


def test_delete_is_idempotent(storage, make_payload):
    created = _create(storage, make_payload)
    assert storage.delete_build(created.id) is True
    assert storage.delete_build(created.id) is False
    assert storage.get_build(created.id) is None


def test_ids_are_not_reused(storage, make_payload):
    first = _create(storage, make_payload, commandAlias="first")
    storage.delete_build(first.id)
    second = _create(storage, make_payload, commandAlias="second")
    assert second.id > first.id


def test_filter_by_activity_type_is_exact(storage, make_payload):
    _create(storage, make_payload, commandAlias="a", activityType="Gathering")
    _create(storage, make_payload, commandAlias="b", activityType="gathering")
    _create(storage, make_payload, commandAlias="c", activityType="Solo PvP")
    _create(storage, make_payload, commandAlias="d", activityType="Gathering")

    found = storage.get_builds_by_activity_type("Gathering")
    assert [b.command_alias for b in found] == ["a", "d"]


def test_absent_slots_stay_absent(storage, make_payload):
    created = _create(
        storage,
        make_payload,
        equipment={"weapon": {"name": "Axe", "tier": "T8"}, "head": {"name": "Hood", "tier": "T8"}},
    )
    build = storage.get_build(created.id)
    assert build.equipment.head.name == "Hood"
    assert build.equipment.cape is None
    assert build.equipment.off_hand is None


def test_bot_settings_replaced_wholesale(storage):
    assert storage.get_bot_settings() is None

    storage.upsert_bot_settings(BotSettingsIn(token="t1", client_id="c1", guild_id="g1", prefix="!"))
    settings = storage.upsert_bot_settings(BotSettingsIn(token="t2", client_id="c2", prefix=""))

    assert settings.token == "t2"
    assert settings.guild_id is None
    assert settings.prefix == "/"
    assert storage.get_bot_settings() == settings


def test_users(storage):
    user = storage.create_user(UserCreate(username="officer", password_hash="opaque"))
    assert user.is_admin is False
    assert storage.get_user(user.id) == user
    assert storage.get_user_by_username("officer") == user
    assert storage.get_user_by_username("Officer") is None

    with pytest.raises(ConflictError):
        storage.create_user(UserCreate(username="officer", password_hash="other"))


def test_memory_records_are_copies(make_payload):
    storage = MemoryStorage()
    created = _create(storage, make_payload)
    created.name = "Mutated"
    created.equipment.weapon.name = "Mutated"

    stored = storage.get_build(created.id)
    assert stored.name == "Axe Build"
    assert stored.equipment.weapon.name == "Axe"


def test_database_failure_raises_persistence_error():
    # No tables created on this engine
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session = sessionmaker(bind=engine)()
    try:
        with pytest.raises(PersistenceError):
            DatabaseStorage(session).get_builds()
    finally:
        session.close()
        engine.dispose()
