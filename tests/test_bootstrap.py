from app.config import Settings
from app.services.auth import authenticate, hash_password, verify_password
from app.services.bootstrap import SAMPLE_BUILDS, bootstrap, ensure_default_admin, seed_sample_builds
from app.storage import MemoryStorage


def test_default_admin_created_once():
    storage = MemoryStorage()
    settings = Settings(DEFAULT_ADMIN_USERNAME="boss", DEFAULT_ADMIN_PASSWORD="s3cret")

    assert ensure_default_admin(storage, settings) is True
    assert ensure_default_admin(storage, settings) is False

    user = storage.get_user_by_username("boss")
    assert user.is_admin is True
    assert user.password_hash != "s3cret"
    assert authenticate(storage, "boss", "s3cret") == user
    assert authenticate(storage, "boss", "wrong") is None
    assert authenticate(storage, "nobody", "s3cret") is None


def test_seed_sample_builds_skips_existing(storage):
    assert seed_sample_builds(storage) == len(SAMPLE_BUILDS)
    assert seed_sample_builds(storage) == 0
    assert [b.command_alias for b in storage.get_builds()] == [
        "greataxe-solo",
        "arcane-zvz",
        "gatherer-nature",
    ]


def test_bootstrap_seeds_only_when_enabled():
    storage = MemoryStorage()
    bootstrap(storage, Settings(SEED_SAMPLE_BUILDS=False))
    assert storage.get_builds() == []
    assert storage.get_user_by_username("admin") is not None

    bootstrap(storage, Settings(SEED_SAMPLE_BUILDS=True))
    assert len(storage.get_builds()) == len(SAMPLE_BUILDS)


def test_verify_password_rejects_non_hash():
    assert verify_password("admin", "admin") is False
    assert verify_password("admin", hash_password("admin")) is True
