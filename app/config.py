from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    SECRET_KEY: str = "change-me"
    DATABASE_URL: str = "sqlite:///./builds.db"

    # "database" or "memory"
    STORAGE_BACKEND: str = "database"

    # API auth (bearer token alternative to a session)
    API_TOKEN: str = ""

    # Used to absolutize relative image paths in bot messages
    PUBLIC_URL: str = "http://localhost:8000"

    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin"
    BOOTSTRAP_ON_STARTUP: bool = True
    SEED_SAMPLE_BUILDS: bool = False

    APP_TITLE: str = "Build Manager"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
