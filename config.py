"""
config.py

Centralized configuration management using pydantic-settings.
All modules must import settings from this file.
Direct os.getenv() calls are prohibited elsewhere.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application-wide settings loaded from .env file."""

    # Firebase
    firebase_project_id: str = ""
    firebase_credentials_path: str = ""  # empty -> application default credentials

    # Firestore collections holding push tokens, in lookup order
    users_collection: str = "users"
    profiles_collection: str = "profiles"

    # Recipient policy (JSON in env, e.g. RECIPIENT_PAIRS='{"a": "b"}')
    recipient_pairs: dict[str, str] = {"david1720": "maria1720"}
    display_name_aliases: dict[str, str] = {
        "Esteban": "david1720",
        "Luisa": "maria1720",
    }

    # Logging
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        """Normalise to an upper-case level name, rejecting unknown names."""
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


settings = Settings()
