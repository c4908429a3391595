"""
Configuration for the DeckShare backend.

Runtime settings come from environment variables (optionally seeded from a
``.env`` file). Tunables that rarely change live in an optional YAML file and
are read by dotted path, e.g. ``image_store.thumbnail_width``.
"""

import json
import os
from typing import Any

import yaml

from dotenv import load_dotenv

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DEFAULT_FILE_CONFIG_PATH = os.path.join(BACKEND_DIR, "..", "config", "deckshare.yaml")


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_list(name: str, default: list[str]) -> list[str]:
    """Parse a JSON array or a comma separated list."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return list(default)
    raw = raw.strip()
    if raw.startswith("["):
        return [str(item) for item in json.loads(raw)]
    return [item.strip() for item in raw.split(",") if item.strip()]


class ServiceConfig:
    """Environment backed settings plus optional YAML overrides."""

    def __init__(self, env_file: str | None = None) -> None:
        # Real environment variables win over the .env file
        load_dotenv(dotenv_path=env_file or os.path.join(BACKEND_DIR, ".env"), override=False)
        self.config: dict[str, Any] = {}
        self.file_config: dict[str, Any] = {}
        self.file_config_path = os.getenv("APP_CONFIG_PATH", DEFAULT_FILE_CONFIG_PATH)
        self.load_from_env()
        self.load_file_config()

    def load_from_env(self) -> None:
        self.config = {
            # Persistence
            "database_url": os.getenv("DATABASE_URL"),
            "db_host": os.getenv("DB_HOST", "localhost"),
            "db_port": os.getenv("DB_PORT", "5432"),
            "db_user": os.getenv("DB_USER", "postgres"),
            "db_password": os.getenv("DB_PASSWORD", "postgres"),
            "db_name": os.getenv("DB_NAME", "deckshare"),
            "db_echo": _env_bool("DB_ECHO"),
            # Image Store
            "media_root": os.getenv("MEDIA_ROOT", "./uploads"),
            "base_url": os.getenv("BASE_URL", "http://localhost:8000"),
            # Auth
            "secret_key": os.getenv("SECRET_KEY", "supersecret"),
            "access_token_expire_minutes": _env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 1440),
            # HTTP and runtime
            "debug": _env_bool("DEBUG"),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "allowed_origins": _env_list("ALLOWED_ORIGINS", ["http://localhost:5173"]),
            "expired_purge_interval_seconds": _env_int("EXPIRED_PURGE_INTERVAL_SECONDS", 3600),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Return a setting, or ``default`` when it is unset."""
        value = self.config.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        self.config[key] = value

    def reload(self) -> None:
        """Re-read the environment and the YAML file."""
        self.load_from_env()
        self.load_file_config()

    def load_file_config(self) -> None:
        """Load the YAML tunables; a missing file means no overrides."""
        path = os.path.abspath(self.file_config_path)
        if not os.path.exists(path):
            self.file_config = {}
            return
        with open(path, "r", encoding="utf-8") as stream:
            data = yaml.safe_load(stream) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        self.file_config = data

    def get_file_value(self, path: str, default: Any = None) -> Any:
        """Look up a YAML tunable by dotted path.

        ``APP_FLAG_<PATH>`` environment variables take precedence, so
        ``image_store.thumbnail_width`` can be overridden with
        ``APP_FLAG_IMAGE_STORE_THUMBNAIL_WIDTH``.
        """
        override = os.getenv(f"APP_FLAG_{path.replace('.', '_').upper()}")
        if override is not None:
            return self._coerce_override(override, default)

        node: Any = self.file_config
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return default if node is None else node

    def set_file_config(self, file_config: dict[str, Any]) -> None:
        self.file_config = file_config

    @staticmethod
    def _coerce_override(raw: str, default: Any) -> Any:
        if not raw:
            return default
        if isinstance(default, bool):
            return raw.lower() in {"1", "true", "yes", "on"}
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
        return raw


# Global configuration instance
config = ServiceConfig()
