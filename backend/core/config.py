"""Settings for the maintenance entry points.

Resolution order (later wins):
  1. built-in defaults (same values as config.yaml)
  2. config.yaml at the repository root (or --config)
  3. environment variables, after loading a .env file with python-dotenv

Environment variables:
  MONGODB_URI (fallback MONGO_URI), USER_DB_NAME, USER_COLLECTION,
  STALE_INDEX_NAME, ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD, BCRYPT_ROUNDS,
  APP_ENV, LOG_LEVEL
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from backend.core.errors import ConfigError

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = ROOT_DIR / "config.yaml"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
PRODUCTION_ENVS = {"production", "prod"}

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "mongodb": {
        "database": "certifyflow",
        "users_collection": "users",
        "server_selection_timeout_ms": 5000,
    },
    "maintenance": {
        "stale_index": "username_1",
    },
    "admin_seed": {
        "email": "admin@certifyflow.com",
        "name": "System Administrator",
        "password": "Admin123!",
        "bcrypt_rounds": 10,
    },
}


@dataclass(frozen=True)
class Settings:
    mongo_uri: Optional[str]
    db_name: str
    users_collection: str
    server_selection_timeout_ms: int
    stale_index: str
    admin_email: str
    admin_name: str
    admin_password: str
    bcrypt_rounds: int
    environment: str = "development"
    uses_demo_password: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in PRODUCTION_ENVS


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug(f"No config file at {path}, using built-in defaults")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")
    return data


def _merge(defaults: Dict[str, Dict[str, Any]], overrides: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    merged = {section: dict(values) for section, values in defaults.items()}
    for section, values in overrides.items():
        if not isinstance(values, dict):
            raise ConfigError(f"Section '{section}' must be a mapping")
        merged.setdefault(section, {}).update(values)
    return merged


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def load_settings(config_path: Optional[str | Path] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from defaults, YAML and environment.

    When ``environ`` is omitted the process environment is used and a .env
    file is loaded first (existing variables are not overridden).
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if config_path and not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    cfg = _merge(DEFAULTS, _read_yaml(path))

    mongo = cfg["mongodb"]
    seed = cfg["admin_seed"]

    mongo_uri = environ.get("MONGODB_URI") or environ.get("MONGO_URI") or None
    admin_password = environ.get("ADMIN_PASSWORD")
    uses_demo_password = not admin_password
    environment = environ.get("APP_ENV", "development")

    settings = Settings(
        mongo_uri=mongo_uri,
        db_name=environ.get("USER_DB_NAME", mongo["database"]),
        users_collection=environ.get("USER_COLLECTION", mongo["users_collection"]),
        server_selection_timeout_ms=_as_int(
            "server_selection_timeout_ms", mongo["server_selection_timeout_ms"]),
        stale_index=environ.get("STALE_INDEX_NAME", cfg["maintenance"]["stale_index"]),
        admin_email=environ.get("ADMIN_EMAIL", seed["email"]),
        admin_name=environ.get("ADMIN_NAME", seed["name"]),
        admin_password=admin_password or str(seed["password"]),
        bcrypt_rounds=_as_int("BCRYPT_ROUNDS", environ.get("BCRYPT_ROUNDS", seed["bcrypt_rounds"])),
        environment=environment,
        uses_demo_password=uses_demo_password,
    )

    if settings.is_production and settings.uses_demo_password:
        raise ConfigError("ADMIN_PASSWORD must be set when APP_ENV is production")
    if not 4 <= settings.bcrypt_rounds <= 31:
        raise ConfigError(f"BCRYPT_ROUNDS must be between 4 and 31, got {settings.bcrypt_rounds}")
    return settings


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the shared console log format; LOG_LEVEL picks the level."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT
    )


__all__ = ["Settings", "load_settings", "configure_logging", "DEFAULT_CONFIG_PATH"]
