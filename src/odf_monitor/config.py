"""Configuration management using pydantic-settings."""

import re
import tomllib
from enum import Enum
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import ComparisonMode

DEFAULT_MONGO_URI = "mongodb://localhost:27017/odf"
DEFAULT_PORT = 3011
DEFAULT_DISCIPLINE_TTL = 3600
CONFIG_PATH = Path("~/.config/odf-monitor/config.toml").expanduser()
MONGO_URI_PATTERN = re.compile(r"^mongodb(?:\+srv)?://.+")


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class MongoConfig(BaseSettings):
    """MongoDB connection and collection names."""

    model_config = SettingsConfigDict(env_prefix="ODF_MONITOR_MONGO_")

    uri: str = DEFAULT_MONGO_URI
    database: str | None = None  # Defaults to the database named in the URI
    documents_collection: str = "odf_documents"
    disciplines_collection: str = "discipline-settings"
    timeout_ms: int = 5000

    @field_validator("uri")
    @classmethod
    def check_uri(cls, v: str) -> str:
        if not MONGO_URI_PATTERN.match(v):
            raise ValueError("Must be a valid MongoDB URI (mongodb:// or mongodb+srv://)")
        return v


class ApiConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ODF_MONITOR_API_")

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    global_prefix: str = "api"
    frontend_url: str = "http://localhost:3000"
    environment: Environment = Environment.DEVELOPMENT

    @field_validator("port")
    @classmethod
    def check_port(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Port must be a positive integer")
        return v

    @field_validator("global_prefix")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        return v.strip("/")


class CacheConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ODF_MONITOR_CACHE_")

    discipline_ttl_seconds: int = DEFAULT_DISCIPLINE_TTL


class ComparisonConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ODF_MONITOR_COMPARISON_")

    mode: ComparisonMode = ComparisonMode.RAW


class ReprocessConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ODF_MONITOR_REPROCESS_")

    backend_url: str | None = None
    timeout: float = 30.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ODF_MONITOR_")

    mongo: MongoConfig = MongoConfig()
    api: ApiConfig = ApiConfig()
    cache: CacheConfig = CacheConfig()
    comparison: ComparisonConfig = ComparisonConfig()
    reprocess: ReprocessConfig = ReprocessConfig()


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults."""
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        mongo = MongoConfig(**data.get("mongo", {}))
        api = ApiConfig(**data.get("api", {}))
        cache = CacheConfig(**data.get("cache", {}))
        comparison = ComparisonConfig(**data.get("comparison", {}))
        reprocess = ReprocessConfig(**data.get("reprocess", {}))
        return Settings(
            mongo=mongo, api=api, cache=cache, comparison=comparison, reprocess=reprocess
        )

    return Settings()


def parse_mongo_uri(uri: str) -> tuple[str, str]:
    """Extract (host, database) from a MongoDB URI, dropping credentials."""
    cleaned = re.sub(r"^mongodb(?:\+srv)?://", "", uri)
    if "@" in cleaned:
        cleaned = cleaned.split("@", 1)[1]
    host, _, rest = cleaned.partition("/")
    db_name = rest.split("?", 1)[0]
    return host, db_name
