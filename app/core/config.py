import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"
DEFAULT_CONFIG_FILE = BASE_DIR / "config" / "app.config.json"
INSECURE_SESSION_SECRET = "change-me"

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when settings cannot be resolved; fatal at startup."""


class ServerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    port: int = Field(default=3000, ge=1, le=65535)
    session_secret: str
    trust_proxy: bool = True


class DatabaseSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: str = Field(..., min_length=1)
    port: int = 3306
    user: str = Field(..., min_length=1)
    password: str = ""
    database: str = Field(..., min_length=1)
    connection_limit: int = Field(default=10, ge=1, alias="connectionLimit")
    url: Optional[str] = None

    def sqlalchemy_url(self) -> str | URL:
        if self.url:
            return self.url
        return URL.create(
            "mysql+pymysql",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query={"charset": "utf8mb4"},
        )


class AppSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_name: str = "Portfolio Site"
    environment: str = "development"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    api_prefix: str = "/api"
    cors_origins: tuple[str, ...] = ()
    public_dir: Path = BASE_DIR / "public"
    max_body_bytes: int = Field(default=1024 * 1024, ge=1)
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, ge=1)
    redis_url: Optional[str] = None
    rate_limit_requests: int = Field(default=300, ge=1)
    rate_limit_window_seconds: int = Field(default=15 * 60, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
        if isinstance(v, str):
            v = v.strip().strip('"\'')
            if v == "*":
                return ("*",)
            return tuple(origin.strip() for origin in v.split(",") if origin.strip())
        return tuple(v)

    @field_validator("public_dir", mode="after")
    @classmethod
    def resolve_public_dir(cls, v: Path) -> Path:
        return v if v.is_absolute() else BASE_DIR / v


class Settings(BaseModel):
    """Resolved, immutable application settings."""

    model_config = ConfigDict(frozen=True)

    server: ServerSettings
    db: DatabaseSettings
    app: AppSettings = AppSettings()

    @property
    def is_production(self) -> bool:
        return self.app.environment.lower() == "production"

    @property
    def secure_cookies(self) -> bool:
        # Only claim TLS when a trusted proxy terminates it in production.
        return self.is_production and self.server.trust_proxy

    @property
    def database_url(self) -> str | URL:
        return self.db.sqlalchemy_url()


class EnvironmentOverrides(BaseSettings):
    """Flat environment variables that override values from the config file."""

    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    PORT: Optional[int] = None
    SESSION_SECRET: Optional[str] = None
    TRUST_PROXY: Optional[bool] = None

    DB_HOST: Optional[str] = None
    DB_PORT: Optional[int] = None
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_NAME: Optional[str] = None
    DB_CONNECTION_LIMIT: Optional[int] = None
    DATABASE_URL: Optional[str] = None

    ENVIRONMENT: Optional[str] = None
    LOG_LEVEL: Optional[str] = None
    LOG_FILE_PATH: Optional[str] = None
    API_PREFIX: Optional[str] = None
    CORS_ORIGINS: Optional[str] = None
    PUBLIC_DIR: Optional[str] = None
    MAX_BODY_BYTES: Optional[int] = None
    MAX_UPLOAD_BYTES: Optional[int] = None
    REDIS_URL: Optional[str] = None
    RATE_LIMIT_REQUESTS: Optional[int] = None
    RATE_LIMIT_WINDOW_SECONDS: Optional[int] = None

    def as_layer(self) -> dict[str, dict[str, Any]]:
        mapping = {
            "server": {
                "port": self.PORT,
                "session_secret": self.SESSION_SECRET,
                "trust_proxy": self.TRUST_PROXY,
            },
            "db": {
                "host": self.DB_HOST,
                "port": self.DB_PORT,
                "user": self.DB_USER,
                "password": self.DB_PASSWORD,
                "database": self.DB_NAME,
                "connectionLimit": self.DB_CONNECTION_LIMIT,
                "url": self.DATABASE_URL,
            },
            "app": {
                "environment": self.ENVIRONMENT,
                "log_level": self.LOG_LEVEL,
                "log_file": self.LOG_FILE_PATH,
                "api_prefix": self.API_PREFIX,
                "cors_origins": self.CORS_ORIGINS,
                "public_dir": self.PUBLIC_DIR,
                "max_body_bytes": self.MAX_BODY_BYTES,
                "max_upload_bytes": self.MAX_UPLOAD_BYTES,
                "redis_url": self.REDIS_URL,
                "rate_limit_requests": self.RATE_LIMIT_REQUESTS,
                "rate_limit_window_seconds": self.RATE_LIMIT_WINDOW_SECONDS,
            },
        }
        return {
            section: {key: value for key, value in values.items() if value is not None}
            for section, values in mapping.items()
        }


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.warning("Config file %s not found, relying on environment variables", path)
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return data


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _describe_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"])
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def load_settings(config_file: str | Path | None = None, env_file: str | Path | None = ENV_FILE) -> Settings:
    """Resolve settings from defaults, the JSON config file and the environment.

    Environment variables win over file values, which win over defaults.
    Raises ConfigurationError when the file is malformed or a required key
    is missing from every layer.
    """

    if env_file is not None:
        load_dotenv(env_file)

    path = Path(config_file or os.getenv("APP_CONFIG_FILE") or DEFAULT_CONFIG_FILE)
    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid environment variable: {_describe_errors(exc)}") from exc
    layered = _merge(_read_config_file(path), overrides.as_layer())

    server = layered.setdefault("server", {})
    environment = str(layered.get("app", {}).get("environment", "development"))
    if not server.get("session_secret"):
        if environment.lower() == "production":
            raise ConfigurationError("Missing config key: server.session_secret")
        logger.warning("server.session_secret is not set, using an insecure default")
        server["session_secret"] = INSECURE_SESSION_SECRET

    try:
        return Settings.model_validate(layered)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {_describe_errors(exc)}") from exc
