"""
Environment-driven configuration for the product search webhook.
"""
import os
from typing import Optional
from urllib.parse import quote_plus

from .errors import ConfigurationError

CATALOG_SOURCES = ("json", "sql")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if raw in ("true", "1", "yes"):
        return True
    if raw in ("false", "0", "no"):
        return False
    return default


def _first_env(*names: str, default: Optional[str] = None) -> Optional[str]:
    # Railway exposes MYSQLHOST, local setups use MYSQL_HOST
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


class Settings:
    """Configuration loaded from environment variables."""

    # Properties that read from environment each time
    @property
    def PORT(self) -> int:
        return int(os.getenv("PORT", "8080"))

    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def CATALOG_SOURCE(self) -> str:
        return os.getenv("CATALOG_SOURCE", "json").strip().lower()

    @property
    def CATALOG_PATH(self) -> str:
        return os.getenv("CATALOG_PATH", os.path.join("data", "sample_catalog.json"))

    @property
    def DATABASE_URL(self) -> Optional[str]:
        explicit = os.getenv("DATABASE_URL")
        if explicit:
            return explicit
        host = _first_env("MYSQLHOST", "MYSQL_HOST", default="localhost")
        port = _first_env("MYSQLPORT", "MYSQL_PORT", default="3306")
        user = _first_env("MYSQLUSER", "MYSQL_USER", default="root")
        password = _first_env("MYSQLPASSWORD", "MYSQL_PASSWORD", default="")
        database = _first_env("MYSQLDATABASE", "MYSQL_DATABASE", default="rezagemcollection")
        return f"mysql+pymysql://{quote_plus(user)}:{quote_plus(password)}@{host}:{port}/{database}"

    @property
    def CATALOG_CACHE_TTL_SECONDS(self) -> int:
        return int(os.getenv("CATALOG_CACHE_TTL_SECONDS", "300"))

    @property
    def QUERY_CACHE_TTL_SECONDS(self) -> int:
        return int(os.getenv("QUERY_CACHE_TTL_SECONDS", str(24 * 3600)))

    @property
    def REDIS_URL(self) -> Optional[str]:
        return os.getenv("REDIS_URL")

    @property
    def OPENAI_API_KEY(self) -> Optional[str]:
        return (os.getenv("OPENAI_API_KEY") or "").strip() or None

    @property
    def QUERY_CORRECTION_ENABLED(self) -> bool:
        return _env_bool("QUERY_CORRECTION_ENABLED", True)

    @property
    def QUERY_CORRECTION_MODEL(self) -> str:
        return os.getenv("QUERY_CORRECTION_MODEL", "gpt-4o-mini")

    @property
    def REQUEST_TIMEOUT_SECONDS(self) -> float:
        return float(os.getenv("REQUEST_TIMEOUT_SECONDS", "25"))

    @property
    def FUZZY_THRESHOLD(self) -> float:
        return float(os.getenv("FUZZY_THRESHOLD", "0.6"))

    def validate(self) -> None:
        """Validate settings needed to build the catalog source."""
        if self.CATALOG_SOURCE not in CATALOG_SOURCES:
            raise ConfigurationError(
                f"CATALOG_SOURCE must be one of {', '.join(CATALOG_SOURCES)}, got {self.CATALOG_SOURCE!r}"
            )
        if self.CATALOG_SOURCE == "sql" and not self.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL (or MYSQL_* variables) required when CATALOG_SOURCE=sql")
        if not 0.0 <= self.FUZZY_THRESHOLD <= 1.0:
            raise ConfigurationError("FUZZY_THRESHOLD must be between 0 and 1")


settings = Settings()
