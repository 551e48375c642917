"""
Configuration for building a CacheStore and its persistent store.
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from datastore.exceptions import ConfigurationError

_ENV_FIELDS = {
    "capacity": "DATASTORE_CAPACITY",
    "backend": "DATASTORE_BACKEND",
    "db_path": "DATASTORE_DB_PATH",
    "table_name": "DATASTORE_TABLE_NAME",
    "redis_url": "DATASTORE_REDIS_URL",
    "key_prefix": "DATASTORE_KEY_PREFIX",
    "max_recorded_failures": "DATASTORE_MAX_RECORDED_FAILURES",
}


class DataStoreConfig(BaseModel):
    """
    Settings for a cache and its backend.

    Attributes:
        capacity: Maximum resident entries in the cache
        backend: Persistent store to use ('sqlite', 'memory' or 'redis')
        db_path: SQLite database file
        table_name: SQLite table holding the key/value pairs
        redis_url: Redis connection URL
        key_prefix: Prefix for keys stored in Redis
        max_recorded_failures: Store failures kept by the cache for inspection
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    capacity: int = Field(default=1000, ge=0)
    backend: Literal["sqlite", "memory", "redis"] = "sqlite"
    db_path: str = "DataStore.db"
    table_name: str = Field(default="data", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "datastore:"
    max_recorded_failures: int = Field(default=100, ge=1)

    @classmethod
    def create(cls, **values) -> "DataStoreConfig":
        """
        Build a config, reporting invalid values as ConfigurationError.
        """
        try:
            return cls(**values)
        except PydanticValidationError as e:
            raise ConfigurationError("Invalid datastore configuration", e) from e

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "DataStoreConfig":
        """
        Build a config from DATASTORE_* environment variables.

        Unset variables fall back to the field defaults.
        """
        environ = os.environ if environ is None else environ
        values = {
            field: environ[name]
            for field, name in _ENV_FIELDS.items()
            if name in environ
        }
        return cls.create(**values)
