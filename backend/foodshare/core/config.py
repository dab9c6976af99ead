# foodshare/core/config.py
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

StorageBackend = Literal["auto", "memory", "file", "mongo"]


class Settings(BaseSettings):
    storage_backend: StorageBackend = "auto"
    mongodb_uri: Optional[str] = None
    mongodb_db: str = "foodshare"
    data_file: str = "db.json"

    admin_id: str = "admin"
    admin_password: str = "1234"

    default_expiry_hours: float = 6
    seed_demo: bool = True
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def resolved_backend(self) -> str:
        """'auto' means Mongo when a URI is configured, else the local JSON file."""
        if self.storage_backend != "auto":
            return self.storage_backend
        return "mongo" if self.mongodb_uri else "file"


@lru_cache
def get_settings() -> Settings:
    return Settings()
