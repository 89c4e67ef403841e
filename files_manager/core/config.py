# files_manager/core/config.py
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # document store
    db_host: str = "localhost"
    db_port: int = 27017
    db_database: str = "files_manager"

    # session cache
    redis_host: str = "localhost"
    redis_port: int = 6379

    port: int = 5000

    # payload storage
    folder_path: str = "/tmp/files_manager"
    storage_backend: Literal["local", "s3"] = "local"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = None
    aws_s3_bucket_name: Optional[str] = None

    session_ttl_seconds: int = 60 * 60 * 24
    page_size: int = 20

    log_level: str = "INFO"
    log_format: Literal["plain", "json"] = "plain"

    # Tell pydantic-settings to load from .env at project root
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore any extra stuff in .env
    )

    @property
    def mongo_url(self) -> str:
        return f"mongodb://{self.db_host}:{self.db_port}"

    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}/0"


@lru_cache
def get_settings() -> Settings:
    return Settings()
