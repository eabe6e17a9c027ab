from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', env_prefix='FILEPANE_')

    app_name: str = 'filepane'
    app_host: str = '127.0.0.1'
    app_port: int = 34115
    log_level: str = 'info'
    cors_origins: str = ''
    frontend_dir: Optional[str] = None
    temp_extension: str = '.dctmp'
    subdirectory_limit: int = Field(default=3000, ge=1)
    directory_mode: int = 0o755
    copy_chunk_size: int = Field(default=1024 * 1024, ge=4096)
    command_timeout_sec: int = Field(default=20, ge=2, le=300)


settings = Settings()
