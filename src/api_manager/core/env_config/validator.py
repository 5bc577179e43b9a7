"""
Pydantic settings for environment configuration.

Reads API_MANAGER_* variables and an optional .env file.
"""

from typing import Optional, Literal
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiManagerSettings(BaseSettings):
    """
    ApiManager configuration from environment variables.

    Reads from:
    1. Environment variables (API_MANAGER_*)
    2. .env file
    3. Defaults

    Example .env file:
        API_MANAGER_BASE_URL=https://api.example.com
        API_MANAGER_ALLOW_LOGS=true
        API_MANAGER_BACKEND=requests
        API_MANAGER_TIMEOUT_READ=60
        API_MANAGER_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix='API_MANAGER_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Prefix for every DataRequest path")
    allow_logs: bool = Field(default=False)
    backend: Literal["httpx", "requests"] = Field(default="httpx")
    verify_ssl: bool = Field(default=True)

    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)
    upload_chunk_size: int = Field(default=64 * 1024, gt=0)

    connectivity_host: str = Field(default="1.1.1.1", min_length=1)
    connectivity_port: int = Field(default=53, gt=0, lt=65536)
    connectivity_timeout: float = Field(default=1.5, gt=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="DEBUG")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', 'backend', mode='before')
    @classmethod
    def lower_choice(cls, v):
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_file_path(self) -> "ApiManagerSettings":
        """log_file_path is required when log_enable_file=True."""
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return self

    @property
    def logging_enabled(self) -> bool:
        return self.log_enable_console or self.log_enable_file
