"""
Configuration loader from environment variables and .env files.
"""

from typing import Optional

from ..config import ApiManagerConfig, ConnectivityConfig, TimeoutConfig
from ..logging.config import LoggingConfig
from .profiles import get_env_file_path
from .validator import ApiManagerSettings


def load_from_env(
    profile: Optional[str] = None,
    env_file: Optional[str] = None,
    **overrides
) -> ApiManagerConfig:
    """
    Load ApiManagerConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (settings field names)
    2. Environment variables (API_MANAGER_*)
    3. .env file (profile-specific or default)
    4. Defaults

    Args:
        profile: Profile name (.env.<profile>); falls back to API_MANAGER_ENV
        env_file: Custom .env file path (overrides profile)
        **overrides: Explicit overrides, e.g. base_url=..., timeout_read=...

    Raises:
        pydantic.ValidationError: invalid values

    Example:
        >>> config = load_from_env(profile="production", allow_logs=True)
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    settings = ApiManagerSettings(_env_file=env_file)
    if overrides:
        settings = ApiManagerSettings.model_validate(
            {**settings.model_dump(), **overrides}
        )

    logging_config = None
    if settings.allow_logs and settings.logging_enabled:
        logging_config = LoggingConfig.create(
            level=settings.log_level,
            format=settings.log_format,
            enable_console=settings.log_enable_console,
            enable_file=settings.log_enable_file,
            file_path=settings.log_file_path,
        )

    return ApiManagerConfig(
        base_url=settings.base_url,
        allow_logs=settings.allow_logs,
        timeout=TimeoutConfig(connect=settings.timeout_connect, read=settings.timeout_read),
        verify_ssl=settings.verify_ssl,
        backend=settings.backend,
        upload_chunk_size=settings.upload_chunk_size,
        connectivity=ConnectivityConfig(
            host=settings.connectivity_host,
            port=settings.connectivity_port,
            timeout=settings.connectivity_timeout,
        ),
        logging=logging_config,
    )
