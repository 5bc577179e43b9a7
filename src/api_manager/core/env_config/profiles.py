"""
Profile management for different environments (.env.<profile> files).
"""

import os
from typing import Optional

PROFILE_ENV_VAR = "API_MANAGER_ENV"


def get_env_file_path(profile: Optional[str] = None) -> str:
    """
    Get .env file path for profile.

    Example:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)  # API_MANAGER_ENV unset
        '.env'
    """
    if profile is None:
        profile = os.getenv(PROFILE_ENV_VAR)

    if not profile:
        return ".env"

    return f".env.{profile}"
