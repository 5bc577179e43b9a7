"""Загрузка ApiManagerConfig из окружения, .env профилей и файлов."""

from .file_loader import ConfigFileLoader
from .loader import load_from_env
from .profiles import get_env_file_path
from .validator import ApiManagerSettings

__all__ = [
    "ApiManagerSettings",
    "ConfigFileLoader",
    "get_env_file_path",
    "load_from_env",
]
