"""
Configuration file loader for YAML and JSON files.

Supports loading ApiManagerConfig from external configuration files.

Example config.yaml:

    api_manager:
      base_url: https://api.example.com
      allow_logs: true
      backend: httpx
      timeout:
        connect: 5
        read: 60
      connectivity:
        host: 8.8.8.8
        port: 53
      logging:
        level: INFO
        format: json
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..config import ApiManagerConfig, ConnectivityConfig, TimeoutConfig
from ..exceptions import ConfigValidationError
from ..logging import LoggingConfig

CONFIG_FILE_ENV_VAR = "API_MANAGER_CONFIG_FILE"
ROOT_SECTION = "api_manager"

_SECTIONS = {
    "timeout": TimeoutConfig,
    "connectivity": ConnectivityConfig,
    "logging": LoggingConfig,
}
_SCALARS = ("base_url", "allow_logs", "backend", "verify_ssl", "upload_chunk_size")


class ConfigFileLoader:
    """
    Загрузчик конфигурации из файлов.

    Examples:
        >>> config = ConfigFileLoader.from_yaml("config.yaml")
        >>> config = ConfigFileLoader.from_json("config.json")
        >>> config = ConfigFileLoader.from_file("config.yaml")  # Auto-detect
        >>> config = ConfigFileLoader.from_env_path()  # From API_MANAGER_CONFIG_FILE
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> ApiManagerConfig:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> ApiManagerConfig:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> ApiManagerConfig:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            return ConfigFileLoader.from_yaml(path)
        if suffix == ".json":
            return ConfigFileLoader.from_json(path)

        raise ValueError(
            f"Unsupported config format: {suffix}. Supported: .yaml, .yml, .json"
        )

    @staticmethod
    def from_env_path(env_var: str = CONFIG_FILE_ENV_VAR) -> Optional[ApiManagerConfig]:
        """
        Загрузить конфиг по пути из переменной окружения.

        Returns:
            ApiManagerConfig, или None если переменная не задана
        """
        path = os.getenv(env_var)
        if not path:
            return None
        return ConfigFileLoader.from_file(path)

    @staticmethod
    def _build_config(data: Dict[str, Any], source: str) -> ApiManagerConfig:
        """Построить ApiManagerConfig из словаря."""
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Config root must be a mapping in {source}")

        if ROOT_SECTION in data:
            data = data[ROOT_SECTION]
            if not isinstance(data, dict):
                raise ConfigValidationError(
                    f"Section '{ROOT_SECTION}' must be a mapping in {source}"
                )

        unknown = set(data) - set(_SECTIONS) - set(_SCALARS)
        if unknown:
            raise ConfigValidationError(
                f"Unknown config keys in {source}: {', '.join(sorted(unknown))}"
            )

        kwargs: Dict[str, Any] = {key: data[key] for key in _SCALARS if key in data}

        try:
            for name, section_cls in _SECTIONS.items():
                if name not in data:
                    continue
                section = data[name]
                if not isinstance(section, dict):
                    raise ConfigValidationError(
                        f"Section '{name}' must be a mapping in {source}"
                    )
                if section_cls is LoggingConfig:
                    kwargs[name] = LoggingConfig.create(**section)
                else:
                    kwargs[name] = section_cls(**section)

            return ApiManagerConfig(**kwargs)
        except (ValueError, TypeError) as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}")
