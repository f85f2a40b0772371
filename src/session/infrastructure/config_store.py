"""
YAML хранилище AppConfig.

Чтение никогда не падает: отсутствующий или битый файл -> дефолтный
AppConfig (ConfigLoadFailure логируется как предупреждение).
"""

from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger
from pydantic import ValidationError

from config.settings import CONFIG_SCHEMA_VERSION
from src.domain.contracts import AppConfig
from ..domain.exceptions import ConfigLoadError, SessionFileWriteError
from ..domain.interfaces import IConfigStore


class YamlConfigStore(IConfigStore):
    """Конфиг в одном YAML файле."""

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

    def load(self) -> AppConfig:
        try:
            return AppConfig.model_validate(self._read())
        except (ConfigLoadError, ValidationError) as e:
            logger.warning(f"[ConfigStore] {e}; используются настройки по умолчанию")
            return AppConfig()

    def save(self, config: AppConfig) -> None:
        """
        Raises:
            SessionFileWriteError: Если файл не записан
        """
        data = config.model_dump(mode="json")
        data["schema_version"] = CONFIG_SCHEMA_VERSION
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.config_path.with_name(self.config_path.name + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
            tmp_path.replace(self.config_path)
            logger.debug(f"[ConfigStore] Сохранено: {self.config_path}")

        except (IOError, OSError, yaml.YAMLError) as e:
            raise SessionFileWriteError(
                message=f"Не удалось сохранить конфиг: {self.config_path}",
                component="YamlConfigStore",
                original_error=e
            )

    def _read(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            logger.debug(f"[ConfigStore] Файл не найден, дефолты: {self.config_path}")
            return {}

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (IOError, OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(
                message=f"Не удалось прочитать конфиг: {self.config_path}",
                component="YamlConfigStore",
                original_error=e
            )

        if not isinstance(data, dict):
            raise ConfigLoadError(
                message=f"Ожидался словарь в {self.config_path}, получено {type(data).__name__}",
                component="YamlConfigStore"
            )

        version = data.get("schema_version", CONFIG_SCHEMA_VERSION)
        if version != CONFIG_SCHEMA_VERSION:
            logger.warning(
                f"[ConfigStore] schema_version={version}, ожидалась {CONFIG_SCHEMA_VERSION}; "
                "известные поля будут прочитаны"
            )
        return data

    def validate(self) -> AppConfig:
        """
        Строгая проверка файла (для CLI --check-config).

        Raises:
            ConfigLoadError: Если файл не читается или не проходит схему
        """
        try:
            return AppConfig.model_validate(self._read())
        except ValidationError as e:
            raise ConfigLoadError(
                message=f"Конфиг не прошёл валидацию: {self.config_path}",
                component="YamlConfigStore",
                original_error=e
            )
