"""
Менеджер файлов для домена Session.

Имена артефактов: "{index:02d}_{title}.{ext}".
Коллизии разрешаются суффиксом из текущего времени (итеративно, с ограничением).
"""

import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable

from loguru import logger

from config.settings import UNIQUE_PATH_MAX_ATTEMPTS
from ..domain.exceptions import FileNameCollisionError, SessionFileWriteError


def build_filename(index: int, title: str, extension: str = "png") -> str:
    return f"{index:02d}_{title}.{extension.lstrip('.')}"


class SessionFileManager:
    """Менеджер файлов сессии захвата."""

    def __init__(
        self,
        max_attempts: int = UNIQUE_PATH_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.max_attempts = max(1, max_attempts)
        self.clock = clock

    def ensure_directory(self, directory_path: Path) -> Path:
        """
        Создает директорию если она не существует.

        Raises:
            SessionFileWriteError: Если не удалось создать директорию
        """
        try:
            directory_path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"[Session] Директория создана/проверена: {directory_path}")
            return directory_path

        except (IOError, OSError) as e:
            raise SessionFileWriteError(
                message=f"Не удалось создать директорию: {directory_path}",
                component="SessionFileManager",
                original_error=e
            )

    def ensure_unique_path(self, path: Path) -> Path:
        """
        Возвращает путь без коллизии с существующими файлами.

        К имени добавляется суффикс из времени (_HHMMSSmmm); если и он занят,
        к суффиксу добавляется номер попытки.

        Raises:
            FileNameCollisionError: Если за max_attempts свободное имя не найдено
        """
        if not path.exists():
            return path

        for attempt in range(1, self.max_attempts + 1):
            stamp = self.clock().strftime("%H%M%S%f")[:9]
            suffix = stamp if attempt == 1 else f"{stamp}_{attempt}"
            candidate = path.with_name(f"{path.stem}_{suffix}{path.suffix}")
            if not candidate.exists():
                logger.debug(f"[Session] Коллизия имени {path.name} -> {candidate.name}")
                return candidate

        raise FileNameCollisionError(
            message=f"Не найдено свободное имя для {path.name} за {self.max_attempts} попыток",
            component="SessionFileManager"
        )

    def persist_artifact(self, source: Path, destination: Path) -> Path:
        """
        Переносит снимок слайда в папку сессии.

        Raises:
            SessionFileWriteError: Если перенос не удался
        """
        try:
            self.ensure_directory(destination.parent)
            shutil.move(str(source), str(destination))
            logger.debug(f"[Session] Артефакт сохранен: {destination}")
            return destination

        except (IOError, OSError) as e:
            raise SessionFileWriteError(
                message=f"Не удалось сохранить артефакт: {destination}",
                component="SessionFileManager",
                original_error=e
            )
