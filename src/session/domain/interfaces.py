"""
Интерфейсы (абстрактные классы) для домена Session.

Внешние коллабораторы цикла захвата: источник изображений,
навигатор презентации и хранилище конфига.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

from src.domain.contracts import AppConfig
from src.extraction.geometry import Rect


class IImageCaptureSource(ABC):
    """Источник снимков слайдов."""

    @abstractmethod
    def resolution(self) -> Tuple[int, int]:
        """Разрешение кадра (width, height)."""
        pass

    @abstractmethod
    def capture(self, region: Optional[Rect] = None) -> Path:
        """
        Снимает экран (или регион) во временный файл.

        Raises:
            CaptureError: Если снимок не получен
        """
        pass

    @abstractmethod
    def capture_and_hash(self, region: Rect) -> Tuple[Path, str]:
        """Снимок региона + хэш его содержимого (проверка перелистывания)."""
        pass

    def seek(self, slide_index: int) -> None:
        """
        Встать на слайд slide_index (1-based) при продолжении сессии.

        Живой экран не перематывается: презентация остаётся там, где её оставили.
        """
        pass


class IPresentationNavigator(ABC):
    """Управление окном презентации."""

    @abstractmethod
    def activate(self, target: str) -> None:
        """Активирует окно презентации (фокус)."""
        pass

    @abstractmethod
    def advance(self, target: str) -> bool:
        """Основное перелистывание (например, стрелка вправо)."""
        pass

    @abstractmethod
    def advance_alternate(self, target: str) -> bool:
        """Альтернативная последовательность (например, PageDown / пробел)."""
        pass


class IConfigStore(ABC):
    """Хранилище настроек и ResumeRecord."""

    @abstractmethod
    def load(self) -> AppConfig:
        """Загружает конфиг; при ошибке — дефолты (ConfigLoadError не пробрасывается)."""
        pass

    @abstractmethod
    def save(self, config: AppConfig) -> None:
        pass
