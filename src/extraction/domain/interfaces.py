"""
Интерфейсы (абстрактные классы) для домена Extraction.

Домен Extraction отвечает за:
1. Вырезание и нормализацию регионов слайда
2. OCR распознавание текста каждого региона
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict

import numpy as np

from contracts.slide_dto import RegionName
from ..geometry import GeometryProfile, Rect
from src.domain.contracts import FilterSpec, SegmentationMode


class IOCRProvider(ABC):
    """Интерфейс для провайдеров OCR (домен Extraction)."""

    @abstractmethod
    def extract_text(self, image: np.ndarray, mode: SegmentationMode) -> str:
        """
        Распознаёт текст на изображении региона.

        Args:
            image: Нормализованный регион (grayscale или BGR)
            mode: Подсказка о раскладке текста

        Returns:
            Распознанный текст (может быть пустым)

        Raises:
            OCRProcessingError: Если OCR недоступен или вернул ошибку
        """
        pass


class IImageProcessor(ABC):
    """Интерфейс обработки изображений (домен Extraction)."""

    @abstractmethod
    def load(self, image_path: Path) -> np.ndarray:
        """Читает изображение с диска (BGR)."""
        pass

    @abstractmethod
    def crop(self, image: np.ndarray, rect: Rect) -> np.ndarray:
        """Вырезает прямоугольник, обрезанный по границам изображения."""
        pass

    @abstractmethod
    def normalize(self, image: np.ndarray, filter_spec: FilterSpec) -> np.ndarray:
        """Масштабирует и применяет фильтры из FilterSpec."""
        pass


class IRegionExtractor(ABC):
    """Интерфейс извлечения текста по регионам слайда."""

    @abstractmethod
    def extract(self, image_path: Path, profile: GeometryProfile) -> Dict[RegionName, str]:
        """
        Возвращает текст по регионам.

        Регионы, где OCR упал, в словаре отсутствуют.

        Raises:
            OCRProcessingError: Если не прочитан ни один регион
        """
        pass

