"""
OpenCV реализация IImageProcessor.

Чтение слайда, вырезание региона и нормализация под OCR.
"""

from pathlib import Path

import cv2
import numpy as np
from loguru import logger

from src.domain.contracts import FilterSpec, FilterType
from ..domain.exceptions import ImageDecodingError, ImageProcessingError
from ..domain.interfaces import IImageProcessor
from ..geometry import Rect
from .filters import (
    apply_clahe,
    apply_grayscale,
    apply_invert,
    apply_otsu_threshold,
    apply_scale,
)

_FILTERS = {
    FilterType.GRAYSCALE: apply_grayscale,
    FilterType.CLAHE: apply_clahe,
    FilterType.THRESHOLD: apply_otsu_threshold,
    FilterType.INVERT: apply_invert,
}


class OpenCVImageProcessor(IImageProcessor):
    """
    Обработка регионов через OpenCV.

    ЦКП: numpy-массив региона, готовый к OCR.
    """

    def load(self, image_path: Path) -> np.ndarray:
        """
        Читает файл изображения и декодирует в numpy array.

        Загрузка через numpy для поддержки путей с Unicode (cv2.imread не умеет).

        Raises:
            ImageProcessingError: Если файл не найден
            ImageDecodingError: Если не удалось декодировать изображение
        """
        if not image_path.exists():
            raise ImageProcessingError(
                message=f"Изображение не найдено: {image_path}",
                component="OpenCVImageProcessor"
            )

        img_array = np.fromfile(str(image_path), np.uint8)
        image = cv2.imdecode(img_array, cv2.IMREAD_COLOR) if img_array.size else None

        if image is None:
            raise ImageDecodingError(
                message=f"Не удалось декодировать изображение: {image_path}",
                component="OpenCVImageProcessor"
            )

        logger.debug(f"[ImageProcessor] Прочитано: {image_path.name}, размер: {image.shape}")
        return image

    def crop(self, image: np.ndarray, rect: Rect) -> np.ndarray:
        height, width = image.shape[:2]
        bounded = rect.clamp(width, height)
        if bounded.width == 0 or bounded.height == 0:
            raise ImageProcessingError(
                message=f"Регион {rect.as_tuple()} вне изображения {width}x{height}",
                component="OpenCVImageProcessor"
            )
        return image[bounded.y:bounded.bottom, bounded.x:bounded.right]

    def normalize(self, image: np.ndarray, filter_spec: FilterSpec) -> np.ndarray:
        """
        Масштабирует регион и применяет фильтры по порядку.

        Args:
            image: Регион (BGR)
            filter_spec: Валидированный план фильтров (первый = GRAYSCALE)
        """
        result = apply_scale(image, filter_spec.scale)
        for filter_type in filter_spec.filters:
            result = _FILTERS[filter_type](result)
        return result

    @staticmethod
    def encode_png(image: np.ndarray) -> bytes:
        """Кодирует регион в PNG bytes (для отправки в OCR)."""
        success, buffer = cv2.imencode(".png", image)
        if not success:
            raise ImageProcessingError(
                message="Не удалось закодировать регион в PNG",
                component="OpenCVImageProcessor"
            )
        return buffer.tobytes()
