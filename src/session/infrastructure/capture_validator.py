"""
Проверка снимка слайда сразу после захвата.

Отбраковывает: отсутствующий файл, 0 байт, нечитаемое изображение,
нулевые или слишком маленькие размеры.
"""

from pathlib import Path
from typing import Tuple

from loguru import logger
from PIL import Image, UnidentifiedImageError

from config.settings import MIN_CAPTURE_HEIGHT, MIN_CAPTURE_WIDTH
from ..domain.exceptions import CaptureError


class CaptureValidator:
    """ЦКП: размер валидного снимка (width, height) или CaptureError."""

    def __init__(self, min_width: int = MIN_CAPTURE_WIDTH, min_height: int = MIN_CAPTURE_HEIGHT):
        self.min_width = min_width
        self.min_height = min_height

    def validate(self, image_path: Path) -> Tuple[int, int]:
        """
        Raises:
            CaptureError: Если снимок пустой, битый или слишком маленький
        """
        if not image_path.exists() or image_path.stat().st_size == 0:
            raise CaptureError(
                message=f"Пустой снимок: {image_path}",
                component="CaptureValidator"
            )

        try:
            with Image.open(image_path) as image:
                width, height = image.size
        except (UnidentifiedImageError, OSError) as e:
            raise CaptureError(
                message=f"Снимок не читается: {image_path.name}",
                component="CaptureValidator",
                original_error=e
            )

        if width < self.min_width or height < self.min_height:
            raise CaptureError(
                message=f"Снимок слишком маленький: {width}x{height} (мин {self.min_width}x{self.min_height})",
                component="CaptureValidator"
            )

        logger.debug(f"[CaptureValidator] OK: {image_path.name} {width}x{height}")
        return width, height
