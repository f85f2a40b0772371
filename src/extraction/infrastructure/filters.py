"""
Infrastructure: Фильтры и операции обработки регионов слайда.

Утилиты низкого уровня для подготовки региона к OCR.
"""

import cv2
import numpy as np
import numpy.typing as npt


def apply_grayscale(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Преобразует изображение в grayscale."""
    if len(image.shape) == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)  # type: ignore[return-value]
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)  # type: ignore[return-value]


def apply_clahe(image: npt.NDArray[np.uint8], clip_limit: float = 2.0, tile_size: int = 8) -> npt.NDArray[np.uint8]:
    """
    CLAHE (Contrast Limited Adaptive Histogram Equalization).

    Args:
        image: Grayscale изображение (H, W)
        clip_limit: Threshold для контраста (default 2.0)
        tile_size: Размер локальной области (default 8)
    """
    if len(image.shape) != 2:
        image = apply_grayscale(image)

    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=(tile_size, tile_size))
    return clahe.apply(image)  # type: ignore[return-value]


def apply_otsu_threshold(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Бинаризация Otsu (чёрный текст на белом для заголовков)."""
    if len(image.shape) != 2:
        image = apply_grayscale(image)
    _, binary = cv2.threshold(image, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return binary  # type: ignore[return-value]


def apply_invert(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Инверсия (светлый текст на тёмной плашке)."""
    return cv2.bitwise_not(image)  # type: ignore[return-value]


def apply_scale(image: npt.NDArray[np.uint8], scale: float) -> npt.NDArray[np.uint8]:
    """
    Масштабирование региона.

    Уменьшение через INTER_AREA, увеличение через INTER_CUBIC.
    """
    if scale == 1.0:
        return image
    height, width = image.shape[:2]
    new_size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
    interpolation = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_CUBIC
    return cv2.resize(image, new_size, interpolation=interpolation)  # type: ignore[return-value]
