"""
Domain слой домена Extraction.

Содержит интерфейсы (абстрактные классы) и исключения для Extraction домена.
"""

from .interfaces import (
    IOCRProvider,
    IImageProcessor,
    IRegionExtractor,
)

from .exceptions import (
    ExtractionError,
    ImageProcessingError,
    ImageDecodingError,
    OCRProcessingError,
    OCRProviderError,
    OCRResponseError,
)

__all__ = [
    # Интерфейсы
    "IOCRProvider",
    "IImageProcessor",
    "IRegionExtractor",

    # Исключения
    "ExtractionError",
    "ImageProcessingError",
    "ImageDecodingError",
    "OCRProcessingError",
    "OCRProviderError",
    "OCRResponseError",
]
