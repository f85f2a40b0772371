"""
Инфраструктурный слой домена Extraction.

OpenCV обработка регионов и OCR провайдеры.
"""

from .image_processor import OpenCVImageProcessor

__all__ = [
    "OpenCVImageProcessor",
]
