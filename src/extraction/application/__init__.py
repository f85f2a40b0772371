"""
Application слой домена Extraction.

Содержит фабрику и оркестратор чтения регионов.
"""

from .factory import ExtractionComponentFactory
from .region_extractor import OCRRegionExtractor

__all__ = [
    "ExtractionComponentFactory",
    "OCRRegionExtractor",
]
