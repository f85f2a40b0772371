"""
Домен Extraction: регионы слайда + OCR.

Этот домен отвечает за:
1. Геометрию регионов под разрешение экрана (GeometryProfile)
2. Crop + нормализацию регионов (OpenCV)
3. Параллельный OCR регионов (Google Vision)

Граница домена: Dict[RegionName, str]
"""

from .geometry import GeometryProfile, Rect
from .infrastructure.image_processor import OpenCVImageProcessor
from .application.region_extractor import OCRRegionExtractor, REGION_SPECS, RegionSpec
from .application.factory import ExtractionComponentFactory

__all__ = [
    "GeometryProfile",
    "Rect",
    "OpenCVImageProcessor",
    "OCRRegionExtractor",
    "REGION_SPECS",
    "RegionSpec",
    "ExtractionComponentFactory",
]
