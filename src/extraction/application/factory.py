"""
Фабрика для создания компонентов домена Extraction.

Если OCR провайдер создать нельзя (нет credentials, нет сети),
фабрика возвращает None — сессия уходит в режим без классификации.
"""

from typing import Optional

from loguru import logger

from ..domain.exceptions import ExtractionError
from ..domain.interfaces import IImageProcessor, IOCRProvider, IRegionExtractor
from ..infrastructure.image_processor import OpenCVImageProcessor
from .region_extractor import OCRRegionExtractor


class ExtractionComponentFactory:
    """Фабрика для создания компонентов домена Extraction."""

    @staticmethod
    def create_ocr_provider(credentials_path: Optional[str] = None) -> IOCRProvider:
        """
        Создает провайдер OCR.

        Raises:
            OCRProviderError: Если провайдер недоступен
        """
        from ..infrastructure.ocr.google_vision_ocr import GoogleVisionOCR

        logger.debug("[Extraction] Создание OCR провайдера")
        return GoogleVisionOCR(credentials_path)

    @staticmethod
    def create_image_processor() -> IImageProcessor:
        logger.debug("[Extraction] Создание обработчика изображений")
        return OpenCVImageProcessor()

    @staticmethod
    def create_region_extractor(
        ocr_provider: Optional[IOCRProvider] = None,
        image_processor: Optional[IImageProcessor] = None,
        credentials_path: Optional[str] = None
    ) -> Optional[IRegionExtractor]:
        """
        Создает экстрактор регионов.

        Returns:
            OCRRegionExtractor или None, если OCR недоступен (режим без классификации)
        """
        if ocr_provider is None:
            try:
                ocr_provider = ExtractionComponentFactory.create_ocr_provider(credentials_path)
            except ExtractionError as e:
                logger.warning(f"[Extraction] OCR недоступен, режим без классификации: {e}")
                return None

        if image_processor is None:
            image_processor = ExtractionComponentFactory.create_image_processor()

        return OCRRegionExtractor(ocr_provider=ocr_provider, image_processor=image_processor)
