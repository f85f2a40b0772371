"""
OCR: Google Vision API интеграция.

Распознавание текста одного региона слайда:
- Кодирование региона в PNG
- Выбор метода API по SegmentationMode
- Возврат "сырого" текста (санитизация — задача классификатора)

Режимы:
  SINGLE_LINE -> text_detection, берётся первая строка (заголовок)
  BLOCK       -> document_text_detection (титульный слайд, выноска)
  SPARSE      -> document_text_detection (весь слайд)
"""

import os
from pathlib import Path
from typing import Any, List, Optional

import numpy as np
from google.auth.exceptions import GoogleAuthError
from google.cloud import vision
from loguru import logger

from config.settings import GOOGLE_APPLICATION_CREDENTIALS, OCR_LANGUAGE_HINTS
from src.domain.contracts import SegmentationMode
from ...domain.exceptions import OCRProviderError, OCRResponseError
from ...domain.interfaces import IOCRProvider
from ..image_processor import OpenCVImageProcessor


class GoogleVisionOCR(IOCRProvider):
    """
    Обёртка над Google Cloud Vision API.

    Реализует интерфейс IOCRProvider. Клиент можно передать снаружи
    (тесты, общий клиент на несколько сессий).
    """

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        client: Optional[Any] = None,
        language_hints: Optional[List[str]] = None
    ):
        """
        Инициализация OCR клиента.

        Args:
            credentials_path: Путь к JSON-файлу credentials.
                            Если не указан, берётся из settings.
            client: Готовый ImageAnnotatorClient (опционально)
            language_hints: Подсказки языка для API

        Raises:
            OCRProviderError: Если credentials не найдены или не годятся для клиента
        """
        self.language_hints = language_hints if language_hints is not None else OCR_LANGUAGE_HINTS

        if client is not None:
            self.client = client
            logger.debug("[GoogleVisionOCR] Используется переданный клиент")
            return

        creds_path = credentials_path or GOOGLE_APPLICATION_CREDENTIALS
        if not creds_path or not Path(creds_path).exists():
            raise OCRProviderError(
                message=f"Credentials файл не найден: {creds_path}",
                component="GoogleVisionOCR"
            )

        # Устанавливаем credentials через переменную окружения
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = str(creds_path)
        try:
            self.client = vision.ImageAnnotatorClient()
        except (GoogleAuthError, ValueError) as e:
            raise OCRProviderError(
                message=f"Не удалось создать клиент Google Vision (credentials: {creds_path})",
                component="GoogleVisionOCR",
                original_error=e
            )

        logger.info("[GoogleVisionOCR] Клиент инициализирован")

    def extract_text(self, image: np.ndarray, mode: SegmentationMode) -> str:
        """
        Распознаёт текст региона.

        Raises:
            OCRResponseError: Если API вернул ошибку или вызов упал
        """
        content = OpenCVImageProcessor.encode_png(image)
        request_image = vision.Image(content=content)
        image_context = vision.ImageContext(language_hints=self.language_hints)

        try:
            if mode == SegmentationMode.SINGLE_LINE:
                response = self.client.text_detection(image=request_image, image_context=image_context)
            else:
                response = self.client.document_text_detection(image=request_image, image_context=image_context)
        except Exception as e:
            raise OCRResponseError(
                message=f"Вызов Google Vision упал ({mode.value})",
                component="GoogleVisionOCR",
                original_error=e
            )

        if response.error.message:
            raise OCRResponseError(
                message=f"Google Vision API error: {response.error.message}",
                component="GoogleVisionOCR"
            )

        text = self._parse_response(response, mode)
        logger.debug(f"[GoogleVisionOCR] {mode.value}: {len(text)} символов")
        return text

    def _parse_response(self, response: Any, mode: SegmentationMode) -> str:
        """Достаёт текст из ответа в зависимости от режима."""
        if mode == SegmentationMode.SINGLE_LINE:
            if not response.text_annotations:
                return ""
            # Первая аннотация: весь текст; для заголовка нужна первая непустая строка
            description = response.text_annotations[0].description or ""
            for line in description.splitlines():
                if line.strip():
                    return line.strip()
            return ""

        if response.full_text_annotation:
            return response.full_text_annotation.text or ""
        return ""
