"""
Исключения для домена Extraction.

Специфичные для обработки регионов слайда и OCR ошибки.
"""

from typing import Optional


class ExtractionError(Exception):
    """Базовое исключение для ошибок домена Extraction."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Extraction Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class ImageProcessingError(ExtractionError):
    """Ошибка обработки изображения."""
    pass


class ImageDecodingError(ImageProcessingError):
    """Ошибка декодирования изображения."""
    pass


class OCRProcessingError(ExtractionError):
    """Ошибка обработки OCR (OCRFailure: слайд сохраняется как Slide_NN)."""
    pass


class OCRProviderError(OCRProcessingError):
    """Провайдер OCR недоступен."""
    pass


class OCRResponseError(OCRProcessingError):
    """Ошибка в ответе OCR."""
    pass
