"""
Исключения для домена Session.

Таксономия ошибок цикла захвата (см. RetryPolicy):
- CaptureError      -> повтор захвата, затем пропуск слайда
- AdvanceError      -> повтор перелистывания, затем альтернативная клавиша
- ConfigLoadError   -> пустой конфиг с дефолтами
- прочие            -> уведомление, пауза, следующий слайд
OCR ошибки живут в домене Extraction (OCRProcessingError).
"""

from typing import Optional


class SessionError(Exception):
    """Базовое исключение для ошибок домена Session."""

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
        msg = f"Session Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class CaptureError(SessionError):
    """Захват вернул пустое/слишком маленькое/нечитаемое изображение."""
    pass


class AdvanceError(SessionError):
    """Слайд не перелистнулся (хэш не изменился или вызов упал)."""
    pass


class ConfigLoadError(SessionError):
    """Конфиг не прочитан (не фатально)."""
    pass


class SessionFileWriteError(SessionError):
    """Ошибка записи артефакта или служебного файла."""
    pass


class FileNameCollisionError(SessionFileWriteError):
    """Не удалось подобрать уникальное имя за отведённое число попыток."""
    pass


class InvalidStateTransitionError(SessionError):
    """Недопустимый переход состояния сессии."""
    pass
