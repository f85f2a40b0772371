"""
RetryPolicy: классификация ошибки итерации -> действие восстановления.

| Ошибка          | Восстановление                                                |
|-----------------|---------------------------------------------------------------|
| CaptureFailure  | активировать окно, подождать дольше, повторить; иначе пропуск |
| OCRFailure      | имя Slide_NN, слайд сохраняется и считается успешным          |
| AdvanceFailure  | повтор основного перелистывания, затем альтернативная клавиша |
| ConfigLoad      | дефолтный конфиг                                              |
| Generic         | уведомление, короткая пауза, следующий слайд                  |

Ни одна ошибка слайда не завершает сессию — только явная отмена.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from loguru import logger
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from config.settings import (
    ADVANCE_RETRY_DELAY,
    CAPTURE_ATTEMPTS,
    CAPTURE_RETRY_DELAY,
    GENERIC_ERROR_DELAY,
)
from src.extraction.domain.exceptions import ExtractionError
from .domain.exceptions import AdvanceError, CaptureError, ConfigLoadError


class ErrorKind(str, Enum):
    CAPTURE_FAILURE = "capture_failure"
    OCR_FAILURE = "ocr_failure"
    ADVANCE_FAILURE = "advance_failure"
    CONFIG_LOAD_FAILURE = "config_load_failure"
    GENERIC = "generic"


class RecoveryAction(str, Enum):
    RETRY_CAPTURE = "retry_capture"
    SKIP_SLIDE = "skip_slide"
    FALLBACK_NAME = "fallback_name"
    RETRY_ADVANCE = "retry_advance"
    ALTERNATE_ADVANCE = "alternate_advance"
    GIVE_UP_ADVANCE = "give_up_advance"
    USE_DEFAULTS = "use_defaults"
    CONTINUE = "continue"


@dataclass(frozen=True)
class RecoveryPlan:
    kind: ErrorKind
    action: RecoveryAction
    delay: float = 0.0
    reactivate: bool = False


class RetryPolicy:
    """
    Политика восстановления для цикла захвата.

    attempt — номер неудачной попытки (1 = первая неудача).
    """

    def __init__(
        self,
        capture_attempts: int = CAPTURE_ATTEMPTS,
        capture_retry_delay: float = CAPTURE_RETRY_DELAY,
        advance_retry_delay: float = ADVANCE_RETRY_DELAY,
        generic_delay: float = GENERIC_ERROR_DELAY
    ):
        self.capture_attempts = max(1, capture_attempts)
        self.capture_retry_delay = max(0.0, capture_retry_delay)
        self.advance_retry_delay = max(0.0, advance_retry_delay)
        self.generic_delay = max(0.0, generic_delay)

    @staticmethod
    def classify(error: BaseException) -> ErrorKind:
        if isinstance(error, CaptureError):
            return ErrorKind.CAPTURE_FAILURE
        if isinstance(error, ExtractionError):
            return ErrorKind.OCR_FAILURE
        if isinstance(error, AdvanceError):
            return ErrorKind.ADVANCE_FAILURE
        if isinstance(error, ConfigLoadError):
            return ErrorKind.CONFIG_LOAD_FAILURE
        return ErrorKind.GENERIC

    def plan(self, error: Union[BaseException, ErrorKind], attempt: int = 1) -> RecoveryPlan:
        """
        Действие восстановления для ошибки.

        Args:
            error: Исключение или уже известный ErrorKind
            attempt: Номер неудачной попытки (1-based)
        """
        kind = error if isinstance(error, ErrorKind) else self.classify(error)

        if kind == ErrorKind.CAPTURE_FAILURE:
            if attempt < self.capture_attempts:
                return RecoveryPlan(kind, RecoveryAction.RETRY_CAPTURE, self.capture_retry_delay, reactivate=True)
            return RecoveryPlan(kind, RecoveryAction.SKIP_SLIDE)

        if kind == ErrorKind.OCR_FAILURE:
            return RecoveryPlan(kind, RecoveryAction.FALLBACK_NAME)

        if kind == ErrorKind.ADVANCE_FAILURE:
            if attempt == 1:
                return RecoveryPlan(kind, RecoveryAction.RETRY_ADVANCE, self.advance_retry_delay)
            if attempt == 2:
                return RecoveryPlan(kind, RecoveryAction.ALTERNATE_ADVANCE, self.advance_retry_delay)
            return RecoveryPlan(kind, RecoveryAction.GIVE_UP_ADVANCE)

        if kind == ErrorKind.CONFIG_LOAD_FAILURE:
            return RecoveryPlan(kind, RecoveryAction.USE_DEFAULTS)

        return RecoveryPlan(kind, RecoveryAction.CONTINUE, self.generic_delay)

    def capture_retrying(
        self,
        sleep: Callable[[float], object],
        before_retry: Optional[Callable[[RetryCallState], None]] = None,
        is_cancelled: Optional[Callable[[], bool]] = None
    ) -> Retrying:
        """
        tenacity.Retrying для захвата слайда.

        Args:
            sleep: Кооперативная пауза сессии (будится отменой)
            before_retry: Хук перед повтором (активация окна)
            is_cancelled: Прекратить повторы, если сессию отменили
        """
        stop = stop_after_attempt(self.capture_attempts)
        if is_cancelled is not None:
            stop = stop | (lambda retry_state: is_cancelled())

        def _log_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            logger.warning(
                f"[RetryPolicy] Захват не удался (попытка {retry_state.attempt_number}/"
                f"{self.capture_attempts}): {error}"
            )
            if before_retry is not None:
                before_retry(retry_state)

        return Retrying(
            stop=stop,
            wait=wait_fixed(self.capture_retry_delay),
            retry=retry_if_exception_type(CaptureError),
            before_sleep=_log_retry,
            sleep=sleep,
            reraise=True,
        )
