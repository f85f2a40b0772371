"""
Валидационные контракты (contracts) проекта Slide Capture.

Каждый контракт гарантирует:
  1. Правильный тип данных (type safety)
  2. Значения в допустимых диапазонах (data integrity)
  3. Версионируемую сериализацию (schema_version)

Без этих контрактов в YAML может оказаться что угодно:
  - log_level = 17 (должен быть [0, 3])
  - capture_delay = -5 (должен быть >= 0.1)
  - max_title_length = 5000 (должен быть [10, 200])
  - resume_record.current_slide > total_slides

В отличие от стадий пайплайна, конфиг НЕ падает на плохих значениях:
значения зажимаются в диапазон, мусор заменяется дефолтом.

Все модели используют Pydantic v2 с Field validators.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config.settings import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_CAPTURE_DELAY,
    DEFAULT_DELAY_BETWEEN_SLIDES,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_TITLE_LENGTH,
    DEFAULT_RESUME_MAX_AGE_HOURS,
    MAX_TITLE_LENGTH,
    MIN_DELAY_SECONDS,
    MIN_TITLE_LENGTH,
)


# ============================================================================
# IMAGE PROCESSING (фильтры для регионов)
# ============================================================================

class FilterType(str, Enum):
    """Доступные фильтры нормализации региона."""
    GRAYSCALE = "grayscale"           # Обязательный, всегда первый
    CLAHE = "clahe"                   # Adaptive histogram equalization (контраст)
    THRESHOLD = "threshold"           # Otsu бинаризация (тонкий текст на фоне)
    INVERT = "invert"                 # Светлый текст на тёмном фоне


class SegmentationMode(str, Enum):
    """Подсказка OCR о раскладке текста в регионе."""
    SINGLE_LINE = "single_line"       # одна строка (заголовок)
    BLOCK = "block"                   # блок текста (титульный слайд, выноска)
    SPARSE = "sparse"                 # разреженный текст (весь слайд)


class FilterSpec(BaseModel):
    """
    Контракт нормализации региона перед OCR.

    scale применяется ДО фильтров (full-регион уменьшается вдвое).
    """

    model_config = ConfigDict(frozen=True)

    filters: List[FilterType] = Field(
        default_factory=lambda: [FilterType.GRAYSCALE],
        min_length=1,
        description="Фильтры в порядке применения (первый = GRAYSCALE)"
    )
    scale: float = Field(1.0, gt=0, le=4.0, description="Масштаб региона (0-4]")

    @field_validator('filters')
    @classmethod
    def first_filter_is_grayscale(cls, v: List[FilterType]) -> List[FilterType]:
        """Первый фильтр ДОЛЖЕН быть GRAYSCALE."""
        if not v or v[0] != FilterType.GRAYSCALE:
            raise ValueError("Первый фильтр должен быть GRAYSCALE")
        if len(v) != len(set(v)):
            raise ValueError(f"Найдены дублирующиеся фильтры: {v}")
        return v


# ============================================================================
# RESUME RECORD
# ============================================================================

class ResumeRecord(BaseModel):
    """
    Персистентное состояние для продолжения прерванной сессии.

    current_slide == total_slides означает "сессия завершена, resume не предлагать".
    """

    model_config = ConfigDict(frozen=True)

    current_slide: int = Field(..., ge=0, description="Последний обработанный слайд (1-based)")
    total_slides: int = Field(..., ge=1, description="Всего слайдов в сессии")
    output_folder: str = Field(..., min_length=1, description="Папка с артефактами")
    timestamp: datetime = Field(default_factory=datetime.now, description="Время сохранения")

    @model_validator(mode='after')
    def current_not_beyond_total(self) -> "ResumeRecord":
        """current_slide не может быть больше total_slides."""
        if self.current_slide > self.total_slides:
            raise ValueError(
                f"current_slide ({self.current_slide}) > total_slides ({self.total_slides})"
            )
        return self

    @property
    def is_complete(self) -> bool:
        return self.current_slide >= self.total_slides


# ============================================================================
# APP CONFIG (версионируемая схема настроек)
# ============================================================================

def _clamp_number(value: Any, default: float, low: Optional[float], high: Optional[float]) -> float:
    """Приводит значение к числу и зажимает в [low, high]; мусор -> default."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    if low is not None:
        number = max(low, number)
    if high is not None:
        number = min(high, number)
    return number


class AppConfig(BaseModel):
    """
    Настройки приложения (сериализуются в YAML).

    Поля вне диапазона не вызывают ошибку, а зажимаются:
      log_level -> [0, 3], задержки -> >= 0.1с, max_title_length -> [10, 200].
    """

    model_config = ConfigDict(extra="ignore")

    schema_version: int = Field(CONFIG_SCHEMA_VERSION, description="Версия схемы конфига")
    log_level: int = Field(DEFAULT_LOG_LEVEL, description="0=DEBUG, 1=INFO, 2=WARNING, 3=ERROR")
    delay_between_slides: float = Field(DEFAULT_DELAY_BETWEEN_SLIDES, description="Пауза после перелистывания (с)")
    capture_delay: float = Field(DEFAULT_CAPTURE_DELAY, description="Пауза перед захватом (с)")
    max_title_length: int = Field(DEFAULT_MAX_TITLE_LENGTH, description="Максимальная длина заголовка")
    resume_max_age_hours: float = Field(
        DEFAULT_RESUME_MAX_AGE_HOURS,
        description="Старше этого resume не предлагается (0 = без ограничения)"
    )
    resume_record: Optional[ResumeRecord] = None

    @field_validator('schema_version', mode='before')
    @classmethod
    def normalize_version(cls, v: Any) -> int:
        return int(_clamp_number(v, CONFIG_SCHEMA_VERSION, 1, None))

    @field_validator('log_level', mode='before')
    @classmethod
    def clamp_log_level(cls, v: Any) -> int:
        return int(_clamp_number(v, DEFAULT_LOG_LEVEL, 0, 3))

    @field_validator('delay_between_slides', mode='before')
    @classmethod
    def clamp_slide_delay(cls, v: Any) -> float:
        return _clamp_number(v, DEFAULT_DELAY_BETWEEN_SLIDES, MIN_DELAY_SECONDS, None)

    @field_validator('capture_delay', mode='before')
    @classmethod
    def clamp_capture_delay(cls, v: Any) -> float:
        return _clamp_number(v, DEFAULT_CAPTURE_DELAY, MIN_DELAY_SECONDS, None)

    @field_validator('max_title_length', mode='before')
    @classmethod
    def clamp_title_length(cls, v: Any) -> int:
        return int(_clamp_number(v, DEFAULT_MAX_TITLE_LENGTH, MIN_TITLE_LENGTH, MAX_TITLE_LENGTH))

    @field_validator('resume_max_age_hours', mode='before')
    @classmethod
    def clamp_resume_age(cls, v: Any) -> float:
        return _clamp_number(v, DEFAULT_RESUME_MAX_AGE_HOURS, 0, None)

    @field_validator('resume_record', mode='before')
    @classmethod
    def drop_invalid_resume(cls, v: Any) -> Any:
        """Битая запись resume не ломает весь конфиг — она просто игнорируется."""
        if v is None or isinstance(v, ResumeRecord):
            return v
        try:
            return ResumeRecord.model_validate(v)
        except ValueError:
            return None

