"""
DTO контракт: Session -> вызывающий код (CLI, UI)

Состояние сессии захвата, события прогресса и итоговая сводка.
Персистентный ResumeRecord описан в src/domain/contracts.py (Pydantic).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class SlideOutcome(str, Enum):
    """Чем закончилась одна итерация цикла."""
    SAVED = "saved"            # классифицирован и сохранён
    FALLBACK = "fallback"      # сохранён под именем Slide_NN (OCR недоступен)
    SKIPPED = "skipped"        # захват не удался, артефакта нет
    FAILED = "failed"          # прочая ошибка, артефакта нет


@dataclass
class CaptureSession:
    """
    Состояние одной сессии захвата.

    Меняется только контроллером. current_index 1-based и не уменьшается.
    """
    total_slides: int
    output_folder: Path
    current_index: int = 0
    state: SessionState = SessionState.IDLE
    started_at: Optional[datetime] = None
    resume_from: int = 1

    @property
    def remaining(self) -> int:
        return max(0, self.total_slides - self.current_index)


@dataclass(frozen=True)
class ProgressEvent:
    """Событие для UI/CLI после каждой итерации (или предупреждения)."""
    index: int
    total: int
    state: SessionState
    outcome: Optional[SlideOutcome] = None
    filename: Optional[str] = None
    eta: Optional[str] = None
    message: str = ""


@dataclass(frozen=True)
class SessionSummary:
    """Итог сессии: одна строка в лог в конце работы."""
    requested: int
    succeeded: int
    fallback_named: int
    skipped: int
    failed: int
    elapsed_seconds: float
    state: SessionState

    def describe(self) -> str:
        return (
            f"{self.succeeded}/{self.requested} слайдов сохранено "
            f"(fallback: {self.fallback_named}, пропущено: {self.skipped}, ошибок: {self.failed}) "
            f"за {self.elapsed_seconds:.1f}с, состояние: {self.state.value}"
        )
