"""
ProgressEstimator: ETA по средней длительности итерации.

ETA не определён, пока замеров меньше ETA_MIN_SAMPLES (3).
"""

from statistics import mean
from typing import List, Optional

from config.settings import ETA_MIN_SAMPLES


def format_duration(seconds: float) -> str:
    """
    Человекочитаемая длительность.

    < 60с -> "42s", < 3600с -> "7m" (округление), иначе -> "1.5h"
    """
    seconds = max(0.0, seconds)
    if seconds < 60:
        return f"{int(round(seconds))}s"
    if seconds < 3600:
        return f"{int(round(seconds / 60))}m"
    return f"{seconds / 3600:.1f}h"


class ProgressEstimator:
    """Скользящая оценка оставшегося времени сессии."""

    def __init__(self, min_samples: int = ETA_MIN_SAMPLES):
        self.min_samples = min_samples
        self._durations: List[float] = []

    @property
    def samples(self) -> List[float]:
        return list(self._durations)

    def sample(self, duration: float) -> None:
        self._durations.append(max(0.0, float(duration)))

    def eta_seconds(self, remaining: int) -> Optional[float]:
        if len(self._durations) < self.min_samples:
            return None
        return mean(self._durations) * max(0, remaining)

    def eta_text(self, remaining: int) -> Optional[str]:
        eta = self.eta_seconds(remaining)
        return format_duration(eta) if eta is not None else None

    def reset(self) -> None:
        self._durations.clear()
