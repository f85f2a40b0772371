"""
ResumeStateStore: сохранение и загрузка ResumeRecord через IConfigStore.

Инварианты:
- current_slide в сохранённых записях одной сессии не уменьшается
- запись с current_slide == total_slides не предлагается для resume
- запись старше resume_max_age_hours не предлагается (0 = без ограничения)
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from src.domain.contracts import AppConfig, ResumeRecord
from .domain.interfaces import IConfigStore


class ResumeStateStore:
    """Обёртка над IConfigStore для ResumeRecord."""

    def __init__(
        self,
        config_store: IConfigStore,
        max_age_hours: Optional[float] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Args:
            config_store: Хранилище конфига (YAML)
            max_age_hours: Срок годности записи; None -> из конфига
            clock: Источник текущего времени (для тестов)
        """
        self.config_store = config_store
        self.max_age_hours = max_age_hours
        self.clock = clock
        self._last_saved: Optional[int] = None

    def load(self) -> Optional[ResumeRecord]:
        return self.config_store.load().resume_record

    def resumable(self) -> Optional[ResumeRecord]:
        """
        Запись, которую можно предложить пользователю, или None.
        """
        config = self.config_store.load()
        record = config.resume_record
        if record is None:
            return None

        if record.is_complete:
            logger.debug("[ResumeStore] Сессия в записи завершена, resume не предлагается")
            return None

        max_age = self.max_age_hours if self.max_age_hours is not None else config.resume_max_age_hours
        if max_age > 0:
            timestamp = record.timestamp
            if timestamp.tzinfo is not None:
                # YAML мог сохранить aware-время; clock по умолчанию naive local
                timestamp = timestamp.astimezone().replace(tzinfo=None)
            age = self.clock() - timestamp
            if age > timedelta(hours=max_age):
                logger.info(
                    f"[ResumeStore] Запись устарела ({age.total_seconds() / 3600:.1f}ч > {max_age}ч), "
                    "resume не предлагается"
                )
                return None

        return record

    def update(self, current_slide: int, total_slides: int, output_folder: Path) -> ResumeRecord:
        """
        Сохраняет прогресс.

        Уменьшение current_slide внутри сессии игнорируется (запись не меняется).
        """
        if self._last_saved is not None and current_slide < self._last_saved:
            logger.warning(
                f"[ResumeStore] Попытка уменьшить current_slide: {self._last_saved} -> {current_slide}, пропуск"
            )
            current_slide = self._last_saved

        record = ResumeRecord(
            current_slide=min(current_slide, total_slides),
            total_slides=total_slides,
            output_folder=str(output_folder),
            timestamp=self.clock(),
        )
        self._save_record(record)
        self._last_saved = record.current_slide
        logger.debug(f"[ResumeStore] Сохранено: {record.current_slide}/{record.total_slides}")
        return record

    def start_from(self, record: Optional[ResumeRecord]) -> None:
        """Начало сессии: запоминаем нижнюю границу монотонности."""
        self._last_saved = record.current_slide if record is not None else None

    def clear(self) -> None:
        self._save_record(None)
        self._last_saved = None
        logger.debug("[ResumeStore] Запись resume очищена")

    def _save_record(self, record: Optional[ResumeRecord]) -> None:
        config: AppConfig = self.config_store.load()
        self.config_store.save(config.model_copy(update={"resume_record": record}))
