"""
SlideClassifier: тип слайда + безопасный заголовок + метаданные.

classify() — чистая функция от (region_texts, context):
контекст передаётся явно и возвращается обновлённым, глобального
состояния нет.

Контракт: никогда не падает. Пустые или мусорные регионы дают
Generic / "Untitled".
"""

from typing import Mapping, Optional, Sequence, Tuple

from loguru import logger

from config.settings import DEFAULT_MAX_TITLE_LENGTH, MAX_TITLE_LENGTH, MIN_TITLE_LENGTH
from contracts.slide_dto import ClassificationResult, ClassifierContext, RegionName, SlideType
from .module_context import update_context
from .rules import SLIDE_RULES, SlideFeatures, SlideRule
from .sanitizer import UNTITLED, clean_text, finalize_title, is_meaningful

_COVER_MAX_LINES = 2


def fallback_title(index: int) -> str:
    """Имя слайда без классификации (OCR недоступен)."""
    return f"Slide_{index:02d}"


class SlideClassifier:
    """
    Классификатор слайдов по таблице правил SLIDE_RULES.

    Заголовок берётся из региона title; если он пуст — из cover.
    """

    def __init__(
        self,
        max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
        rules: Sequence[SlideRule] = SLIDE_RULES
    ):
        self.max_title_length = max(MIN_TITLE_LENGTH, min(MAX_TITLE_LENGTH, int(max_title_length)))
        self.rules = tuple(rules)
        logger.debug(f"[SlideClassifier] Инициализирован (max_title_length={self.max_title_length})")

    def classify(
        self,
        region_texts: Mapping[RegionName, str],
        context: ClassifierContext
    ) -> Tuple[ClassificationResult, ClassifierContext]:
        """
        Классифицирует слайд.

        Args:
            region_texts: Текст по регионам (упавшие регионы отсутствуют)
            context: Контекст модуля с предыдущих слайдов

        Returns:
            (ClassificationResult, обновлённый контекст)
        """
        try:
            return self._classify(region_texts, context)
        except Exception as e:
            # Контракт "никогда не падает": любая ошибка правила -> Generic
            logger.error(f"[SlideClassifier] Ошибка классификации, используем Untitled: {e}")
            return ClassificationResult(slide_type=SlideType.GENERIC, title=UNTITLED), context

    def fallback(self, index: int) -> ClassificationResult:
        return ClassificationResult(
            slide_type=SlideType.GENERIC,
            title=fallback_title(index),
            extracted_metadata={"fallback": "true"},
        )

    def _classify(
        self,
        region_texts: Mapping[RegionName, str],
        context: ClassifierContext
    ) -> Tuple[ClassificationResult, ClassifierContext]:
        headline = self._headline(region_texts)

        # Контекст модуля обновляется ДО определения типа
        context = update_context(context, headline)

        features = SlideFeatures(
            headline=headline,
            full_text=region_texts.get(RegionName.FULL) or "",
            sidebar_text=region_texts.get(RegionName.SIDEBAR),
            context=context,
            max_title_length=self.max_title_length,
        )

        for rule in self.rules:
            if not rule.matches(features):
                continue
            raw_title, metadata = rule.build_title(features)
            title = finalize_title(raw_title, self.max_title_length)
            logger.debug(f"[SlideClassifier] {rule.slide_type.value}: '{title}'")
            return ClassificationResult(
                slide_type=rule.slide_type,
                title=title,
                extracted_metadata=metadata,
            ), context

        return ClassificationResult(slide_type=SlideType.GENERIC, title=UNTITLED), context

    @staticmethod
    def _headline(region_texts: Mapping[RegionName, str]) -> str:
        """title в приоритете, cover — fallback; мусор считается пустым."""
        title = SlideClassifier._first_lines(region_texts.get(RegionName.TITLE), 1)
        if is_meaningful(title):
            return title

        cover = SlideClassifier._first_lines(region_texts.get(RegionName.COVER), _COVER_MAX_LINES)
        if is_meaningful(cover):
            return cover
        return ""

    @staticmethod
    def _first_lines(raw: Optional[str], limit: int) -> str:
        if not raw:
            return ""
        lines = [clean_text(line) for line in raw.splitlines()]
        return " ".join([line for line in lines if line][:limit])
