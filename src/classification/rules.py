"""
Таблица правил классификации слайдов.

Правила проверяются строго по порядку, первое совпавшее побеждает:
CyberLab -> KnowledgeCheckAnswer -> KnowledgeCheck -> PulseCheck ->
Summary -> Break -> Scenario -> Generic

Порядок важен: слайд "Knowledge Check Answer" содержит и "Knowledge Check",
поэтому ответ стоит раньше вопроса.

Каждое правило = (тип, предикат, построитель заголовка). Построитель
возвращает "сырой" заголовок (финализирует его классификатор) и метаданные.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Pattern, Tuple

from contracts.slide_dto import ClassifierContext, SlideType
from .sanitizer import clean_text

# =============================================================================
# МАРКЕРЫ
# =============================================================================
CYBER_LAB = re.compile(r"\bcyber\s*lab\b", re.IGNORECASE)
KNOWLEDGE_CHECK_ANSWER = re.compile(r"\bknowledge\s*check\s*[-:]?\s*answers?\b", re.IGNORECASE)
KNOWLEDGE_CHECK = re.compile(r"\bknowledge\s*check\b", re.IGNORECASE)
PULSE_CHECK = re.compile(r"\bpulse\s*check\b", re.IGNORECASE)
SUMMARY = re.compile(r"\bsummary\b", re.IGNORECASE)
BREAK = re.compile(
    # строка начинается или заканчивается словом break ("Lunch Break", "BREAK: back at 10:30"),
    # либо фраза "take a (10 min) break"
    r"^[^\w\n]*break\b|\bbreak[^\w\n]*$"
    r"|\btake\s+a\s+(?:\d+\s*-?\s*min(?:ute)?s?\s+)?break\b",
    re.IGNORECASE | re.MULTILINE,
)
REAL_WORLD_SCENARIO = re.compile(r"\breal[\s-]*world\s+scenario\b", re.IGNORECASE)

# =============================================================================
# ИЗВЛЕЧЕНИЕ МЕТАДАННЫХ
# =============================================================================
QUESTION_NUMBER = re.compile(r"\bquestion\s*#?\s*(\d{1,3})\b", re.IGNORECASE)
# Имя: до конца строки или до первой точки
LAB_NAME = re.compile(r"\bcyber\s*lab\s*[:\-–]\s*([A-Za-z0-9][A-Za-z0-9 &()\-]*)", re.IGNORECASE)
SCENARIO_NAME = re.compile(r"\bscenario\s*[:\-–]\s*([A-Za-z0-9][A-Za-z0-9 &()\-]*)", re.IGNORECASE)
_NAME_MAX_WORDS = 8


@dataclass(frozen=True)
class SlideFeatures:
    """
    Всё, что правила знают о слайде.

    sidebar_text = None, если регион sidebar не прочитан.
    """
    headline: str
    full_text: str
    sidebar_text: Optional[str]
    context: ClassifierContext
    max_title_length: int

    @property
    def marker_text(self) -> str:
        """Текст для поиска маркеров: весь слайд + заголовок."""
        return f"{self.full_text}\n{self.headline}"


TitleBuilder = Callable[[SlideFeatures], Tuple[str, Dict[str, str]]]


@dataclass(frozen=True)
class SlideRule:
    slide_type: SlideType
    matches: Callable[[SlideFeatures], bool]
    build_title: TitleBuilder


def _marker(pattern: Pattern[str]) -> Callable[[SlideFeatures], bool]:
    return lambda features: bool(pattern.search(features.marker_text))


def _extract_name(pattern: Pattern[str], *texts: Optional[str]) -> Optional[str]:
    """Первое совпадение по текстам (по порядку), обрезанное до _NAME_MAX_WORDS слов."""
    for text in texts:
        if not text:
            continue
        match = pattern.search(text)
        if match:
            name = clean_text(" ".join(match.group(1).split()[:_NAME_MAX_WORDS]))
            if name:
                return name
    return None


def _with_module(base: str, context: ClassifierContext) -> str:
    return f"{base}_{context.current_module}" if context.current_module else base


def _module_metadata(context: ClassifierContext) -> Dict[str, str]:
    return {"module": context.current_module} if context.current_module else {}


def _question_title(base: str) -> TitleBuilder:
    def build(features: SlideFeatures) -> Tuple[str, Dict[str, str]]:
        match = QUESTION_NUMBER.search(features.marker_text)
        if not match:
            return base, {}
        number = str(int(match.group(1)))
        return f"{base}_{number}", {"question_number": number}
    return build


def _cyber_lab_title(features: SlideFeatures) -> Tuple[str, Dict[str, str]]:
    headline = features.headline
    # Заголовок уже называет лабу: "Cyber Lab: Configuring Firewall"
    if CYBER_LAB.search(headline) and len(CYBER_LAB.sub("", headline).strip(" :-|")) > 0:
        lab_name = _extract_name(LAB_NAME, headline)
        metadata = {"lab_name": lab_name} if lab_name else {}
        return re.sub(r"\s*[:|]\s*", " ", headline), metadata

    lab_name = _extract_name(LAB_NAME, features.full_text, headline)
    if lab_name:
        return f"Cyber_Lab_{lab_name}", {"lab_name": lab_name}
    return "Cyber_Lab", {}


def _module_title(base: str) -> TitleBuilder:
    def build(features: SlideFeatures) -> Tuple[str, Dict[str, str]]:
        return _with_module(base, features.context), _module_metadata(features.context)
    return build


def _scenario_matches(features: SlideFeatures) -> bool:
    # Выноска сценария живёт в sidebar; если sidebar не прочитан, смотрим весь слайд
    text = features.sidebar_text if features.sidebar_text is not None else features.full_text
    return bool(REAL_WORLD_SCENARIO.search(text))


def _scenario_title(features: SlideFeatures) -> Tuple[str, Dict[str, str]]:
    metadata = _module_metadata(features.context)
    scenario_name = _extract_name(SCENARIO_NAME, features.sidebar_text, features.full_text)
    if scenario_name:
        metadata["scenario_name"] = scenario_name
        return f"Real_World_Scenario_{scenario_name}", metadata
    return _with_module("Real_World_Scenario", features.context), metadata


def _generic_title(features: SlideFeatures) -> Tuple[str, Dict[str, str]]:
    if not features.headline:
        return "", {}

    title = features.headline.replace(" ", "_")
    module = features.context.current_module
    if module and module.lower() not in title.lower():
        prefixed = f"{module}_{title}"
        # Длинные заголовки не префиксуем
        if len(prefixed) < features.max_title_length:
            return prefixed, {"module": module}
    return title, {}


SLIDE_RULES: Tuple[SlideRule, ...] = (
    SlideRule(SlideType.CYBER_LAB, _marker(CYBER_LAB), _cyber_lab_title),
    SlideRule(SlideType.KNOWLEDGE_CHECK_ANSWER, _marker(KNOWLEDGE_CHECK_ANSWER), _question_title("Knowledge_Check_Answer")),
    SlideRule(SlideType.KNOWLEDGE_CHECK, _marker(KNOWLEDGE_CHECK), _question_title("Knowledge_Check")),
    SlideRule(SlideType.PULSE_CHECK, _marker(PULSE_CHECK), _module_title("Pulse_Check")),
    SlideRule(SlideType.SUMMARY, _marker(SUMMARY), _module_title("Summary")),
    SlideRule(SlideType.BREAK, _marker(BREAK), lambda features: ("Break", {})),
    SlideRule(SlideType.SCENARIO, _scenario_matches, _scenario_title),
    SlideRule(SlideType.GENERIC, lambda features: True, _generic_title),
)
