"""
Определение текущего модуля курса по заголовку слайда.

Контекст "липкий": модуль меняется только когда в заголовке найден маркер,
иначе ClassifierContext возвращается без изменений.
"""

import re
from dataclasses import replace
from typing import List, Optional, Pattern, Tuple

from loguru import logger

from contracts.slide_dto import ClassifierContext

# "Introduction", но не "Introduction (cont.)" / "Introduction cont'd"
INTRODUCTION_PATTERN = re.compile(r"\bintroduction\b(?!\s*[(\[\-]?\s*cont)", re.IGNORECASE)

# Ключевые слова вводного слайда -> тег модуля (порядок важен: первый найденный)
INTRODUCTION_KEYWORDS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"\bclam\s*av\b", re.IGNORECASE), "ClamAV"),
    (re.compile(r"\bendpoint\s+security\b", re.IGNORECASE), "Endpoint_Security"),
    (re.compile(r"\bcyber\s*security\b", re.IGNORECASE), "Cybersecurity"),
    (re.compile(r"\banti[\s-]?virus\b", re.IGNORECASE), "Antivirus"),
    (re.compile(r"\bfirewalls?\b", re.IGNORECASE), "Firewalls"),
]

# Фразы, которые сами по себе открывают модуль (без "Introduction")
MODULE_PHRASES: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"\banti[\s-]?virus\s+(?:problems|risks)\b", re.IGNORECASE), "Antivirus_Risks"),
    (re.compile(r"\bendpoint\s+detection\b|\bEDR\b"), "EDR"),
    (re.compile(r"\byara\s+rules?\b", re.IGNORECASE), "YARA"),
]

# "Introduction to Network Defense" -> "Network_Defense"
_INTRODUCTION_TOPIC = re.compile(r"\bintroduction\s+to\s+(?:the\s+)?([A-Za-z0-9][A-Za-z0-9 &\-]*)", re.IGNORECASE)
_TOPIC_MAX_WORDS = 4


def detect_module(headline: str) -> Optional[str]:
    """
    Возвращает тег модуля, если заголовок открывает модуль.

    Args:
        headline: Очищенный заголовок слайда
    """
    if not headline:
        return None

    if INTRODUCTION_PATTERN.search(headline):
        for pattern, tag in INTRODUCTION_KEYWORDS:
            if pattern.search(headline):
                return tag

    for pattern, tag in MODULE_PHRASES:
        if pattern.search(headline):
            return tag

    if INTRODUCTION_PATTERN.search(headline):
        match = _INTRODUCTION_TOPIC.search(headline)
        if match:
            words = match.group(1).split()[:_TOPIC_MAX_WORDS]
            if words:
                return "_".join(words)

    return None


def update_context(context: ClassifierContext, headline: str) -> ClassifierContext:
    """Новый контекст, если заголовок открывает другой модуль; иначе тот же объект."""
    module = detect_module(headline)
    if not module or module == context.current_module:
        return context

    logger.debug(f"[ModuleContext] Модуль: '{context.current_module}' -> '{module}'")
    return replace(context, current_module=module, previous_topic=context.current_module)
