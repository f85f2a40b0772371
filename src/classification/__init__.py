"""
Домен Classification: тип слайда и имя файла.

1. Санитизация OCR-текста (sanitizer)
2. Контекст модуля курса между слайдами (module_context)
3. Упорядоченная таблица правил (rules)
4. SlideClassifier — чистая функция (region_texts, context) -> (result, context)
"""

from .sanitizer import UNTITLED, clean_text, finalize_title, sanitize_text
from .module_context import detect_module, update_context
from .rules import SLIDE_RULES, SlideFeatures, SlideRule
from .slide_classifier import SlideClassifier, fallback_title

__all__ = [
    "UNTITLED",
    "clean_text",
    "finalize_title",
    "sanitize_text",
    "detect_module",
    "update_context",
    "SLIDE_RULES",
    "SlideFeatures",
    "SlideRule",
    "SlideClassifier",
    "fallback_title",
]
