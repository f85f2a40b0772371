"""
Санитизация OCR-текста для использования в имени файла.

clean_text      — сырой OCR -> чистая строка (может быть пустой)
sanitize_text   — то же, но пустой результат -> "Untitled"
finalize_title  — заголовок -> безопасная часть имени файла ≤ max_length

Инвариант: finalize_title(x) — неподвижная точка и для sanitize_text,
и для самого finalize_title.
"""

import re
from typing import Optional

UNTITLED = "Untitled"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_DISALLOWED = re.compile(r"[^A-Za-z0-9 \-_:.()&|]")
_WHITESPACE = re.compile(r"\s+")
_UNDERSCORES = re.compile(r"_+")
_MEANINGFUL = re.compile(r"[A-Za-z0-9]{2,}")


def clean_text(raw: Optional[str]) -> str:
    """Убирает управляющие символы и всё вне белого списка; схлопывает пробелы."""
    if not raw:
        return ""
    # Переводы строк превращаем в пробел, чтобы не склеивать слова
    text = _CONTROL_CHARS.sub(" ", raw)
    text = _DISALLOWED.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_text(raw: Optional[str]) -> str:
    return clean_text(raw) or UNTITLED


def is_meaningful(text: str) -> bool:
    """Есть ли в строке хоть одно "слово" (а не OCR-мусор вроде '| .')."""
    return bool(_MEANINGFUL.search(text))


def finalize_title(title: Optional[str], max_length: int) -> str:
    """
    Финальная форма заголовка для имени файла.

    1. clean_text
    2. пробелы -> '_', схлопывание '__'
    3. обрезка до max_length
    4. '/' -> '_', ':' -> '-', '?' удаляется
    5. обрезка '_', '-', '.' по краям
    """
    text = clean_text(title)
    if not text:
        return UNTITLED

    text = _UNDERSCORES.sub("_", text.replace(" ", "_"))
    text = text[:max_length]
    text = text.replace("/", "_").replace(":", "-").replace("?", "")
    text = text.strip("_-.")

    return text or UNTITLED
