import pytest

from src.classification.sanitizer import UNTITLED, clean_text, finalize_title, is_meaningful, sanitize_text


def test_clean_text_removes_control_and_disallowed_chars():
    """Тест: управляющие символы и всё вне белого списка удаляются."""
    raw = "Cyber\tLab\x00: Firewall «Rules» #1 ✓"

    result = clean_text(raw)

    assert result == "Cyber Lab : Firewall Rules 1"


def test_clean_text_collapses_whitespace_and_newlines():
    """Тест: переводы строк не склеивают слова, пробелы схлопываются."""
    assert clean_text("  Endpoint\n\nSecurity   Basics  ") == "Endpoint Security Basics"


def test_clean_text_keeps_allowed_punctuation():
    """Тест: символы - _ : . ( ) & | сохраняются."""
    assert clean_text("A-B_C: D. (E) & F | G") == "A-B_C: D. (E) & F | G"


@pytest.mark.parametrize("raw", [None, "", "   ", "\x01\x02", "«»✓"])
def test_sanitize_text_empty_becomes_untitled(raw):
    """Тест: пустой результат санитизации -> Untitled."""
    assert sanitize_text(raw) == UNTITLED


def test_is_meaningful():
    """Тест: мусор OCR не считается заголовком."""
    assert is_meaningful("Summary")
    assert is_meaningful("Q3")
    assert not is_meaningful("| . -")
    assert not is_meaningful("a b c")


def test_finalize_title_replaces_spaces_and_special_chars():
    """Тест: пробелы -> '_', ':' -> '-', '?' удаляется."""
    assert finalize_title("What is EDR: Overview?", 60) == "What_is_EDR-_Overview"


def test_finalize_title_truncates_to_max_length():
    """Тест: заголовок обрезается до max_length."""
    title = "Very Long Title " * 20

    result = finalize_title(title, 40)

    assert len(result) <= 40
    assert result.startswith("Very_Long_Title_Very")
    # После обрезки хвостовой '_' убирается
    assert not result.endswith("_")


def test_finalize_title_empty_is_untitled():
    """Тест: пустой/мусорный заголовок -> Untitled."""
    assert finalize_title("", 60) == UNTITLED
    assert finalize_title("___", 60) == UNTITLED
    assert finalize_title("?? ::", 60) == UNTITLED


@pytest.mark.parametrize("raw", [
    "Cyber Lab: Configuring Firewall",
    "  Knowledge   Check  -  Answer ?",
    "Introduction to ClamAV (cont.)",
    "A__B__C",
    "x" * 300,
    "Pulse Check | Module 3",
])
def test_finalize_title_is_fixed_point(raw):
    """Тест: повторная санитизация финального заголовка ничего не меняет."""
    title = finalize_title(raw, 60)

    assert sanitize_text(title) == title
    assert finalize_title(title, 60) == title
    assert len(title) <= 60
