import pytest

from contracts.slide_dto import ClassifierContext
from src.classification.module_context import detect_module, update_context


@pytest.mark.parametrize("headline, expected", [
    ("Introduction to ClamAV", "ClamAV"),
    ("Introduction: Endpoint Security", "Endpoint_Security"),
    ("Cybersecurity Introduction", "Cybersecurity"),
    ("Introduction to Antivirus", "Antivirus"),
    ("Introduction - Firewalls", "Firewalls"),
    ("Antivirus Problems", "Antivirus_Risks"),
    ("Antivirus Risks", "Antivirus_Risks"),
    ("Endpoint Detection and Response", "EDR"),
    ("What is EDR", "EDR"),
    ("Writing YARA Rules", "YARA"),
    ("Introduction to Network Defense Basics Today", "Network_Defense_Basics_Today"),
])
def test_detect_module(headline, expected):
    """Тест: маркеры модуля в заголовке."""
    assert detect_module(headline) == expected


def test_introduction_continued_is_not_a_new_module():
    """Тест: 'Introduction (cont.)' не открывает модуль."""
    assert detect_module("Introduction (cont.) ClamAV") is None
    assert detect_module("Introduction cont'd") is None


def test_plain_headline_has_no_module():
    """Тест: обычный заголовок не трогает модуль."""
    assert detect_module("Scanning files on Linux") is None
    assert detect_module("") is None


def test_update_context_sets_module_and_previous_topic():
    """Тест: новый модуль -> previous_topic = старый модуль."""
    context = ClassifierContext(current_module="ClamAV")

    updated = update_context(context, "Writing YARA Rules")

    assert updated.current_module == "YARA"
    assert updated.previous_topic == "ClamAV"
    # Исходный контекст не изменился (frozen)
    assert context.current_module == "ClamAV"


def test_update_context_without_marker_returns_same_object():
    """Тест: без маркера возвращается тот же контекст."""
    context = ClassifierContext(current_module="ClamAV", previous_topic="Antivirus")

    assert update_context(context, "Scanning with clamscan") is context
    assert update_context(context, "Introduction to ClamAV") is context
