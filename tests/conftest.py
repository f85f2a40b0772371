"""
Общие фикстуры для тестов Slide Capture.
"""

import pytest

from src.domain.contracts import AppConfig
from tests.fakes import InMemoryConfigStore, ScriptedCaptureSource, ScriptedNavigator


@pytest.fixture
def config_store():
    """Fixture: конфиг в памяти с минимальными задержками."""
    return InMemoryConfigStore(AppConfig(capture_delay=0.1, delay_between_slides=0.1))


@pytest.fixture
def capture_source(tmp_path):
    """Fixture: сценарный источник снимков."""
    return ScriptedCaptureSource(tmp_path / "scratch")


@pytest.fixture
def navigator(capture_source):
    """Fixture: сценарный навигатор."""
    return ScriptedNavigator(capture_source)


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "slides"
