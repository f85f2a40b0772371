"""
Unit-тесты YamlConfigStore и AppConfig.

ЦКП: конфиг всегда загружается; плохие значения зажимаются, а не падают.
"""

import pytest
import yaml

from src.domain.contracts import AppConfig, ResumeRecord
from src.session.domain.exceptions import ConfigLoadError
from src.session.infrastructure.config_store import YamlConfigStore


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "slide_capture.yaml"


class TestAppConfigClamping:
    """Зажим значений в допустимые диапазоны."""

    def test_defaults(self):
        config = AppConfig()

        assert config.log_level == 1
        assert config.max_title_length == 60
        assert config.resume_record is None

    def test_out_of_range_values_are_clamped(self):
        config = AppConfig.model_validate({
            "log_level": 17,
            "delay_between_slides": -5,
            "capture_delay": 0,
            "max_title_length": 5000,
        })

        assert config.log_level == 3
        assert config.delay_between_slides == 0.1
        assert config.capture_delay == 0.1
        assert config.max_title_length == 200

    def test_garbage_values_use_defaults(self):
        config = AppConfig.model_validate({"log_level": "loud", "max_title_length": None, "capture_delay": True})

        assert config.log_level == 1
        assert config.max_title_length == 60
        assert config.capture_delay == 0.5

    def test_non_finite_values_use_defaults(self):
        """Тест: .inf / .nan из YAML не доходят до ожиданий (Event.wait(inf) -> OverflowError)."""
        config = AppConfig.model_validate({
            "capture_delay": float("inf"),
            "delay_between_slides": float("nan"),
            "resume_max_age_hours": float("inf"),
        })
        defaults = AppConfig()

        assert config.capture_delay == defaults.capture_delay
        assert config.delay_between_slides == defaults.delay_between_slides
        assert config.resume_max_age_hours == defaults.resume_max_age_hours

    def test_invalid_resume_record_is_dropped(self):
        """Тест: current > total -> запись игнорируется, конфиг загружается."""
        config = AppConfig.model_validate({
            "max_title_length": 40,
            "resume_record": {"current_slide": 30, "total_slides": 20, "output_folder": "out"},
        })

        assert config.resume_record is None
        assert config.max_title_length == 40

    def test_unknown_keys_are_ignored(self):
        assert AppConfig.model_validate({"theme": "dark"}) == AppConfig()


class TestYamlConfigStore:
    """Чтение и запись YAML."""

    def test_missing_file_gives_defaults(self, config_path):
        assert YamlConfigStore(config_path).load() == AppConfig()

    def test_save_and_load(self, config_path):
        """Тест: сохранённый конфиг читается обратно вместе с resume."""
        store = YamlConfigStore(config_path)
        record = ResumeRecord(current_slide=5, total_slides=20, output_folder="out")

        store.save(AppConfig(log_level=0, resume_record=record))
        loaded = store.load()

        assert loaded.log_level == 0
        assert loaded.resume_record.current_slide == 5
        assert loaded.resume_record.total_slides == 20
        assert yaml.safe_load(config_path.read_text(encoding="utf-8"))["schema_version"] == 1

    def test_corrupted_yaml_gives_defaults(self, config_path):
        """Тест: битый YAML -> дефолты (ConfigLoadFailure не ломает запуск)."""
        config_path.write_text("log_level: [1, 2\n", encoding="utf-8")

        assert YamlConfigStore(config_path).load() == AppConfig()

    def test_non_mapping_yaml_gives_defaults(self, config_path):
        config_path.write_text("- just\n- a list\n", encoding="utf-8")

        assert YamlConfigStore(config_path).load() == AppConfig()

    def test_values_from_file_are_clamped(self, config_path):
        config_path.write_text("log_level: 9\nmax_title_length: 3\n", encoding="utf-8")

        config = YamlConfigStore(config_path).load()

        assert config.log_level == 3
        assert config.max_title_length == 10

    def test_yaml_infinity_delay_uses_default(self, config_path):
        config_path.write_text("capture_delay: .inf\n", encoding="utf-8")

        assert YamlConfigStore(config_path).load().capture_delay == AppConfig().capture_delay

    def test_validate_is_strict(self, config_path):
        """Тест: validate() для CLI пробрасывает ConfigLoadError."""
        config_path.write_text("log_level: [1, 2\n", encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            YamlConfigStore(config_path).validate()
