"""
Unit-тесты CaptureSessionController.

ЦКП: цикл захвата доходит до конца несмотря на сбои отдельных слайдов,
честно реагирует на pause/cancel и ведёт запись resume.
"""

import threading
import time

import pytest

from contracts.session_dto import SessionState, SlideOutcome
from contracts.slide_dto import RegionName
from src.domain.contracts import AppConfig, ResumeRecord
from src.session.controller import CaptureSessionController
from src.session.domain.exceptions import InvalidStateTransitionError, SessionFileWriteError
from src.session.infrastructure.file_manager import SessionFileManager
from src.session.resume_store import ResumeStateStore
from src.session.retry_policy import RetryPolicy
from src.session.signals import SessionSignals
from tests.fakes import ScriptedCaptureSource, ScriptedNavigator, ScriptedRegionExtractor

COURSE_SLIDES = {
    1: {RegionName.TITLE: "Introduction to ClamAV"},
    2: {RegionName.FULL: "Cyber Lab: Configuring Firewall"},
    3: {RegionName.FULL: "Summary"},
}


@pytest.fixture
def signals():
    return SessionSignals()


@pytest.fixture
def events():
    return []


@pytest.fixture
def make_controller(config_store, capture_source, navigator, signals, events):
    """Fixture: фабрика контроллера без реальных задержек."""
    def build(region_extractor=None, on_event=None, **kwargs):
        def record_event(event):
            events.append(event)
            if on_event is not None:
                on_event(event)

        kwargs.setdefault("capture_source", capture_source)
        kwargs.setdefault("navigator", navigator)
        return CaptureSessionController(
            resume_store=ResumeStateStore(config_store),
            config=config_store.load(),
            region_extractor=region_extractor,
            signals=signals,
            retry_policy=RetryPolicy(capture_retry_delay=0, advance_retry_delay=0, generic_delay=0),
            on_event=record_event,
            sleep=lambda seconds: not signals.is_cancelled,
            **kwargs
        )
    return build


def _saved_names(output_dir):
    return sorted(path.name for path in output_dir.iterdir())


def _when_paused(controller, action):
    """Фоновый поток: дождаться Paused и выполнить action (resume / cancel)."""
    def wait_and_act():
        deadline = time.monotonic() + 5.0
        while controller.state != SessionState.PAUSED and time.monotonic() < deadline:
            time.sleep(0.01)
        action()

    thread = threading.Thread(target=wait_and_act, daemon=True)
    thread.start()
    return thread


class TestHappyPath:

    def test_ocr_unavailable_names_every_slide_by_index(self, make_controller, output_dir, config_store):
        """Тест: без OCR все артефакты Slide_NN, сессия Completed."""
        controller = make_controller()

        summary = controller.run(3, output_dir)

        assert _saved_names(output_dir) == ["01_Slide_01.png", "02_Slide_02.png", "03_Slide_03.png"]
        assert controller.state == SessionState.COMPLETED
        assert summary.state == SessionState.COMPLETED
        assert summary.succeeded == 3
        assert summary.fallback_named == 3
        assert config_store.config.resume_record is None

    def test_slides_are_classified(self, make_controller, capture_source, output_dir):
        """Тест: заголовки из OCR, модуль переносится между слайдами."""
        extractor = ScriptedRegionExtractor(capture_source, COURSE_SLIDES)
        controller = make_controller(region_extractor=extractor)

        summary = controller.run(3, output_dir)

        assert _saved_names(output_dir) == [
            "01_Introduction_to_ClamAV.png",
            "02_Cyber_Lab_Configuring_Firewall.png",
            "03_Summary_ClamAV.png",
        ]
        assert summary.succeeded == 3
        assert summary.fallback_named == 0
        assert controller.context.current_module == "ClamAV"
        assert extractor.profiles[0].width == 640

    def test_progress_events_per_slide(self, make_controller, output_dir, events):
        """Тест: событие на каждый слайд, ETA появляется после трёх замеров."""
        controller = make_controller()

        controller.run(4, output_dir)

        slide_events = [event for event in events if event.outcome is not None]
        assert [event.index for event in slide_events] == [1, 2, 3, 4]
        assert all(event.total == 4 for event in slide_events)
        assert slide_events[0].filename == "01_Slide_01.png"
        assert slide_events[0].eta is None
        assert slide_events[2].eta is not None

    def test_existing_file_is_not_overwritten(self, make_controller, output_dir):
        """Тест: коллизия имени -> суффикс, старый файл цел."""
        output_dir.mkdir(parents=True)
        (output_dir / "01_Slide_01.png").write_bytes(b"old")

        make_controller().run(1, output_dir)

        names = [name for name in _saved_names(output_dir) if name.startswith("01_Slide_01")]
        assert len(names) == 2
        assert (output_dir / "01_Slide_01.png").read_bytes() == b"old"


class TestFailureRecovery:

    def test_capture_failure_skips_slide(self, make_controller, tmp_path, output_dir, events):
        """Тест: захват не удаётся -> повтор, пропуск слайда, сессия продолжается."""
        source = ScriptedCaptureSource(tmp_path / "broken", broken_slides={2})
        navigator = ScriptedNavigator(source)
        controller = make_controller(capture_source=source, navigator=navigator)

        summary = controller.run(3, output_dir)

        assert _saved_names(output_dir) == ["01_Slide_01.png", "03_Slide_03.png"]
        assert source.capture_calls[2] == 2
        assert navigator.activations == 1
        assert summary.skipped == 1
        assert summary.state == SessionState.COMPLETED
        skipped = [event for event in events if event.outcome == SlideOutcome.SKIPPED]
        assert [event.index for event in skipped] == [2]
        assert skipped[0].state == SessionState.RUNNING

    def test_ocr_failure_uses_fallback_name(self, make_controller, capture_source, output_dir):
        """Тест: OCR упал на слайде -> Slide_NN, слайд считается сохранённым."""
        extractor = ScriptedRegionExtractor(capture_source, COURSE_SLIDES, failing_slides={2})
        controller = make_controller(region_extractor=extractor)

        summary = controller.run(3, output_dir)

        assert "02_Slide_02.png" in _saved_names(output_dir)
        assert summary.succeeded == 3
        assert summary.fallback_named == 1

    def test_generic_failure_continues(self, make_controller, output_dir):
        """Тест: прочая ошибка итерации -> слайд failed, следующий обрабатывается."""
        class FailingFileManager(SessionFileManager):
            def persist_artifact(self, source, destination):
                if destination.name.startswith("02_"):
                    raise SessionFileWriteError(message="disk full", component="test")
                return super().persist_artifact(source, destination)

        controller = make_controller(file_manager=FailingFileManager())

        summary = controller.run(3, output_dir)

        assert _saved_names(output_dir) == ["01_Slide_01.png", "03_Slide_03.png"]
        assert summary.failed == 1
        assert summary.state == SessionState.COMPLETED

    def test_resume_write_failure_does_not_stop_session(self, make_controller, config_store, output_dir, monkeypatch):
        """Тест: конфиг не записывается (read-only / диск полон) -> все слайды сохранены, Completed."""
        def read_only_save(config):
            raise SessionFileWriteError(message="read-only", component="test")

        monkeypatch.setattr(config_store, "save", read_only_save)
        controller = make_controller()

        summary = controller.run(3, output_dir)

        assert _saved_names(output_dir) == ["01_Slide_01.png", "02_Slide_02.png", "03_Slide_03.png"]
        assert summary.state == SessionState.COMPLETED
        assert summary.succeeded == 3

    def test_resume_write_failure_on_cancel_clear(self, make_controller, signals, config_store, output_dir, monkeypatch):
        def cancel_after_first(event):
            if event.outcome is not None:
                signals.cancel()
                monkeypatch.setattr(config_store, "save", read_only_save)

        def read_only_save(config):
            raise SessionFileWriteError(message="read-only", component="test")

        controller = make_controller(on_event=cancel_after_first, clear_resume_on_cancel=True)

        summary = controller.run(3, output_dir)

        assert summary.state == SessionState.CANCELLED

    def test_unconfirmed_advance_is_retried(self, make_controller, capture_source, output_dir):
        """Тест: хэш не изменился -> повтор основного перелистывания."""
        navigator = ScriptedNavigator(capture_source, stuck_calls=1)
        controller = make_controller(navigator=navigator)

        controller.run(2, output_dir)

        assert navigator.calls == ["advance", "advance"]
        assert capture_source.position == 2

    def test_stuck_presentation_tries_alternate_then_gives_up(self, make_controller, capture_source, output_dir, events):
        """Тест: повтор -> альтернативная клавиша -> предупреждение, сессия идёт дальше."""
        navigator = ScriptedNavigator(capture_source, stuck_calls=10)
        controller = make_controller(navigator=navigator)

        summary = controller.run(2, output_dir)

        assert navigator.calls == ["advance", "advance", "alternate"]
        assert summary.state == SessionState.COMPLETED
        assert "02_Slide_02.png" in _saved_names(output_dir)
        assert any("перелистнуть" in event.message for event in events)


class TestSignals:

    def test_cancel_stops_before_next_slide(self, make_controller, signals, output_dir, config_store):
        """Тест: отмена -> Cancelled, запись resume сохраняется."""
        def cancel_after_second(event):
            if event.index == 2 and event.outcome is not None:
                signals.cancel()

        controller = make_controller(on_event=cancel_after_second)

        summary = controller.run(5, output_dir)

        assert _saved_names(output_dir) == ["01_Slide_01.png", "02_Slide_02.png"]
        assert summary.state == SessionState.CANCELLED
        assert controller.state == SessionState.CANCELLED
        assert config_store.config.resume_record.current_slide == 2

    def test_cancel_can_clear_resume(self, make_controller, signals, output_dir, config_store):
        def cancel_after_first(event):
            if event.outcome is not None:
                signals.cancel()

        controller = make_controller(on_event=cancel_after_first, clear_resume_on_cancel=True)

        controller.run(3, output_dir)

        assert controller.state == SessionState.CANCELLED
        assert config_store.config.resume_record is None

    def test_pause_then_resume(self, make_controller, signals, output_dir, events):
        """Тест: пауза наблюдается между слайдами, после resume сессия завершается."""
        def pause_after_first(event):
            if event.index == 1 and event.outcome is not None:
                signals.pause()
                _when_paused(controller, signals.resume)

        controller = make_controller(on_event=pause_after_first)

        summary = controller.run(3, output_dir)

        states = [event.state for event in events]
        assert SessionState.PAUSED in states
        assert summary.state == SessionState.COMPLETED
        assert len(_saved_names(output_dir)) == 3

    def test_cancel_while_paused(self, make_controller, signals, output_dir):
        """Тест: Paused -> Cancelling -> Cancelled."""
        def pause_after_first(event):
            if event.index == 1 and event.outcome is not None:
                signals.pause()
                _when_paused(controller, signals.cancel)

        controller = make_controller(on_event=pause_after_first)

        summary = controller.run(3, output_dir)

        assert summary.state == SessionState.CANCELLED
        assert _saved_names(output_dir) == ["01_Slide_01.png"]


class TestResume:

    def test_resume_continues_after_saved_slide(self, make_controller, config_store, output_dir):
        """Тест: запись 5/20 -> resume_from 6, total 20."""
        config_store.config = AppConfig(resume_record=ResumeRecord(
            current_slide=5, total_slides=20, output_folder=str(output_dir)
        ))
        controller = make_controller()

        session = controller.prepare(3, output_dir.parent / "other", accept_resume=True)

        assert session.resume_from == 6
        assert session.total_slides == 20
        assert session.output_folder == output_dir

    def test_declined_resume_starts_fresh(self, make_controller, config_store, output_dir):
        config_store.config = AppConfig(resume_record=ResumeRecord(
            current_slide=5, total_slides=20, output_folder=str(output_dir)
        ))
        offered = []
        controller = make_controller()

        session = controller.prepare(3, output_dir, accept_resume=lambda record: offered.append(record) or False)

        assert session.resume_from == 1
        assert session.total_slides == 3
        assert offered[0].current_slide == 5

    def test_resumed_run_processes_only_remaining(self, make_controller, config_store, output_dir):
        """Тест: продолжение обрабатывает только оставшиеся слайды и очищает запись."""
        config_store.config = AppConfig(resume_record=ResumeRecord(
            current_slide=2, total_slides=3, output_folder=str(output_dir)
        ))
        controller = make_controller()

        summary = controller.run(accept_resume=True)

        assert _saved_names(output_dir) == ["03_Slide_03.png"]
        assert summary.requested == 1
        assert config_store.config.resume_record is None

    def test_resumed_run_captures_remaining_slides(self, make_controller, config_store, capture_source, output_dir):
        """Тест: источник перематывается на слайд продолжения, снимки соответствуют номерам."""
        config_store.config = AppConfig(resume_record=ResumeRecord(
            current_slide=2, total_slides=3, output_folder=str(output_dir)
        ))
        extractor = ScriptedRegionExtractor(capture_source, COURSE_SLIDES)
        controller = make_controller(region_extractor=extractor)

        controller.run(accept_resume=True)

        assert _saved_names(output_dir) == ["03_Summary.png"]
        assert capture_source.capture_calls == {3: 1}

    def test_declined_resume_does_not_seek(self, make_controller, config_store, capture_source, output_dir):
        config_store.config = AppConfig(resume_record=ResumeRecord(
            current_slide=2, total_slides=3, output_folder=str(output_dir)
        ))

        make_controller().prepare(3, output_dir, accept_resume=False)

        assert capture_source.position == 1


class TestStateMachine:

    def test_finished_session_cannot_restart(self, make_controller, output_dir):
        controller = make_controller()
        controller.run(1, output_dir)

        with pytest.raises(InvalidStateTransitionError):
            controller.run(1, output_dir)

    def test_zero_slides_rejected(self, make_controller, output_dir):
        with pytest.raises(ValueError):
            make_controller().prepare(0, output_dir)
