"""
CaptureSessionController: цикл захвата слайдов.

Состояния:
    Idle -> Running <-> Paused
    Running/Paused -> Cancelling -> Cancelled
    Running -> Completed

Одна итерация (idx = resume_from..total):
    checkpoint (cancel / pause) -> capture -> classify -> "{idx:02d}_{title}.png"
    -> уникальный путь -> сохранение -> ProgressEstimator -> событие
    -> ResumeRecord -> advance (кроме последнего слайда)

Ошибки итерации восстанавливаются локально по RetryPolicy и не завершают
сессию. Сигналы pause/cancel кооперативные: наблюдаются только на
checkpoint и в ожидании паузы; начатый захват/классификация всегда
доходят до конца.
"""

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Union

from loguru import logger

from config.settings import PAUSE_POLL_INTERVAL
from contracts.session_dto import (
    CaptureSession,
    ProgressEvent,
    SessionState,
    SessionSummary,
    SlideOutcome,
)
from contracts.slide_dto import (
    ClassificationResult,
    ClassifierContext,
    RegionName,
    SlideArtifact,
)
from src.classification.slide_classifier import SlideClassifier
from src.domain.contracts import AppConfig, ResumeRecord
from src.extraction.domain.exceptions import ExtractionError
from src.extraction.domain.interfaces import IRegionExtractor
from src.extraction.geometry import GeometryProfile
from .domain.exceptions import AdvanceError, CaptureError, InvalidStateTransitionError, SessionFileWriteError
from .domain.interfaces import IImageCaptureSource, IPresentationNavigator
from .infrastructure.capture_validator import CaptureValidator
from .infrastructure.file_manager import SessionFileManager, build_filename
from .progress import ProgressEstimator
from .resume_store import ResumeStateStore
from .retry_policy import ErrorKind, RecoveryAction, RetryPolicy
from .signals import SessionSignals

EventCallback = Callable[[ProgressEvent], None]
ResumeDecision = Union[bool, Callable[[ResumeRecord], bool]]

_TRANSITIONS = {
    SessionState.IDLE: {SessionState.RUNNING},
    SessionState.RUNNING: {SessionState.PAUSED, SessionState.CANCELLING, SessionState.COMPLETED},
    SessionState.PAUSED: {SessionState.RUNNING, SessionState.CANCELLING},
    SessionState.CANCELLING: {SessionState.CANCELLED},
    SessionState.CANCELLED: set(),
    SessionState.COMPLETED: set(),
}


class CaptureSessionController:
    """
    Оркестратор сессии захвата.

    Координирует:
    1. Захват (IImageCaptureSource) с повтором через RetryPolicy
    2. OCR регионов (IRegionExtractor) и классификацию (SlideClassifier)
    3. Сохранение артефакта и ResumeRecord
    4. Перелистывание (IPresentationNavigator) с проверкой по хэшу

    region_extractor=None -> режим без классификации (все слайды Slide_NN).
    """

    def __init__(
        self,
        capture_source: IImageCaptureSource,
        navigator: IPresentationNavigator,
        resume_store: ResumeStateStore,
        config: Optional[AppConfig] = None,
        region_extractor: Optional[IRegionExtractor] = None,
        classifier: Optional[SlideClassifier] = None,
        signals: Optional[SessionSignals] = None,
        retry_policy: Optional[RetryPolicy] = None,
        progress: Optional[ProgressEstimator] = None,
        file_manager: Optional[SessionFileManager] = None,
        validator: Optional[CaptureValidator] = None,
        target: str = "presentation",
        on_event: Optional[EventCallback] = None,
        sleep: Optional[Callable[[float], bool]] = None,
        clock: Callable[[], float] = time.monotonic,
        clear_resume_on_cancel: bool = False
    ):
        self.capture_source = capture_source
        self.navigator = navigator
        self.resume_store = resume_store
        self.config = config or AppConfig()
        self.region_extractor = region_extractor
        self.classifier = classifier or SlideClassifier(self.config.max_title_length)
        self.signals = signals or SessionSignals()
        self.retry_policy = retry_policy or RetryPolicy()
        self.progress = progress or ProgressEstimator()
        self.file_manager = file_manager or SessionFileManager()
        self.validator = validator or CaptureValidator()
        self.target = target
        self.on_event = on_event
        self.clear_resume_on_cancel = clear_resume_on_cancel
        self._sleep = sleep or self.signals.sleep
        self._clock = clock

        self._session: Optional[CaptureSession] = None
        self._state = SessionState.IDLE
        self._context = ClassifierContext()
        self._profile: Optional[GeometryProfile] = None
        self._counts: Dict[SlideOutcome, int] = {outcome: 0 for outcome in SlideOutcome}
        self._last_mark = 0.0

        mode = "с классификацией" if region_extractor is not None else "без классификации"
        logger.info(f"[Controller] Инициализирован ({mode})")

    # ------------------------------------------------------------------
    # Публичный API
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[CaptureSession]:
        return self._session

    @property
    def context(self) -> ClassifierContext:
        return self._context

    def pause(self) -> None:
        self.signals.pause()

    def resume(self) -> None:
        self.signals.resume()

    def cancel(self) -> None:
        self.signals.cancel()

    def prepare(
        self,
        total_slides: int,
        output_folder: Path,
        accept_resume: ResumeDecision = False
    ) -> CaptureSession:
        """
        Создаёт сессию: новую или из ResumeRecord.

        Если есть незавершённая запись и вызывающий её принимает,
        total_slides и output_folder берутся из записи.

        Raises:
            ValueError: Если total_slides < 1
        """
        if self._session is not None:
            return self._session

        record = self.resume_store.resumable()
        use_record = False
        if record is not None:
            use_record = accept_resume(record) if callable(accept_resume) else bool(accept_resume)

        if use_record and record is not None:
            total_slides = record.total_slides
            output_folder = Path(record.output_folder)
            resume_from = record.current_slide + 1
            logger.info(
                f"[Controller] Продолжение сессии: слайд {resume_from}/{total_slides}, папка {output_folder}"
            )
        else:
            resume_from = 1

        if total_slides < 1:
            raise ValueError(f"total_slides должно быть >= 1, получено {total_slides}")

        self.resume_store.start_from(record if use_record else None)
        if use_record:
            self.capture_source.seek(resume_from)
        self._session = CaptureSession(
            total_slides=total_slides,
            output_folder=Path(output_folder),
            current_index=resume_from - 1,
            state=SessionState.IDLE,
            started_at=datetime.now(),
            resume_from=resume_from,
        )
        return self._session

    def run(
        self,
        total_slides: int = 0,
        output_folder: Optional[Path] = None,
        accept_resume: ResumeDecision = False
    ) -> SessionSummary:
        """
        Запускает цикл захвата до конца, отмены или исчерпания слайдов.

        Returns:
            SessionSummary (также пишется в лог)
        """
        session = self._session or self.prepare(
            total_slides, output_folder or Path("."), accept_resume
        )
        self.file_manager.ensure_directory(session.output_folder)

        started = self._clock()
        self._last_mark = started
        self._transition(SessionState.RUNNING)
        self._profile = self._detect_profile()

        if self.region_extractor is None:
            logger.warning("[Controller] OCR недоступен: все слайды будут названы Slide_NN")

        logger.info(
            f"[Controller] Старт: слайды {session.resume_from}..{session.total_slides} -> {session.output_folder}"
        )

        for idx in range(session.resume_from, session.total_slides + 1):
            if not self._checkpoint():
                break
            self._run_iteration(idx)
        else:
            self._transition(SessionState.COMPLETED)
            self._clear_resume()

        summary = self._summary(self._clock() - started)
        logger.info(f"[Controller] Итог: {summary.describe()}")
        return summary

    # ------------------------------------------------------------------
    # Состояние
    # ------------------------------------------------------------------

    def _transition(self, new_state: SessionState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise InvalidStateTransitionError(
                message=f"{self._state.value} -> {new_state.value}",
                component="CaptureSessionController"
            )
        logger.debug(f"[Controller] {self._state.value} -> {new_state.value}")
        self._state = new_state
        if self._session is not None:
            self._session.state = new_state

    def _checkpoint(self) -> bool:
        """Точка наблюдения сигналов. False — сессия отменена."""
        if self.signals.is_cancelled:
            self._cancel()
            return False

        if self.signals.is_paused:
            self._transition(SessionState.PAUSED)
            self._notify("Пауза")
            if not self.signals.wait_while_paused(PAUSE_POLL_INTERVAL):
                self._cancel()
                return False
            self._transition(SessionState.RUNNING)
            self._notify("Продолжение")
        return True

    def _cancel(self) -> None:
        self._transition(SessionState.CANCELLING)
        if self.clear_resume_on_cancel:
            self._clear_resume()
        self._transition(SessionState.CANCELLED)
        session = self._session
        logger.warning(
            f"[Controller] Сессия отменена на слайде {session.current_index + 1 if session else '?'}"
        )
        self._notify("Отменено")

    # ------------------------------------------------------------------
    # Итерация
    # ------------------------------------------------------------------

    def _run_iteration(self, idx: int) -> SlideOutcome:
        session = self._require_session()
        session.current_index = max(session.current_index, idx)
        final_path: Optional[Path] = None

        try:
            outcome, final_path = self._capture_classify_persist(idx)
        except Exception as e:
            # Generic: уведомить, короткая пауза, следующий слайд
            plan = self.retry_policy.plan(e)
            logger.error(f"[Controller] Слайд {idx:02d}: ошибка {plan.kind.value}: {e}")
            self._notify(f"Слайд {idx:02d} пропущен из-за ошибки: {e}")
            self._sleep(plan.delay)
            outcome = SlideOutcome.FAILED

        self._counts[outcome] += 1

        now = self._clock()
        self.progress.sample(now - self._last_mark)
        self._last_mark = now

        self._emit(ProgressEvent(
            index=idx,
            total=session.total_slides,
            state=self._state,
            outcome=outcome,
            filename=final_path.name if final_path else None,
            eta=self.progress.eta_text(session.total_slides - idx),
        ))

        self._save_resume(idx)

        if idx < session.total_slides and not self.signals.is_cancelled:
            self._advance(idx)

        return outcome

    def _save_resume(self, idx: int) -> None:
        """Сохраняет ResumeRecord; ошибка записи не останавливает сессию."""
        session = self._require_session()
        try:
            self.resume_store.update(idx, session.total_slides, session.output_folder)
        except SessionFileWriteError as e:
            logger.warning(f"[Controller] Слайд {idx:02d}: запись resume не сохранена: {e}")

    def _clear_resume(self) -> None:
        try:
            self.resume_store.clear()
        except SessionFileWriteError as e:
            logger.warning(f"[Controller] Запись resume не очищена: {e}")

    def _capture_classify_persist(self, idx: int) -> Tuple[SlideOutcome, Optional[Path]]:
        session = self._require_session()
        self._sleep(self.config.capture_delay)

        try:
            source_path = self._capture_with_retry()
        except CaptureError as e:
            plan = self.retry_policy.plan(e, attempt=self.retry_policy.capture_attempts)
            logger.warning(f"[Controller] Слайд {idx:02d}: захват не удался ({plan.action.value}): {e}")
            self._notify(f"Слайд {idx:02d} пропущен: снимок не получен")
            return SlideOutcome.SKIPPED, None

        artifact = SlideArtifact(index=idx, source_image_path=source_path)
        artifact.classification, artifact.region_texts, outcome = self._classify(idx, source_path)

        extension = source_path.suffix.lstrip(".") or "png"
        filename = build_filename(idx, artifact.classification.title, extension)
        destination = self.file_manager.ensure_unique_path(session.output_folder / filename)
        artifact.final_path = self.file_manager.persist_artifact(source_path, destination)

        logger.info(
            f"[Controller] {idx:02d}/{session.total_slides:02d} "
            f"{artifact.classification.slide_type.value}: {artifact.final_path.name}"
        )
        return outcome, artifact.final_path

    def _capture_with_retry(self) -> Path:
        retrying = self.retry_policy.capture_retrying(
            sleep=self._sleep,
            before_retry=lambda retry_state: self._reactivate(),
            is_cancelled=lambda: self.signals.is_cancelled,
        )
        return retrying(self._capture_once)

    def _capture_once(self) -> Path:
        path = self.capture_source.capture()
        try:
            width, height = self.validator.validate(path)
        except CaptureError:
            path.unlink(missing_ok=True)
            raise
        if self._profile is None:
            self._profile = GeometryProfile.from_resolution(width, height)
        return path

    def _reactivate(self) -> None:
        try:
            self.navigator.activate(self.target)
        except Exception as e:
            logger.warning(f"[Controller] Не удалось активировать '{self.target}': {e}")

    def _classify(
        self,
        idx: int,
        image_path: Path
    ) -> Tuple[ClassificationResult, Dict[RegionName, str], SlideOutcome]:
        if self.region_extractor is None or self._profile is None:
            return self.classifier.fallback(idx), {}, SlideOutcome.FALLBACK

        try:
            region_texts = self.region_extractor.extract(image_path, self._profile)
        except ExtractionError as e:
            plan = self.retry_policy.plan(e)
            logger.warning(f"[Controller] Слайд {idx:02d}: OCR не удался ({plan.action.value}): {e}")
            return self.classifier.fallback(idx), {}, SlideOutcome.FALLBACK

        result, self._context = self.classifier.classify(region_texts, self._context)
        return result, region_texts, SlideOutcome.SAVED

    # ------------------------------------------------------------------
    # Перелистывание
    # ------------------------------------------------------------------

    def _advance(self, idx: int) -> bool:
        """
        Перелистывает на следующий слайд с проверкой по хэшу.

        Неудача: повтор основного перелистывания, затем альтернативная
        последовательность; если и она не помогла — идём дальше.
        """
        before = self._verification_hash()
        use_alternate = False
        attempt = 0

        while True:
            try:
                self._try_advance(use_alternate, before)
                return True
            except AdvanceError as e:
                attempt += 1
                plan = self.retry_policy.plan(ErrorKind.ADVANCE_FAILURE, attempt)
                if plan.action == RecoveryAction.GIVE_UP_ADVANCE:
                    logger.warning(f"[Controller] Слайд {idx:02d}: перелистывание не подтверждено: {e}")
                    self._notify(f"Не удалось перелистнуть после слайда {idx:02d}")
                    return False

                logger.warning(f"[Controller] Слайд {idx:02d}: {e}; {plan.action.value}")
                if not self._sleep(plan.delay):
                    return False
                use_alternate = plan.action == RecoveryAction.ALTERNATE_ADVANCE

    def _try_advance(self, use_alternate: bool, before: Optional[str]) -> None:
        """
        Raises:
            AdvanceError: Если вызов упал, вернул False или хэш не изменился
        """
        try:
            if use_alternate:
                advanced = self.navigator.advance_alternate(self.target)
            else:
                advanced = self.navigator.advance(self.target)
        except Exception as e:
            raise AdvanceError(
                message="Вызов перелистывания упал",
                component="CaptureSessionController",
                original_error=e
            )
        if not advanced:
            raise AdvanceError(message="Навигатор не перелистнул", component="CaptureSessionController")

        self._sleep(self.config.delay_between_slides)

        after = self._verification_hash()
        if before is not None and after is not None and after == before:
            raise AdvanceError(message="Хэш слайда не изменился", component="CaptureSessionController")

    def _verification_hash(self) -> Optional[str]:
        """Хэш области проверки; None — проверить нельзя (перелистывание не верифицируется)."""
        if self._profile is None:
            return None
        try:
            path, digest = self.capture_source.capture_and_hash(self._profile.region(RegionName.VERIFY))
        except (CaptureError, OSError) as e:
            logger.debug(f"[Controller] Хэш для проверки не получен: {e}")
            return None
        path.unlink(missing_ok=True)
        return digest

    # ------------------------------------------------------------------
    # Вспомогательное
    # ------------------------------------------------------------------

    def _detect_profile(self) -> Optional[GeometryProfile]:
        try:
            width, height = self.capture_source.resolution()
            return GeometryProfile.from_resolution(width, height)
        except (CaptureError, OSError, ValueError) as e:
            logger.warning(f"[Controller] Разрешение не определено, возьмём из первого снимка: {e}")
            return None

    def _require_session(self) -> CaptureSession:
        if self._session is None:
            raise InvalidStateTransitionError(
                message="Сессия не подготовлена (prepare/run)",
                component="CaptureSessionController"
            )
        return self._session

    def _notify(self, message: str) -> None:
        session = self._session
        self._emit(ProgressEvent(
            index=session.current_index if session else 0,
            total=session.total_slides if session else 0,
            state=self._state,
            message=message,
        ))

    def _emit(self, event: ProgressEvent) -> None:
        if self.on_event is None:
            return
        try:
            self.on_event(event)
        except Exception:
            logger.exception("[Controller] Ошибка в обработчике событий прогресса")

    def _summary(self, elapsed: float) -> SessionSummary:
        session = self._require_session()
        requested = session.total_slides - session.resume_from + 1
        return SessionSummary(
            requested=requested,
            succeeded=self._counts[SlideOutcome.SAVED] + self._counts[SlideOutcome.FALLBACK],
            fallback_named=self._counts[SlideOutcome.FALLBACK],
            skipped=self._counts[SlideOutcome.SKIPPED],
            failed=self._counts[SlideOutcome.FAILED],
            elapsed_seconds=elapsed,
            state=self._state,
        )
