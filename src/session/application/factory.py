"""
Фабрика для создания компонентов домена Session.

Собирает CaptureSessionController из конфига:
- источник снимков: экран (ImageGrab) или папка (--replay)
- extractor: Google Vision или None (режим без классификации)
- хранилище конфига/resume: YAML
"""

from pathlib import Path
from typing import Optional, Tuple

from loguru import logger

from config.settings import CONFIG_FILE
from src.classification.slide_classifier import SlideClassifier
from src.domain.contracts import AppConfig
from src.extraction.application.factory import ExtractionComponentFactory
from src.extraction.domain.interfaces import IRegionExtractor
from ..controller import CaptureSessionController, EventCallback
from ..domain.interfaces import IConfigStore, IImageCaptureSource, IPresentationNavigator
from ..infrastructure.capture_sources import FolderReplayNavigator, FolderReplaySource, ScreenCaptureSource
from ..infrastructure.config_store import YamlConfigStore
from ..infrastructure.file_signal_source import FileSignalSource
from ..resume_store import ResumeStateStore
from ..signals import SessionSignals


class KeyboardNavigator(IPresentationNavigator):
    """
    Навигатор живой презентации: Right / PageDown через pyautogui.

    pyautogui импортируется лениво: в режиме replay он не нужен.
    """

    def __init__(self, primary_key: str = "right", alternate_key: str = "pagedown"):
        import pyautogui

        self._gui = pyautogui
        self.primary_key = primary_key
        self.alternate_key = alternate_key

    def activate(self, target: str) -> None:
        # Клик в центр экрана возвращает фокус окну презентации
        width, height = self._gui.size()
        self._gui.click(width // 2, height // 2)
        logger.debug(f"[Navigator] Активировано окно '{target}'")

    def advance(self, target: str) -> bool:
        self._gui.press(self.primary_key)
        return True

    def advance_alternate(self, target: str) -> bool:
        self._gui.press(self.alternate_key)
        return True


class SessionComponentFactory:
    """Фабрика для создания компонентов домена Session."""

    @staticmethod
    def create_config_store(config_path: Optional[Path] = None) -> IConfigStore:
        path = Path(config_path) if config_path else CONFIG_FILE
        logger.debug(f"[Session] Конфиг: {path}")
        return YamlConfigStore(path)

    @staticmethod
    def create_capture(
        replay_dir: Optional[Path] = None
    ) -> Tuple[IImageCaptureSource, IPresentationNavigator]:
        """
        Источник снимков + навигатор.

        Args:
            replay_dir: Папка со скриншотами; None -> живой экран
        """
        if replay_dir is not None:
            source = FolderReplaySource(replay_dir)
            return source, FolderReplayNavigator(source)

        return ScreenCaptureSource(), KeyboardNavigator()

    @staticmethod
    def create_region_extractor(
        credentials_path: Optional[str] = None,
        use_ocr: bool = True
    ) -> Optional[IRegionExtractor]:
        if not use_ocr:
            logger.info("[Session] OCR отключён, режим без классификации")
            return None
        return ExtractionComponentFactory.create_region_extractor(credentials_path=credentials_path)

    @staticmethod
    def create_signal_source(signals: SessionSignals, control_dir: Path) -> FileSignalSource:
        return FileSignalSource(signals, control_dir)

    @staticmethod
    def create_controller(
        config_store: IConfigStore,
        capture_source: IImageCaptureSource,
        navigator: IPresentationNavigator,
        region_extractor: Optional[IRegionExtractor] = None,
        config: Optional[AppConfig] = None,
        signals: Optional[SessionSignals] = None,
        on_event: Optional[EventCallback] = None,
        clear_resume_on_cancel: bool = False
    ) -> CaptureSessionController:
        """
        Создает контроллер сессии.

        Args:
            config_store: Хранилище конфига (в нём же ResumeRecord)
            capture_source: Источник снимков
            navigator: Навигатор презентации
            region_extractor: OCR регионов; None -> все слайды Slide_NN
            config: Уже загруженный конфиг (иначе читается из config_store)
            signals: Сигналы pause/cancel (общие с источником сигналов)
            on_event: Колбэк прогресса
            clear_resume_on_cancel: Очищать ResumeRecord при отмене
        """
        config = config or config_store.load()
        return CaptureSessionController(
            capture_source=capture_source,
            navigator=navigator,
            resume_store=ResumeStateStore(config_store, config.resume_max_age_hours),
            config=config,
            region_extractor=region_extractor,
            classifier=SlideClassifier(config.max_title_length),
            signals=signals,
            on_event=on_event,
            clear_resume_on_cancel=clear_resume_on_cancel,
        )
