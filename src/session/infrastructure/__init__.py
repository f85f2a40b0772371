"""
Инфраструктурный слой домена Session.

Захват экрана/replay, YAML конфиг, файлы сессии, управляющий файл сигналов.
"""

from .capture_sources import FolderReplayNavigator, FolderReplaySource, ScreenCaptureSource, image_region_hash
from .capture_validator import CaptureValidator
from .config_store import YamlConfigStore
from .file_manager import SessionFileManager, build_filename
from .file_signal_source import FileSignalSource

__all__ = [
    "FolderReplayNavigator",
    "FolderReplaySource",
    "ScreenCaptureSource",
    "image_region_hash",
    "CaptureValidator",
    "YamlConfigStore",
    "SessionFileManager",
    "build_filename",
    "FileSignalSource",
]
