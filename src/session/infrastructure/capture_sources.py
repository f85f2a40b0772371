"""
Источники снимков и навигаторы.

ScreenCaptureSource   — живой захват экрана (Pillow ImageGrab)
FolderReplaySource    — "воспроизведение" папки готовых скриншотов
FolderReplayNavigator — перелистывание для FolderReplaySource

Replay позволяет переименовать уже выгруженную презентацию тем же
конвейером классификации, без окна браузера.
"""

import hashlib
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger
from PIL import Image, ImageGrab

from ...extraction.geometry import Rect
from ..domain.exceptions import CaptureError
from ..domain.interfaces import IImageCaptureSource, IPresentationNavigator

SUPPORTED_IMAGE_FORMATS = [".png", ".jpg", ".jpeg", ".bmp", ".webp"]


def image_region_hash(image_path: Path, region: Optional[Rect] = None) -> str:
    """SHA-256 пикселей изображения (или его региона)."""
    with Image.open(image_path) as image:
        if region is not None:
            bounded = region.clamp(*image.size)
            image = image.crop((bounded.x, bounded.y, bounded.right, bounded.bottom))
        return hashlib.sha256(image.convert("RGB").tobytes()).hexdigest()


class ScreenCaptureSource(IImageCaptureSource):
    """Захват экрана через Pillow ImageGrab."""

    def __init__(self, scratch_dir: Optional[Path] = None):
        self.scratch_dir = Path(scratch_dir) if scratch_dir else Path(tempfile.mkdtemp(prefix="slide_capture_"))
        self.scratch_dir.mkdir(parents=True, exist_ok=True)

    def resolution(self) -> Tuple[int, int]:
        try:
            return ImageGrab.grab().size
        except OSError as e:
            raise CaptureError(
                message="Не удалось определить разрешение экрана",
                component="ScreenCaptureSource",
                original_error=e
            )

    def capture(self, region: Optional[Rect] = None) -> Path:
        bbox = (region.x, region.y, region.right, region.bottom) if region else None
        try:
            image = ImageGrab.grab(bbox=bbox)
        except OSError as e:
            raise CaptureError(
                message="ImageGrab не вернул снимок",
                component="ScreenCaptureSource",
                original_error=e
            )

        path = self.scratch_dir / f"capture_{uuid.uuid4().hex[:12]}.png"
        image.save(path, format="PNG")
        return path

    def capture_and_hash(self, region: Rect) -> Tuple[Path, str]:
        path = self.capture(region)
        return path, image_region_hash(path)


class FolderReplaySource(IImageCaptureSource):
    """
    Отдаёт изображения папки по одному, по порядку имён.

    Текущая позиция двигается FolderReplayNavigator.advance().
    """

    def __init__(self, input_dir: Path, scratch_dir: Optional[Path] = None):
        self.input_dir = Path(input_dir)
        self.images = self._list_images(self.input_dir)
        if not self.images:
            raise CaptureError(
                message=f"В папке нет изображений: {self.input_dir}",
                component="FolderReplaySource"
            )
        self.position = 0
        self.scratch_dir = Path(scratch_dir) if scratch_dir else Path(tempfile.mkdtemp(prefix="slide_replay_"))
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"[FolderReplay] {len(self.images)} изображений в {self.input_dir}")

    @staticmethod
    def _list_images(directory: Path) -> List[Path]:
        if not directory.exists():
            return []
        return sorted(
            path for path in directory.iterdir()
            if path.is_file() and path.suffix.lower() in SUPPORTED_IMAGE_FORMATS
        )

    @property
    def current(self) -> Path:
        return self.images[min(self.position, len(self.images) - 1)]

    def seek(self, slide_index: int) -> None:
        """Слайд N = N-й файл папки (с зажатием в границы)."""
        self.position = max(0, min(slide_index - 1, len(self.images) - 1))
        logger.info(f"[FolderReplay] Переход к слайду {slide_index}: {self.current.name}")

    def resolution(self) -> Tuple[int, int]:
        with Image.open(self.images[0]) as image:
            return image.size

    def capture(self, region: Optional[Rect] = None) -> Path:
        """Копирует текущий кадр во временную папку (оригинал не трогаем)."""
        source = self.current
        path = self.scratch_dir / f"replay_{uuid.uuid4().hex[:12]}{source.suffix.lower()}"
        if region is None:
            shutil.copy2(source, path)
            return path

        with Image.open(source) as image:
            bounded = region.clamp(*image.size)
            image.crop((bounded.x, bounded.y, bounded.right, bounded.bottom)).save(path)
        return path

    def capture_and_hash(self, region: Rect) -> Tuple[Path, str]:
        path = self.capture(region)
        # position входит в хэш: одинаковые соседние слайды не считаются "не перелистнулось"
        digest = hashlib.sha256(f"{self.position}:{image_region_hash(path)}".encode("utf-8")).hexdigest()
        return path, digest


class FolderReplayNavigator(IPresentationNavigator):
    """Навигатор для FolderReplaySource: advance = следующий файл."""

    def __init__(self, source: FolderReplaySource):
        self.source = source

    def activate(self, target: str) -> None:
        logger.debug(f"[FolderReplay] activate({target}) — не требуется")

    def advance(self, target: str) -> bool:
        if self.source.position >= len(self.source.images) - 1:
            return False
        self.source.position += 1
        return True

    def advance_alternate(self, target: str) -> bool:
        return self.advance(target)
