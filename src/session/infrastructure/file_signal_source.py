"""
Источник сигналов через управляющий файл.

Фоновый поток раз в poll_interval читает файл CONTROL_FILE_NAME и
переводит команду в SessionSignals. После чтения файл удаляется.

Команды (одна на файл, регистр не важен):
    pause | resume | toggle | cancel

Пример из соседнего терминала:
    echo pause > data/slides/.slide_capture_control
"""

import threading
import time
from pathlib import Path
from typing import Optional

from loguru import logger

from config.settings import CONTROL_FILE_NAME, PAUSE_POLL_INTERVAL
from ..signals import SessionSignals


class FileSignalSource:
    """Фоновый поток: управляющий файл -> SessionSignals."""

    def __init__(
        self,
        signals: SessionSignals,
        control_dir: Path,
        poll_interval: float = PAUSE_POLL_INTERVAL
    ):
        self.signals = signals
        self.control_path = Path(control_dir) / CONTROL_FILE_NAME
        self.poll_interval = poll_interval
        self.running = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self.running = True
        self._thread = threading.Thread(
            target=self._loop,
            name="slide-capture-signals",
            daemon=True
        )
        self._thread.start()
        logger.info(f"[Signals] Управляющий файл: {self.control_path}")

    def stop(self) -> None:
        self.running = False
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    def poll_once(self) -> Optional[str]:
        """Читает и применяет команду; возвращает её (или None)."""
        if not self.control_path.exists():
            return None

        try:
            command = self.control_path.read_text(encoding="utf-8").strip().lower()
            self.control_path.unlink()
        except OSError as e:
            logger.warning(f"[Signals] Не удалось прочитать {self.control_path.name}: {e}")
            return None

        if command == "pause":
            self.signals.pause()
        elif command == "resume":
            self.signals.resume()
        elif command == "toggle":
            self.signals.toggle_pause()
        elif command == "cancel":
            self.signals.cancel()
        else:
            logger.warning(f"[Signals] Неизвестная команда: '{command}'")
            return None
        return command

    def _loop(self) -> None:
        while self.running and not self.signals.is_cancelled:
            self.poll_once()
            time.sleep(self.poll_interval)
