"""
Настройка loguru для Slide Capture.

Числовой уровень из AppConfig (0..3) переводится в уровень loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_LEVELS = {0: "DEBUG", 1: "INFO", 2: "WARNING", 3: "ERROR"}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)


def level_name(level: int) -> str:
    """0..3 -> DEBUG..ERROR (значения вне диапазона зажимаются)."""
    return LOG_LEVELS[max(0, min(3, int(level)))]


def configure_logging(level: int = 1, log_file: Optional[Path] = None) -> None:
    """
    Переконфигурирует sink'и loguru.

    Args:
        level: Порог логирования 0=DEBUG, 1=INFO, 2=WARNING, 3=ERROR
        log_file: Дополнительный файл лога (например, в папке сессии)
    """
    name = level_name(level)
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=name)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level=name,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}",
            encoding="utf-8",
        )

    logger.debug(f"[Logging] Уровень логирования: {name}")
