"""
Сигналы pause / resume / cancel одной сессии.

Один объект на сессию (не глобальные флаги). Пишет только источник
сигналов, цикл захвата только читает и ждёт.

Все ожидания — threading.Event/Condition с таймаутом: отмена будит
любое ожидание сразу.
"""

import threading
from enum import Enum

from loguru import logger


class SignalState(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class SessionSignals:
    """Трёхпозиционный флаг running|paused|cancelled."""

    def __init__(self) -> None:
        self._state = SignalState.RUNNING
        self._condition = threading.Condition(threading.Lock())
        self._cancelled = threading.Event()

    @property
    def state(self) -> SignalState:
        with self._condition:
            return self._state

    @property
    def is_paused(self) -> bool:
        return self.state == SignalState.PAUSED

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    # --- сторона источника сигналов ---

    def pause(self) -> None:
        self._set(SignalState.PAUSED)

    def resume(self) -> None:
        self._set(SignalState.RUNNING)

    def toggle_pause(self) -> None:
        with self._condition:
            target = SignalState.RUNNING if self._state == SignalState.PAUSED else SignalState.PAUSED
        self._set(target)

    def cancel(self) -> None:
        self._set(SignalState.CANCELLED)

    def _set(self, state: SignalState) -> None:
        with self._condition:
            if self._state == SignalState.CANCELLED:
                return  # отмена необратима
            if self._state == state:
                return
            self._state = state
            if state == SignalState.CANCELLED:
                self._cancelled.set()
            self._condition.notify_all()
        logger.info(f"[Signals] -> {state.value}")

    # --- сторона цикла захвата ---

    def wait_while_paused(self, poll_interval: float = 0.25) -> bool:
        """
        Блокирует, пока стоит пауза.

        Returns:
            True — продолжаем, False — сессию отменили
        """
        with self._condition:
            while self._state == SignalState.PAUSED:
                self._condition.wait(timeout=poll_interval)
            return self._state != SignalState.CANCELLED

    def sleep(self, seconds: float) -> bool:
        """
        Кооперативная пауза.

        Returns:
            True — проспали целиком, False — разбудила отмена
        """
        if seconds <= 0:
            return not self.is_cancelled
        return not self._cancelled.wait(timeout=seconds)
