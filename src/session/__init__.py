"""
Домен Session: цикл захвата слайдов.

Этот домен отвечает за:
1. Машину состояний сессии (CaptureSessionController)
2. Восстановление после сбоев (RetryPolicy)
3. Продолжение прерванной сессии (ResumeStateStore)
4. Оценку оставшегося времени (ProgressEstimator)
5. Сигналы pause / resume / cancel (SessionSignals)
"""

from .signals import SessionSignals, SignalState
from .progress import ProgressEstimator, format_duration
from .retry_policy import ErrorKind, RecoveryAction, RecoveryPlan, RetryPolicy
from .resume_store import ResumeStateStore
from .controller import CaptureSessionController
from .application.factory import SessionComponentFactory

__all__ = [
    "SessionSignals",
    "SignalState",
    "ProgressEstimator",
    "format_duration",
    "ErrorKind",
    "RecoveryAction",
    "RecoveryPlan",
    "RetryPolicy",
    "ResumeStateStore",
    "CaptureSessionController",
    "SessionComponentFactory",
]
