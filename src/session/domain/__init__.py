"""
Domain слой домена Session.

Содержит интерфейсы внешних коллабораторов и исключения цикла захвата.
"""

from .interfaces import (
    IImageCaptureSource,
    IPresentationNavigator,
    IConfigStore,
)

from .exceptions import (
    SessionError,
    CaptureError,
    AdvanceError,
    ConfigLoadError,
    SessionFileWriteError,
    FileNameCollisionError,
    InvalidStateTransitionError,
)

__all__ = [
    # Интерфейсы
    "IImageCaptureSource",
    "IPresentationNavigator",
    "IConfigStore",

    # Исключения
    "SessionError",
    "CaptureError",
    "AdvanceError",
    "ConfigLoadError",
    "SessionFileWriteError",
    "FileNameCollisionError",
    "InvalidStateTransitionError",
]
