"""
Контракты DTO между доменами проекта Slide Capture.

Контракты:
- Extraction -> Classification: RegionName, ClassificationResult (slide_dto.py)
- Classification -> Classification: ClassifierContext (slide_dto.py)
- Session -> Caller: CaptureSession, ProgressEvent, SessionSummary (session_dto.py)
"""

from .slide_dto import (
    RegionName,
    OCR_REGIONS,
    SlideType,
    ClassifierContext,
    ClassificationResult,
    SlideArtifact,
)
from .session_dto import (
    SessionState,
    SlideOutcome,
    CaptureSession,
    ProgressEvent,
    SessionSummary,
)

__all__ = [
    # Slide
    "RegionName",
    "OCR_REGIONS",
    "SlideType",
    "ClassifierContext",
    "ClassificationResult",
    "SlideArtifact",
    # Session
    "SessionState",
    "SlideOutcome",
    "CaptureSession",
    "ProgressEvent",
    "SessionSummary",
]
