"""
DTO контракт: Extraction -> Classification -> Session

Описывает то, что известно об одном слайде:
- какие регионы читаются OCR (RegionName)
- тип слайда и итоговое имя (ClassificationResult)
- контекст модуля, который переходит от слайда к слайду (ClassifierContext)
- артефакт слайда до сохранения на диск (SlideArtifact)
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional


class RegionName(str, Enum):
    """Именованные регионы слайда."""
    TITLE = "title"
    COVER = "cover"
    SIDEBAR = "sidebar"
    FULL = "full"
    VERIFY = "verify"


# Регионы, которые читаются OCR (VERIFY используется только для хэша)
OCR_REGIONS = (RegionName.TITLE, RegionName.COVER, RegionName.SIDEBAR, RegionName.FULL)


class SlideType(str, Enum):
    GENERIC = "Generic"
    CYBER_LAB = "CyberLab"
    KNOWLEDGE_CHECK = "KnowledgeCheck"
    KNOWLEDGE_CHECK_ANSWER = "KnowledgeCheckAnswer"
    PULSE_CHECK = "PulseCheck"
    SUMMARY = "Summary"
    BREAK = "Break"
    SCENARIO = "Scenario"


@dataclass(frozen=True)
class ClassifierContext:
    """
    Контекст, который переносится между слайдами одной сессии.

    Меняется только когда на слайде найден маркер модуля,
    иначе возвращается без изменений.
    """
    current_module: str = ""
    previous_topic: str = ""


@dataclass
class ClassificationResult:
    """
    Результат классификации слайда.

    title уже безопасен для файловой системы и не длиннее max_title_length.
    """
    slide_type: SlideType
    title: str
    extracted_metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class SlideArtifact:
    """
    Один захваченный слайд до сохранения.

    region_texts содержит только успешно прочитанные регионы.
    """
    index: int
    source_image_path: Path
    region_texts: Dict[RegionName, str] = field(default_factory=dict)
    classification: Optional[ClassificationResult] = None
    final_path: Optional[Path] = None
