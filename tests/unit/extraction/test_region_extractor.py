"""
Unit-тесты OCRRegionExtractor.

ЦКП: параллельный OCR регионов, частичный результат при сбоях.
"""

import threading

import cv2
import numpy as np
import pytest

from contracts.slide_dto import RegionName
from src.domain.contracts import SegmentationMode
from src.extraction.application.region_extractor import REGION_SPECS, OCRRegionExtractor
from src.extraction.domain.exceptions import OCRProcessingError, OCRResponseError
from src.extraction.domain.interfaces import IOCRProvider
from src.extraction.geometry import GeometryProfile
from src.extraction.infrastructure.image_processor import OpenCVImageProcessor


class FakeOCR(IOCRProvider):
    """OCR по режиму сегментации; failing_modes -> OCRResponseError."""

    def __init__(self, failing_modes=()):
        self.failing_modes = set(failing_modes)
        self.calls = []
        self._lock = threading.Lock()

    def extract_text(self, image, mode):
        with self._lock:
            self.calls.append((mode, image.shape))
        if mode in self.failing_modes:
            raise OCRResponseError(message="API error", component="FakeOCR")
        return f"text:{mode.value}"


@pytest.fixture
def slide_path(tmp_path):
    """Fixture: слайд 960x540 на диске."""
    image = np.full((540, 960, 3), 200, dtype=np.uint8)
    cv2.putText(image, "Summary", (60, 40), cv2.FONT_HERSHEY_SIMPLEX, 1.0, (0, 0, 0), 2)
    path = tmp_path / "slide.png"
    cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def profile():
    return GeometryProfile.from_resolution(960, 540)


def test_all_regions_extracted(slide_path, profile):
    """Тест: четыре региона, каждый со своим режимом OCR."""
    ocr = FakeOCR()
    extractor = OCRRegionExtractor(ocr, OpenCVImageProcessor())

    texts = extractor.extract(slide_path, profile)

    assert texts == {
        RegionName.TITLE: "text:single_line",
        RegionName.COVER: "text:block",
        RegionName.SIDEBAR: "text:block",
        RegionName.FULL: "text:sparse",
    }
    assert len(ocr.calls) == 4


def test_regions_are_normalized_before_ocr(slide_path, profile):
    """Тест: в OCR уходят grayscale регионы, full уменьшен вдвое."""
    ocr = FakeOCR()
    extractor = OCRRegionExtractor(ocr, OpenCVImageProcessor())

    extractor.extract(slide_path, profile)

    shapes = {mode: shape for mode, shape in ocr.calls}
    assert all(len(shape) == 2 for shape in shapes.values())
    assert shapes[SegmentationMode.SPARSE] == (270, 480)


def test_partial_failure_keeps_other_regions(slide_path, profile):
    """Тест: упавшие регионы отсутствуют, остальные прочитаны."""
    extractor = OCRRegionExtractor(FakeOCR(failing_modes={SegmentationMode.BLOCK}), OpenCVImageProcessor())

    texts = extractor.extract(slide_path, profile)

    assert set(texts) == {RegionName.TITLE, RegionName.FULL}


def test_all_regions_failed_raises(slide_path, profile):
    """Тест: ни один регион не прочитан -> OCRProcessingError."""
    extractor = OCRRegionExtractor(FakeOCR(failing_modes=set(SegmentationMode)), OpenCVImageProcessor())

    with pytest.raises(OCRProcessingError):
        extractor.extract(slide_path, profile)


def test_unreadable_slide_raises_ocr_processing_error(tmp_path, profile):
    """Тест: битый файл слайда -> OCRProcessingError (fallback имени)."""
    path = tmp_path / "broken.png"
    path.write_bytes(b"garbage")
    extractor = OCRRegionExtractor(FakeOCR(), OpenCVImageProcessor())

    with pytest.raises(OCRProcessingError):
        extractor.extract(path, profile)


def test_worker_count_is_bounded():
    """Тест: не больше 4 одновременных OCR вызовов."""
    extractor = OCRRegionExtractor(FakeOCR(), OpenCVImageProcessor(), max_workers=16)

    assert extractor.max_workers == 4


def test_region_specs_cover_ocr_regions():
    """Тест: VERIFY не читается OCR."""
    assert RegionName.VERIFY not in REGION_SPECS
    assert REGION_SPECS[RegionName.TITLE].mode == SegmentationMode.SINGLE_LINE
