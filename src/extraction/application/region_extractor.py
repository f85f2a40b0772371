"""
OCRRegionExtractor: текст по регионам одного слайда.

Четыре региона (title, cover, sidebar, full) независимы и читаются
параллельно (не больше OCR_MAX_WORKERS одновременных вызовов OCR).
Падение одного региона не отменяет остальные: результат частичный.

ЦКП: Dict[RegionName, str] только с успешно прочитанными регионами.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
from loguru import logger

from config.settings import FULL_REGION_DOWNSCALE, OCR_MAX_WORKERS
from contracts.slide_dto import OCR_REGIONS, RegionName
from src.domain.contracts import FilterSpec, FilterType, SegmentationMode
from ..domain.exceptions import ExtractionError, OCRProcessingError
from ..domain.interfaces import IImageProcessor, IOCRProvider, IRegionExtractor
from ..geometry import GeometryProfile


@dataclass(frozen=True)
class RegionSpec:
    """Как читать регион: режим OCR и нормализация."""
    mode: SegmentationMode
    filter_spec: FilterSpec


REGION_SPECS: Dict[RegionName, RegionSpec] = {
    RegionName.TITLE: RegionSpec(
        mode=SegmentationMode.SINGLE_LINE,
        filter_spec=FilterSpec(filters=[FilterType.GRAYSCALE, FilterType.THRESHOLD]),
    ),
    RegionName.COVER: RegionSpec(
        mode=SegmentationMode.BLOCK,
        filter_spec=FilterSpec(filters=[FilterType.GRAYSCALE, FilterType.CLAHE]),
    ),
    RegionName.SIDEBAR: RegionSpec(
        mode=SegmentationMode.BLOCK,
        filter_spec=FilterSpec(filters=[FilterType.GRAYSCALE, FilterType.CLAHE]),
    ),
    RegionName.FULL: RegionSpec(
        mode=SegmentationMode.SPARSE,
        filter_spec=FilterSpec(
            filters=[FilterType.GRAYSCALE, FilterType.CLAHE],
            scale=FULL_REGION_DOWNSCALE,
        ),
    ),
}


class OCRRegionExtractor(IRegionExtractor):
    """
    Извлекает текст регионов слайда.

    Координирует:
    1. Загрузку слайда (один раз)
    2. Crop + normalize для каждого региона
    3. Параллельный OCR с частичным join
    """

    def __init__(
        self,
        ocr_provider: IOCRProvider,
        image_processor: IImageProcessor,
        max_workers: int = OCR_MAX_WORKERS,
        region_specs: Optional[Dict[RegionName, RegionSpec]] = None
    ):
        self.ocr_provider = ocr_provider
        self.image_processor = image_processor
        self.max_workers = max(1, min(OCR_MAX_WORKERS, max_workers))
        self.region_specs = region_specs or REGION_SPECS

        logger.info(f"[RegionExtractor] Инициализирован (workers={self.max_workers})")

    def extract(self, image_path: Path, profile: GeometryProfile) -> Dict[RegionName, str]:
        """
        Возвращает текст по регионам.

        Raises:
            OCRProcessingError: Если слайд не читается или упали все регионы
        """
        try:
            image = self.image_processor.load(image_path)
        except ExtractionError as e:
            raise OCRProcessingError(
                message=f"Слайд не читается: {image_path.name}",
                component="OCRRegionExtractor",
                original_error=e
            )

        regions = [name for name in OCR_REGIONS if name in self.region_specs]
        texts: Dict[RegionName, str] = {}
        errors: Dict[RegionName, Exception] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="ocr-region") as pool:
            futures = {
                name: pool.submit(self._extract_region, image, profile, name)
                for name in regions
            }
            for name, future in futures.items():
                try:
                    region_name, text = future.result()
                    texts[region_name] = text
                except Exception as e:
                    errors[name] = e
                    logger.warning(f"[RegionExtractor] Регион {name.value} не прочитан: {e}")

        if regions and not texts:
            first_error = next(iter(errors.values()), None)
            raise OCRProcessingError(
                message=f"Ни один регион не прочитан: {image_path.name}",
                component="OCRRegionExtractor",
                original_error=first_error
            )

        logger.debug(
            f"[RegionExtractor] {image_path.name}: "
            f"{len(texts)}/{len(regions)} регионов прочитано"
        )
        return texts

    def _extract_region(
        self,
        image: np.ndarray,
        profile: GeometryProfile,
        name: RegionName
    ) -> Tuple[RegionName, str]:
        spec = self.region_specs[name]
        region = self.image_processor.crop(image, profile.region(name))
        region = self.image_processor.normalize(region, spec.filter_spec)
        return name, self.ocr_provider.extract_text(region, spec.mode)
