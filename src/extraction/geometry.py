"""
GeometryProfile: регионы слайда, пересчитанные под разрешение экрана.

Координаты регионов заданы для референсного кадра 3840x2160
(config.settings.REFERENCE_REGIONS) и масштабируются один раз за сессию.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from loguru import logger

from config.settings import REFERENCE_HEIGHT, REFERENCE_REGIONS, REFERENCE_WIDTH
from contracts.slide_dto import RegionName


@dataclass(frozen=True)
class Rect:
    """Прямоугольник в пикселях."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def clamp(self, image_width: int, image_height: int) -> "Rect":
        """Обрезает прямоугольник по границам изображения."""
        x = min(max(0, self.x), image_width)
        y = min(max(0, self.y), image_height)
        right = min(max(x, self.right), image_width)
        bottom = min(max(y, self.bottom), image_height)
        return Rect(x, y, right - x, bottom - y)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class GeometryProfile:
    """
    Неизменяемый набор регионов для одной сессии.

    scale_x/scale_y — отношение фактического разрешения к 3840x2160.
    """
    width: int
    height: int
    scale_x: float
    scale_y: float
    regions: Mapping[RegionName, Rect]

    @property
    def scale_factor(self) -> float:
        return self.scale_x

    def region(self, name: RegionName) -> Rect:
        return self.regions[name]

    @classmethod
    def from_resolution(cls, width: int, height: int) -> "GeometryProfile":
        """
        Строит профиль для разрешения экрана.

        Raises:
            ValueError: Если разрешение не положительное
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Некорректное разрешение: {width}x{height}")

        scale_x = width / REFERENCE_WIDTH
        scale_y = height / REFERENCE_HEIGHT

        regions: Dict[RegionName, Rect] = {}
        for name, (x, y, w, h) in REFERENCE_REGIONS.items():
            rect = Rect(
                x=int(round(x * scale_x)),
                y=int(round(y * scale_y)),
                width=max(1, int(round(w * scale_x))),
                height=max(1, int(round(h * scale_y))),
            )
            regions[RegionName(name)] = rect.clamp(width, height)

        logger.debug(
            f"[Geometry] Профиль {width}x{height}: scale={scale_x:.3f}x{scale_y:.3f}"
        )
        return cls(
            width=width,
            height=height,
            scale_x=scale_x,
            scale_y=scale_y,
            regions=MappingProxyType(regions),
        )
