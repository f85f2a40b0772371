import pytest

from config.settings import REFERENCE_REGIONS
from contracts.slide_dto import RegionName
from src.extraction.geometry import GeometryProfile, Rect


def test_reference_resolution_keeps_reference_regions():
    """Тест: 3840x2160 -> регионы как в настройках."""
    profile = GeometryProfile.from_resolution(3840, 2160)

    assert profile.scale_factor == 1.0
    for name, rect in REFERENCE_REGIONS.items():
        assert profile.region(RegionName(name)).as_tuple() == rect


def test_regions_scale_with_resolution():
    """Тест: 1920x1080 -> все регионы уменьшаются вдвое."""
    profile = GeometryProfile.from_resolution(1920, 1080)

    assert profile.scale_x == pytest.approx(0.5)
    assert profile.scale_y == pytest.approx(0.5)
    x, y, w, h = REFERENCE_REGIONS["title"]
    assert profile.region(RegionName.TITLE) == Rect(x // 2, y // 2, w // 2, h // 2)


def test_all_regions_fit_inside_frame():
    """Тест: для нестандартного разрешения регионы не выходят за кадр."""
    profile = GeometryProfile.from_resolution(1366, 768)

    for rect in profile.regions.values():
        assert rect.x >= 0 and rect.y >= 0
        assert rect.right <= 1366
        assert rect.bottom <= 768
        assert rect.width > 0 and rect.height > 0


def test_profile_is_immutable():
    """Тест: профиль нельзя изменить после создания."""
    profile = GeometryProfile.from_resolution(1920, 1080)

    with pytest.raises(TypeError):
        profile.regions[RegionName.TITLE] = Rect(0, 0, 1, 1)


@pytest.mark.parametrize("width, height", [(0, 1080), (1920, -1)])
def test_invalid_resolution_raises(width, height):
    """Тест: неположительное разрешение -> ValueError."""
    with pytest.raises(ValueError):
        GeometryProfile.from_resolution(width, height)


def test_rect_clamp():
    """Тест: прямоугольник обрезается по границам изображения."""
    assert Rect(-10, 5, 50, 50).clamp(30, 30) == Rect(0, 5, 30, 25)
    assert Rect(100, 100, 10, 10).clamp(50, 50) == Rect(50, 50, 0, 0)
