"""
Unit tests for palette ordering and swatch selection.
"""

import pytest

from palette_cluster import ArrayImage, ExtractionConfig, Palette, PaletteSwatch, Position, ValidationError, extract_palette

RED = (53.2, 80.1, 67.2)
NEAR_RED = (55.0, 75.0, 65.0)
BLUE = (32.3, 79.2, -107.9)
GREEN = (46.2, -51.7, 49.9)
NEAR_BLUE = (35.0, 75.0, -100.0)


def swatch(lab, population):
    return PaletteSwatch(lab=lab, rgb=(0, 0, 0), hex='#000000', population=population, position=Position(0, 0))


@pytest.fixture
def palette():
    return Palette([
        swatch(GREEN, 30),
        swatch(NEAR_BLUE, 5),
        swatch(RED, 100),
        swatch(BLUE, 50),
        swatch(NEAR_RED, 90),
    ])


class TestPalette:
    """Test ordering and the dominant swatch"""

    def test_sorted_by_population(self, palette):
        assert [item.population for item in palette] == [100, 90, 50, 30, 5]
        assert len(palette) == 5

    def test_dominant_swatch(self, palette):
        assert palette.dominant_swatch.lab == RED

    def test_empty(self):
        palette = Palette([])
        assert palette.is_empty
        assert palette.dominant_swatch is None
        assert palette.find_swatches(3) == []


class TestFindSwatches:
    """Test selection of populous, distinct hues"""

    def test_picks_populous_distinct_hues(self, palette):
        found = palette.find_swatches(3)
        assert [item.lab for item in found] == [RED, BLUE, GREEN]

    def test_single_swatch_is_dominant(self, palette):
        assert [item.lab for item in palette.find_swatches(1)] == [RED]

    def test_returns_everything_when_n_is_large(self, palette):
        assert palette.find_swatches(5) == palette.swatches
        assert palette.find_swatches(9) == palette.swatches

    def test_similar_colors_stay_distinct(self):
        palette = Palette([swatch((50.0, 0.0, 0.0), 10), swatch((52.0, 0.0, 0.0), 8), swatch((54.0, 0.0, 0.0), 6)])
        found = palette.find_swatches(2)
        assert [item.population for item in found] == [10, 8]

    @pytest.mark.parametrize('n', [0, -1, 1.5, None])
    def test_invalid_count(self, palette, n):
        with pytest.raises(ValidationError):
            palette.find_swatches(n)

    def test_with_extracted_palette(self, two_color_image):
        config = ExtractionConfig(epsilon=0.1, min_points=4)
        palette = Palette(extract_palette(ArrayImage(two_color_image), config))
        assert len(palette) == 2
        found = palette.find_swatches(1)
        assert len(found) == 1
        assert found[0].population == 200
