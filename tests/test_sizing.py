"""Tests for the aspect-ratio size planner."""

import pytest

from image_variants.core.exceptions import InvalidDimensionError
from image_variants.core.sizing import plan_height, plan_size


class TestPlanHeight:
    """Tests for plan_height."""

    def test_thumbnail_of_4_3_source(self):
        """1024x768 at width 256 keeps the 4:3 ratio."""
        assert plan_height(1024, 768, 256) == 192

    def test_same_width_keeps_source_height(self):
        """A target equal to the source width must not divide by zero or distort."""
        assert plan_height(1024, 768, 1024) == 768
        assert plan_height(640, 481, 640) == 481

    def test_non_exact_divisor_is_not_truncated(self):
        """1500 / 1000 must not be computed as integer 1."""
        assert plan_height(1500, 1000, 1000) == 667

    def test_upscale(self):
        """Targets wider than the source scale the height up."""
        assert plan_height(100, 50, 200) == 100

    @pytest.mark.parametrize(
        "source_width,source_height,target_width,expected",
        [
            (4, 3, 2, 2),  # 1.5 -> 2
            (4, 5, 2, 2),  # 2.5 -> 2
            (4, 7, 2, 4),  # 3.5 -> 4
            (3, 2, 2, 1),  # 1.33 -> 1
            (3, 5, 2, 3),  # 3.33 -> 3
        ],
    )
    def test_rounds_half_to_even(self, source_width, source_height, target_width, expected):
        """Ties round to the even neighbour."""
        assert plan_height(source_width, source_height, target_width) == expected

    def test_never_below_one_pixel(self):
        """Extremely wide sources still produce a 1 pixel high output."""
        assert plan_height(1000, 1, 10) == 1
        assert plan_height(4, 1, 2) == 1

    @pytest.mark.parametrize("source_width", [1, 7, 640, 1024, 3001])
    @pytest.mark.parametrize("source_height", [1, 3, 480, 768])
    @pytest.mark.parametrize("target_width", [1, 128, 256, 5000])
    def test_ratio_within_one_pixel(self, source_width, source_height, target_width):
        """Planned height is >= 1 and within a pixel of the exact ratio."""
        height = plan_height(source_width, source_height, target_width)

        assert isinstance(height, int)
        assert height >= 1
        assert abs(height - source_height * target_width / source_width) <= 1

    @pytest.mark.parametrize(
        "source_width,source_height,target_width",
        [
            (0, 768, 256),
            (1024, 768, 0),
            (-1, 768, 256),
            (1024, 768, -256),
            (1024, 0, 256),
        ],
    )
    def test_invalid_dimensions(self, source_width, source_height, target_width):
        """Zero or negative dimensions raise InvalidDimensionError."""
        with pytest.raises(InvalidDimensionError):
            plan_height(source_width, source_height, target_width)


class TestPlanSize:
    """Tests for plan_size."""

    def test_plan_size(self):
        assert plan_size((1024, 768), 256) == (256, 192)
        assert plan_size((1024, 768), 1024) == (1024, 768)

    def test_plan_size_invalid(self):
        with pytest.raises(InvalidDimensionError):
            plan_size((0, 768), 256)
