"""Unit tests for core entities.

Tests cover light bar construction, armor candidate copies, the digit label
vocabulary and the corner-ordered digit quad.
"""
import pytest
import numpy as np
from dataclasses import FrozenInstanceError
from armor_id.core.entities import (
    ArmorCandidate, DigitLabel, LightBar, NumberQuad, RECOGNIZED_LABELS
)


class TestLightBar:
    """Test suite for LightBar entity."""

    def test_from_rotated_rect_upright(self):
        """Test endpoints of an upright rotated rect."""
        light = LightBar.from_rotated_rect(((100.0, 100.0), (10.0, 40.0), 0.0))

        assert light.top == pytest.approx((100.0, 80.0))
        assert light.bottom == pytest.approx((100.0, 120.0))
        assert light.length == pytest.approx(40.0)
        assert light.tilt_angle == pytest.approx(0.0)

    def test_from_rotated_rect_top_above_bottom(self):
        """Test that top is always the endpoint with the smaller y."""
        light = LightBar.from_rotated_rect(((50.0, 60.0), (8.0, 30.0), 15.0))

        assert light.top[1] < light.bottom[1]
        assert light.center == pytest.approx((50.0, 60.0))

    def test_tilt_angle_sign(self):
        """Test tilt is positive when the top leans right."""
        light = LightBar(top=(10.0, 0.0), bottom=(0.0, 10.0))

        assert light.tilt_angle == pytest.approx(45.0)

    def test_light_bar_immutability(self):
        """Test that light bars are read-only."""
        light = LightBar(top=(0.0, 0.0), bottom=(0.0, 10.0))

        with pytest.raises(FrozenInstanceError):
            light.top = (1.0, 1.0)


class TestArmorCandidate:
    """Test suite for ArmorCandidate entity."""

    def test_from_lights_center(self):
        """Test center is the midpoint of the light centers."""
        left = LightBar(top=(0.0, 0.0), bottom=(0.0, 20.0))
        right = LightBar(top=(40.0, 10.0), bottom=(40.0, 30.0))

        armor = ArmorCandidate.from_lights(left, right)

        assert armor.center == pytest.approx((20.0, 15.0))
        assert armor.label is DigitLabel.UNASSIGNED
        assert armor.similarity == 0.0
        assert armor.digit_image is None

    def test_evolve_leaves_original_untouched(self):
        """Test that evolve returns an enriched copy."""
        armor = ArmorCandidate.from_lights(
            LightBar((0.0, 0.0), (0.0, 20.0)), LightBar((40.0, 0.0), (40.0, 20.0))
        )
        image = np.zeros((28, 20), dtype=np.uint8)

        enriched = armor.evolve(digit_image=image, similarity=0.9, label=DigitLabel.FOUR)

        assert enriched is not armor
        assert enriched.digit_image is image
        assert enriched.label is DigitLabel.FOUR
        assert armor.digit_image is None
        assert armor.label is DigitLabel.UNASSIGNED

    def test_equality_ignores_digit_image(self):
        """Test that comparing armors does not compare image arrays."""
        armor = ArmorCandidate.from_lights(
            LightBar((0.0, 0.0), (0.0, 20.0)), LightBar((40.0, 0.0), (40.0, 20.0))
        )

        assert armor.evolve(digit_image=np.ones((28, 20), np.uint8)) == armor


class TestDigitLabel:
    """Test suite for the digit vocabulary."""

    def test_recognized_labels_order(self):
        assert [label.value for label in RECOGNIZED_LABELS] == ["2", "3", "4", "5"]

    def test_unassigned_not_recognized(self):
        assert DigitLabel.UNASSIGNED not in RECOGNIZED_LABELS

    def test_lookup_by_value(self):
        assert DigitLabel("3") is DigitLabel.THREE
        assert str(DigitLabel.FIVE) == "5"


class TestNumberQuad:
    """Test suite for NumberQuad."""

    def test_field_order(self):
        quad = NumberQuad((0, 27), (0, 0), (19, 0), (19, 27))

        assert quad.bottom_left == (0, 27)
        assert quad.top_left == (0, 0)
        assert quad.top_right == (19, 0)
        assert quad.bottom_right == (19, 27)

    def test_as_array(self):
        arr = NumberQuad((0, 27), (0, 0), (19, 0), (19, 27)).as_array()

        assert arr.dtype == np.float32
        assert arr.shape == (4, 2)
        assert arr[2].tolist() == [19.0, 0.0]

    def test_signed_area_upright(self):
        quad = NumberQuad((0, 27), (0, 0), (19, 0), (19, 27))

        assert quad.signed_area() == pytest.approx(19 * 27)

    def test_signed_area_mirrored_is_negative(self):
        quad = NumberQuad((19, 27), (19, 0), (0, 0), (0, 27))

        assert quad.signed_area() == pytest.approx(-19 * 27)

    def test_signed_area_collapsed(self):
        quad = NumberQuad((5, 5), (5, 5), (5, 5), (5, 5))

        assert quad.signed_area() == 0.0
