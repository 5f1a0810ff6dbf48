"""Unit tests for image utilities."""
import pytest
import numpy as np
import cv2

from armor_id.core.exceptions import FrameError
from armor_id.utils.image_utils import (
    check_frame, concat_vertical, draw_armors, is_binary, stack_number_images, to_grayscale
)


class TestCheckFrame:
    """Test suite for frame validation."""

    @pytest.mark.parametrize("shape", [(24, 32), (24, 32, 1), (24, 32, 3), (24, 32, 4)])
    def test_accepts_supported_shapes(self, shape):
        check_frame(np.zeros(shape, dtype=np.uint8))

    def test_rejects_none(self):
        with pytest.raises(FrameError):
            check_frame(None)

    def test_rejects_empty(self):
        with pytest.raises(FrameError, match="empty"):
            check_frame(np.zeros((0, 0, 3), dtype=np.uint8))

    def test_rejects_float_frames(self):
        with pytest.raises(FrameError, match="8-bit"):
            check_frame(np.zeros((24, 32, 3), dtype=np.float32))

    def test_rejects_two_channel_frames(self):
        with pytest.raises(FrameError, match="shape"):
            check_frame(np.zeros((24, 32, 2), dtype=np.uint8))


class TestToGrayscale:
    """Test suite for grayscale conversion."""

    def test_rgb_and_bgr_weight_channels_differently(self):
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        image[:, :, 0] = 255  # red in RGB, blue in BGR

        as_rgb = to_grayscale(image, "rgb")
        as_bgr = to_grayscale(image, "bgr")

        assert as_rgb.shape == (4, 4)
        assert as_rgb[0, 0] > as_bgr[0, 0]

    def test_four_channel_input(self):
        image = np.full((4, 4, 4), 200, dtype=np.uint8)

        assert to_grayscale(image, "bgr").shape == (4, 4)

    def test_single_channel_passes_through(self):
        image = np.arange(16, dtype=np.uint8).reshape(4, 4, 1)

        np.testing.assert_array_equal(to_grayscale(image), image[:, :, 0])

    def test_grayscale_passes_through(self):
        image = np.arange(16, dtype=np.uint8).reshape(4, 4)

        assert to_grayscale(image) is image


class TestDebugImages:
    """Test suite for debug image helpers."""

    def test_is_binary(self):
        assert is_binary(np.array([[0, 255], [255, 0]], dtype=np.uint8))
        assert not is_binary(np.array([[0, 128]], dtype=np.uint8))

    def test_concat_vertical(self):
        stacked = concat_vertical([np.zeros((28, 20), np.uint8), np.ones((28, 20), np.uint8)])

        assert stacked.shape == (56, 20)
        assert stacked[30, 0] == 1

    def test_concat_vertical_empty(self):
        assert concat_vertical([]) is None

    def test_stack_number_images_skips_armors_without_image(self, armor_factory):
        armor = armor_factory()
        with_image = armor.evolve(digit_image=np.zeros((28, 20), np.uint8))

        strip = stack_number_images([with_image, armor, with_image])

        assert strip.shape == (28, 40)
        assert stack_number_images([armor]) is None

    def test_draw_armors_does_not_modify_frame(self, armor_factory):
        frame = np.zeros((240, 320, 3), dtype=np.uint8)
        armor = armor_factory().evolve(classification_text="3:98.0%")

        canvas = draw_armors(frame, [armor])

        assert canvas.shape == frame.shape
        assert canvas.any()
        assert not frame.any()

    def test_draw_armors_on_grayscale_frame(self, armor_factory):
        frame = np.zeros((240, 320), dtype=np.uint8)

        canvas = draw_armors(frame, [armor_factory()])

        assert canvas.shape == (240, 320, 3)
        # left light bar outline
        assert canvas[120, 110].any()
