"""Utility functions package."""

from .geometry import canonical_quad, check_lights, number_vertices, perspective_matrix
from .image_utils import (
    check_frame, concat_vertical, draw_armors, is_binary, stack_number_images, to_grayscale
)

__all__ = [
    "canonical_quad", "check_lights", "number_vertices", "perspective_matrix",
    "check_frame", "concat_vertical", "draw_armors", "is_binary",
    "stack_number_images", "to_grayscale"
]
