"""Cost-matrix construction from images."""

from .image_cost import build_cost_matrix, find_images, load_images, mean_color, open_images

__all__ = [
    "build_cost_matrix",
    "find_images",
    "load_images",
    "mean_color",
    "open_images",
]
