"""Image cost-matrix construction.

Builds the cost matrix handed to the solver from two sets of images: entry
(i, j) is the Euclidean distance between the mean RGB colour of row image
i and column image j. Rows are scored in parallel, one task per row, each
task writing only its own output row; the matrix is returned once every
task has finished.

Example:
    >>> references = load_images("capsules/")
    >>> cutouts = load_images("cutouts/")
    >>> costs = build_cost_matrix(references, cutouts, num_workers=4)
    >>> result = solve(costs)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np
import torch
from PIL import Image
from torch import Tensor


logger = logging.getLogger("kuhnmunkres.costs")

ImageLike = Union[Image.Image, np.ndarray, Tensor]


def find_images(directory: Union[str, Path], pattern: str = "*.png") -> List[Path]:
    """Paths of the files matching ``pattern`` in ``directory``, sorted by name.

    Raises:
        FileNotFoundError: If ``directory`` does not exist.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Image directory not found: {directory}")
    return sorted(directory.glob(pattern))


def open_images(paths: Sequence[Union[str, Path]]) -> List[Image.Image]:
    """Open every path as an RGB image."""
    images = []
    for path in paths:
        with Image.open(path) as image:
            images.append(image.convert("RGB"))
    return images


def load_images(directory: Union[str, Path], pattern: str = "*.png") -> List[Image.Image]:
    """Load every image matching ``pattern`` in ``directory``, sorted by name.

    Raises:
        FileNotFoundError: If ``directory`` does not exist.
    """
    images = open_images(find_images(directory, pattern))
    logger.info(f"Loaded {len(images)} image(s) from {directory}")
    return images


def mean_color(image: ImageLike) -> Tensor:
    """Per-channel mean of an RGB image.

    Alpha channels are dropped and grey images count as equal R, G and B.

    Args:
        image: PIL image, (H, W, C) numpy array, or (C, H, W) tensor.

    Returns:
        Float64 tensor of shape (3,).
    """
    if isinstance(image, Image.Image):
        image = np.asarray(image.convert("RGB"))
    if isinstance(image, np.ndarray):
        pixels = torch.from_numpy(np.asarray(image, dtype=np.float64))
        if pixels.dim() == 2:
            pixels = pixels[..., None].expand(-1, -1, 3)
        pixels = pixels[..., :3]
        return pixels.reshape(-1, pixels.shape[-1]).mean(dim=0)

    pixels = image.detach().to(dtype=torch.float64)
    if pixels.dim() == 2:
        pixels = pixels[None].expand(3, -1, -1)
    pixels = pixels[:3]
    return pixels.reshape(pixels.shape[0], -1).mean(dim=1)


def build_cost_matrix(
    row_images: Sequence[ImageLike],
    col_images: Sequence[ImageLike],
    num_workers: int = 4,
) -> Tensor:
    """Score every (row image, column image) pair by mean-colour distance.

    Args:
        row_images: Images indexing the rows of the matrix.
        col_images: Images indexing the columns of the matrix.
        num_workers: Thread pool size; one task per row.

    Returns:
        Float64 tensor of shape (len(row_images), len(col_images)).

    Raises:
        ValueError: If either image set is empty.
    """
    if len(row_images) == 0 or len(col_images) == 0:
        raise ValueError(
            f"Cannot build a cost matrix from {len(row_images)} row image(s) "
            f"and {len(col_images)} column image(s)"
        )

    col_means = torch.stack([mean_color(image) for image in col_images])
    costs = torch.empty(len(row_images), len(col_images), dtype=torch.float64)

    def _score_row(row: int) -> None:
        row_mean = mean_color(row_images[row])
        costs[row] = torch.linalg.vector_norm(col_means - row_mean, dim=1)

    with ThreadPoolExecutor(max_workers=max(num_workers, 1)) as executor:
        # list() re-raises the first worker exception, if any
        list(executor.map(_score_row, range(len(row_images))))

    logger.info(f"Built {costs.shape[0]}x{costs.shape[1]} cost matrix")
    return costs
