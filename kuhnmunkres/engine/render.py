"""Rendering of solver snapshots to images.

Key features:
    - Matrix values drawn on a white grid
    - Selected zeros filled green, prepared zeros filled blue
    - Alternating path cells outlined in magenta
    - Covered rows and columns struck through in red

Example:
    >>> image = render_snapshot(snapshot, cell_size=60)
    >>> image.save("/tmp/step.png")
"""

from typing import Tuple

from PIL import Image, ImageDraw, ImageFont

from ..solver.state import Snapshot


BACKGROUND_COLOR = (255, 255, 255)
TEXT_COLOR = (0, 0, 0)
GRID_COLOR = (0, 0, 0)
COVER_COLOR = (255, 0, 0)
SELECTED_COLOR = (0, 255, 0)
PREPARED_COLOR = (0, 0, 255)
PATH_COLOR = (255, 0, 255)


def load_font(font_size: int) -> ImageFont.ImageFont:
    """Load a TrueType font, falling back to Pillow's default font."""
    try:
        return ImageFont.truetype("arial.ttf", font_size)
    except (IOError, OSError):
        try:
            return ImageFont.truetype(
                "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", font_size
            )
        except (IOError, OSError):
            return ImageFont.load_default()


def _cell_box(row: int, col: int, cell_size: int, margin: int) -> Tuple[int, int, int, int]:
    left = margin + col * cell_size
    top = margin + row * cell_size
    return left, top, left + cell_size, top + cell_size


def render_snapshot(snapshot: Snapshot, cell_size: int = 60) -> Image.Image:
    """Draw one snapshot of the solver.

    Args:
        snapshot: Snapshot to draw.
        cell_size: Side of one matrix cell in pixels.

    Returns:
        RGB image of side ``size * cell_size + 2 * margin``.
    """
    size = snapshot.size
    margin = cell_size // 4
    side = size * cell_size + 2 * margin

    image = Image.new("RGB", (side, side), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)
    font = load_font(max(cell_size // 3, 8))

    # Zero markers go under the grid and the numbers
    for row, col in snapshot.selected:
        draw.rectangle(_cell_box(row, col, cell_size, margin), fill=SELECTED_COLOR)
    for row, col in snapshot.prepared:
        draw.rectangle(_cell_box(row, col, cell_size, margin), fill=PREPARED_COLOR)

    for k in range(size + 1):
        offset = margin + k * cell_size
        draw.line([(margin, offset), (side - margin, offset)], fill=GRID_COLOR, width=1)
        draw.line([(offset, margin), (offset, side - margin)], fill=GRID_COLOR, width=1)

    values = snapshot.matrix.tolist()
    for row in range(size):
        for col in range(size):
            left, top, right, bottom = _cell_box(row, col, cell_size, margin)
            text = f"{values[row][col]:g}"
            text_bbox = draw.textbbox((0, 0), text, font=font)
            text_width = text_bbox[2] - text_bbox[0]
            text_height = text_bbox[3] - text_bbox[1]
            position = (
                (left + right - text_width) // 2,
                (top + bottom - text_height) // 2,
            )
            draw.text(position, text, fill=TEXT_COLOR, font=font)

    path_width = max(cell_size // 15, 2)
    for row, col in snapshot.prepared_path + snapshot.selected_path:
        draw.rectangle(
            _cell_box(row, col, cell_size, margin), outline=PATH_COLOR, width=path_width
        )

    cover_width = max(cell_size // 10, 2)
    for row, covered in enumerate(snapshot.covered_rows):
        if covered:
            y = margin + row * cell_size + cell_size // 2
            draw.line([(margin, y), (side - margin, y)], fill=COVER_COLOR, width=cover_width)
    for col, covered in enumerate(snapshot.covered_cols):
        if covered:
            x = margin + col * cell_size + cell_size // 2
            draw.line([(x, margin), (x, side - margin)], fill=COVER_COLOR, width=cover_width)

    return image
