"""SVG and raster rendering of sigil patterns in canonical space.

Draws the 16 sub-triangles of a pattern (dark fill for bit 1, light
fill for bit 0) inside a canvas of the canonical warp size. The raster
output is exactly what the external warp would hand to the sampler for
a clean, unrotated capture, which makes it the reference input for
end-to-end decoding.
"""

from __future__ import annotations

import io
from collections.abc import Sequence

import numpy as np
import structlog
from PIL import Image, ImageDraw

from .bits import TOTAL_CELLS
from .layout import WARP_SIZE, CanonicalLayout

logger = structlog.get_logger(__name__)

DEFAULT_DARK = "#1A202C"
DEFAULT_LIGHT = "#FFFFFF"
DEFAULT_OUTLINE = "#718096"

# Grayscale levels for raster output
DARK_LEVEL = 30
LIGHT_LEVEL = 230
BACKGROUND_LEVEL = 255


def _check_pattern(pattern: Sequence[int]) -> None:
    if len(pattern) != TOTAL_CELLS:
        raise ValueError(f"Pattern must have {TOTAL_CELLS} bits, got {len(pattern)}")


def _canvas_height(layout: CanonicalLayout) -> int:
    return int(layout.height) + 1


def render_svg(
    pattern: Sequence[int],
    size: int = WARP_SIZE,
    dark: str = DEFAULT_DARK,
    light: str = DEFAULT_LIGHT,
    outline: str | None = DEFAULT_OUTLINE,
) -> str:
    """Render a 16-bit pattern as an SVG string.

    Args:
        pattern: 16 bits in canonical order (1 = dark).
        size: Base width of the triangle in pixels.
        dark: Fill color for 1 cells.
        light: Fill color for 0 cells.
        outline: Stroke color for the outer triangle, or None.

    Returns:
        Complete SVG document as a string.

    Raises:
        ValueError: If pattern does not hold 16 bits.
    """
    _check_pattern(pattern)
    layout = CanonicalLayout.build(size)
    height = _canvas_height(layout)

    svg_parts: list[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'viewBox="0 0 {size} {height}" '
        f'width="{size}" height="{height}">',
        f'  <rect width="{size}" height="{height}" fill="white"/>',
    ]

    for cell in layout.cells:
        points_str = " ".join(f"{x:.1f},{y:.1f}" for x, y in layout.cell_vertices(cell.index))
        fill = dark if pattern[cell.index] else light
        svg_parts.append(
            f'  <polygon points="{points_str}" fill="{fill}" '
            f'stroke="none" data-index="{cell.index}" data-role="{cell.role}"/>'
        )

    if outline is not None:
        points_str = " ".join(f"{x:.1f},{y:.1f}" for x, y in layout.vertices)
        svg_parts.append(
            f'  <polygon points="{points_str}" fill="none" stroke="{outline}" stroke-width="1.5"/>'
        )

    svg_parts.append("</svg>")
    svg_content = "\n".join(svg_parts)

    logger.debug("svg_rendered", size=size, cells=TOTAL_CELLS)
    return svg_content


def render_image(
    pattern: Sequence[int],
    size: int = WARP_SIZE,
    dark_level: int = DARK_LEVEL,
    light_level: int = LIGHT_LEVEL,
) -> Image.Image:
    """Render a 16-bit pattern as a grayscale PIL image in canonical space.

    Raises:
        ValueError: If pattern does not hold 16 bits.
    """
    _check_pattern(pattern)
    layout = CanonicalLayout.build(size)

    img = Image.new("L", (size, _canvas_height(layout)), BACKGROUND_LEVEL)
    draw = ImageDraw.Draw(img)
    for cell in layout.cells:
        level = dark_level if pattern[cell.index] else light_level
        draw.polygon(layout.cell_vertices(cell.index), fill=level)
    return img


def render_array(
    pattern: Sequence[int],
    size: int = WARP_SIZE,
    dark_level: int = DARK_LEVEL,
    light_level: int = LIGHT_LEVEL,
) -> np.ndarray:
    """Render a pattern to a uint8 grayscale array (rows x cols)."""
    return np.array(render_image(pattern, size, dark_level, light_level), dtype=np.uint8)


def render_png(
    pattern: Sequence[int],
    size: int = WARP_SIZE,
    dark_level: int = DARK_LEVEL,
    light_level: int = LIGHT_LEVEL,
) -> bytes:
    """Render a pattern as PNG bytes.

    Returns:
        PNG image bytes.
    """
    img = render_image(pattern, size, dark_level, light_level)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    png_bytes = buf.getvalue()

    logger.debug("png_rendered", size=size, bytes=len(png_bytes))
    return png_bytes
