"""Coordinate transformation utilities for composition and export.

Provides conversion between the coordinate systems the engine uses:
- Template space (percentage of canvas, 0-100 on both axes)
- Working space (WORKING_SIZE square, center at WORKING_CENTER)
- Render space (export canvas pixels, composition center at COMPOSITION_CENTER)
"""

from constants import (
    WORKING_SIZE, WORKING_CENTER_X, WORKING_CENTER_Y,
    COMPOSITION_CENTER_X, COMPOSITION_CENTER_Y,
    RENDER_SCALE, FLOWER_BASE_SIZE,
)
from models.transform import Vec2


def percent_to_working(pct_x, pct_y):
    """Convert a template position (0-100) to working space.

    Args:
        pct_x: Percent of canvas width (50 is center)
        pct_y: Percent of canvas height (50 is center)

    Returns:
        Vec2 in working space
    """
    return Vec2(pct_x / 100.0 * WORKING_SIZE, pct_y / 100.0 * WORKING_SIZE)


def working_to_percent(x, y):
    """Convert a working-space position to template percentages."""
    return Vec2(x / WORKING_SIZE * 100.0, y / WORKING_SIZE * 100.0)


def working_to_render(x, y, size_scale=1.0):
    """Convert a working-space position to export canvas pixels.

    The offset from the working center is scaled by RENDER_SCALE and the
    size preset multiplier, so a larger size spreads items out around the
    composition center rather than shifting them.

    Args:
        x, y: Working-space position
        size_scale: Size preset multiplier

    Returns:
        (px, py) render pixel coordinates
    """
    factor = RENDER_SCALE * size_scale
    px = COMPOSITION_CENTER_X + (x - WORKING_CENTER_X) * factor
    py = COMPOSITION_CENTER_Y + (y - WORKING_CENTER_Y) * factor
    return px, py


def render_to_working(px, py, size_scale=1.0):
    """Inverse of working_to_render()."""
    factor = RENDER_SCALE * size_scale
    x = WORKING_CENTER_X + (px - COMPOSITION_CENTER_X) / factor
    y = WORKING_CENTER_Y + (py - COMPOSITION_CENTER_Y) / factor
    return x, y


def flower_render_diameter(scale, size_scale=1.0):
    """Diameter in render pixels of a flower with the given item scale."""
    return FLOWER_BASE_SIZE * scale * RENDER_SCALE * size_scale
