"""Composition renderer - flattens an arrangement into the export image.

Drawing happens on a fixed 600x680 RGBA canvas, independent of any on-screen
zoom or pan, in this order:
    1. White background
    2. Wrap disc with a radial gradient in the wrap style's colors
    3. Greenery bed disc
    4. Flowers, bottom of the stack first, each clipped to a circle
    5. Ribbon band and bow
    6. Title and attribution caption in the bottom band

Gradients and masks are built with numpy and composited with Pillow. Disc
edges are supersampled so the export has smooth edges at any size preset.

A flower whose image is unavailable is drawn as a disc of its own color, so
one bad image never aborts the render.
"""

import math
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFont, ImageOps

from constants import (
    EXPORT_WIDTH, EXPORT_HEIGHT,
    COMPOSITION_CENTER_X, COMPOSITION_CENTER_Y,
    BACKGROUND_COLOR,
    WRAP_COLORS, WRAP_RADIUS, DEFAULT_WRAP_STYLE,
    GREENERY_RADIUS, GREENERY_COLORS,
    DEFAULT_RIBBON_COLOR,
    RIBBON_WIDTH, RIBBON_HEIGHT, RIBBON_CORNER_RADIUS, RIBBON_TOP,
    BOW_LOBE_OFFSET_X, BOW_LOBE_RADIUS_X, BOW_LOBE_RADIUS_Y, BOW_CENTER_Y, BOW_KNOT_RADIUS,
    TITLE_COLOR, TITLE_FONT_SIZE, TITLE_BASELINE_Y, TITLE_FONT_CANDIDATES,
    CAPTION_COLOR, CAPTION_FONT_SIZE, CAPTION_BASELINE_Y, CAPTION_FONT_CANDIDATES,
    CAPTION_TEXT, DEFAULT_BOUQUET_NAME,
    MASK_SUPERSAMPLE,
)
from models.color import Color
from utils.coordinate_transforms import working_to_render, flower_render_diameter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderStyle:
    """Style parameters the renderer needs from an arrangement"""
    wrap_style: str = DEFAULT_WRAP_STYLE
    ribbon_color: Color = Color.from_name(DEFAULT_RIBBON_COLOR)
    size_scale: float = 1.0

    @classmethod
    def from_model(cls, model) -> 'RenderStyle':
        return cls(model.wrap_style, model.ribbon_color, model.size_scale)


# ========================================
# Raster helpers
# ========================================

def circle_mask(diameter: int, supersample: int = MASK_SUPERSAMPLE) -> Image.Image:
    """Antialiased circular 'L' mask filling a diameter x diameter square"""
    big = diameter * supersample
    mask = Image.new('L', (big, big), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, big - 1, big - 1), fill=255)
    return mask.resize((diameter, diameter), Image.Resampling.LANCZOS)


def radial_gradient_disc(radius: float, inner, outer) -> Image.Image:
    """RGBA disc whose color runs from `inner` at the center to `outer` at the rim

    Args:
        radius: Disc radius in pixels
        inner, outer: Anything Color.parse accepts

    Returns:
        Image of size (ceil(2*radius), ceil(2*radius)), transparent outside the disc
    """
    size = int(math.ceil(radius * 2))
    inner_rgb = np.array(Color.parse(inner).to_rgb255(), dtype=np.float32)
    outer_rgb = np.array(Color.parse(outer).to_rgb255(), dtype=np.float32)

    # Distance of each pixel center from the disc center, normalized to the radius
    coords = np.arange(size, dtype=np.float32) + 0.5 - size / 2.0
    xx, yy = np.meshgrid(coords, coords)
    t = np.clip(np.sqrt(xx * xx + yy * yy) / radius, 0.0, 1.0)[..., np.newaxis]

    rgb = inner_rgb + (outer_rgb - inner_rgb) * t
    pixels = np.empty((size, size, 4), dtype=np.uint8)
    pixels[..., :3] = np.round(rgb).astype(np.uint8)
    pixels[..., 3] = 255

    disc = Image.fromarray(pixels, 'RGBA')
    disc.putalpha(circle_mask(size))
    return disc


def composite_centered(canvas: Image.Image, tile: Image.Image, cx: float, cy: float):
    """Alpha-composite `tile` centered on (cx, cy), clipping at the canvas edges"""
    x = int(round(cx - tile.width / 2.0))
    y = int(round(cy - tile.height / 2.0))
    left, top = max(0, x), max(0, y)
    right = min(canvas.width, x + tile.width)
    bottom = min(canvas.height, y + tile.height)
    if right <= left or bottom <= top:
        return
    visible = tile.crop((left - x, top - y, right - x, bottom - y))
    canvas.alpha_composite(visible, dest=(left, top))


def load_font(candidates: Iterable[str], size: int):
    """First loadable TrueType font from candidates, else Pillow's default"""
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug("No TrueType font from %s, using Pillow default", tuple(candidates))
    return ImageFont.load_default(size=size)


# ========================================
# Renderer
# ========================================

class CompositionRenderer:
    """Renders arrangements to the canonical export image.

    Images come from an optional FlowerImageResolver. Without one, or when
    render() is given an explicit image mapping, no loading happens.
    """

    def __init__(self, resolver=None):
        self.resolver = resolver
        self._title_font = load_font(TITLE_FONT_CANDIDATES, TITLE_FONT_SIZE)
        self._caption_font = load_font(CAPTION_FONT_CANDIDATES, CAPTION_FONT_SIZE)

    def render(self, arrangement, style: Optional[RenderStyle] = None,
               label_text: Optional[str] = None,
               images: Optional[Dict[str, Optional[Image.Image]]] = None) -> Image.Image:
        """Render an arrangement to a 600x680 RGBA image

        Args:
            arrangement: ArrangementModel, or an iterable of Items
            style: Style override; read from the model when omitted
            label_text: Bouquet name for the title line
            images: Pre-resolved ref -> image (None for unavailable);
                resolved through the resolver when omitted

        Returns:
            RGBA Pillow image
        """
        if hasattr(arrangement, 'get_draw_order'):
            items = arrangement.get_draw_order()
            if style is None:
                style = RenderStyle.from_model(arrangement)
        else:
            items = sorted(arrangement, key=lambda item: item.stack_order)
        if style is None:
            style = RenderStyle()

        if images is None:
            refs = {item.image_ref for item in items if item.image_ref}
            images = self.resolver.resolve_many(refs) if (self.resolver and refs) else {}

        canvas = Image.new('RGBA', (EXPORT_WIDTH, EXPORT_HEIGHT), Color.parse(BACKGROUND_COLOR).to_rgba255())
        self._draw_wrap(canvas, style.wrap_style)
        self._draw_greenery(canvas)
        for item in items:
            self._draw_item(canvas, item, images.get(item.image_ref) if item.image_ref else None,
                            style.size_scale)
        self._draw_ribbon(canvas, style.ribbon_color)
        self._draw_labels(canvas, label_text or DEFAULT_BOUQUET_NAME)

        logger.debug("Rendered %d items (wrap=%s, size=%.2f)", len(items), style.wrap_style, style.size_scale)
        return canvas

    # ========================================
    # Drawing steps
    # ========================================

    def _draw_wrap(self, canvas: Image.Image, wrap_style: str):
        inner, outer = WRAP_COLORS.get(wrap_style, WRAP_COLORS[DEFAULT_WRAP_STYLE])
        disc = radial_gradient_disc(WRAP_RADIUS, inner, outer)
        composite_centered(canvas, disc, COMPOSITION_CENTER_X, COMPOSITION_CENTER_Y)

    def _draw_greenery(self, canvas: Image.Image):
        disc = radial_gradient_disc(GREENERY_RADIUS, *GREENERY_COLORS)
        composite_centered(canvas, disc, COMPOSITION_CENTER_X, COMPOSITION_CENTER_Y)

    def _draw_item(self, canvas: Image.Image, item, image: Optional[Image.Image], size_scale: float):
        px, py = working_to_render(item.pos.x, item.pos.y, size_scale)
        diameter = max(1, int(round(flower_render_diameter(item.scale, size_scale))))

        tile = None
        if image is not None:
            try:
                tile = ImageOps.fit(image.convert('RGBA'), (diameter, diameter),
                                    method=Image.Resampling.LANCZOS)
            except (OSError, ValueError) as e:
                logger.warning("Could not draw image for %s: %s", item.flower_type_id, e)
        if tile is None:
            tile = Image.new('RGBA', (diameter, diameter), item.color.to_rgba255())

        # Clip to the circle, keeping any transparency the image already had
        alpha = np.asarray(tile.getchannel('A'), dtype=np.uint16)
        mask = np.asarray(circle_mask(diameter), dtype=np.uint16)
        tile.putalpha(Image.fromarray((alpha * mask // 255).astype(np.uint8), 'L'))

        if item.rotation % 360.0:
            # Pillow rotates counter-clockwise; item rotation is clockwise on a y-down canvas
            tile = tile.rotate(-item.rotation, resample=Image.Resampling.BICUBIC, expand=True)
        composite_centered(canvas, tile, px, py)

    def _draw_ribbon(self, canvas: Image.Image, ribbon_color: Color):
        fill = ribbon_color.to_rgba255()
        cx = COMPOSITION_CENTER_X
        draw = ImageDraw.Draw(canvas)
        draw.rounded_rectangle(
            (cx - RIBBON_WIDTH / 2, RIBBON_TOP, cx + RIBBON_WIDTH / 2, RIBBON_TOP + RIBBON_HEIGHT),
            radius=RIBBON_CORNER_RADIUS, fill=fill,
        )
        for side in (-1, 1):
            lobe_x = cx + side * BOW_LOBE_OFFSET_X
            draw.ellipse(
                (lobe_x - BOW_LOBE_RADIUS_X, BOW_CENTER_Y - BOW_LOBE_RADIUS_Y,
                 lobe_x + BOW_LOBE_RADIUS_X, BOW_CENTER_Y + BOW_LOBE_RADIUS_Y),
                fill=fill,
            )
        draw.ellipse(
            (cx - BOW_KNOT_RADIUS, BOW_CENTER_Y - BOW_KNOT_RADIUS,
             cx + BOW_KNOT_RADIUS, BOW_CENTER_Y + BOW_KNOT_RADIUS),
            fill=fill,
        )

    def _draw_labels(self, canvas: Image.Image, title: str):
        draw = ImageDraw.Draw(canvas)
        self._draw_centered_text(draw, title, self._title_font, TITLE_BASELINE_Y, TITLE_COLOR)
        self._draw_centered_text(draw, CAPTION_TEXT, self._caption_font, CAPTION_BASELINE_Y, CAPTION_COLOR)

    @staticmethod
    def _draw_centered_text(draw: ImageDraw.ImageDraw, text: str, font, baseline_y: float, color: str):
        """Draw text horizontally centered with its baseline on baseline_y"""
        fill = Color.parse(color).to_rgba255()
        if isinstance(font, ImageFont.FreeTypeFont):
            draw.text((COMPOSITION_CENTER_X, baseline_y), text, font=font, fill=fill, anchor='ms')
            return
        # Bitmap fonts have no anchors; sit the text's bottom on the baseline
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        draw.text((COMPOSITION_CENTER_X - (right + left) / 2.0, baseline_y - bottom),
                  text, font=font, fill=fill)
