"""
Bouquet Builder - Templates and Occasion Presets

Named layouts that replace the whole arrangement when applied.

Coordinates are percentage-of-canvas (0-100 on both axes); the arrangement
model scales them into working space when applying. An entry without an
explicit stack_order is stacked by flower category
(focal > filler > greenery), an entry without an explicit scale uses the
category's default scale.

Templates carry only a layout. Occasion presets also carry the wrap style
and ribbon color that suit the occasion.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from constants import (
    WRAP_PAPER, WRAP_CELLOPHANE, WRAP_BURLAP, WRAP_FABRIC,
    CATEGORY_FOCAL, CATEGORY_FILLER, CATEGORY_GREENERY,
)
from models.flower import FlowerType


@dataclass(frozen=True)
class TemplateEntry:
    """One placement in a template, in percentage-of-canvas coordinates"""
    flower_type_id: str
    x: float
    y: float
    rotation: float = 0.0
    scale: Optional[float] = None
    stack_order: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TemplateEntry':
        """Build from a template record (snake_case or camelCase keys)"""
        stack = data.get('stack_order', data.get('stackOrder', data.get('zIndex')))
        scale = data.get('scale')
        return cls(
            flower_type_id=data.get('flower_type_id') or data.get('flowerTypeId') or data.get('flowerId'),
            x=float(data['x']),
            y=float(data['y']),
            rotation=float(data.get('rotation', 0.0)),
            scale=None if scale is None else float(scale),
            stack_order=None if stack is None else int(stack),
        )


@dataclass(frozen=True)
class ArrangementTemplate:
    """A named quick-start layout"""
    template_id: str
    name: str
    entries: Tuple[TemplateEntry, ...]
    description: str = ''
    category: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ArrangementTemplate':
        return cls(
            template_id=data.get('template_id') or data.get('id'),
            name=data.get('name', ''),
            entries=tuple(TemplateEntry.from_dict(e) for e in data.get('entries', data.get('arrangement', []))),
            description=data.get('description', ''),
            category=data.get('category', ''),
        )


@dataclass(frozen=True)
class OccasionPreset:
    """A layout plus the wrap style and ribbon color for an occasion"""
    preset_id: str
    name: str
    wrap_style: str
    ribbon_color: str
    entries: Tuple[TemplateEntry, ...]
    description: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OccasionPreset':
        return cls(
            preset_id=data.get('preset_id') or data.get('id'),
            name=data.get('name', ''),
            wrap_style=data.get('wrap_style', data.get('wrapping', WRAP_PAPER)),
            ribbon_color=data.get('ribbon_color', data.get('ribbonColor', 'red')),
            entries=tuple(TemplateEntry.from_dict(e) for e in data.get('entries', data.get('flowers', []))),
            description=data.get('description', ''),
        )


# ======================================================================
# BUILT-IN CATALOG
# ======================================================================
# Flowers referenced by the built-in templates and presets. Hosts normally
# pass their own catalog; this one keeps the built-ins usable standalone.

def _flower(flower_type_id, name, color, category):
    return FlowerType(
        flower_type_id=flower_type_id,
        name=name,
        color=color,
        image_ref=f"flowers/{flower_type_id}.png",
        category=category,
        stock=100,
    )


BUILTIN_FLOWERS = {
    f.flower_type_id: f for f in (
        _flower('red-rose', 'Red Rose', '#dc2626', CATEGORY_FOCAL),
        _flower('pink-rose', 'Pink Rose', '#ec4899', CATEGORY_FOCAL),
        _flower('white-rose', 'White Rose', '#f5f5f5', CATEGORY_FOCAL),
        _flower('sunflower', 'Sunflower', '#eab308', CATEGORY_FOCAL),
        _flower('peony', 'Peony', '#fce7f3', CATEGORY_FOCAL),
        _flower('purple-tulip', 'Purple Tulip', '#a855f7', CATEGORY_FOCAL),
        _flower('orange-lily', 'Orange Lily', '#f97316', CATEGORY_FOCAL),
        _flower('babys-breath', "Baby's Breath", '#ffffff', CATEGORY_FILLER),
        _flower('lavender', 'Lavender', '#8b5cf6', CATEGORY_FILLER),
        _flower('eucalyptus', 'Eucalyptus', '#22c55e', CATEGORY_GREENERY),
    )
}


# ======================================================================
# BUILT-IN TEMPLATES
# ======================================================================

def _entries(*rows):
    """rows of (flower_type_id, x, y, rotation, scale, stack_order)"""
    return tuple(TemplateEntry(*row) for row in rows)


BUILTIN_TEMPLATES = {
    t.template_id: t for t in (
        ArrangementTemplate(
            'romantic-roses', 'Romantic Roses',
            _entries(
                ('red-rose', 50, 30, 0, 1.2, 5),
                ('red-rose', 35, 40, -15, 1.1, 4),
                ('red-rose', 65, 40, 15, 1.1, 4),
                ('red-rose', 25, 55, -25, 1.0, 3),
                ('red-rose', 75, 55, 25, 1.0, 3),
                ('pink-rose', 40, 65, -10, 0.9, 2),
                ('pink-rose', 60, 65, 10, 0.9, 2),
                ('babys-breath', 30, 75, 0, 0.8, 1),
                ('babys-breath', 70, 75, 0, 0.8, 1),
            ),
            description='Classic red roses arranged in a heart pattern',
            category='romantic',
        ),
        ArrangementTemplate(
            'elegant-whites', 'Elegant Whites',
            _entries(
                ('white-rose', 50, 25, 0, 1.3, 6),
                ('white-rose', 35, 35, -20, 1.2, 5),
                ('white-rose', 65, 35, 20, 1.2, 5),
                ('peony', 50, 50, 0, 1.1, 4),
                ('eucalyptus', 25, 45, -30, 0.9, 3),
                ('eucalyptus', 75, 45, 30, 0.9, 3),
                ('eucalyptus', 20, 70, -45, 0.85, 2),
                ('eucalyptus', 80, 70, 45, 0.85, 2),
            ),
            description='Sophisticated white roses with eucalyptus',
            category='elegant',
        ),
        ArrangementTemplate(
            'vibrant-sunset', 'Vibrant Sunset',
            _entries(
                ('sunflower', 50, 25, 0, 1.4, 6),
                ('orange-lily', 30, 40, -15, 1.1, 5),
                ('orange-lily', 70, 40, 15, 1.1, 5),
                ('red-rose', 45, 55, -5, 1.0, 4),
                ('red-rose', 55, 55, 5, 1.0, 4),
                ('sunflower', 25, 65, -20, 0.9, 3),
                ('sunflower', 75, 65, 20, 0.9, 3),
            ),
            description='Warm oranges, yellows and reds for energy',
            category='vibrant',
        ),
        ArrangementTemplate(
            'minimal-lavender', 'Minimal Lavender',
            _entries(
                ('lavender', 45, 30, -5, 1.0, 3),
                ('lavender', 55, 30, 5, 1.0, 3),
                ('lavender', 50, 45, 0, 1.1, 4),
                ('eucalyptus', 35, 55, -20, 0.9, 2),
                ('eucalyptus', 65, 55, 20, 0.9, 2),
                ('babys-breath', 50, 70, 0, 0.8, 1),
            ),
            description='Simple and calming lavender arrangement',
            category='minimal',
        ),
        ArrangementTemplate(
            'spring-garden', 'Spring Garden',
            _entries(
                ('purple-tulip', 50, 25, 0, 1.2, 6),
                ('purple-tulip', 35, 35, -10, 1.1, 5),
                ('purple-tulip', 65, 35, 10, 1.1, 5),
                ('pink-rose', 45, 50, -5, 1.0, 4),
                ('pink-rose', 55, 50, 5, 1.0, 4),
                ('babys-breath', 30, 60, -15, 0.85, 3),
                ('babys-breath', 70, 60, 15, 0.85, 3),
                ('eucalyptus', 25, 75, -25, 0.8, 2),
                ('eucalyptus', 75, 75, 25, 0.8, 2),
            ),
            description='Fresh tulips and mixed spring flowers',
            category='seasonal',
        ),
        ArrangementTemplate(
            'peony-paradise', 'Peony Paradise',
            _entries(
                ('peony', 50, 30, 0, 1.4, 6),
                ('peony', 30, 45, -15, 1.2, 5),
                ('peony', 70, 45, 15, 1.2, 5),
                ('pink-rose', 50, 60, 0, 1.0, 4),
                ('babys-breath', 25, 55, -20, 0.8, 3),
                ('babys-breath', 75, 55, 20, 0.8, 3),
                ('eucalyptus', 20, 70, -30, 0.75, 2),
                ('eucalyptus', 80, 70, 30, 0.75, 2),
            ),
            description='Lush peonies with delicate accents',
            category='elegant',
        ),
    )
}


# ======================================================================
# BUILT-IN OCCASION PRESETS
# ======================================================================
# Scale and stack order come from each flower's category.

def _preset_entries(*rows):
    """rows of (flower_type_id, x, y, rotation)"""
    return tuple(TemplateEntry(flower_type_id, x, y, rotation) for flower_type_id, x, y, rotation in rows)


BUILTIN_PRESETS = {
    p.preset_id: p for p in (
        OccasionPreset(
            'romantic', 'Romantic', WRAP_FABRIC, '#dc2626',
            _preset_entries(
                ('red-rose', 41.7, 41.7, -6),
                ('red-rose', 58.3, 37.5, 8),
                ('red-rose', 50.0, 54.2, 0),
                ('pink-rose', 33.3, 50.0, -12),
                ('pink-rose', 66.7, 47.9, 12),
                ('babys-breath', 37.5, 62.5, -4),
                ('babys-breath', 62.5, 60.4, 4),
                ('eucalyptus', 29.2, 37.5, -14),
                ('eucalyptus', 70.8, 39.6, 14),
            ),
            description='Red roses & pink accents',
        ),
        OccasionPreset(
            'birthday', 'Birthday', WRAP_CELLOPHANE, '#ec4899',
            _preset_entries(
                ('sunflower', 50.0, 37.5, 0),
                ('orange-lily', 37.5, 50.0, -10),
                ('purple-tulip', 62.5, 47.9, 10),
                ('pink-rose', 41.7, 62.5, -5),
                ('sunflower', 58.3, 60.4, 5),
                ('lavender', 31.3, 35.4, -13),
                ('lavender', 68.8, 37.5, 13),
                ('babys-breath', 45.8, 70.8, 0),
            ),
            description='Colorful & cheerful mix',
        ),
        OccasionPreset(
            'sympathy', 'Sympathy', WRAP_PAPER, 'white',
            _preset_entries(
                ('white-rose', 41.7, 41.7, -5),
                ('white-rose', 58.3, 39.6, 5),
                ('white-rose', 50.0, 54.2, 0),
                ('peony', 35.4, 52.1, -9),
                ('peony', 64.6, 50.0, 9),
                ('babys-breath', 29.2, 37.5, -11),
                ('babys-breath', 70.8, 35.4, 11),
                ('eucalyptus', 39.6, 66.7, -15),
                ('eucalyptus', 60.4, 64.6, 15),
            ),
            description='White & soft tones',
        ),
        OccasionPreset(
            'congratulations', 'Congrats', WRAP_BURLAP, 'gold',
            _preset_entries(
                ('sunflower', 50.0, 35.4, 0),
                ('orange-lily', 35.4, 45.8, -10),
                ('orange-lily', 64.6, 43.8, 10),
                ('pink-rose', 41.7, 58.3, -6),
                ('purple-tulip', 58.3, 56.3, 6),
                ('lavender', 29.2, 54.2, -14),
                ('lavender', 70.8, 52.1, 14),
                ('eucalyptus', 47.9, 70.8, 0),
            ),
            description='Bright & celebratory',
        ),
        OccasionPreset(
            'spring', 'Spring', WRAP_PAPER, 'green',
            _preset_entries(
                ('purple-tulip', 41.7, 39.6, -7),
                ('purple-tulip', 58.3, 37.5, 7),
                ('pink-rose', 50.0, 52.1, 0),
                ('peony', 35.4, 50.0, -10),
                ('white-rose', 64.6, 47.9, 10),
                ('lavender', 29.2, 58.3, -13),
                ('lavender', 70.8, 56.3, 13),
                ('eucalyptus', 45.8, 66.7, 0),
            ),
            description='Fresh tulips & pastels',
        ),
        OccasionPreset(
            'garden', 'Garden', WRAP_BURLAP, '#22c55e',
            _preset_entries(
                ('sunflower', 47.9, 35.4, 0),
                ('lavender', 33.3, 41.7, -9),
                ('lavender', 64.6, 39.6, 9),
                ('pink-rose', 41.7, 54.2, -4),
                ('white-rose', 58.3, 52.1, 4),
                ('eucalyptus', 27.1, 52.1, -15),
                ('eucalyptus', 70.8, 50.0, 15),
                ('babys-breath', 50.0, 66.7, 0),
            ),
            description='Natural countryside feel',
        ),
    )
}
