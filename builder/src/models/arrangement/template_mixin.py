"""
Template Mixin for Arrangement Model

Replaces the whole item list with a named layout. Template coordinates are
percentage-of-canvas; they are scaled into working space here so that
relative positions survive unchanged.

Each application creates brand new items with fresh instance ids, so
applying the same template twice gives equal transforms but no shared ids.
"""

from typing import Iterable, List, Mapping, Optional

from constants import (
    CATEGORY_FOCAL,
    CATEGORY_STACK_ORDER, CATEGORY_DEFAULT_SCALE,
    PLACEHOLDER_FLOWER_COLOR,
    WRAP_STYLES,
)
from models.color import Color
from models.flower import FlowerType
from models.templates import (
    ArrangementTemplate, OccasionPreset, TemplateEntry, BUILTIN_FLOWERS,
)
from utils.coordinate_transforms import percent_to_working

from ._internal.item import Item


class ArrangementTemplateMixin:
    """Mixin providing template and preset application for ArrangementModel

    This mixin assumes the class has:
    - self._items: List[Item]
    - self._config: EngineConfig
    - self._logger: Logger
    - self._check_capacity(extra, current)
    - wrap_style and ribbon_color setters
    """

    def apply_template(self, template: ArrangementTemplate,
                       catalog: Optional[Mapping[str, FlowerType]] = None) -> List[str]:
        """Replace the arrangement with a template layout

        Args:
            template: Layout to apply
            catalog: Mapping flower_type_id -> FlowerType; the built-in
                flowers when omitted

        Returns:
            instance_ids of the new items, in template order

        Raises:
            ValueError: If the layout does not fit max_items (nothing changes)
        """
        items = self._items_from_entries(template.entries, catalog)
        self._items[:] = items
        self._logger.info("Applied template '%s' (%d items)", template.template_id, len(items))
        return [item.instance_id for item in items]

    def apply_preset(self, preset: OccasionPreset,
                     catalog: Optional[Mapping[str, FlowerType]] = None) -> List[str]:
        """Replace the arrangement with an occasion preset

        Same as apply_template, and also sets wrap style and ribbon color.
        """
        items = self._items_from_entries(preset.entries, catalog)
        # Validate the whole style before touching anything
        if preset.wrap_style not in WRAP_STYLES:
            raise ValueError(f"Unknown wrap style {preset.wrap_style!r}, expected one of {WRAP_STYLES}")
        ribbon_color = Color.parse(preset.ribbon_color)

        self.wrap_style = preset.wrap_style
        self.ribbon_color = ribbon_color
        self._items[:] = items
        self._logger.info("Applied preset '%s' (%d items)", preset.preset_id, len(items))
        return [item.instance_id for item in items]

    # ========================================
    # Helper Methods (Internal)
    # ========================================

    def _items_from_entries(self, entries: Iterable[TemplateEntry],
                            catalog: Optional[Mapping[str, FlowerType]]) -> List[Item]:
        entries = list(entries)
        self._check_capacity(len(entries), current=0)
        if catalog is None:
            catalog = BUILTIN_FLOWERS

        items = []
        for entry in entries:
            flower = catalog.get(entry.flower_type_id)
            if flower is None:
                self._logger.warning("Unknown flower '%s' in layout, using placeholder",
                                     entry.flower_type_id)
                name, color, image_ref, category = (
                    entry.flower_type_id, PLACEHOLDER_FLOWER_COLOR, None, CATEGORY_FOCAL
                )
            else:
                name, color, image_ref, category = (
                    flower.name, flower.color, flower.image_ref, flower.category
                )

            scale = entry.scale if entry.scale is not None else CATEGORY_DEFAULT_SCALE[category]
            stack_order = entry.stack_order
            if stack_order is None:
                stack_order = CATEGORY_STACK_ORDER[category]

            pos = percent_to_working(entry.x, entry.y)
            items.append(Item({
                'flower_type_id': entry.flower_type_id,
                'name': name,
                'color': color,
                'image_ref': image_ref,
                'category': category,
                'x': pos.x,
                'y': pos.y,
                'rotation': entry.rotation,
                'scale': self._config.clamp_scale(scale),
                'stack_order': stack_order,
            }))
        return items
