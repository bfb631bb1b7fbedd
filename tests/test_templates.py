"""
Tests for templates and occasion presets.

Covers:
- Built-in template and preset libraries
- Percentage-to-working coordinate scaling
- Re-keying on every application
- Category stacking and scale defaults
- Unknown catalog ids (placeholder color, no image)
- Preset style application
- Record parsing (from_dict)
"""
import pytest

from constants import PLACEHOLDER_FLOWER_COLOR
from models.arrangement import ArrangementModel
from models.color import Color
from models.config import EngineConfig
from models.templates import (
    ArrangementTemplate, OccasionPreset, TemplateEntry,
    BUILTIN_TEMPLATES, BUILTIN_PRESETS, BUILTIN_FLOWERS,
)


def _transforms(model):
    return [(i.flower_type_id, i.pos.x, i.pos.y, i.rotation, i.scale, i.stack_order)
            for i in model.get_items()]


# ══════════════════════════════════════════════════════════════════════════
# Built-in libraries
# ══════════════════════════════════════════════════════════════════════════

class TestBuiltins:

    def test_template_ids(self):
        assert set(BUILTIN_TEMPLATES) == {
            'romantic-roses', 'elegant-whites', 'vibrant-sunset',
            'minimal-lavender', 'spring-garden', 'peony-paradise',
        }

    def test_preset_styles(self):
        expected = {
            'romantic': 'fabric', 'birthday': 'cellophane', 'sympathy': 'paper',
            'congratulations': 'burlap', 'spring': 'paper', 'garden': 'burlap',
        }
        assert {k: p.wrap_style for k, p in BUILTIN_PRESETS.items()} == expected

    @pytest.mark.parametrize("layout", list(BUILTIN_TEMPLATES.values()) + list(BUILTIN_PRESETS.values()))
    def test_builtins_reference_builtin_flowers(self, layout):
        for entry in layout.entries:
            assert entry.flower_type_id in BUILTIN_FLOWERS
            assert 0 <= entry.x <= 100 and 0 <= entry.y <= 100

    @pytest.mark.parametrize("preset_id", sorted(BUILTIN_PRESETS))
    def test_preset_ribbon_colors_parse(self, preset_id):
        Color.parse(BUILTIN_PRESETS[preset_id].ribbon_color)


# ══════════════════════════════════════════════════════════════════════════
# Applying templates
# ══════════════════════════════════════════════════════════════════════════

class TestApplyTemplate:

    def test_coordinates_scaled_to_working_space(self, fresh_model):
        fresh_model.apply_template(BUILTIN_TEMPLATES['romantic-roses'])
        first = fresh_model.get_items()[0]
        assert (first.pos.x, first.pos.y) == pytest.approx((120.0, 72.0))
        assert first.scale == 1.2
        assert first.stack_order == 5

    def test_replaces_existing_items(self, fresh_model, red_rose):
        for _ in range(3):
            fresh_model.add(red_rose)
        ids = fresh_model.apply_template(BUILTIN_TEMPLATES['minimal-lavender'])
        assert fresh_model.get_instance_ids() == ids
        assert len(ids) == 6

    def test_twice_equal_transforms_disjoint_ids(self, fresh_model):
        template = BUILTIN_TEMPLATES['spring-garden']
        first_ids = fresh_model.apply_template(template)
        first = _transforms(fresh_model)
        second_ids = fresh_model.apply_template(template)
        assert _transforms(fresh_model) == first
        assert set(first_ids).isdisjoint(second_ids)

    def test_relative_positions_preserved(self, fresh_model):
        template = BUILTIN_TEMPLATES['elegant-whites']
        fresh_model.apply_template(template)
        items = fresh_model.get_items()
        for a_entry, b_entry, a, b in zip(template.entries, template.entries[1:], items, items[1:]):
            assert (b.pos.x - a.pos.x) == pytest.approx((b_entry.x - a_entry.x) * 2.4)
            assert (b.pos.y - a.pos.y) == pytest.approx((b_entry.y - a_entry.y) * 2.4)

    def test_unknown_flower_gets_placeholder(self, fresh_model):
        template = ArrangementTemplate('custom', 'Custom', (TemplateEntry('ghost-orchid', 50, 50),))
        fresh_model.apply_template(template)
        item = fresh_model.get_items()[0]
        assert item.flower_type_id == 'ghost-orchid'
        assert item.color == Color.parse(PLACEHOLDER_FLOWER_COLOR)
        assert item.image_ref is None

    def test_category_stacking_without_explicit_order(self, fresh_model):
        template = ArrangementTemplate('layers', 'Layers', (
            TemplateEntry('red-rose', 50, 50),
            TemplateEntry('babys-breath', 40, 50),
            TemplateEntry('eucalyptus', 60, 50),
        ))
        fresh_model.apply_template(template)
        stacks = {i.category: i.stack_order for i in fresh_model.get_items()}
        assert stacks == {'focal': 2, 'filler': 1, 'greenery': 0}
        order = [i.category for i in fresh_model.get_draw_order()]
        assert order == ['greenery', 'filler', 'focal']

    def test_scale_clamped(self):
        model = ArrangementModel(EngineConfig(scale_max=1.0))
        model.apply_template(BUILTIN_TEMPLATES['vibrant-sunset'])
        assert max(i.scale for i in model.get_items()) == 1.0

    def test_too_many_entries_leaves_model_unchanged(self, red_rose):
        model = ArrangementModel(EngineConfig(max_items=3))
        kept = model.add(red_rose)
        with pytest.raises(ValueError):
            model.apply_template(BUILTIN_TEMPLATES['romantic-roses'])
        assert model.get_instance_ids() == [kept]

    def test_custom_catalog(self, fresh_model):
        from models.flower import FlowerType
        catalog = {'red-rose': FlowerType('red-rose', 'House Rose', '#880000', 'house/rose.png')}
        fresh_model.apply_template(BUILTIN_TEMPLATES['romantic-roses'], catalog)
        first = fresh_model.get_items()[0]
        assert first.image_ref == 'house/rose.png'
        assert first.color.to_hex() == '#880000'


# ══════════════════════════════════════════════════════════════════════════
# Applying presets
# ══════════════════════════════════════════════════════════════════════════

class TestApplyPreset:

    def test_sets_style(self, fresh_model):
        fresh_model.apply_preset(BUILTIN_PRESETS['birthday'])
        assert fresh_model.wrap_style == 'cellophane'
        assert fresh_model.ribbon_color.to_hex() == '#EC4899'

    def test_category_scale_defaults(self, fresh_model):
        fresh_model.apply_preset(BUILTIN_PRESETS['romantic'])
        for item in fresh_model.get_items():
            assert item.scale == (1.0 if item.category == 'focal' else 0.85)

    def test_deterministic(self):
        a, b = ArrangementModel(), ArrangementModel()
        a.apply_preset(BUILTIN_PRESETS['garden'])
        b.apply_preset(BUILTIN_PRESETS['garden'])
        assert _transforms(a) == _transforms(b)

    def test_invalid_wrap_leaves_model_unchanged(self, fresh_model, red_rose):
        kept = fresh_model.add(red_rose)
        preset = OccasionPreset('odd', 'Odd', 'plastic', 'red', (TemplateEntry('red-rose', 50, 50),))
        with pytest.raises(ValueError):
            fresh_model.apply_preset(preset)
        assert fresh_model.get_instance_ids() == [kept]
        assert fresh_model.wrap_style == 'paper'

    def test_invalid_ribbon_leaves_model_unchanged(self, fresh_model, red_rose):
        kept = fresh_model.add(red_rose)
        preset = OccasionPreset('odd', 'Odd', 'burlap', 'not-a-color', (TemplateEntry('red-rose', 50, 50),))
        with pytest.raises(ValueError):
            fresh_model.apply_preset(preset)
        assert fresh_model.get_instance_ids() == [kept]
        assert fresh_model.wrap_style == 'paper'
        assert fresh_model.ribbon_color.name == 'red'


# ══════════════════════════════════════════════════════════════════════════
# Record parsing
# ══════════════════════════════════════════════════════════════════════════

class TestFromDict:

    def test_template_from_camel_case_record(self):
        template = ArrangementTemplate.from_dict({
            'id': 'mine', 'name': 'Mine',
            'arrangement': [
                {'flowerId': 'red-rose', 'x': 50, 'y': 30, 'rotation': 5, 'scale': 1.2, 'zIndex': 7},
                {'flowerId': 'eucalyptus', 'x': 20, 'y': 70},
            ],
        })
        assert template.template_id == 'mine'
        assert template.entries[0] == TemplateEntry('red-rose', 50.0, 30.0, 5.0, 1.2, 7)
        assert template.entries[1].scale is None
        assert template.entries[1].stack_order is None

    def test_preset_from_record(self):
        preset = OccasionPreset.from_dict({
            'id': 'p', 'name': 'P', 'wrapping': 'burlap', 'ribbonColor': '#22c55e',
            'flowers': [{'flower_type_id': 'sunflower', 'x': 50, 'y': 50}],
        })
        assert preset.wrap_style == 'burlap'
        assert preset.entries[0].flower_type_id == 'sunflower'
