"""
Tests for the composition renderer and flower image resolution.

Covers:
- Canvas size and drawing layers (background, wrap, greenery, ribbon, labels)
- Flowers: color fallback, loaded images, rotation, stacking, size presets
- One failing image never aborts the render
- Resolver: caching, failures, per-image timeout, concurrency, file loading
"""
import time
import threading
import pytest
from PIL import Image

from models.arrangement import ArrangementModel
from models.flower import FlowerType
from services.composition_renderer import (
    CompositionRenderer, RenderStyle, radial_gradient_disc, circle_mask,
)
from services.image_resolver import FlowerImageResolver


@pytest.fixture(scope='module')
def renderer():
    """Renderer without a resolver: every flower draws as a colored disc"""
    return CompositionRenderer()


@pytest.fixture
def resolver(fake_loader):
    resolver = FlowerImageResolver(loader=fake_loader, timeout=0.5)
    yield resolver
    resolver.close()


def _close(pixel, expected, tolerance=6):
    return all(abs(a - b) <= tolerance for a, b in zip(pixel[:3], expected))


def _flower(flower_type_id, color, image_ref=None):
    return FlowerType(flower_type_id, flower_type_id.title(), color, image_ref, stock=1)


# ══════════════════════════════════════════════════════════════════════════
# Canvas layers
# ══════════════════════════════════════════════════════════════════════════

class TestCanvas:

    def test_size_and_mode(self, renderer, fresh_model):
        image = renderer.render(fresh_model)
        assert image.size == (600, 680)
        assert image.mode == 'RGBA'

    def test_background_white(self, renderer, fresh_model):
        image = renderer.render(fresh_model)
        assert image.getpixel((2, 2)) == (255, 255, 255, 255)
        assert image.getpixel((597, 677)) == (255, 255, 255, 255)

    def test_greenery_center(self, renderer, fresh_model):
        image = renderer.render(fresh_model)
        assert _close(image.getpixel((300, 300)), (0xf0, 0xfd, 0xf4), 2)

    @pytest.mark.parametrize("wrap,outer", [
        ('paper', (0xc4, 0x9a, 0x6c)),
        ('burlap', (0x8b, 0x66, 0x42)),
        ('fabric', (0xf0, 0xa0, 0xb4)),
    ])
    def test_wrap_rim_color(self, renderer, fresh_model, wrap, outer):
        fresh_model.wrap_style = wrap
        image = renderer.render(fresh_model)
        # Between the greenery bed (r=250) and the wrap rim (r=280)
        assert _close(image.getpixel((300, 26)), outer)

    def test_ribbon_color(self, renderer, fresh_model):
        fresh_model.ribbon_color = 'gold'
        image = renderer.render(fresh_model)
        assert _close(image.getpixel((300, 540)), (0xd4, 0xaf, 0x37), 1)
        assert _close(image.getpixel((275, 510)), (0xd4, 0xaf, 0x37), 1)

    def test_title_drawn(self, renderer, fresh_model):
        image = renderer.render(fresh_model, label_text="Anniversary")
        band = image.crop((150, 615, 450, 656))
        assert any(pixel[:3] != (255, 255, 255) for pixel in band.getdata())

    def test_deterministic(self, renderer, red_rose, eucalyptus):
        model = ArrangementModel()
        model.add(red_rose)
        model.add(eucalyptus)
        assert renderer.render(model).tobytes() == renderer.render(model).tobytes()


# ══════════════════════════════════════════════════════════════════════════
# Flowers
# ══════════════════════════════════════════════════════════════════════════

class TestFlowers:

    def test_color_fallback_without_resolver(self, renderer, fresh_model, red_rose):
        fresh_model.add(red_rose)
        image = renderer.render(fresh_model)
        assert _close(image.getpixel((300, 300)), (0xdc, 0x26, 0x26), 1)

    def test_stack_order_decides_top(self, renderer, fresh_model):
        rose = fresh_model.add(_flower('rose', '#ff0000'), position=(120, 120))
        leaf = fresh_model.add(_flower('leaf', '#00ff00'), position=(120, 120))
        fresh_model.update(rose, stack_order=5)
        fresh_model.update(leaf, stack_order=2)
        assert _close(renderer.render(fresh_model).getpixel((300, 300)), (255, 0, 0), 1)
        fresh_model.update(leaf, stack_order=9)
        assert _close(renderer.render(fresh_model).getpixel((300, 300)), (0, 255, 0), 1)

    def test_equal_stack_later_item_on_top(self, renderer, fresh_model):
        first = fresh_model.add(_flower('rose', '#ff0000'), position=(120, 120))
        second = fresh_model.add(_flower('leaf', '#00ff00'), position=(120, 120))
        fresh_model.update(first, stack_order=3)
        fresh_model.update(second, stack_order=3)
        assert _close(renderer.render(fresh_model).getpixel((300, 300)), (0, 255, 0), 1)

    def test_size_preset_spreads_items(self, renderer, fresh_model):
        instance_id = fresh_model.add(_flower('rose', '#ff0000'), position=(170, 120))
        fresh_model.update(instance_id, scale=0.5)
        medium = renderer.render(fresh_model)
        fresh_model.size = 'large'
        large = renderer.render(fresh_model)
        # medium: center x=400, radius 28; large: center x=425, radius 35
        assert not _close(medium.getpixel((440, 300)), (255, 0, 0), 1)
        assert _close(large.getpixel((440, 300)), (255, 0, 0), 1)

    def test_stored_scale_untouched_by_size(self, renderer, fresh_model, red_rose):
        instance_id = fresh_model.add(red_rose)
        fresh_model.size = 'small'
        renderer.render(fresh_model)
        assert fresh_model.get_item(instance_id).scale == 1.1

    def test_loaded_image_drawn(self, resolver, fresh_model):
        fresh_model.add(_flower('rose', '#ff0000', 'good.png'), position=(120, 120))
        image = CompositionRenderer(resolver).render(fresh_model)
        assert _close(image.getpixel((300, 300)), (0, 0, 255), 2)

    def test_failing_image_falls_back_to_color(self, resolver, fresh_model, caplog):
        fresh_model.add(_flower('rose', '#ff0000', 'bad.png'), position=(120, 120))
        fresh_model.add(_flower('leaf', '#00ff00', 'good.png'), position=(60, 60))
        image = CompositionRenderer(resolver).render(fresh_model)
        assert image.size == (600, 680)
        assert _close(image.getpixel((300, 300)), (255, 0, 0), 1)
        assert "bad.png" in caplog.text

    def test_rotation(self, fresh_model):
        split = Image.new('RGBA', (64, 64), (255, 0, 0, 255))
        split.paste((0, 0, 255, 255), (32, 0, 64, 64))
        instance_id = fresh_model.add(_flower('rose', '#888888', 'split.png'), position=(120, 120))
        fresh_model.update(instance_id, scale=1.0)
        renderer = CompositionRenderer()

        upright = renderer.render(fresh_model, images={'split.png': split})
        fresh_model.update(instance_id, rotation=180.0)
        flipped = renderer.render(fresh_model, images={'split.png': split})

        assert _close(upright.getpixel((270, 300)), (255, 0, 0), 10)
        assert _close(flipped.getpixel((270, 300)), (0, 0, 255), 10)

    def test_render_item_list_with_style(self, renderer, red_rose):
        model = ArrangementModel()
        model.add(red_rose)
        style = RenderStyle(wrap_style='burlap', size_scale=1.25)
        image = renderer.render(model.get_items(), style, "List")
        assert image.size == (600, 680)
        assert _close(image.getpixel((300, 26)), (0x8b, 0x66, 0x42))

    def test_items_off_canvas_clipped(self, renderer, fresh_model):
        fresh_model.add(_flower('rose', '#ff0000'), position=(-200, -200))
        fresh_model.add(_flower('leaf', '#00ff00'), position=(500, 500))
        assert renderer.render(fresh_model).size == (600, 680)


# ══════════════════════════════════════════════════════════════════════════
# Raster helpers
# ══════════════════════════════════════════════════════════════════════════

class TestHelpers:

    def test_circle_mask(self):
        mask = circle_mask(40)
        assert mask.size == (40, 40)
        assert mask.getpixel((20, 20)) == 255
        assert mask.getpixel((0, 0)) == 0

    def test_radial_gradient(self):
        disc = radial_gradient_disc(50, '#000000', '#ffffff')
        assert disc.size == (100, 100)
        center = disc.getpixel((50, 50))
        near_rim = disc.getpixel((50, 2))
        assert center[0] < 10
        assert near_rim[0] > 230
        assert disc.getpixel((0, 0))[3] == 0


# ══════════════════════════════════════════════════════════════════════════
# Image resolver
# ══════════════════════════════════════════════════════════════════════════

class TestResolver:

    def test_resolve_many_mixed(self, resolver):
        results = resolver.resolve_many(['good.png', 'bad.png', None, ''])
        assert results['good.png'].mode == 'RGBA'
        assert results['bad.png'] is None
        assert set(results) == {'good.png', 'bad.png'}

    def test_success_cached(self, resolver, fake_loader):
        resolver.resolve('good.png')
        resolver.resolve('good.png')
        assert fake_loader.calls.count('good.png') == 1
        assert resolver.is_cached('good.png')

    def test_failure_not_cached(self, resolver, fake_loader):
        assert resolver.resolve('bad.png') is None
        assert resolver.resolve('bad.png') is None
        assert fake_loader.calls.count('bad.png') == 2

    def test_timeout_marks_only_that_ref(self, resolver, caplog):
        start = time.monotonic()
        results = resolver.resolve_many(['slow.png', 'good.png'])
        assert time.monotonic() - start < 1.5
        assert results['slow.png'] is None
        assert results['good.png'] is not None
        assert "Timed out" in caplog.text

    def test_distinct_refs_load_concurrently(self, solid_image):
        barrier = threading.Barrier(3, timeout=2.0)

        def loader(ref):
            barrier.wait()
            return solid_image()

        with FlowerImageResolver(loader=loader, max_workers=3, timeout=3.0) as resolver:
            results = resolver.resolve_many(['a', 'b', 'c'])
        assert all(image is not None for image in results.values())

    def test_default_loader_reads_files(self, tmp_path):
        Image.new('RGB', (8, 8), (10, 20, 30)).save(tmp_path / 'rose.png')
        with FlowerImageResolver(base_dir=str(tmp_path)) as resolver:
            image = resolver.resolve('rose.png')
            assert image.mode == 'RGBA'
            assert image.getpixel((0, 0)) == (10, 20, 30, 255)
            assert resolver.resolve('missing.png') is None

    def test_from_config(self):
        from models.config import EngineConfig
        with FlowerImageResolver.from_config(EngineConfig(image_timeout=1.5)) as resolver:
            assert resolver.timeout == 1.5

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            FlowerImageResolver(timeout=0)
