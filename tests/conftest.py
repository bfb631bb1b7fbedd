"""
Shared fixtures for Bouquet Builder tests.

Provides catalog flowers, fresh models and sessions, and a fake image
loader for renderer tests.
"""
import sys
import os
import time
import pytest

# Ensure builder/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'builder', 'src'))

# Qt widgets (clipboard, render worker) without a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')


@pytest.fixture
def catalog():
    """Built-in flower catalog"""
    from models.templates import BUILTIN_FLOWERS
    return dict(BUILTIN_FLOWERS)


@pytest.fixture
def red_rose(catalog):
    return catalog['red-rose']


@pytest.fixture
def eucalyptus(catalog):
    return catalog['eucalyptus']


@pytest.fixture
def sold_out_flower():
    from models.flower import FlowerType
    return FlowerType('sold-out', 'Sold Out Orchid', '#c084fc', stock=0)


@pytest.fixture
def fresh_model():
    """Empty arrangement with default config"""
    from models.arrangement import ArrangementModel
    return ArrangementModel()


@pytest.fixture
def session():
    """Fresh session with no image resolver (flowers render as discs)"""
    from session import BuilderSession
    return BuilderSession()


@pytest.fixture
def solid_image():
    """Factory for small solid RGBA images"""
    from PIL import Image

    def make(color=(255, 0, 0, 255), size=(32, 32)):
        return Image.new('RGBA', size, color)
    return make


@pytest.fixture
def fake_loader(solid_image):
    """Image loader: 'bad*' refs raise, 'slow*' refs hang, others are solid blue"""
    calls = []

    def load(ref):
        calls.append(ref)
        if ref.startswith('bad'):
            raise OSError(f"cannot open {ref}")
        if ref.startswith('slow'):
            time.sleep(2.0)
        return solid_image((0, 0, 255, 255))

    load.calls = calls
    return load
