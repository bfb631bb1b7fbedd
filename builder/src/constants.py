"""
Bouquet Builder - Constants and Configuration

This module contains all constant values used throughout the engine:
- Working space and render space geometry
- Slot layout ring definitions
- Default item limits and constraints
- Wrap, ribbon and greenery palettes
- Export/compositing constants

Working space is the coordinate system items are stored in. It is a square
of WORKING_SIZE units with the bouquet center at WORKING_CENTER. Render space
is the fixed canonical export canvas (EXPORT_WIDTH x EXPORT_HEIGHT pixels),
independent of any on-screen zoom or pan.
"""

# ======================================================================
# WORKING SPACE
# ======================================================================

WORKING_SIZE = 240.0
WORKING_CENTER_X = 120.0
WORKING_CENTER_Y = 120.0

# Diameter of an unscaled flower in working units
FLOWER_BASE_SIZE = 56.0

# ======================================================================
# SLOT LAYOUT
# ======================================================================
# Ring 0 is the single center slot. Every other ring is
# (count, radius, start_angle_radians, scale).

CENTER_SLOT_SCALE = 1.1
CENTER_SLOT_STACK_ORDER = 10

SLOT_RINGS = (
    (6, 44.0, -0.5235987755982988, 1.0),   # ring 1, start at -pi/6
    (12, 88.0, 0.0, 0.9),                  # ring 2
)

# Jitter is a smooth periodic function of the slot index within its ring
SLOT_RADIUS_JITTER = 0.05          # fraction of ring radius
SLOT_RADIUS_JITTER_FREQ = 7.3
SLOT_ANGLE_JITTER = 0.05           # radians
SLOT_ANGLE_JITTER_FREQ = 3.1
SLOT_TILT_FACTOR = 0.3             # outward tilt, fraction of slot angle in degrees
SLOT_TILT_JITTER = 8.0             # degrees
SLOT_TILT_JITTER_FREQ = 2.7
SLOT_RING_STACK_BASE = 5           # ring k slot i -> base - k + i

# Overflow ring used once the precomputed table is exhausted
OVERFLOW_RADIUS = 120.0
OVERFLOW_SLOTS_PER_TURN = 8
OVERFLOW_SCALE = 0.8
OVERFLOW_STACK_ORDER = 1
OVERFLOW_TILT = 10.0

# ======================================================================
# ITEM CONSTRAINTS
# ======================================================================

DEFAULT_SCALE_MIN = 0.5
DEFAULT_SCALE_MAX = 2.0
DEFAULT_MAX_ITEMS = None          # None = unbounded

# Quick-control steps
ROTATE_STEP = 15.0
SCALE_STEP = 0.1
DUPLICATE_OFFSET = 12.0

# Category stacking for templates and presets (higher draws on top)
CATEGORY_FOCAL = 'focal'
CATEGORY_FILLER = 'filler'
CATEGORY_GREENERY = 'greenery'
CATEGORY_STACK_ORDER = {
    CATEGORY_FOCAL: 2,
    CATEGORY_FILLER: 1,
    CATEGORY_GREENERY: 0,
}
CATEGORY_DEFAULT_SCALE = {
    CATEGORY_FOCAL: 1.0,
    CATEGORY_FILLER: 0.85,
    CATEGORY_GREENERY: 0.85,
}

# Used when a template references a flower the catalog does not know
PLACEHOLDER_FLOWER_COLOR = '#9ca3af'

# ======================================================================
# HISTORY
# ======================================================================

DEFAULT_HISTORY_CAP = 30

# ======================================================================
# STYLE
# ======================================================================

WRAP_PAPER = 'paper'
WRAP_CELLOPHANE = 'cellophane'
WRAP_BURLAP = 'burlap'
WRAP_FABRIC = 'fabric'

# Radial gradient (inner, outer) per wrap style
WRAP_COLORS = {
    WRAP_PAPER:      ('#d4a574', '#c49a6c'),
    WRAP_CELLOPHANE: ('#e0e0e0', '#ffffff'),
    WRAP_BURLAP:     ('#a67c52', '#8b6642'),
    WRAP_FABRIC:     ('#f8b4c4', '#f0a0b4'),
}
WRAP_STYLES = (WRAP_PAPER, WRAP_CELLOPHANE, WRAP_BURLAP, WRAP_FABRIC)
DEFAULT_WRAP_STYLE = WRAP_PAPER

RIBBON_COLORS = {
    'red':    '#dc2626',
    'pink':   '#ec4899',
    'white':  '#f5f5f5',
    'gold':   '#d4af37',
    'navy':   '#1e3a5f',
    'purple': '#7c3aed',
    'green':  '#16a34a',
    'black':  '#1f2937',
}
DEFAULT_RIBBON_COLOR = 'red'

# Render-time size multipliers
SIZE_PRESETS = {
    'small': 0.75,
    'medium': 1.0,
    'large': 1.25,
}
DEFAULT_SIZE = 'medium'

# ======================================================================
# COMPOSITION / EXPORT
# ======================================================================

EXPORT_WIDTH = 600
EXPORT_HEIGHT = 680               # square composition + caption band
COMPOSITION_SIZE = 600
COMPOSITION_CENTER_X = 300.0
COMPOSITION_CENTER_Y = 300.0

# Working units -> render pixels
RENDER_SCALE = 2.0

BACKGROUND_COLOR = '#ffffff'
WRAP_RADIUS = 280.0
GREENERY_RADIUS = 250.0
GREENERY_COLORS = ('#f0fdf4', '#dcfce7')

# Ribbon anchor near the bottom of the composition
RIBBON_WIDTH = 120.0
RIBBON_HEIGHT = 40.0
RIBBON_CORNER_RADIUS = 20.0
RIBBON_TOP = 520.0
BOW_LOBE_OFFSET_X = 25.0
BOW_LOBE_RADIUS_X = 20.0
BOW_LOBE_RADIUS_Y = 25.0
BOW_CENTER_Y = 510.0
BOW_KNOT_RADIUS = 10.0

TITLE_COLOR = '#374151'
TITLE_FONT_SIZE = 24
TITLE_BASELINE_Y = 650
CAPTION_COLOR = '#9ca3af'
CAPTION_FONT_SIZE = 14
CAPTION_BASELINE_Y = 670
CAPTION_TEXT = 'Created with Roses Garden Bouquet Builder'
DEFAULT_BOUQUET_NAME = 'My Custom Bouquet'

# Candidate font files, tried in order before Pillow's built-in font
TITLE_FONT_CANDIDATES = ('DejaVuSans-Bold.ttf', 'Arial Bold.ttf', 'arialbd.ttf')
CAPTION_FONT_CANDIDATES = ('DejaVuSans.ttf', 'Arial.ttf', 'arial.ttf')

# Supersampling factor for antialiased disc/mask edges
MASK_SUPERSAMPLE = 4

# ======================================================================
# IMAGE RESOLUTION
# ======================================================================

DEFAULT_IMAGE_TIMEOUT = 5.0       # seconds, per image
DEFAULT_IMAGE_WORKERS = 4

# ======================================================================
# EXPORT TARGETS
# ======================================================================

EXPORT_MIME_TYPE = 'image/png'
EXPORT_FILENAME_SUFFIX = '-bouquet.png'
SHARE_TEXT = 'Check out my custom bouquet design!'
