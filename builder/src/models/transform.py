"""Transform data structures for coordinate and placement representation."""
from dataclasses import dataclass


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Working space (item positions, center at WORKING_CENTER)
    - Render space pixels (export canvas)
    - Template space (percentage of canvas, 0-100)
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def offset(self, dx: float, dy: float) -> 'Vec2':
        """Return a new vector translated by (dx, dy)"""
        return Vec2(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Slot:
    """Placement target for the Nth item added to an arrangement.

    Slots are produced by SlotLayoutEngine and are immutable so that the
    precomputed table can be handed out without copying.
    """
    x: float
    y: float
    rotation: float
    scale: float
    stack_order: int

    @property
    def position(self) -> Vec2:
        return Vec2(self.x, self.y)


@dataclass
class Transform:
    """Item transform state: position, rotation, scale and stacking.

    Position is in working space, rotation in degrees (unbounded),
    scale is uniform.
    """
    pos: Vec2
    rotation: float = 0.0
    scale: float = 1.0
    stack_order: int = 0
