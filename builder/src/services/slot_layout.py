"""Slot layout engine - places bouquet items in concentric rings.

Items are laid out like a real bouquet viewed from above: one focal flower
in the center, then rings of growing size around it. Each ring slot gets a
small jitter on angle and radius so the result does not look like a
mechanical grid. The jitter is a smooth periodic function of the slot
index (never a random number generator), so the same index always lands on
the same slot for a given configuration.

Slots past the precomputed table fall back to a wide outer ring computed on
the fly, so slot_for() is total for any non-negative index.
"""

import math
import logging
from dataclasses import dataclass
from typing import List, Tuple

from constants import (
    WORKING_CENTER_X, WORKING_CENTER_Y,
    CENTER_SLOT_SCALE, CENTER_SLOT_STACK_ORDER,
    SLOT_RINGS,
    SLOT_RADIUS_JITTER, SLOT_RADIUS_JITTER_FREQ,
    SLOT_ANGLE_JITTER, SLOT_ANGLE_JITTER_FREQ,
    SLOT_TILT_FACTOR, SLOT_TILT_JITTER, SLOT_TILT_JITTER_FREQ,
    SLOT_RING_STACK_BASE,
    OVERFLOW_RADIUS, OVERFLOW_SLOTS_PER_TURN, OVERFLOW_SCALE,
    OVERFLOW_STACK_ORDER, OVERFLOW_TILT,
)
from models.transform import Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotLayoutConfig:
    """Geometry of the slot table.

    rings: one (count, radius, start_angle, scale) tuple per ring after the
    center slot, innermost first.
    """
    center_x: float = WORKING_CENTER_X
    center_y: float = WORKING_CENTER_Y
    rings: Tuple[Tuple[int, float, float, float], ...] = SLOT_RINGS
    center_scale: float = CENTER_SLOT_SCALE
    center_stack_order: int = CENTER_SLOT_STACK_ORDER
    overflow_radius: float = OVERFLOW_RADIUS
    overflow_slots_per_turn: int = OVERFLOW_SLOTS_PER_TURN
    overflow_scale: float = OVERFLOW_SCALE
    overflow_stack_order: int = OVERFLOW_STACK_ORDER

    def __post_init__(self):
        # Normalize to tuples so the config stays hashable after JSON loading
        object.__setattr__(self, 'rings', tuple(tuple(ring) for ring in self.rings))
        for count, radius, _start, scale in self.rings:
            if int(count) < 1:
                raise ValueError(f"Ring slot count must be positive, got {count}")
            if radius < 0 or scale <= 0:
                raise ValueError(f"Invalid ring radius/scale: {radius}, {scale}")
        if self.overflow_slots_per_turn < 1:
            raise ValueError("overflow_slots_per_turn must be positive")


def generate_ring_slots(cx: float, cy: float, ring_index: int, count: int,
                        start_angle: float, radius: float, scale: float) -> List[Slot]:
    """Generate the slots of one ring.

    Args:
        cx, cy: Ring center in working space
        ring_index: 1 for the innermost ring; drives stack order
        count: Number of slots on the ring
        start_angle: Angle of slot 0, radians
        radius: Nominal ring radius
        scale: Scale for every slot on the ring

    Returns:
        List of Slot, in insertion order
    """
    slots = []
    for i in range(count):
        angle = start_angle + (i / count) * math.pi * 2
        jitter_r = radius * SLOT_RADIUS_JITTER * math.sin(i * SLOT_RADIUS_JITTER_FREQ)
        jitter_a = SLOT_ANGLE_JITTER * math.cos(i * SLOT_ANGLE_JITTER_FREQ)
        r = radius + jitter_r
        a = angle + jitter_a

        slots.append(Slot(
            x=cx + math.cos(a) * r,
            y=cy + math.sin(a) * r,
            # Gentle outward tilt plus a secondary wobble
            rotation=math.degrees(angle) * SLOT_TILT_FACTOR
                     + math.sin(i * SLOT_TILT_JITTER_FREQ) * SLOT_TILT_JITTER,
            scale=scale,
            # Later slots on the same ring layer over earlier ones
            stack_order=SLOT_RING_STACK_BASE - ring_index + i,
        ))
    return slots


def build_slot_table(config: SlotLayoutConfig) -> Tuple[Slot, ...]:
    """Precompute the full ring table for a configuration"""
    slots = [Slot(
        x=config.center_x,
        y=config.center_y,
        rotation=0.0,
        scale=config.center_scale,
        stack_order=config.center_stack_order,
    )]
    for ring_index, (count, radius, start_angle, scale) in enumerate(config.rings, start=1):
        slots.extend(generate_ring_slots(
            config.center_x, config.center_y, ring_index,
            int(count), start_angle, radius, scale
        ))
    return tuple(slots)


class SlotLayoutEngine:
    """Deterministic slot assignment for the Nth placed item.

    The table is built once per instance; engines are cheap to share
    between arrangements that use the same configuration.
    """

    def __init__(self, config: SlotLayoutConfig = None):
        self.config = config or SlotLayoutConfig()
        self._table = build_slot_table(self.config)
        logger.debug("Built slot table with %d slots", len(self._table))

    @property
    def table_size(self) -> int:
        """Number of precomputed (non-overflow) slots"""
        return len(self._table)

    def slot_for(self, index: int) -> Slot:
        """Get the slot for the item at position `index` in insertion order

        Args:
            index: Non-negative item index

        Returns:
            Slot for that index

        Raises:
            ValueError: If index is negative or not an integer
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError(f"Slot index must be an integer, got {index!r}")
        if index < 0:
            raise ValueError(f"Slot index must be non-negative, got {index}")

        if index < len(self._table):
            return self._table[index]
        return self._overflow_slot(index)

    def _overflow_slot(self, index: int) -> Slot:
        """Wide outer ring for items past the precomputed table"""
        cfg = self.config
        angle = ((index - len(self._table)) / cfg.overflow_slots_per_turn) * math.pi * 2
        return Slot(
            x=cfg.center_x + math.cos(angle) * cfg.overflow_radius,
            y=cfg.center_y + math.sin(angle) * cfg.overflow_radius,
            rotation=math.sin(index) * OVERFLOW_TILT,
            scale=cfg.overflow_scale,
            stack_order=cfg.overflow_stack_order,
        )

    def slots(self, count: int) -> List[Slot]:
        """Slots for the first `count` indices"""
        return [self.slot_for(i) for i in range(count)]
