"""Engine configuration.

Defaults come from constants.py. A JSON settings file can override any
field; unknown keys are ignored so older/newer files keep loading.
"""

import os
import json
import logging
from dataclasses import dataclass, field, asdict, fields
from typing import Optional

from constants import (
    DEFAULT_SCALE_MIN, DEFAULT_SCALE_MAX,
    DEFAULT_MAX_ITEMS, DEFAULT_HISTORY_CAP,
    DEFAULT_IMAGE_TIMEOUT, DEFAULT_IMAGE_WORKERS,
)
from services.slot_layout import SlotLayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Tunable limits for one arrangement session"""
    scale_min: float = DEFAULT_SCALE_MIN
    scale_max: float = DEFAULT_SCALE_MAX
    max_items: Optional[int] = DEFAULT_MAX_ITEMS
    history_cap: int = DEFAULT_HISTORY_CAP
    image_timeout: float = DEFAULT_IMAGE_TIMEOUT
    image_workers: int = DEFAULT_IMAGE_WORKERS
    slot_layout: SlotLayoutConfig = field(default_factory=SlotLayoutConfig)

    def __post_init__(self):
        if self.scale_min <= 0 or self.scale_max < self.scale_min:
            raise ValueError(f"Invalid scale bounds [{self.scale_min}, {self.scale_max}]")
        if self.max_items is not None and self.max_items < 0:
            raise ValueError(f"max_items must be non-negative, got {self.max_items}")
        if self.history_cap < 1:
            raise ValueError(f"history_cap must be at least 1, got {self.history_cap}")
        if self.image_timeout <= 0:
            raise ValueError(f"image_timeout must be positive, got {self.image_timeout}")
        if self.image_workers < 1:
            raise ValueError(f"image_workers must be at least 1, got {self.image_workers}")

    def clamp_scale(self, value: float) -> float:
        """Clamp a scale into [scale_min, scale_max]"""
        return max(self.scale_min, min(self.scale_max, float(value)))

    # ========================================
    # Dict / file round trip
    # ========================================

    def to_dict(self) -> dict:
        data = asdict(self)
        data['slot_layout']['rings'] = [list(ring) for ring in self.slot_layout.rings]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'EngineConfig':
        """Build from a dict, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}

        slot_data = kwargs.pop('slot_layout', None)
        if slot_data:
            slot_known = {f.name for f in fields(SlotLayoutConfig)}
            kwargs['slot_layout'] = SlotLayoutConfig(
                **{k: v for k, v in slot_data.items() if k in slot_known}
            )
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str) -> 'EngineConfig':
        """Load from a JSON file; a missing file yields the defaults

        Raises:
            ValueError: If the file exists but is not a valid config
        """
        if not os.path.exists(path):
            logger.debug("No config at %s, using defaults", path)
            return cls()

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file {path}: expected an object")
        config = cls.from_dict(data)
        logger.info("Loaded engine config from %s", path)
        return config

    def save(self, path: str):
        """Write to a JSON file, creating the directory if needed"""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
