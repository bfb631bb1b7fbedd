"""
Bouquet Builder - Color Domain Model

Canonical color representation for flowers, ribbons and wrap palettes.
All color parsing and conversion flows through this class.
"""

import re
from typing import Optional, Tuple, Union
from constants import RIBBON_COLORS

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$')


class Color:
    """Immutable color with uint8 RGB storage and optional palette name tag.

    Internal storage: _r, _g, _b (uint8 0-255), _name (string)

    Palette colors (the ribbon palette) keep their name so that saved
    designs can round-trip "gold" rather than "#D4AF37". Custom colors carry
    an empty name.
    """

    def __init__(self, r: int, g: int, b: int, name: str = ""):
        """Direct construction from RGB uint8 values (0-255).

        Args:
            r: Red component (0-255)
            g: Green component (0-255)
            b: Blue component (0-255)
            name: Optional color name (for palette colors)
        """
        # Clamp to valid uint8 range
        self._r = max(0, min(255, int(r)))
        self._g = max(0, min(255, int(g)))
        self._b = max(0, min(255, int(b)))
        self._name = name

    @property
    def r(self) -> int:
        """Red component (0-255) - READ ONLY"""
        return self._r

    @property
    def g(self) -> int:
        """Green component (0-255) - READ ONLY"""
        return self._g

    @property
    def b(self) -> int:
        """Blue component (0-255) - READ ONLY"""
        return self._b

    @property
    def name(self) -> str:
        """Color name (empty string for custom colors) - READ ONLY"""
        return self._name

    # ========================================
    # Output Methods
    # ========================================

    def to_hex(self) -> str:
        """Convert to hex color string: #RRGGBB.

        Returns:
            Hex color string with leading #
        """
        return f"#{self._r:02X}{self._g:02X}{self._b:02X}"

    def to_rgb255(self) -> Tuple[int, int, int]:
        """Convert to RGB uint8 tuple (0-255), the form Pillow expects"""
        return (self._r, self._g, self._b)

    def to_rgba255(self, alpha: int = 255) -> Tuple[int, int, int, int]:
        """Convert to RGBA uint8 tuple (0-255)"""
        return (self._r, self._g, self._b, max(0, min(255, int(alpha))))

    def to_tuple_float3(self) -> Tuple[float, float, float]:
        """Convert to normalized float RGB tuple (0-1) for gradient math"""
        return (self._r / 255.0, self._g / 255.0, self._b / 255.0)

    def to_design_value(self) -> str:
        """Value stored in saved designs: palette name if tagged, else hex"""
        return self._name if self._name else self.to_hex()

    # ========================================
    # Static Factory Methods
    # ========================================

    @staticmethod
    def from_hex(hex_string: str) -> Optional['Color']:
        """Create Color from hex string: #RRGGBB, RRGGBB or #RGB.

        Args:
            hex_string: Hex color string with or without leading #

        Returns:
            Color object if parse succeeds, None otherwise
        """
        if not isinstance(hex_string, str):
            return None

        match = _HEX_RE.match(hex_string.strip())
        if not match:
            return None

        digits = match.group(1)
        if len(digits) == 3:
            digits = ''.join(c * 2 for c in digits)

        return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    @staticmethod
    def from_name(color_name: str) -> Optional['Color']:
        """Create Color from a ribbon palette name, preserving the name tag.

        Args:
            color_name: Palette name (e.g. 'gold')

        Returns:
            Color object, or None if the name is not in the palette
        """
        if not isinstance(color_name, str):
            return None
        key = color_name.strip().lower()
        if key not in RIBBON_COLORS:
            return None
        color = Color.from_hex(RIBBON_COLORS[key])
        return Color(color.r, color.g, color.b, name=key)

    @staticmethod
    def parse(value: Union['Color', str, Tuple[int, int, int]]) -> 'Color':
        """Create Color from any supported representation.

        Accepts a Color (returned as-is), a palette name, a hex string or an
        (r, g, b) tuple.

        Raises:
            ValueError: If the value cannot be interpreted as a color
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            color = Color.from_name(value) or Color.from_hex(value)
            if color is None:
                raise ValueError(f"Unrecognized color value: {value!r}")
            return color
        if isinstance(value, (tuple, list)) and len(value) == 3:
            return Color(*value)
        raise ValueError(f"Unrecognized color value: {value!r}")

    # ========================================
    # Equality and Hashing
    # ========================================

    def __eq__(self, other) -> bool:
        """Test equality based on RGB values and name tag."""
        if not isinstance(other, Color):
            return False
        return (self._r, self._g, self._b, self._name) == (other._r, other._g, other._b, other._name)

    def __hash__(self) -> int:
        return hash((self._r, self._g, self._b))

    def __repr__(self) -> str:
        if self._name:
            return f"Color({self._r}, {self._g}, {self._b}, name='{self._name}')"
        return f"Color({self._r}, {self._g}, {self._b})"

    def __str__(self) -> str:
        """String representation - uses hex format."""
        return self.to_hex()
