from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .undertone import Undertone


@dataclass(frozen=True)
class ColorSwatch:
    name: str   # Human-readable label, e.g. "Coral"
    hex: str    # "#RRGGBB"

    @property
    def rgb(self) -> Tuple[int, int, int]:
        code = self.hex.lstrip("#")
        return tuple(int(code[i:i + 2], 16) for i in (0, 2, 4))

    def to_dict(self) -> dict:
        return {"name": self.name, "hex": self.hex}


@dataclass(frozen=True)
class Recommendation:
    """
    Static palette for one undertone: colors to wear, colors to avoid
    and the explanation shown next to them.
    """
    undertone: Undertone
    good: Tuple[ColorSwatch, ...]
    avoid: Tuple[ColorSwatch, ...]
    explanation: str

    def to_dict(self) -> dict:
        return {
            "undertone": self.undertone.value,
            "good": [swatch.to_dict() for swatch in self.good],
            "avoid": [swatch.to_dict() for swatch in self.avoid],
            "explanation": self.explanation,
        }
