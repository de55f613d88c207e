from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from .recommendation import Recommendation
from .undertone import Undertone


@dataclass(frozen=True)
class UndertoneAnalysis:
    """
    Outcome of one classifier run over a pixel buffer.
    """
    undertone: Undertone
    ratio: float                              # mean R / mean G over skin pixels
    mean_rgb: Tuple[float, float, float]      # blue is informational only
    skin_pixel_count: int
    total_pixel_count: int

    @property
    def skin_coverage(self) -> float:
        """Fraction of the buffer accepted by the skin filter (0-1)."""
        return self.skin_pixel_count / self.total_pixel_count


@dataclass(frozen=True)
class UndertoneReport:
    """
    Data object combining an analysis with the palette looked up for it.
    This is what the API and CLI render.
    """
    analysis: UndertoneAnalysis
    recommendation: Recommendation
    tips: Tuple[str, ...] = field(default_factory=tuple)
    path: Path | None = None

    @property
    def undertone(self) -> Undertone:
        return self.analysis.undertone

    def to_dict(self) -> dict:
        r, g, b = self.analysis.mean_rgb
        return {
            "path": str(self.path) if self.path else None,
            "undertone": self.analysis.undertone.value,
            "ratio": round(self.analysis.ratio, 4),
            "mean_rgb": {"r": round(r, 2), "g": round(g, 2), "b": round(b, 2)},
            "skin_pixel_count": self.analysis.skin_pixel_count,
            "total_pixel_count": self.analysis.total_pixel_count,
            "skin_coverage": round(self.analysis.skin_coverage, 4),
            "recommendation": self.recommendation.to_dict(),
            "tips": list(self.tips),
        }
