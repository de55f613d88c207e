from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class PixelAccumulator:
    """
    Running channel sums over the pixels accepted by the skin filter.
    Sums are plain ints so merging chunks is exact and order independent.
    """
    total_r: int = 0
    total_g: int = 0
    total_b: int = 0 # Reported in mean_rgb only, never used for the decision.
    count: int = 0

    def merge(self, other: PixelAccumulator) -> PixelAccumulator:
        return PixelAccumulator(
            total_r=self.total_r + other.total_r,
            total_g=self.total_g + other.total_g,
            total_b=self.total_b + other.total_b,
            count=self.count + other.count,
        )

    def is_empty(self) -> bool:
        return self.count == 0

    def mean_rgb(self) -> tuple[float, float, float]:
        """Average R, G, B of the accepted pixels. Caller must check `is_empty` first."""
        return (
            self.total_r / self.count,
            self.total_g / self.count,
            self.total_b / self.count,
        )
