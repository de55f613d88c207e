# services/skin_pixel_service.py
from __future__ import annotations
import math
from typing import Tuple
import numpy as np

# HSV gate for plausible skin: red-orange hues, moderate saturation, not too dark/bright.
HUE_RANGE = (0.0, 50.0)            # degrees
SATURATION_RANGE = (0.10, 0.60)
VALUE_RANGE = (0.20, 0.95)


class SkinPixelService:
    """
    Decides whether RGB pixels plausibly belong to human skin.
    Pure functions only: no I/O, no state.
    """

    @staticmethod
    def to_hsv(r: int, g: int, b: int) -> Tuple[float, float, float]:
        """
        Convert one RGB pixel (0-255 ints) to (hue°, saturation, value).

        Pure black has no saturation or hue; (0.0, 0.0, 0.0) is returned for it.
        """
        c_max = max(r, g, b)
        c_min = min(r, g, b)
        delta = c_max - c_min

        if c_max == 0:
            return 0.0, 0.0, 0.0

        v = c_max / 255
        s = delta / c_max

        if delta == 0:
            h = 0.0
        elif c_max == r:
            h = math.fmod((g - b) / delta, 6)
        elif c_max == g:
            h = (b - r) / delta + 2
        else:
            h = (r - g) / delta + 4

        h = h * 60
        if h < 0:
            h += 360
        return h, s, v

    @staticmethod
    def _in_gate(h, s, v):
        return (
            (h >= HUE_RANGE[0]) & (h <= HUE_RANGE[1])
            & (s >= SATURATION_RANGE[0]) & (s <= SATURATION_RANGE[1])
            & (v >= VALUE_RANGE[0]) & (v <= VALUE_RANGE[1])
        )

    def is_skin_tone(self, r: int, g: int, b: int) -> bool:
        """
        Args:
            r, g, b (int): channel intensities in [0, 255].

        Returns:
            True if the pixel falls inside the skin HSV gate, False otherwise.
        """
        if max(r, g, b) == 0:
            return False
        h, s, v = self.to_hsv(r, g, b)
        return bool(self._in_gate(h, s, v))

    def skin_mask(self, pixels: np.ndarray) -> np.ndarray:
        """
        Vectorised `is_skin_tone` over an array whose last axis holds R, G, B(, A).
        Returns a boolean array of the leading shape. Same decisions as the scalar path.
        """
        rgb = np.asarray(pixels)[..., :3].astype(np.float64)
        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

        c_max = np.maximum(np.maximum(r, g), b)
        c_min = np.minimum(np.minimum(r, g), b)
        delta = c_max - c_min

        nonzero = c_max > 0
        chroma = delta > 0
        # Divide only where defined; masked-out lanes stay 0 and are rejected below.
        v = c_max / 255
        s = np.zeros_like(c_max)
        np.divide(delta, c_max, out=s, where=nonzero)

        delta_safe = np.where(chroma, delta, 1.0)
        h = np.select(
            [~chroma, c_max == r, c_max == g],
            [
                0.0,
                np.fmod((g - b) / delta_safe, 6),
                (b - r) / delta_safe + 2,
            ],
            default=(r - g) / delta_safe + 4,
        )
        h = h * 60
        h = np.where(h < 0, h + 360, h)

        return nonzero & self._in_gate(h, s, v)
