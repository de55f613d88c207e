from __future__ import annotations
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import List

import numpy as np
from dotenv import load_dotenv

from ..models.errors import EmptySkinSetError, InvalidInputError
from ..models.pixel_accumulator import PixelAccumulator
from ..models.undertone import Undertone
from ..models.undertone_analysis import UndertoneAnalysis
from .skin_pixel_service import SkinPixelService

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# Mean-red / mean-green bands, checked in this order. Anything else is neutral,
# including the 1.3-1.4 gap.
WARM_RATIO_RANGE = (1.4, 2.0)
COOL_RATIO_RANGE = (0.8, 1.3)


class UndertoneService:
    """
    Reduces a pixel buffer to a single Undertone.
    *   Works on anything array-like: (N, C) or (H, W, C) with C in {3, 4}.
    *   Each call owns its accumulator; nothing is cached between calls.
    """
    def __init__(
        self,
        skin_pixel_service: SkinPixelService | None = None,
        chunk_size: int | None = None,
        workers: int | None = None,
    ):
        self.skin_pixel_service = skin_pixel_service or SkinPixelService()
        self.CHUNK_SIZE = int(chunk_size if chunk_size is not None
                              else os.getenv("ANALYSIS_CHUNK_SIZE", "262144"))
        self.WORKERS = int(workers if workers is not None
                           else os.getenv("ANALYSIS_WORKERS", "1"))
        if self.CHUNK_SIZE < 1:
            raise ValueError(f"chunk_size must be positive, got {self.CHUNK_SIZE}")
        if self.WORKERS < 1:
            raise ValueError(f"workers must be positive, got {self.WORKERS}")

    # ------------------------- input validation -------------------------
    @staticmethod
    def validate_pixels(pixels) -> np.ndarray:
        """
        Flatten a pixel buffer to an (N, 3) view in its native dtype, dropping any alpha channel.

        Raises:
            InvalidInputError: empty buffer, wrong arity, non-integral or out-of-range values.
        """
        try:
            arr = np.asarray(pixels)
        except (ValueError, TypeError) as err:
            raise InvalidInputError(f"Malformed pixel buffer: {err}") from err

        if arr.size == 0:
            raise InvalidInputError("Pixel buffer is empty")
        if arr.ndim < 2 or arr.shape[-1] not in (3, 4):
            raise InvalidInputError(
                f"Expected pixels with 3 (RGB) or 4 (RGBA) channels, got shape {arr.shape}"
            )
        if arr.dtype == np.bool_ or not (
            np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)
        ):
            raise InvalidInputError(f"Channel values must be integers, got dtype {arr.dtype}")
        if np.issubdtype(arr.dtype, np.floating):
            if not np.all(np.isfinite(arr)) or not np.all(arr == np.floor(arr)):
                raise InvalidInputError("Channel values must be whole numbers")
        if arr.min() < 0 or arr.max() > 255:
            raise InvalidInputError(
                f"Channel values must lie in [0, 255], got [{arr.min()}, {arr.max()}]"
            )

        return arr.reshape(-1, arr.shape[-1])[:, :3]

    # ------------------------- accumulation -------------------------
    def _accumulate_chunk(self, chunk: np.ndarray) -> PixelAccumulator:
        mask = self.skin_pixel_service.skin_mask(chunk)
        sums = chunk[mask].astype(np.int64).sum(axis=0)
        return PixelAccumulator(
            total_r=int(sums[0]),
            total_g=int(sums[1]),
            total_b=int(sums[2]),
            count=int(mask.sum()),
        )

    def _chunks(self, arr: np.ndarray) -> List[np.ndarray]:
        return [arr[i:i + self.CHUNK_SIZE] for i in range(0, len(arr), self.CHUNK_SIZE)]

    def _accumulate_array(self, arr: np.ndarray) -> PixelAccumulator:
        chunks = self._chunks(arr)
        if self.WORKERS > 1 and len(chunks) > 1:
            with ThreadPoolExecutor(max_workers=self.WORKERS) as pool:
                partials = list(pool.map(self._accumulate_chunk, chunks))
        else:
            partials = [self._accumulate_chunk(chunk) for chunk in chunks]
        return reduce(PixelAccumulator.merge, partials, PixelAccumulator())

    def accumulate(self, pixels) -> PixelAccumulator:
        """Sum R, G, B over the skin pixels of *pixels*. Validates the buffer first."""
        return self._accumulate_array(self.validate_pixels(pixels))

    # ------------------------- classification -------------------------
    @staticmethod
    def classify_ratio(ratio: float) -> Undertone:
        """
        Map a mean-red / mean-green ratio to an Undertone.
        Warm is checked before cool; everything that matches neither is neutral.
        """
        if WARM_RATIO_RANGE[0] <= ratio <= WARM_RATIO_RANGE[1]:
            return Undertone.WARM
        elif COOL_RATIO_RANGE[0] <= ratio <= COOL_RATIO_RANGE[1]:
            return Undertone.COOL
        else:
            return Undertone.NEUTRAL

    def analyze_pixels(self, pixels) -> UndertoneAnalysis:
        """
        Args:
            pixels: a decoded RGB(A) buffer.

        Returns:
            UndertoneAnalysis with the label, ratio, mean colour and pixel counts.

        Raises:
            InvalidInputError: the buffer is malformed.
            EmptySkinSetError: no pixel passed the skin filter.
        """
        arr = self.validate_pixels(pixels)
        acc = self._accumulate_array(arr)
        total = len(arr)

        if acc.is_empty():
            logger.info(f"No skin pixels among {total} pixels")
            raise EmptySkinSetError(total)

        avg_r, avg_g, avg_b = acc.mean_rgb()
        ratio = avg_r / avg_g
        undertone = self.classify_ratio(ratio)
        logger.debug(
            f"Skin pixels: {acc.count}/{total} | mean RGB: "
            f"({avg_r:.1f}, {avg_g:.1f}, {avg_b:.1f}) | R/G: {ratio:.4f} → {undertone.value}"
        )

        return UndertoneAnalysis(
            undertone=undertone,
            ratio=ratio,
            mean_rgb=(avg_r, avg_g, avg_b),
            skin_pixel_count=acc.count,
            total_pixel_count=total,
        )

    def determine_undertone(self, pixels) -> Undertone:
        return self.analyze_pixels(pixels).undertone
