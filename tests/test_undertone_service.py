"""
Undertone classifier: ratio thresholds, accumulation and failure modes.
Run from project root: python -m pytest tests/ -v
"""
import sys
import unittest
from pathlib import Path

import numpy as np

# Project root on path so "from undertone_matcher. ..." works
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from undertone_matcher.models.errors import EmptySkinSetError, InvalidInputError
from undertone_matcher.models.pixel_accumulator import PixelAccumulator
from undertone_matcher.models.undertone import Undertone
from undertone_matcher.services.undertone_service import UndertoneService


class TestClassifyRatio(unittest.TestCase):
    """Fixed bands, warm first, neutral for everything else."""

    def test_boundary_values(self):
        classify = UndertoneService.classify_ratio
        self.assertEqual(classify(1.4), Undertone.WARM)
        self.assertEqual(classify(2.0), Undertone.WARM)
        self.assertEqual(classify(1.39999), Undertone.NEUTRAL)  # 1.3-1.4 gap is not cool
        self.assertEqual(classify(1.3), Undertone.COOL)
        self.assertEqual(classify(1.30001), Undertone.NEUTRAL)
        self.assertEqual(classify(0.8), Undertone.COOL)
        self.assertEqual(classify(0.79999), Undertone.NEUTRAL)
        self.assertEqual(classify(2.00001), Undertone.NEUTRAL)

    def test_totality_and_exclusivity(self):
        """Every positive ratio lands in exactly one band."""
        for ratio in np.concatenate([np.linspace(1e-6, 5.0, 5001), [1e-12, 1e6]]):
            ratio = float(ratio)
            is_warm = 1.4 <= ratio <= 2.0
            is_cool = 0.8 <= ratio <= 1.3
            self.assertFalse(is_warm and is_cool)
            result = UndertoneService.classify_ratio(ratio)
            self.assertIsInstance(result, Undertone)
            if is_warm:
                self.assertEqual(result, Undertone.WARM)
            elif is_cool:
                self.assertEqual(result, Undertone.COOL)
            else:
                self.assertEqual(result, Undertone.NEUTRAL)


class TestAnalyzePixels(unittest.TestCase):

    def setUp(self):
        self.service = UndertoneService(chunk_size=1024, workers=1)

    def test_uniform_warm_image(self):
        pixels = np.full((2, 2, 3), (200, 120, 90), dtype=np.uint8)
        analysis = self.service.analyze_pixels(pixels)
        self.assertEqual(analysis.undertone, Undertone.WARM)
        self.assertAlmostEqual(analysis.ratio, 200 / 120)
        self.assertEqual(analysis.skin_pixel_count, 4)
        self.assertEqual(analysis.total_pixel_count, 4)
        self.assertEqual(analysis.mean_rgb, (200.0, 120.0, 90.0))
        self.assertEqual(self.service.determine_undertone(pixels), Undertone.WARM)

    def test_black_pixel_excluded_from_average(self):
        """Three skin pixels at R/G 1.2 plus one black pixel → cool over 3 pixels."""
        pixels = [(180, 150, 130), (180, 150, 130), (180, 150, 130), (0, 0, 0)]
        analysis = self.service.analyze_pixels(pixels)
        self.assertEqual(analysis.undertone, Undertone.COOL)
        self.assertAlmostEqual(analysis.ratio, 1.2)
        self.assertEqual(analysis.skin_pixel_count, 3)
        self.assertEqual(analysis.total_pixel_count, 4)
        self.assertAlmostEqual(analysis.skin_coverage, 0.75)

    def test_magenta_leaning_pixels_are_not_skin(self):
        """(180,150,160) has hue 340°, so with a black pixel nothing is left to classify."""
        pixels = [[(180, 150, 160), (180, 150, 160)], [(180, 150, 160), (0, 0, 0)]]
        with self.assertRaises(EmptySkinSetError):
            self.service.analyze_pixels(pixels)

    def test_white_image_raises_empty_skin_set(self):
        pixels = np.full((2, 2, 3), 255, dtype=np.uint8)
        with self.assertRaises(EmptySkinSetError) as ctx:
            self.service.analyze_pixels(pixels)
        self.assertEqual(ctx.exception.total_pixel_count, 4)

    def test_gap_ratio_is_neutral(self):
        """(200,148,120): skin, R/G ~1.35 falls between cool and warm."""
        analysis = self.service.analyze_pixels([(200, 148, 120)])
        self.assertAlmostEqual(analysis.ratio, 200 / 148)
        self.assertEqual(analysis.undertone, Undertone.NEUTRAL)

    def test_ratio_above_warm_band_is_neutral(self):
        analysis = self.service.analyze_pixels([(200, 98, 85)])
        self.assertGreater(analysis.ratio, 2.0)
        self.assertEqual(analysis.undertone, Undertone.NEUTRAL)

    def test_alpha_channel_ignored(self):
        opaque = np.array([[200, 120, 90, 255], [190, 150, 120, 255], [10, 200, 30, 255]])
        clear = opaque.copy()
        clear[:, 3] = 0
        self.assertEqual(self.service.analyze_pixels(opaque), self.service.analyze_pixels(clear))
        self.assertEqual(self.service.analyze_pixels(opaque),
                         self.service.analyze_pixels(opaque[:, :3]))

    def test_float_pixels_with_whole_values_accepted(self):
        analysis = self.service.analyze_pixels(np.array([[200.0, 120.0, 90.0]]))
        self.assertEqual(analysis.undertone, Undertone.WARM)


class TestAccumulation(unittest.TestCase):

    def test_chunked_and_threaded_match_single_pass(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, size=(60, 45, 3), dtype=np.uint8)
        single = UndertoneService(chunk_size=10_000, workers=1).accumulate(pixels)
        chunked = UndertoneService(chunk_size=7, workers=1).accumulate(pixels)
        threaded = UndertoneService(chunk_size=7, workers=4).accumulate(pixels)
        self.assertGreater(single.count, 0)
        self.assertEqual(single, chunked)
        self.assertEqual(single, threaded)

    def test_validation_keeps_native_dtype(self):
        rgba = np.zeros((4, 5, 4), dtype=np.uint8)
        flat = UndertoneService.validate_pixels(rgba)
        self.assertEqual(flat.dtype, np.uint8)
        self.assertEqual(flat.shape, (20, 3))

    def test_uint8_sums_do_not_overflow(self):
        pixels = np.full((30, 10, 3), (200, 120, 90), dtype=np.uint8)
        acc = UndertoneService(chunk_size=64).accumulate(pixels)
        self.assertEqual(acc, PixelAccumulator(total_r=60000, total_g=36000, total_b=27000, count=300))

    def test_accumulator_counts_only_skin(self):
        acc = UndertoneService().accumulate([(200, 120, 90), (255, 255, 255), (200, 120, 90)])
        self.assertEqual(acc, PixelAccumulator(total_r=400, total_g=240, total_b=180, count=2))

    def test_merge(self):
        a = PixelAccumulator(1, 2, 3, 1)
        b = PixelAccumulator(10, 20, 30, 2)
        self.assertEqual(a.merge(b), PixelAccumulator(11, 22, 33, 3))
        self.assertTrue(PixelAccumulator().is_empty())
        self.assertEqual(a.merge(b).mean_rgb(), (11 / 3, 22 / 3, 11.0))

    def test_bad_settings(self):
        with self.assertRaises(ValueError):
            UndertoneService(chunk_size=0)
        with self.assertRaises(ValueError):
            UndertoneService(workers=0)


class TestInvalidInput(unittest.TestCase):

    def setUp(self):
        self.service = UndertoneService()

    def test_rejected_buffers(self):
        bad_inputs = {
            "empty": [],
            "empty array": np.zeros((0, 3), dtype=np.uint8),
            "two channels": [(1, 2), (3, 4)],
            "five channels": [(1, 2, 3, 4, 5)],
            "flat scalars": [1, 2, 3],
            "over 255": [(256, 0, 0)],
            "negative": [(-1, 0, 0)],
            "fractional": [(200.5, 120, 90)],
            "nan": [(float("nan"), 120, 90)],
            "ragged": [(1, 2, 3), (4, 5)],
            "strings": [("a", "b", "c")],
            "booleans": np.ones((2, 3), dtype=bool),
        }
        for name, pixels in bad_inputs.items():
            with self.subTest(name):
                with self.assertRaises(InvalidInputError):
                    self.service.analyze_pixels(pixels)

    def test_invalid_input_is_a_value_error(self):
        with self.assertRaises(ValueError):
            self.service.accumulate([])


if __name__ == "__main__":
    unittest.main()
