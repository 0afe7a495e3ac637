import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "detector"))

from colorvision_detector.errors import InvalidInput, NotInitialized
from colorvision_detector.palette import Palette
from colorvision_detector.resolver import ColorNameResolver


def _small_palette():
    return Palette.from_records(
        [
            {"name": "Black", "hex": "#000000"},
            {"name": "Gray", "hex": "#808080"},
            {"name": "White", "hex": "#ffffff"},
            {"name": "Red", "hex": "#ff0000"},
            {"name": "Scarlet", "hex": "#ff0000"},
            {"name": "Blue", "hex": "#0000ff"},
        ]
    )


class ResolverTests(unittest.TestCase):
    def test_resolve_before_initialize(self):
        resolver = ColorNameResolver()
        self.assertFalse(resolver.is_initialized)
        with self.assertRaises(NotInitialized):
            resolver.resolve(10, 20, 30)
        with self.assertRaises(NotInitialized):
            resolver.nearest(10, 20, 30)

    def test_exact_match_has_zero_distance(self):
        resolver = ColorNameResolver()
        self.assertTrue(resolver.initialize(_small_palette()))
        match = resolver.nearest(128, 128, 128)
        self.assertEqual(match.name, "Gray")
        self.assertEqual(match.distance, 0)
        self.assertEqual(resolver.resolve(0, 0, 255), "Blue")

    def test_nearest_by_squared_distance(self):
        resolver = ColorNameResolver()
        resolver.initialize(_small_palette())
        match = resolver.nearest(100, 90, 110)
        self.assertEqual(match.name, "Gray")
        self.assertEqual(match.distance, 28 ** 2 + 38 ** 2 + 18 ** 2)

    def test_tie_goes_to_first_entry(self):
        resolver = ColorNameResolver()
        resolver.initialize(_small_palette())
        self.assertEqual(resolver.resolve(255, 0, 0), "Red")
        self.assertEqual(resolver.nearest(250, 5, 5).index, 3)

    def test_equidistant_entries_resolve_to_earlier_one(self):
        palette = Palette.from_records(
            [
                {"name": "Low", "r": 10, "g": 0, "b": 0},
                {"name": "High", "r": 30, "g": 0, "b": 0},
            ]
        )
        resolver = ColorNameResolver()
        resolver.initialize(palette)
        self.assertEqual(resolver.resolve(20, 0, 0), "Low")

    def test_cache_matches_full_scan(self):
        cached = ColorNameResolver()
        uncached = ColorNameResolver(cache_enabled=False)
        cached.initialize()
        uncached.initialize()
        samples = [(r, g, b) for r in range(0, 256, 51) for g in range(0, 256, 85) for b in range(0, 256, 127)]
        for triple in samples:
            first = cached.resolve(*triple)
            self.assertEqual(first, cached.resolve(*triple))
            self.assertEqual(first, uncached.resolve(*triple))
            self.assertEqual(first, cached.nearest(*triple).name)
        info = cached.cache_info()
        self.assertEqual(info.misses, len(samples))
        self.assertEqual(info.hits, len(samples))
        self.assertEqual(uncached.cache_info().size, 0)

    def test_cache_cleared_when_full(self):
        resolver = ColorNameResolver(cache_max_entries=2)
        resolver.initialize(_small_palette())
        resolver.resolve(1, 1, 1)
        resolver.resolve(2, 2, 2)
        self.assertEqual(resolver.cache_info().size, 2)
        resolver.resolve(3, 3, 3)
        self.assertEqual(resolver.cache_info().size, 1)
        self.assertEqual(resolver.resolve(1, 1, 1), "Black")

    def test_clear_cache_resets_counters(self):
        resolver = ColorNameResolver()
        resolver.clear_cache()
        resolver.initialize(_small_palette())
        resolver.resolve(1, 1, 1)
        resolver.resolve(1, 1, 1)
        resolver.resolve(250, 250, 250)
        info = resolver.cache_info()
        self.assertEqual((info.hits, info.misses, info.size), (1, 2, 2))

        resolver.clear_cache()
        info = resolver.cache_info()
        self.assertEqual((info.hits, info.misses, info.size), (0, 0, 0))
        self.assertEqual(resolver.resolve(1, 1, 1), "Black")
        self.assertEqual(resolver.cache_info().misses, 1)

    def test_reinitialize_drops_cached_names(self):
        resolver = ColorNameResolver()
        resolver.initialize(_small_palette())
        self.assertEqual(resolver.resolve(250, 250, 250), "White")
        resolver.initialize(Palette.from_records([{"name": "Only", "hex": "#123456"}]))
        self.assertEqual(resolver.resolve(250, 250, 250), "Only")

    def test_channels_validated(self):
        resolver = ColorNameResolver()
        resolver.initialize(_small_palette())
        with self.assertRaises(InvalidInput):
            resolver.resolve(256, 0, 0)
        with self.assertRaises(InvalidInput):
            resolver.resolve(-1, 0, 0)
        with self.assertRaises(InvalidInput):
            resolver.resolve(1.5, 0, 0)

    def test_missing_palette_file_leaves_resolver_not_ready(self):
        resolver = ColorNameResolver(palette_path=ROOT / "tests" / "no-such-palette.json")
        with self.assertLogs("colorvision.detector.resolver", level="WARNING"):
            self.assertFalse(resolver.initialize())
        self.assertFalse(resolver.is_initialized)
        with self.assertRaises(NotInitialized):
            resolver.resolve(0, 0, 0)

    def test_name_color_attaches_name(self):
        from colorvision_detector.models import RGBColor

        resolver = ColorNameResolver()
        resolver.initialize()
        named = resolver.name_color(RGBColor.rgb(128, 128, 128))
        self.assertEqual(named.name, "Gray")
        self.assertEqual(named.hex_code, "#ff808080")


if __name__ == "__main__":
    unittest.main()
