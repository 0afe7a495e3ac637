import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "detector"))

from colorvision_detector.errors import InvalidInput
from colorvision_detector.models import FrameBuffer, RGBColor, Viewport


class RGBColorTests(unittest.TestCase):
    def test_pixel_round_trip(self):
        color = RGBColor(0x12, 0x34, 0x56, 0x78)
        self.assertEqual(color.pixel, 0x12345678)
        unpacked = RGBColor.from_pixel(color.pixel)
        self.assertEqual(
            (unpacked.alpha, unpacked.red, unpacked.green, unpacked.blue),
            (0x12, 0x34, 0x56, 0x78),
        )

    def test_channels_are_clamped(self):
        color = RGBColor(300, -5, 256, 128)
        self.assertEqual((color.alpha, color.red, color.green, color.blue), (255, 0, 255, 128))

    def test_hex_formats(self):
        gray = RGBColor.rgb(128, 128, 128)
        self.assertEqual(gray.hex_code, "#ff808080")
        self.assertEqual(gray.rgb_hex, "#808080")
        self.assertEqual(RGBColor.rgb(171, 205, 239).display_hex, "#ABCDEF")

    def test_from_hex(self):
        self.assertEqual(RGBColor.from_hex("#ff8000").as_tuple(), (255, 128, 0))
        self.assertEqual(RGBColor.from_hex("80102030").alpha, 0x80)
        with self.assertRaises(InvalidInput):
            RGBColor.from_hex("#12345")

    def test_name_is_not_part_of_equality(self):
        plain = RGBColor.rgb(1, 2, 3)
        named = plain.with_name("Almost Black")
        self.assertEqual(plain, named)
        self.assertEqual(named.name, "Almost Black")
        self.assertIsNone(plain.name)


class ViewportTests(unittest.TestCase):
    def test_degenerate_viewport_rejected(self):
        with self.assertRaises(InvalidInput):
            Viewport(2, 2, 2, 4).validate(8, 8)

    def test_out_of_bounds_viewport_rejected(self):
        with self.assertRaises(InvalidInput):
            Viewport(0, 0, 9, 4).validate(8, 8)
        with self.assertRaises(InvalidInput):
            Viewport(-1, 0, 4, 4).validate(8, 8)

    def test_full_frame_viewport_is_valid(self):
        Viewport.full(8, 8).validate(8, 8)

    def test_centered_viewport(self):
        vp = Viewport.centered(640, 360, 40, 40)
        self.assertEqual(vp, Viewport(300, 160, 340, 200))
        self.assertEqual(vp.area, 1600)

    def test_centered_viewport_is_clipped(self):
        vp = Viewport.centered(8, 8, 20, 20)
        self.assertEqual(vp, Viewport(0, 0, 8, 8))

    def test_centered_single_pixel_viewport(self):
        vp = Viewport.centered(640, 360, 1, 1)
        self.assertEqual(vp, Viewport(320, 180, 321, 181))
        self.assertEqual(vp.area, 1)
        vp.validate(640, 360)

    def test_centered_odd_viewport_keeps_requested_size(self):
        vp = Viewport.centered(640, 360, 5, 5)
        self.assertEqual(vp, Viewport(318, 178, 323, 183))
        self.assertEqual((vp.width, vp.height), (5, 5))


class FrameBufferTests(unittest.TestCase):
    def test_expected_size(self):
        frame = FrameBuffer(width=4, height=2, data=bytes(12))
        self.assertEqual(frame.expected_size, 12)
        frame.validate()

    def test_odd_dimensions_rejected(self):
        with self.assertRaises(InvalidInput):
            FrameBuffer(width=3, height=2, data=bytes(100)).validate()

    def test_non_positive_dimensions_rejected(self):
        with self.assertRaises(InvalidInput):
            FrameBuffer(width=0, height=2, data=bytes(100)).validate()

    def test_unknown_format_rejected(self):
        with self.assertRaises(InvalidInput):
            FrameBuffer(width=4, height=2, data=bytes(12), pixel_format="YV12").validate()


if __name__ == "__main__":
    unittest.main()
