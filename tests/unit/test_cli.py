import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "tools"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "detector"))

from colorvision_app.cli import build_parser
from colorvision_detector import Viewport


class CliTests(unittest.TestCase):
    def test_analyze_command(self):
        parser = build_parser()
        args = parser.parse_args(["analyze", "--input", "frame.nv21", "--width", "640", "--height", "360", "--viewport", "300,160,340,200"])
        self.assertEqual(args.command, "analyze")
        self.assertEqual(args.input, "frame.nv21")
        self.assertEqual(args.viewport, Viewport(300, 160, 340, 200))

    def test_name_command(self):
        parser = build_parser()
        args = parser.parse_args(["name", "128", "0", "255"])
        self.assertEqual(args.command, "name")
        self.assertEqual((args.red, args.green, args.blue), (128, 0, 255))

    def test_pattern_command(self):
        parser = build_parser()
        args = parser.parse_args(["sample-pattern", "--pattern", "quadrants"])
        self.assertEqual(args.command, "sample-pattern")
        self.assertEqual(args.pattern, "quadrants")
        self.assertIsNone(args.viewport)

    def test_bad_viewport_rejected(self):
        parser = build_parser()
        with self.assertRaises(SystemExit):
            parser.parse_args(["sample-pattern", "--viewport", "1,2,3"])

    def test_benchmark_and_doctor_commands(self):
        parser = build_parser()
        self.assertEqual(parser.parse_args(["benchmark", "--seconds", "2"]).seconds, 2)
        self.assertEqual(parser.parse_args(["doctor"]).command, "doctor")
        self.assertEqual(parser.parse_args(["palette", "--search", "blue"]).search, "blue")


if __name__ == "__main__":
    unittest.main()
