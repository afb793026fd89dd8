from __future__ import annotations

import unittest

from transformtoy_core.core.colors import fade_alpha, format_color, is_valid_color, parse_color


class ColorGrammarTests(unittest.TestCase):
    def test_named_colors(self) -> None:
        self.assertEqual(parse_color("red"), (255, 0, 0, 255))
        self.assertEqual(parse_color("  RebeccaPurple "), (102, 51, 153, 255))
        self.assertEqual(parse_color("transparent"), (0, 0, 0, 0))

    def test_hex_forms(self) -> None:
        self.assertEqual(parse_color("#f00"), (255, 0, 0, 255))
        self.assertEqual(parse_color("#00FF00"), (0, 255, 0, 255))
        self.assertEqual(parse_color("#0000ff80"), (0, 0, 255, 128))

    def test_functional_forms(self) -> None:
        self.assertEqual(parse_color("rgb(1, 2, 3)"), (1, 2, 3, 255))
        self.assertEqual(parse_color("rgba(10,20,30,0.5)"), (10, 20, 30, 128))
        self.assertEqual(parse_color("rgb(300,0,0)"), (255, 0, 0, 255))

    def test_rgba_alpha_forms(self) -> None:
        self.assertEqual(parse_color("rgba(0,0,0,1.)"), (0, 0, 0, 255))
        self.assertEqual(parse_color("rgba(0,0,0,.5)"), (0, 0, 0, 128))
        self.assertEqual(parse_color("rgba(0,0,0,1)"), (0, 0, 0, 255))
        self.assertFalse(is_valid_color("rgba(0,0,0,.)"))
        self.assertFalse(is_valid_color("rgba(0,0,0,1.2.3)"))

    def test_rejects_garbage(self) -> None:
        for bad in ("", "notacolor", "#12", "rgb(1,2)", "#gggggg"):
            with self.subTest(bad=bad):
                self.assertFalse(is_valid_color(bad))
                with self.assertRaises(ValueError):
                    parse_color(bad)
        self.assertFalse(is_valid_color(42))

    def test_fade_alpha_endpoints(self) -> None:
        self.assertEqual(fade_alpha((255, 0, 0, 200), 0.0), (255, 0, 0, 0))
        self.assertEqual(fade_alpha((255, 0, 0, 200), 1.0), (255, 0, 0, 200))
        self.assertEqual(fade_alpha((255, 0, 0, 200), 0.5), (255, 0, 0, 100))

    def test_format_color(self) -> None:
        self.assertEqual(format_color((1, 2, 3, 255)), "rgb(1, 2, 3)")
        self.assertEqual(format_color((1, 2, 3, 0)), "rgba(1, 2, 3, 0)")


if __name__ == "__main__":
    unittest.main()
