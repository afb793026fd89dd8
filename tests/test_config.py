from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from transformtoy_core.core.config import DEFAULT_CONFIG, load_config, validate_config


class ToyConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = validate_config()
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertEqual(config.canvas_size, 600)
        self.assertEqual(config.canvas_scale, 4.0)
        self.assertFalse(config.reverse_right_to_left)
        self.assertEqual(config.forward_current_frame_color, "#7F0000")

    def test_partial_override(self) -> None:
        config = validate_config({"reverse_right_to_left": True, "animation_duration_ms": 500})
        self.assertTrue(config.reverse_right_to_left)
        self.assertEqual(config.animation_duration_ms, 500.0)
        self.assertIsInstance(config.animation_duration_ms, float)
        self.assertEqual(config.step_duration_ms, DEFAULT_CONFIG.step_duration_ms)

    def test_rejects_unknown_key(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown config key"):
            validate_config({"nope": 1})

    def test_rejects_bad_values(self) -> None:
        cases = (
            ({"canvas_size": 0}, "positive integer"),
            ({"canvas_size": 10.5}, "positive integer"),
            ({"canvas_scale": -1}, "positive number"),
            ({"play_step_size": True}, "positive number"),
            ({"show_origin_frame": "yes"}, "boolean"),
            ({"default_fill": "not-a-color"}, "color"),
        )
        for overrides, message in cases:
            with self.subTest(overrides=overrides):
                with self.assertRaisesRegex(ValueError, message):
                    validate_config(overrides)

    def test_load_config_from_table(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "toy.toml"
            path.write_text(
                '[transformtoy]\ncanvas_size = 300\ndefault_fill = "rgb(0, 128, 0)"\nreverse_right_to_left = true\n',
                encoding="utf-8",
            )
            config = load_config(path)
        self.assertEqual(config.canvas_size, 300)
        self.assertEqual(config.default_fill, "rgb(0, 128, 0)")
        self.assertTrue(config.reverse_right_to_left)

    def test_load_config_top_level_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "toy.toml"
            path.write_text("canvas_scale = 2.5\n", encoding="utf-8")
            self.assertEqual(load_config(path).canvas_scale, 2.5)

    def test_load_config_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(Path(tempfile.gettempdir()) / "does-not-exist-transformtoy.toml")


if __name__ == "__main__":
    unittest.main()
