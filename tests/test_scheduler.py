from __future__ import annotations

import unittest

from transformtoy_core.core.scheduler import Animating, Easing, Idle, PlaybackScheduler, ease


def _scheduler(values: list[float], maximum: float = 3.0, **kwargs) -> PlaybackScheduler:
    return PlaybackScheduler(values.append, minimum=0.0, maximum=maximum, **kwargs)


class EasingTests(unittest.TestCase):
    def test_linear(self) -> None:
        self.assertEqual(ease(Easing.LINEAR, 0.3), 0.3)

    def test_cubic_in_out(self) -> None:
        self.assertAlmostEqual(ease(Easing.CUBIC_IN_OUT, 0.25), 0.0625)
        self.assertAlmostEqual(ease(Easing.CUBIC_IN_OUT, 0.5), 0.5)
        self.assertAlmostEqual(ease(Easing.CUBIC_IN_OUT, 0.75), 0.9375)
        self.assertEqual(ease(Easing.CUBIC_IN_OUT, 1.0), 1.0)


class PlaybackSchedulerTests(unittest.TestCase):
    def test_scenario_d_linear_then_cancel(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.animate_to(3.0, 1000.0, "linear")
        self.assertTrue(s.tick(0.0))
        self.assertTrue(s.tick(500.0))
        self.assertAlmostEqual(s.value, 1.5)
        s.cancel()
        rendered = len(values)
        self.assertFalse(s.tick(600.0))
        self.assertEqual(len(values), rendered)
        self.assertEqual(s.value, values[-1])
        self.assertIsInstance(s.state, Idle)
        s.cancel()

    def test_animation_finishes_on_target(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.animate_to(3.0, 1000.0)
        s.tick(0.0)
        self.assertFalse(s.tick(1200.0))
        self.assertEqual(s.value, 3.0)
        self.assertFalse(s.is_animating)

    def test_start_time_can_be_given(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.animate_to(2.0, 1000.0, Easing.LINEAR, now_ms=1000.0)
        s.tick(1500.0)
        self.assertAlmostEqual(s.value, 1.0)

    def test_cubic_in_out_animation(self) -> None:
        values: list[float] = []
        s = _scheduler(values, maximum=1.0)
        s.animate_to(1.0, 1000.0, Easing.CUBIC_IN_OUT, now_ms=0.0)
        s.tick(250.0)
        self.assertAlmostEqual(s.value, 0.0625)

    def test_constant_speed_scales_duration_by_distance(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.set_value(1.0)
        s.animate_to(3.0, 100.0, Easing.CONSTANT_SPEED, now_ms=0.0)
        state = s.state
        assert isinstance(state, Animating)
        self.assertEqual(state.duration_ms, 200.0)
        self.assertEqual(state.easing, Easing.LINEAR)
        s.tick(100.0)
        self.assertAlmostEqual(s.value, 2.0)

    def test_instant_cases_behave_like_set_value(self) -> None:
        for duration, easing in ((0.0, Easing.LINEAR), (-5.0, Easing.LINEAR), (float("nan"), Easing.LINEAR), (500.0, Easing.NONE)):
            with self.subTest(duration=duration, easing=easing):
                values: list[float] = []
                s = _scheduler(values)
                s.animate_to(2.0, duration, easing)
                self.assertEqual(values, [2.0])
                self.assertFalse(s.is_animating)

    def test_new_animation_replaces_running_one(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.animate_to(3.0, 1000.0, now_ms=0.0)
        s.tick(500.0)
        s.animate_to(0.0, 1000.0, now_ms=500.0)
        s.tick(1000.0)
        self.assertAlmostEqual(s.value, 0.75)

    def test_set_value_cancels_and_clamps(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.animate_to(3.0, 1000.0)
        s.set_value(10.0)
        self.assertEqual(values, [3.0])
        self.assertFalse(s.tick(100.0))

    def test_render_error_leaves_scheduler_idle(self) -> None:
        rendered: list[float] = []

        def on_value(value: float) -> None:
            if value > 1.0:
                raise RuntimeError("render failed")
            rendered.append(value)

        s = PlaybackScheduler(on_value, minimum=0.0, maximum=3.0)
        s.animate_to(3.0, 1000.0)
        s.tick(0.0)
        with self.assertRaises(RuntimeError):
            s.tick(500.0)
        self.assertFalse(s.is_animating)
        self.assertEqual(s.value, 0.0)
        s.set_value(0.5)
        self.assertEqual(rendered, [0.0, 0.5])

    def test_play_runs_to_the_end_at_constant_speed(self) -> None:
        values: list[float] = []
        s = _scheduler(values, animation_duration_ms=1000.0)
        s.play(now_ms=0.0)
        s.tick(1500.0)
        self.assertAlmostEqual(s.value, 1.5)
        s.pause()
        self.assertFalse(s.is_animating)

    def test_play_restarts_from_the_far_end(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.last()
        s.play(now_ms=0.0)
        self.assertEqual(s.value, 0.0)
        self.assertTrue(s.is_animating)

    def test_play_backward_right_to_left(self) -> None:
        values: list[float] = []
        s = _scheduler(values, reverse_right_to_left=True)
        s.play(backward=True, now_ms=0.0)
        self.assertEqual(s.value, 3.0)
        state = s.state
        assert isinstance(state, Animating)
        self.assertEqual(state.target, 0.0)

        left_to_right = _scheduler([])
        left_to_right.play(backward=True, now_ms=0.0)
        state = left_to_right.state
        assert isinstance(state, Animating)
        self.assertEqual(state.target, 3.0)

    def test_step_forward_and_backward(self) -> None:
        values: list[float] = []
        s = _scheduler(values, step_duration_ms=100.0)
        cases = (
            (0.0, "forward", 1.0),
            (1.4, "forward", 2.0),
            (0.9995, "forward", 2.0),
            (3.0, "forward", 3.0),
            (1.4, "backward", 1.0),
            (2.0, "backward", 1.0),
            (0.0, "backward", 0.0),
        )
        for start, direction, expected in cases:
            with self.subTest(start=start, direction=direction):
                s.set_value(start)
                if direction == "forward":
                    s.step_forward(now_ms=0.0)
                else:
                    s.step_backward(now_ms=0.0)
                s.tick(100.0)
                self.assertAlmostEqual(s.value, expected)

    def test_first_and_last(self) -> None:
        values: list[float] = []
        s = _scheduler(values)
        s.last()
        s.first()
        self.assertEqual(values, [3.0, 0.0])

    def test_rejects_inverted_range(self) -> None:
        with self.assertRaises(ValueError):
            PlaybackScheduler(minimum=2.0, maximum=1.0)

    def test_values_snap_to_step_size(self) -> None:
        values: list[float] = []
        s = _scheduler(values, step_size=0.25)
        s.set_value(1.1)
        self.assertEqual(s.value, 1.0)
        s.animate_to(2.0, 1000.0, now_ms=0.0)
        s.tick(300.0)
        self.assertEqual(s.value, 1.25)
        s.tick(1000.0)
        self.assertEqual(values, [1.0, 1.25, 2.0])

    def test_step_size_keeps_the_range(self) -> None:
        s = PlaybackScheduler(minimum=0.0, maximum=1.0, step_size=0.3)
        s.set_value(1.0)
        self.assertEqual(s.value, 1.0)
        s.set_value(0.95)
        self.assertEqual(s.value, 0.9)

    def test_rejects_non_positive_step_size(self) -> None:
        for step in (0.0, -0.1, float("nan")):
            with self.subTest(step=step):
                with self.assertRaises(ValueError):
                    PlaybackScheduler(step_size=step)


if __name__ == "__main__":
    unittest.main()
