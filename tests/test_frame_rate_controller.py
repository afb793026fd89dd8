from __future__ import annotations

import unittest

from transformtoy_core.core.frame_rate_controller import FrameRateController, run_playback
from transformtoy_core.core.scheduler import PlaybackScheduler


class FrameRateControllerTests(unittest.TestCase):
    def test_rejects_invalid_target_fps(self) -> None:
        with self.assertRaises(ValueError):
            FrameRateController(target_fps=0)

    def test_rejects_invalid_present_fps(self) -> None:
        with self.assertRaises(ValueError):
            FrameRateController(target_fps=60, present_fps=0)

    def test_present_fps_is_clamped_to_target_fps(self) -> None:
        rate = FrameRateController(target_fps=60, present_fps=240)
        self.assertEqual(rate.present_fps, 60)

    def test_frame_times_follow_target_fps(self) -> None:
        rate = FrameRateController(target_fps=100)
        times = rate.frame_times(start_ms=50.0)
        self.assertEqual([next(times) for _ in range(3)], [50.0, 60.0, 70.0])

    def test_should_present_tracks_cadence(self) -> None:
        rate = FrameRateController(target_fps=100, present_fps=25)
        presented = sum(1 for i in range(100) if rate.should_present(i * rate.frame_ms))
        self.assertEqual(presented, 25)

    def test_should_present_recovers_after_stall(self) -> None:
        rate = FrameRateController(target_fps=60, present_fps=20)
        self.assertTrue(rate.should_present(0.0))
        self.assertTrue(rate.should_present(1000.0))
        self.assertFalse(rate.should_present(1000.0))


class RunPlaybackTests(unittest.TestCase):
    def test_runs_until_scheduler_is_idle(self) -> None:
        values: list[float] = []
        scheduler = PlaybackScheduler(values.append, minimum=0.0, maximum=1.0)
        scheduler.animate_to(1.0, 100.0)
        presented: list[tuple[int, float, float]] = []
        ticks = run_playback(
            scheduler,
            FrameRateController(target_fps=100, present_fps=50),
            on_present=lambda frame, now, value: presented.append((frame, now, value)),
        )
        self.assertEqual(ticks, 11)
        self.assertEqual(len(values), 11)
        self.assertEqual(values[-1], 1.0)
        self.assertEqual([p[1] for p in presented], [0.0, 20.0, 40.0, 60.0, 80.0, 100.0])
        self.assertEqual(presented[-1][0], 5)

    def test_frame_limit_cancels_playback(self) -> None:
        scheduler = PlaybackScheduler(minimum=0.0, maximum=10.0)
        scheduler.animate_to(10.0, 10_000.0)
        with self.assertLogs("transformtoy_core.core.frame_rate_controller", level="WARNING"):
            ticks = run_playback(scheduler, FrameRateController(target_fps=60), max_frames=5)
        self.assertEqual(ticks, 5)
        self.assertFalse(scheduler.is_animating)

    def test_idle_scheduler_stops_after_one_tick(self) -> None:
        scheduler = PlaybackScheduler(minimum=0.0, maximum=1.0)
        self.assertEqual(run_playback(scheduler, FrameRateController()), 1)


if __name__ == "__main__":
    unittest.main()
