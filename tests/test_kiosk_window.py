import os
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace

os.environ.setdefault("MPLCONFIGDIR", "/tmp/mplconfig")

import matplotlib  # noqa: E402
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from capacity_kiosk.chart_data import voltage_time_series  # noqa: E402
from capacity_kiosk.dashboard.app import KioskWindow  # noqa: E402
from capacity_kiosk.frame_clock import ManualFrameClock, MatplotlibFrameClock  # noqa: E402
from capacity_kiosk.screens import Screen  # noqa: E402


def key(k):
    return SimpleNamespace(key=k)


class KioskWindowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.series = voltage_time_series(1)[:20]
        self.clock = ManualFrameClock()
        self.window = KioskWindow(
            self.series,
            preset="voltage-time",
            duration_ms=2000,
            initial_sample_count=5,
            clock=self.clock,
        )

    def tearDown(self) -> None:
        self.window.teardown()
        plt.close(self.window.fig)

    def test_full_flow_start_reveal_results_back(self) -> None:
        self.window._on_key(key("enter"))
        self.assertIs(self.window.flow.screen, Screen.ANALYSIS)
        self.assertEqual(len(self.window.line.get_xdata()), 5)

        self.window._on_key(key("1"))
        self.assertIs(self.window.flow.screen, Screen.ANALYSIS)

        self.clock.run(start_ms=0, interval_ms=50, max_frames=1000)
        self.assertTrue(self.window.flow.analysis_complete)
        self.assertEqual(len(self.window.line.get_xdata()), 20)
        self.assertIn("complete", self.window.status_text.get_text())

        self.window._on_key(key("3"))
        self.assertIs(self.window.flow.screen, Screen.RESULTS)
        self.assertEqual(self.window.flow.selected_cell, 3)
        self.assertIsNone(self.window.scheduler)

        self.window._on_key(key("b"))
        self.assertIs(self.window.flow.screen, Screen.START)

    def test_results_draw_sub_value_at_its_own_size(self) -> None:
        self.window.flow.handle_start()
        self.clock.run(start_ms=0, interval_ms=50, max_frames=1000)
        self.window.flow.handle_key("1")

        texts = {t.get_text(): t for t in self.window.fig.texts}
        self.assertIn("98.2%", texts)
        self.assertIn("(±2%)", texts)
        self.assertEqual(texts["98.2%"].get_fontsize(), 24)
        self.assertEqual(texts["(±2%)"].get_fontsize(), 12)

    def test_leaving_analysis_cancels_pending_frame(self) -> None:
        self.window.flow.handle_start()
        self.clock.tick(0)
        self.assertEqual(self.clock.pending_count, 1)

        self.window.teardown()
        self.assertEqual(self.clock.pending_count, 0)
        self.assertIsNone(self.window.scheduler)

    def test_reentering_analysis_starts_a_fresh_run(self) -> None:
        self.window.flow.handle_start()
        self.clock.run(start_ms=0, interval_ms=50, max_frames=1000)
        first = self.window.scheduler
        self.window.flow.handle_key("2")
        self.window.flow.handle_back_to_start()

        self.window.flow.handle_start()
        second = self.window.scheduler
        self.assertIsNot(first, second)
        self.assertFalse(second.state.completion_signaled)
        self.assertFalse(self.window.flow.analysis_complete)


class MatplotlibFrameClockTests(unittest.TestCase):
    def test_cancel_removes_timer(self) -> None:
        fig = plt.figure()
        self.addCleanup(plt.close, fig)
        clock = MatplotlibFrameClock(fig.canvas, interval_ms=16)
        fired = []

        handle = clock.request_frame(fired.append)
        clock.request_frame(fired.append)
        clock.cancel_frame(handle)
        clock._fire(handle, fired.append)
        self.assertEqual(fired, [])

        clock.cancel_all()
        self.assertEqual(clock._timers, {})

    def test_fire_passes_millisecond_timestamp(self) -> None:
        fig = plt.figure()
        self.addCleanup(plt.close, fig)
        clock = MatplotlibFrameClock(fig.canvas)
        fired = []

        handle = clock.request_frame(fired.append)
        clock._fire(handle, fired.append)
        self.assertEqual(len(fired), 1)
        self.assertGreater(fired[0], 0)


if __name__ == "__main__":
    unittest.main()
