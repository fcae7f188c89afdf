import io
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from capacity_kiosk.chart_data import make_series  # noqa: E402
from capacity_kiosk.frame_clock import ManualFrameClock  # noqa: E402
from capacity_kiosk.main import main, run_headless  # noqa: E402


class HeadlessRunTests(unittest.TestCase):
    def test_zero_duration_completes_on_first_frame(self) -> None:
        series = make_series(range(30), range(30))
        out = io.StringIO()
        with redirect_stdout(out):
            sched = run_headless(series, 0, 5, frame_ms=1)

        self.assertTrue(sched.is_complete)
        self.assertEqual(sched.visible_prefix, series)
        self.assertFalse(sched.is_scheduled)

    def test_cli_headless_with_csv_sweep(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "sweep.csv"
            path.write_text("voltage_v,current_a\n3.3,0.2\n3.1,0.1\n3.2,0.15\n",
                            encoding="utf-8")
            out = io.StringIO()
            with redirect_stdout(out):
                main(["--series", "current-voltage", "--csv", str(path),
                      "--headless", "--duration", "0", "--frame-ms", "1"])

        text = out.getvalue()
        self.assertIn("Loaded 3 points", text)
        self.assertIn("Current vs Voltage Analysis", text)
        self.assertIn("Analysis complete", text)


class CliErrorTests(unittest.TestCase):
    def _exit_code(self, argv):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            main(argv)
        return ctx.exception.code, out.getvalue()

    def test_current_voltage_requires_csv(self) -> None:
        code, text = self._exit_code(["--series", "current-voltage", "--headless"])
        self.assertEqual(code, 1)
        self.assertIn("ERROR:", text)

    def test_non_finite_duration_is_rejected(self) -> None:
        for value in ("nan", "inf"):
            code, text = self._exit_code(["--headless", "--duration", value])
            self.assertEqual(code, 1)
            self.assertIn("--duration must be a finite number", text)

    def test_missing_csv_file(self) -> None:
        code, text = self._exit_code(["--csv", "/nonexistent/sweep.csv", "--headless"])
        self.assertEqual(code, 1)
        self.assertIn("CSV file not found", text)

    def test_empty_csv_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.csv"
            path.write_text("voltage_v,current_a\n", encoding="utf-8")
            code, text = self._exit_code(["--csv", str(path), "--headless"])
        self.assertEqual(code, 1)
        self.assertIn("contains no rows", text)


class ManualFrameClockTests(unittest.TestCase):
    def test_callbacks_requested_during_tick_wait_for_next_tick(self) -> None:
        clock = ManualFrameClock()
        seen = []

        def first(ts):
            seen.append(("first", ts))
            clock.request_frame(lambda t: seen.append(("second", t)))

        clock.request_frame(first)
        self.assertEqual(clock.tick(10), 1)
        self.assertEqual(seen, [("first", 10)])
        self.assertEqual(clock.tick(20), 1)
        self.assertEqual(seen, [("first", 10), ("second", 20)])
        self.assertEqual(clock.frames_delivered, 2)

    def test_cancel_frame(self) -> None:
        clock = ManualFrameClock()
        seen = []
        handle = clock.request_frame(seen.append)
        clock.cancel_frame(handle)
        clock.cancel_frame(handle)
        self.assertEqual(clock.tick(0), 0)
        self.assertEqual(seen, [])


if __name__ == "__main__":
    unittest.main()
