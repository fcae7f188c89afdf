import sys
import unittest
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from capacity_kiosk.chart_data import CELLS_DATA  # noqa: E402
from capacity_kiosk.metrics import MetricDisplay, cell_metrics, scaled_font_size  # noqa: E402
from capacity_kiosk.screens import KioskFlow, Screen  # noqa: E402


class KioskFlowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.transitions = []
        self.flow = KioskFlow(on_screen_change=lambda old, new: self.transitions.append((old, new)))

    def test_keys_ignored_until_analysis_complete(self) -> None:
        self.flow.handle_start()
        self.assertFalse(self.flow.handle_key("2"))
        self.assertIs(self.flow.screen, Screen.ANALYSIS)

        self.flow.handle_chart_complete()
        self.assertTrue(self.flow.handle_key("2"))
        self.assertIs(self.flow.screen, Screen.RESULTS)
        self.assertEqual(self.flow.selected_cell, 2)

    def test_keys_ignored_outside_analysis_screen(self) -> None:
        self.flow.handle_chart_complete()
        self.assertFalse(self.flow.handle_key("1"))
        self.assertIs(self.flow.screen, Screen.START)

    def test_invalid_keys_do_not_navigate(self) -> None:
        self.flow.handle_start()
        self.flow.handle_chart_complete()
        for key in ("0", "6", "x", "", None):
            self.assertFalse(self.flow.handle_key(key))
        self.assertIs(self.flow.screen, Screen.ANALYSIS)

    def test_back_to_start_clears_completion(self) -> None:
        self.flow.handle_start()
        self.flow.handle_chart_complete()
        self.flow.handle_key("5")
        self.flow.handle_back_to_start()

        self.assertIs(self.flow.screen, Screen.START)
        self.assertFalse(self.flow.analysis_complete)
        self.assertEqual(self.transitions, [
            (Screen.START, Screen.ANALYSIS),
            (Screen.ANALYSIS, Screen.RESULTS),
            (Screen.RESULTS, Screen.START),
        ])

    def test_start_resets_completion(self) -> None:
        self.flow.handle_chart_complete()
        self.flow.handle_start()
        self.assertFalse(self.flow.analysis_complete)

    def test_select_unknown_cell_raises(self) -> None:
        with self.assertRaises(ValueError):
            self.flow.select_cell(7)


class MetricFormattingTests(unittest.TestCase):
    def test_cell_one_headline_metrics(self) -> None:
        soh, rul, ocv = cell_metrics(CELLS_DATA[1])
        self.assertEqual(soh.value, "98.2%")
        self.assertEqual(soh.sub_value, "(±2%)")
        self.assertEqual(rul.value, "912")
        self.assertEqual(ocv.value, "3.5254V")
        self.assertIsNone(ocv.sub_value)

    def test_headline_labels_use_fixed_label_size(self) -> None:
        soh = cell_metrics(CELLS_DATA[2])[0]
        self.assertEqual(soh.label_font_size, 48)
        self.assertEqual(soh.value_font_size, 48)
        self.assertEqual(soh.sub_value_font_size, 24)

    def test_other_labels_scale_with_size(self) -> None:
        metric = MetricDisplay("Capacity:", "14.2Ah", "#000000", size="medium")
        self.assertFalse(metric.is_headline)
        self.assertEqual(metric.label_font_size, 24)
        self.assertEqual(scaled_font_size("xxlarge", "value", multiplier=0.5), 28)

    def test_unknown_size_raises(self) -> None:
        with self.assertRaises(ValueError):
            scaled_font_size("huge", "label")


if __name__ == "__main__":
    unittest.main()
