"""
Cell Capacity Kiosk — Window
============================
A single matplotlib figure that hosts the three kiosk screens:

  1. Start:     title and an ANALYSE button (click, Enter or "a")
  2. Analysis:  progressive reveal of the measurement series
  3. Results:   SoH / RUL / OCV headline metrics, Nyquist and Bode plots

Keys:
  Enter / a     start the analysis from the start screen
  1-5           open the results for a cell (after the reveal finishes)
  b / Escape    back to start from the results screen
"""

import os
import sys

import matplotlib
if sys.platform != "darwin" and sys.platform != "win32" and not os.environ.get("DISPLAY"):
    # Allow non-interactive environments (CI/headless) to import this module.
    matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from capacity_kiosk.chart_data import axis_limits, cell_result
from capacity_kiosk.config import (
    BG_COLOR, FRAME_INTERVAL_MS, GRID_COLOR, INITIAL_SAMPLE_COUNT,
    LINE_COLOR, MUTED_TEXT_COLOR, PANEL_COLOR, RUL_COLOR, SERIES_PRESETS,
    START_BUTTON_COLOR, TEXT_COLOR,
)
from capacity_kiosk.frame_clock import MatplotlibFrameClock
from capacity_kiosk.metrics import cell_metrics
from capacity_kiosk.reveal import RevealScheduler
from capacity_kiosk.screens import KioskFlow, Screen


class KioskWindow:
    """Matplotlib host for the kiosk screens and the analysis reveal.

    Args:
        series: Ordered samples revealed on the analysis screen.
        preset: Key into SERIES_PRESETS (titles, padding, duration).
        duration_ms: Reveal duration; defaults to the preset's.
        initial_sample_count: Samples shown before the animation begins.
        clock: Frame clock; defaults to canvas timers on this figure.
        verbose: Print reveal progress and screen transitions.
    """

    def __init__(
        self,
        series,
        preset: str = "voltage-time",
        duration_ms=None,
        initial_sample_count: int = INITIAL_SAMPLE_COUNT,
        clock=None,
        frame_interval_ms: int = FRAME_INTERVAL_MS,
        verbose: bool = False,
    ):
        self.series = tuple(series)
        self.preset = SERIES_PRESETS[preset]
        self.duration_ms = duration_ms if duration_ms is not None else self.preset["duration_ms"]
        self.initial_sample_count = initial_sample_count
        self.verbose = verbose

        self.fig = plt.figure(figsize=(14, 9), facecolor=BG_COLOR)
        self.clock = clock or MatplotlibFrameClock(self.fig.canvas, frame_interval_ms)
        self.flow = KioskFlow(on_screen_change=self._on_screen_change, verbose=verbose)
        self.scheduler = None
        self.line = None
        self.status_text = None
        self._start_button = None

        self.fig.canvas.mpl_connect("key_press_event", self._on_key)
        self.fig.canvas.mpl_connect("button_press_event", self._on_click)
        self.fig.canvas.mpl_connect("close_event", self._on_close)

        self._draw_start()

    # -- event handlers -----------------------------------------------------

    def _on_key(self, event):
        key = (event.key or "").lower()
        if self.flow.screen is Screen.START and key in ("enter", "a"):
            self.flow.handle_start()
        elif self.flow.screen is Screen.RESULTS and key in ("b", "escape"):
            self.flow.handle_back_to_start()
        else:
            self.flow.handle_key(key)

    def _on_click(self, event):
        if self.flow.screen is Screen.START and event.inaxes is self._start_button:
            self.flow.handle_start()

    def _on_close(self, event):
        self.teardown()

    def _on_screen_change(self, old, new):
        if old is Screen.ANALYSIS:
            self._stop_reveal()
        if new is Screen.START:
            self._draw_start()
        elif new is Screen.ANALYSIS:
            self._draw_analysis()
        elif new is Screen.RESULTS:
            self._draw_results(self.flow.selected_cell)
        self.fig.canvas.draw_idle()

    def _on_reveal(self, prefix):
        self.line.set_data([s.x for s in prefix], [s.y for s in prefix])
        if self.scheduler is not None and not self.scheduler.is_complete:
            self.status_text.set_text(f"Analysing... {round(self.scheduler.progress * 100)}%")

    def _on_complete(self):
        self.status_text.set_text("Analysis complete. Press 1-5 to view cell results")
        self.status_text.set_color(RUL_COLOR)
        self.flow.handle_chart_complete()

    # -- lifecycle ----------------------------------------------------------

    def _stop_reveal(self):
        if self.scheduler is not None:
            self.scheduler.stop()
            self.scheduler = None

    def teardown(self):
        """Stop the reveal and drop any pending frame timers."""
        self._stop_reveal()
        if isinstance(self.clock, MatplotlibFrameClock):
            self.clock.cancel_all()

    def run(self):
        """Show the kiosk window (blocks until closed)."""
        plt.show()

    # -- screens ------------------------------------------------------------

    def _reset_figure(self):
        self.fig.clear()
        self.fig.set_facecolor(BG_COLOR)
        self.line = None
        self.status_text = None
        self._start_button = None

    def _style_axes(self, ax):
        ax.set_facecolor(PANEL_COLOR)
        ax.tick_params(colors=TEXT_COLOR, labelsize=10)
        ax.grid(True, alpha=0.3, color=GRID_COLOR, linestyle="--")
        for spine in ax.spines.values():
            spine.set_color(GRID_COLOR)

    def _draw_start(self):
        self._reset_figure()
        self.fig.text(0.5, 0.85, "Real Time Cell Capacity Estimation",
                      ha="center", fontsize=28, fontweight="bold", color=TEXT_COLOR)

        ax = self.fig.add_axes([0.35, 0.2, 0.3, 0.5])
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.set_aspect("equal")
        ax.axis("off")
        ax.add_patch(mpatches.Circle((0.5, 0.5), 0.48, facecolor=START_BUTTON_COLOR))
        ax.text(0.5, 0.5, "ANALYSE", ha="center", va="center",
                fontsize=30, fontweight="bold", color="black")
        self._start_button = ax

    def _draw_analysis(self):
        self._reset_figure()
        self.fig.suptitle(self.preset["title"], fontsize=22, fontweight="bold",
                          color=TEXT_COLOR, y=0.95)

        ax = self.fig.add_axes([0.1, 0.15, 0.82, 0.7])
        self._style_axes(ax)
        xlim, ylim = axis_limits(self.series, self.preset["padding"])
        ax.set_xlim(*xlim)
        ax.set_ylim(*ylim)
        ax.set_xlabel(self.preset["x_label"], fontsize=16, fontweight="bold", color=TEXT_COLOR)
        ax.set_ylabel(self.preset["y_label"], fontsize=16, fontweight="bold", color=TEXT_COLOR)
        self.line, = ax.plot([], [], color=LINE_COLOR, linewidth=3, marker="o",
                             markersize=2, label=self.preset["title"])
        ax.legend(loc="upper left", fontsize=12, framealpha=0.3)

        self.status_text = self.fig.text(0.5, 0.04, "Analysing... 0%", ha="center",
                                         fontsize=16, color=MUTED_TEXT_COLOR)

        self.scheduler = RevealScheduler(
            self.series,
            self.duration_ms,
            self.clock,
            on_reveal=self._on_reveal,
            on_complete=self._on_complete,
            initial_sample_count=self.initial_sample_count,
            verbose=self.verbose,
            name=self.preset["title"],
        )
        self.scheduler.start()

    def _draw_results(self, cell):
        self._reset_figure()
        result = cell_result(cell)
        self.fig.text(0.05, 0.94, f"Cell {cell} Results   (press b to go back)",
                      fontsize=20, fontweight="semibold", color=TEXT_COLOR)

        for i, metric in enumerate(cell_metrics(result)):
            x = 0.2 + i * 0.3
            self.fig.text(x, 0.84, metric.label, ha="center",
                          fontsize=metric.label_font_size * 0.5, fontweight="bold",
                          color=MUTED_TEXT_COLOR)
            self.fig.text(x, 0.76, metric.value, ha="center",
                          fontsize=metric.value_font_size * 0.5, fontweight="heavy",
                          color=metric.color)
            if metric.sub_value:
                self.fig.text(x, 0.71, metric.sub_value, ha="center",
                              fontsize=metric.sub_value_font_size * 0.5,
                              color=MUTED_TEXT_COLOR, alpha=0.8)

        ax_nyq = self.fig.add_axes([0.07, 0.08, 0.38, 0.55])
        self._style_axes(ax_nyq)
        ax_nyq.set_title("Nyquist Plot", fontsize=16, color=TEXT_COLOR)
        ax_nyq.plot([s.x for s in result.nyquist], [s.y for s in result.nyquist],
                    color=RUL_COLOR, marker="o", linewidth=2)
        ax_nyq.set_xlabel("Z_real (Ω)", color=TEXT_COLOR)
        ax_nyq.set_ylabel("-Z_img (Ω)", color=TEXT_COLOR)

        ax_mag = self.fig.add_axes([0.55, 0.08, 0.38, 0.55])
        self._style_axes(ax_mag)
        ax_mag.set_title("Bode Plot", fontsize=16, color=TEXT_COLOR)
        ax_mag.set_xscale("log")
        ax_mag.plot([s.x for s in result.bode_magnitude], [s.y for s in result.bode_magnitude],
                    color=RUL_COLOR, marker="o", linewidth=2, label="|Z| (Ω)")
        ax_mag.set_xlabel("Frequency (Hz)", color=TEXT_COLOR)
        ax_mag.set_ylabel("|Z| (Ω)", color=RUL_COLOR)
        ax_phase = ax_mag.twinx()
        ax_phase.plot([s.x for s in result.bode_phase], [s.y for s in result.bode_phase],
                      color="#ef4444", marker="s", linewidth=2, label="Phase (°)")
        ax_phase.set_ylabel("Phase (°)", color="#ef4444")
