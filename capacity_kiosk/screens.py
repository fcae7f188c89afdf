"""
Kiosk screen flow: start -> analysis -> results -> start.

Cell selection keys (1-5) only count once the analysis reveal has
signalled completion and the analysis screen is still showing.
"""

from enum import Enum
from typing import Callable, Optional

from capacity_kiosk.config import CELL_NUMBERS


class Screen(Enum):
    START = "start"
    ANALYSIS = "analysis"
    RESULTS = "results"


class KioskFlow:
    """Screen state plus the "analysis finished" gate.

    ``on_screen_change(old, new)`` is called on every transition so the
    window can tear down and build views.
    """

    def __init__(self, on_screen_change: Optional[Callable[[Screen, Screen], None]] = None,
                 verbose: bool = False):
        self.screen = Screen.START
        self.analysis_complete = False
        self.selected_cell = CELL_NUMBERS[0]
        self.on_screen_change = on_screen_change
        self.verbose = verbose

    def _go(self, screen: Screen) -> None:
        old, self.screen = self.screen, screen
        if self.verbose:
            print(f"[Kiosk] {old.value} -> {screen.value}")
        if self.on_screen_change is not None:
            self.on_screen_change(old, screen)

    def handle_start(self) -> None:
        self.analysis_complete = False
        self._go(Screen.ANALYSIS)

    def handle_chart_complete(self) -> None:
        if self.verbose:
            print("[Kiosk] Chart animation complete, cell selection unlocked")
        self.analysis_complete = True

    def handle_key(self, key) -> bool:
        """Select a cell from a key press. Returns True if it navigated."""
        if not (self.analysis_complete and self.screen is Screen.ANALYSIS):
            if self.verbose:
                print(f"[Kiosk] Ignoring key {key!r}: analysis_complete="
                      f"{self.analysis_complete}, screen={self.screen.value}")
            return False
        try:
            cell = int(key)
        except (TypeError, ValueError):
            return False
        if cell not in CELL_NUMBERS:
            return False
        self.select_cell(cell)
        return True

    def select_cell(self, cell: int) -> None:
        if cell not in CELL_NUMBERS:
            raise ValueError(f"Unknown cell {cell}; expected one of {CELL_NUMBERS}")
        self.selected_cell = cell
        self._go(Screen.RESULTS)

    def handle_back_to_start(self) -> None:
        self.analysis_complete = False
        self._go(Screen.START)
