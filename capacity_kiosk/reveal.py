"""
Progressive Reveal Engine
=========================

Animates the disclosure of a fixed, ordered Series over a target
wall-clock duration. Each display frame calls ``advance`` with the
frame timestamp; the engine appends whole samples to the visible
prefix at a constant average rate and fires the completion callback
exactly once, on the frame where the prefix becomes the full Series.

Pacing is relative to the last frame that revealed something, not to
the start of the run. A late frame therefore reveals at most the
samples owed since the previous reveal, instead of a catch-up burst.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Sequence

from capacity_kiosk.chart_data import Sample


class RevealPhase(Enum):
    NOT_STARTED = auto()
    RUNNING = auto()
    COMPLETED = auto()


@dataclass
class RevealState:
    """Mutable per-run state. A restart builds a new one."""
    revealed_count: int = 0
    last_frame_ms: Optional[float] = None
    completion_signaled: bool = False
    phase: RevealPhase = RevealPhase.NOT_STARTED


# ---------------------------------------------------------------------------
# Pure pacing functions
# ---------------------------------------------------------------------------

def samples_per_second(sample_count: int, total_duration_ms: float) -> float:
    """Fixed reveal rate for a run.

    Returns 0 for an empty Series and ``math.inf`` for a non-positive
    or non-finite duration, which means "reveal everything on the first
    frame".
    """
    if sample_count <= 0:
        return 0.0
    if not math.isfinite(total_duration_ms) or total_duration_ms <= 0:
        return math.inf
    return sample_count / (total_duration_ms / 1000.0)


def new_reveal_state(series: Sequence[Sample], initial_sample_count: int = 0) -> RevealState:
    initial = min(max(int(initial_sample_count), 0), len(series))
    state = RevealState(revealed_count=initial)
    if 0 < initial < len(series):
        # A shown prefix with samples still pending is already under way
        state.phase = RevealPhase.RUNNING
    return state


def advance(
    state: RevealState,
    series: Sequence[Sample],
    rate: float,
    frame_ms: float,
) -> list[Sample]:
    """Process one frame and return the samples it revealed.

    Moves ``state`` to COMPLETED when the prefix is full. The caller
    checks ``state.completion_signaled`` before and after to learn
    whether this frame made the terminal transition.
    """
    total = len(series)
    if state.phase is RevealPhase.COMPLETED:
        return []

    revealed: list[Sample] = []
    if state.last_frame_ms is None:
        state.last_frame_ms = frame_ms
        state.phase = RevealPhase.RUNNING
        if math.isinf(rate):
            revealed = list(series[state.revealed_count:])
            state.revealed_count = total
    elif state.revealed_count < total:
        elapsed_ms = frame_ms - state.last_frame_ms
        due = math.floor(elapsed_ms / 1000.0 * rate)
        if due >= 1:
            state.last_frame_ms = frame_ms
            take = min(due, total - state.revealed_count)
            start = state.revealed_count
            revealed = list(series[start:start + take])
            state.revealed_count = start + take

    if state.revealed_count >= total and not state.completion_signaled:
        state.completion_signaled = True
        state.phase = RevealPhase.COMPLETED
    return revealed


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------

class RevealScheduler:
    """Drives one Series through a frame clock.

    Args:
        series: Ordered samples to reveal. Copied to a tuple.
        total_duration_ms: Target wall-clock duration of the reveal.
        clock: Host frame primitive (``request_frame`` / ``cancel_frame``).
        on_reveal: Receives the visible prefix after start and after
            every frame that revealed samples.
        on_complete: Zero-argument callback, fired once per run.
        initial_sample_count: Samples visible before the first frame.
        verbose: Print per-frame progress lines.
    """

    def __init__(
        self,
        series: Sequence[Sample],
        total_duration_ms: float,
        clock,
        on_reveal: Optional[Callable[[tuple], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        initial_sample_count: int = 0,
        verbose: bool = False,
        name: str = "chart",
    ):
        self.series = tuple(series)
        self.total_duration_ms = total_duration_ms
        self.clock = clock
        self.on_reveal = on_reveal
        self.on_complete = on_complete
        self.initial_sample_count = initial_sample_count
        self.verbose = verbose
        self.name = name

        self.rate = samples_per_second(len(self.series), total_duration_ms)
        self.state = new_reveal_state(self.series, initial_sample_count)
        self._pending = None
        self._run_id = 0

    # -- read-only views ----------------------------------------------------

    @property
    def visible_prefix(self) -> tuple:
        return self.series[:self.state.revealed_count]

    @property
    def revealed_count(self) -> int:
        return self.state.revealed_count

    @property
    def phase(self) -> RevealPhase:
        return self.state.phase

    @property
    def is_complete(self) -> bool:
        return self.state.phase is RevealPhase.COMPLETED

    @property
    def is_scheduled(self) -> bool:
        return self._pending is not None

    @property
    def progress(self) -> float:
        if not self.series:
            return 1.0 if self.is_complete else 0.0
        return self.state.revealed_count / len(self.series)

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Publish the initial prefix and request the first frame."""
        if self._pending is not None or self.is_complete:
            return
        if self.verbose:
            print(f"[Reveal] {self.name}: starting, {len(self.series)} samples "
                  f"over {self.total_duration_ms / 1000:.1f}s "
                  f"({self.rate:.2f} samples/s)")
        self._publish()
        self._request_next()

    def stop(self) -> None:
        """Cancel the pending frame. Safe to call more than once."""
        if self._pending is not None:
            self._cancel_pending()
            if self.verbose:
                print(f"[Reveal] {self.name}: cancelled at "
                      f"{self.state.revealed_count}/{len(self.series)}")
        # Invalidate any callback the clock already dequeued
        self._run_id += 1

    def restart(self) -> None:
        """Discard this run's state and begin a fresh run."""
        self.stop()
        self.state = new_reveal_state(self.series, self.initial_sample_count)
        self.start()

    # -- frame loop ---------------------------------------------------------

    def advance(self, frame_ms: float) -> None:
        """Process one frame. Also usable directly with synthetic timestamps."""
        was_signaled = self.state.completion_signaled
        revealed = advance(self.state, self.series, self.rate, frame_ms)

        if revealed:
            self._publish()
            if self.verbose:
                total = len(self.series)
                pct = round(self.state.revealed_count / total * 100)
                print(f"[Reveal] {self.name}: {self.state.revealed_count}/{total} ({pct}%)")

        if self.state.completion_signaled and not was_signaled:
            self._cancel_pending()
            if self.verbose:
                print(f"[Reveal] {self.name}: complete after "
                      f"{self.state.revealed_count}/{len(self.series)} samples")
            if self.on_complete is not None:
                self.on_complete()
        elif not self.is_complete:
            self._request_next()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self.clock.cancel_frame(self._pending)
            self._pending = None

    def _request_next(self) -> None:
        if self._pending is not None:
            return
        run_id = self._run_id

        def _on_frame(frame_ms: float) -> None:
            if run_id != self._run_id:
                return
            self._pending = None
            self.advance(frame_ms)

        self._pending = self.clock.request_frame(_on_frame)

    def _publish(self) -> None:
        if self.on_reveal is not None:
            self.on_reveal(self.visible_prefix)
