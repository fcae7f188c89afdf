"""
Frame clocks: the host side of the reveal loop.

A frame clock hands out one callback per display frame:

    handle = clock.request_frame(callback)   # callback(frame_ms)
    clock.cancel_frame(handle)

ManualFrameClock is driven with synthetic timestamps (tests, headless
replay). MatplotlibFrameClock uses single-shot canvas timers so the
reveal runs on the GUI event loop.
"""

import itertools
import time


class ManualFrameClock:
    """Frame clock advanced by hand with ``tick(frame_ms)``."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._pending = {}
        self.frames_delivered = 0

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle) -> None:
        self._pending.pop(handle, None)

    def tick(self, frame_ms: float) -> int:
        """Run every callback requested before this tick.

        Callbacks requested while ticking wait for the next tick.
        Returns the number of callbacks run.
        """
        due = list(self._pending.items())
        self._pending.clear()
        for handle, callback in due:
            callback(frame_ms)
        self.frames_delivered += 1
        return len(due)

    def run(self, start_ms: float, interval_ms: float, max_frames: int) -> float:
        """Tick at a fixed interval until nothing is pending.

        Returns the timestamp of the last frame delivered.
        """
        now = start_ms
        for i in range(max_frames):
            if not self._pending:
                break
            now = start_ms + i * interval_ms
            self.tick(now)
        return now


class MatplotlibFrameClock:
    """Frame clock backed by matplotlib canvas timers.

    Each requested frame gets its own single-shot timer, so cancelling
    one request never affects another.
    """

    def __init__(self, canvas, interval_ms: int = 16):
        self.canvas = canvas
        self.interval_ms = interval_ms
        self._timers = {}
        self._ids = itertools.count(1)

    def request_frame(self, callback) -> int:
        handle = next(self._ids)
        timer = self.canvas.new_timer(interval=self.interval_ms)
        timer.single_shot = True
        timer.add_callback(self._fire, handle, callback)
        self._timers[handle] = timer
        timer.start()
        return handle

    def cancel_frame(self, handle) -> None:
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.stop()

    def cancel_all(self) -> None:
        for handle in list(self._timers):
            self.cancel_frame(handle)

    def _fire(self, handle, callback):
        if self._timers.pop(handle, None) is None:
            return
        callback(time.monotonic() * 1000.0)
        self.canvas.draw_idle()
