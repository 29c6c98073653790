import logging
import time
from collections import deque, namedtuple

import numpy as np

from config import FPS_WINDOW

logger = logging.getLogger(__name__)

FrameStats = namedtuple("FrameStats", ["latest", "mean", "min", "max"])

def _now_ms():
    return time.perf_counter() * 1000.0

def format_stats(stats, window=FPS_WINDOW):
    """Builds the multi-line readout, every value rounded to a whole frame rate."""
    return "\n".join([
        "Frames per Second:",
        f"         latest = {round(stats.latest)}",
        f"avg of last {window} = {round(stats.mean)}",
        f"min of last {window} = {round(stats.min)}",
        f"max of last {window} = {round(stats.max)}",
    ])


class FrameRateMonitor:
    """
    Rolling frames-per-second tracker over the latest `window` frames.

    sample() is called once per frame. The very first call only sets the baseline timestamp.
    render() pushes the formatted readout to `sink`, any callable taking a string.
    """
    def __init__(self, sink=None, clock=None, window=FPS_WINDOW):
        self.sink = sink
        self.clock = clock or _now_ms
        self.window = window
        self.frames = deque(maxlen=window) # oldest falls off the left
        self.last_frame_ms = None
        self.latest_stats = None

    @property
    def samples(self):
        return list(self.frames)

    def stats(self):
        if not self.frames:
            return None
        values = np.fromiter(self.frames, dtype=float, count=len(self.frames))
        return FrameStats(
            latest=float(values[-1]),
            mean=float(values.mean()),
            min=float(values.min()),
            max=float(values.max()),
        )

    def record(self, elapsed_ms):
        """Adds one frame that took `elapsed_ms` and returns the refreshed stats."""
        self.frames.append(1000.0 / elapsed_ms)
        self.latest_stats = self.stats()
        return self.latest_stats

    def sample(self):
        now = self.clock()
        previous, self.last_frame_ms = self.last_frame_ms, now
        if previous is None:
            return None

        elapsed = now - previous
        if elapsed <= 0:
            logger.debug(f"Clock did not advance between frames ({elapsed} ms), sample dropped")
            return self.latest_stats
        return self.record(elapsed)

    def render(self):
        if self.latest_stats is None or self.sink is None:
            return
        self.sink(format_stats(self.latest_stats, self.window))
