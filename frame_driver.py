# frame_driver.py

import time
import logging
from typing import Optional
from input_state import InputSample
from scene import Scene

logger = logging.getLogger("canyon_stream")


class FrameDriver:
    """
    Turns an external clock into simulation ticks.

    Each tick computes the delta from the previous timestamp, clamps it so a
    stall (a dragged window, a breakpoint) cannot blow up the physics,
    advances session and ambient time, runs the scene once and clears the
    input edge flags. It owns no simulation logic of its own.
    """
    def __init__(self, scene: Scene, sample: InputSample, max_dt: float = 0.033, start_time: Optional[float] = None):
        self.scene = scene
        self.sample = sample
        self.max_dt = max_dt
        self.last_time = time.perf_counter() if start_time is None else start_time
        self.ticks = 0

    def tick(self, now: float) -> float:
        """Advances one frame for the timestamp `now` (seconds). Returns the dt used."""
        dt = now - self.last_time
        self.last_time = now
        return self.step(dt)

    def step(self, dt: float) -> float:
        if dt > self.max_dt:
            logger.debug(f"Frame delta {dt:.3f}s clamped to {self.max_dt:.3f}s")
        dt = min(self.max_dt, max(0.0, dt))

        self.scene.advance_time(dt)
        self.scene.update(dt, self.sample)
        self.sample.clear_edges()

        self.ticks += 1
        return dt
