# actor.py

import math
import enum
import logging
from dataclasses import dataclass
import numpy as np
import constants
from constants import WIDTH, HEIGHT, RIM_Y
from terrain import x_left, clamp

logger = logging.getLogger("canyon_stream")


@dataclass(frozen=True)
class Pose:
    """Visual pose offsets for one tick. head_bob is negative when the head moves up."""
    head_bob: float = 0.0
    lean_x: float = 0.0
    lean_y: float = 0.0
    engaged: bool = False


class NodPhase(enum.Enum):
    IDLE = "idle"            # Nothing scheduled yet
    SCHEDULED = "scheduled"  # Waiting for next_at
    RISING = "rising"
    HOLDING = "holding"
    FALLING = "falling"


@dataclass
class NodSchedule:
    """
    The idle nod as an explicit small state machine.

    Phase boundaries are stored as durations relative to started_at rather
    than as absolute timestamps, so a zero-length phase is simply skipped.
    """
    phase: NodPhase = NodPhase.IDLE
    next_at: float = 0.0
    started_at: float = 0.0
    rise: float = 0.0
    hold: float = 0.0
    fall: float = 0.0
    amplitude: float = 0.0

    @property
    def duration(self) -> float:
        return self.rise + self.hold + self.fall

    def evaluate(self, elapsed: float):
        """
        Returns (phase, level) for a nod that started `elapsed` seconds ago,
        with level in [0, 1]. Returns (None, 0.0) once the nod is over.
        """
        if elapsed < self.rise:
            return NodPhase.RISING, math.sin(elapsed / self.rise * math.pi * 0.5)
        elapsed -= self.rise
        if elapsed < self.hold:
            return NodPhase.HOLDING, 1.0
        elapsed -= self.hold
        if elapsed < self.fall:
            return NodPhase.FALLING, math.cos(elapsed / self.fall * math.pi * 0.5)
        return None, 0.0

    @property
    def active(self) -> bool:
        return self.phase in (NodPhase.RISING, NodPhase.HOLDING, NodPhase.FALLING)


class Actor:
    """
    The character on the canyon rim: an anchored position, a smoothed aim
    point, and the nod schedule that drives its idle animation.

    Data Contract:
    - Inputs: rng (np.random.Generator) for nod timing.
    - Invariants: The anchor is derived from the terrain model only, so it is
      identical on every run.
    """
    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.reset()

    def reset(self):
        rim_edge = x_left(float(RIM_Y))
        self.x = clamp(rim_edge - constants.ACTOR_RIM_OFFSET,
                       constants.ACTOR_EDGE_MARGIN, WIDTH - constants.ACTOR_EDGE_MARGIN)
        # Foot position, resting on the 1-unit rim line.
        self.y = RIM_Y - 1.0
        self.aim_x = WIDTH * constants.AIM_START[0]
        self.aim_y = HEIGHT * constants.AIM_START[1]
        self.nod = NodSchedule()

    def follow(self, target_x: float, target_y: float, dt: float):
        """Eases the aim point toward the pointer, frame-rate independently."""
        k = 1.0 - constants.AIM_SMOOTHING ** dt
        self.aim_x += (target_x - self.aim_x) * k
        self.aim_y += (target_y - self.aim_y) * k

    def stream_origin(self, pose: Pose):
        """The stream leaves from mid-height of the body, shifted by the lean."""
        return (self.x + pose.lean_x, self.y - constants.ACTOR_STREAM_HEIGHT + pose.lean_y)

    def pose(self, t: float, engaged: bool) -> Pose:
        """
        Computes this tick's pose. While engaged the actor leans and any nod
        is cancelled and deferred; otherwise the nod schedule advances.
        """
        if engaged:
            self._defer_nod(t)
            lean_x, lean_y = constants.ACTOR_LEAN
            return Pose(0.0, lean_x, lean_y, True)
        level = self._advance_nod(t)
        return Pose(head_bob=-self.nod.amplitude * level)

    def _defer_nod(self, t: float):
        nod = self.nod
        nod.phase = NodPhase.SCHEDULED
        nod.next_at = max(nod.next_at, t + constants.NOD_ENGAGED_DEFER)

    def _advance_nod(self, t: float) -> float:
        nod = self.nod
        rng = self.rng

        if nod.phase is NodPhase.IDLE:
            nod.next_at = t + rng.uniform(*constants.NOD_FIRST_DELAY_RANGE)
            nod.phase = NodPhase.SCHEDULED

        if nod.phase is NodPhase.SCHEDULED:
            if t < nod.next_at:
                return 0.0
            nod.started_at = t
            nod.rise = rng.uniform(*constants.NOD_RISE_RANGE)
            nod.hold = rng.uniform(*constants.NOD_HOLD_RANGE)
            nod.fall = rng.uniform(*constants.NOD_FALL_RANGE)
            nod.amplitude = rng.uniform(*constants.NOD_AMPLITUDE_RANGE)
            # Booked now so an engagement mid-nod can only push it later.
            nod.next_at = t + nod.duration + rng.uniform(*constants.NOD_GAP_RANGE)
            nod.phase = NodPhase.RISING
            logger.debug(f"Nod started at t={t:.2f}s, amplitude={nod.amplitude:.2f}")

        phase, level = nod.evaluate(t - nod.started_at)
        if phase is None:
            nod.phase = NodPhase.SCHEDULED
            return 0.0
        nod.phase = phase
        return level
