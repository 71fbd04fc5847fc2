# scene.py

import enum
import logging
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional
import numpy as np
from actor import Actor, Pose
from input_state import InputSample
from particle_system import ParticleSystem

logger = logging.getLogger("canyon_stream")


class Phase(enum.Enum):
    START = "start"                # Overlay fully visible, waiting for a press
    START_IN = "start_in"          # Overlay fading back in after a finished run
    START_FADING = "start_fading"  # Overlay fading out, stream already running
    ZEN = "zen"                    # Active session
    DONE_WAIT = "done_wait"        # Resource exhausted, waiting for the last drops
    DONE = "done"                  # Outro line playing


# The first press both dismisses the overlay and starts the stream, so the
# stream already runs while the overlay fades out.
STREAMING_PHASES = (Phase.START_FADING, Phase.ZEN)
OVERLAY_PHASES = (Phase.START, Phase.START_IN, Phase.START_FADING)

OutroEnvelope = namedtuple('OutroEnvelope', ['alpha', 'scale', 'drift'])


def smoothstep(p: float) -> float:
    return p * p * (3.0 - 2.0 * p)


@dataclass
class RunState:
    """Everything that starts over on a run reset."""
    budget: float                 # Seconds of streaming available this run
    t: float = 0.0                # Session time
    dt: float = 0.0               # Last frame delta
    resource: float = 1.0         # Remaining fraction of the budget, in [0, 1]
    cooldown: float = 0.0         # Time until the next emission is allowed
    has_fired: bool = False
    overlay: float = 1.0          # Start overlay opacity, in [0, 1]
    done_delay_left: Optional[float] = None  # Armed once the last drop is gone
    outro_t: float = 0.0


@dataclass
class AmbientState:
    """Session-wide state that outlives run resets."""
    bg_t: float = 0.0


class Scene:
    """
    The session state machine. It is the sole owner and mutator of the run
    state, the actor and the three particle collections, and decides each
    tick which of them advance.

    Data Contract:
    - Inputs:
        - config (dict): The 'simulation' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
    - Outputs: None. Renderers read phase, run, ambient, actor, pose and particles.
    - Side Effects: Sets and clears InputSample.held.
    - Invariants: run.resource stays within [0, 1], never increases within a
      run, and is exactly 1.0 after a reset. run.overlay stays within [0, 1].
      ambient.bg_t is never reset.
    """
    def __init__(self, config: dict, rng: np.random.Generator):
        self.config = config
        self.rng = rng

        self.budget_range = tuple(config['session_budget_range'])
        self.unlimited_resource = config.get('unlimited_resource', False)
        self.latch_stream = config.get('latch_stream', True)
        self.emission_threshold = config['emission_threshold']
        self.emission_cooldown = config['emission_cooldown']
        self.emission_burst = config.get('emission_burst', 2)
        self.fade_out_seconds = config['start_fade_out_seconds']
        self.fade_in_seconds = config['start_fade_in_seconds']
        self.done_delay = config['done_delay']
        self.outro_in = config['outro_in']
        self.outro_hold = config['outro_hold']
        self.outro_out = config['outro_out']

        self.ambient = AmbientState()
        self.particles = ParticleSystem(rng)
        self.actor = Actor(rng)
        self.phase = Phase.START
        self.reset_run()

        logger.info(
            f"Scene created. Budget range={self.budget_range}, "
            f"unlimited={self.unlimited_resource}, latch_stream={self.latch_stream}."
        )

    @property
    def outro_total(self) -> float:
        return self.outro_in + self.outro_hold + self.outro_out

    @property
    def overlay_opacity(self) -> float:
        return self.run.overlay if self.phase in OVERLAY_PHASES else 0.0

    def _set_phase(self, phase: Phase):
        if phase is not self.phase:
            logger.info(f"Phase {self.phase.value} -> {phase.value} at t={self.run.t:.2f}s")
        self.phase = phase

    def reset_run(self):
        """
        Starts a fresh run: clears all particles, draws a new budget, refills
        the resource and re-anchors the actor. Ambient time is left alone and
        the phase is left to the caller.
        """
        self.particles.clear()
        self.run = RunState(budget=float(self.rng.uniform(*self.budget_range)))
        self.actor.reset()
        self.pose = Pose()
        logger.info(f"Run reset. Budget={self.run.budget:.2f}s, ambient t={self.ambient.bg_t:.2f}s")

    def manual_reset(self, sample: InputSample):
        """External reset trigger: full run reset straight back to START."""
        self.reset_run()
        sample.held = False
        self._set_phase(Phase.START)

    def advance_time(self, dt: float):
        self.run.t += dt
        self.run.dt = dt
        self.ambient.bg_t += dt

    def _on_press(self, sample: InputSample):
        if self.phase in (Phase.DONE, Phase.DONE_WAIT):
            # The run is over; the outro finishes on its own.
            return
        if self.phase in (Phase.START, Phase.START_IN):
            self._set_phase(Phase.START_FADING)
        sample.held = True

    def update(self, dt: float, sample: InputSample):
        """
        Runs one tick of the state machine. Session and ambient time must
        already have been advanced for this tick (see FrameDriver).
        """
        run = self.run
        if sample.just_pressed:
            self._on_press(sample)
        if sample.just_released and not self.latch_stream:
            sample.held = False

        self.actor.follow(sample.x, sample.y, dt)
        run.cooldown = max(0.0, run.cooldown - dt)

        if self.phase is Phase.START_FADING:
            run.overlay = max(0.0, run.overlay - dt / self.fade_out_seconds)
            if run.overlay <= 0.0:
                self._set_phase(Phase.ZEN)
        elif self.phase is Phase.START_IN:
            run.overlay = min(1.0, run.overlay + dt / self.fade_in_seconds)
            if run.overlay >= 1.0:
                self._set_phase(Phase.START)

        self.pose = self.actor.pose(run.t, sample.held)

        if self.phase is Phase.START:
            return

        # Drain follows the hold, not the emission rate.
        if sample.held and self.phase in STREAMING_PHASES and not self.unlimited_resource:
            run.resource = min(1.0, max(0.0, run.resource - dt / run.budget))
            if run.resource <= 0.0:
                run.resource = 0.0
                sample.held = False
                self._set_phase(Phase.DONE_WAIT)

        if self.phase is Phase.DONE_WAIT and len(self.particles.drops) == 0:
            if run.done_delay_left is None:
                run.done_delay_left = self.done_delay
            run.done_delay_left = max(0.0, run.done_delay_left - dt)
            if run.done_delay_left <= 0.0:
                self._set_phase(Phase.DONE)
                run.outro_t = 0.0

        if self.phase is Phase.DONE:
            run.outro_t += dt
            if run.outro_t >= self.outro_total:
                self.reset_run()
                self.run.overlay = 0.0
                sample.held = False
                self._set_phase(Phase.START_IN)
                return

        if (self.phase in STREAMING_PHASES and sample.held and run.cooldown <= 0.0
                and (self.unlimited_resource or run.resource > self.emission_threshold)):
            self._emit()

        self.particles.update(dt, run.t)

    def _emit(self):
        run = self.run
        if not run.has_fired:
            logger.info(f"First stream of the run at t={run.t:.2f}s")
        run.has_fired = True
        strength = 1.0 if self.unlimited_resource else min(1.0, max(0.0, run.resource))
        origin = self.actor.stream_origin(self.pose)
        target = (self.actor.aim_x, self.actor.aim_y)
        self.particles.emit_stream(origin, target, strength, self.emission_burst)
        run.cooldown = self.emission_cooldown

    def outro_envelope(self) -> OutroEnvelope:
        """
        Alpha, scale and upward drift (0 to 1) of the outro line at the
        current outro time: a quick rise with a slight overshoot, a long
        hold, then a slower release that shrinks a little.
        """
        tt = min(max(self.run.outro_t, 0.0), self.outro_total)
        if tt < self.outro_in:
            p = tt / self.outro_in
            return OutroEnvelope(smoothstep(p), 1.0 + 0.06 * np.sin(p * np.pi), p * 0.35)
        if tt < self.outro_in + self.outro_hold:
            p = (tt - self.outro_in) / self.outro_hold
            return OutroEnvelope(1.0, 1.0 + 0.01 * np.sin(p * np.pi * 2.0), 0.35 + p * 0.45)
        p = min(1.0, (tt - self.outro_in - self.outro_hold) / self.outro_out)
        return OutroEnvelope(1.0 - smoothstep(p), 1.0 - 0.02 * smoothstep(p), 0.80 + p * 0.20)

    def stats(self) -> dict:
        """Snapshot of the counters the main loop logs."""
        return {
            'phase': self.phase.value,
            'resource': self.run.resource,
            'drops': len(self.particles.drops),
            'splashes': len(self.particles.splashes),
            'ripples': len(self.particles.ripples),
            'wall_hits': self.particles.wall_hits,
            'floor_hits': self.particles.floor_hits,
        }
