# particle_system.py

import math
import logging
import numpy as np
import numba
import constants
from constants import WIDTH, HEIGHT, RIM_Y
from particle import Drops, Splashes, Ripples
from terrain import x_left, x_right, floor_y, clamp, lerp

logger = logging.getLogger("canyon_stream")

# Per-drop outcome codes written by the integration kernel.
DROP_ALIVE = 0
DROP_HIT_WALL = 1
DROP_HIT_FLOOR = 2
DROP_EXPIRED = 3

# --- JIT-Compiled Physics Functions ---
# Kept outside the ParticleSystem class so Numba's nopython mode only ever
# sees NumPy arrays and scalars. Spawning splashes and ripples needs the
# generator and the arenas, so the kernel only reports what happened to each
# drop and the Python side reacts to it.

@numba.jit(nopython=True, fastmath=True)
def _integrate_drops_jit(positions, velocities, ages, ttls, seeds, outcomes, dt, t,
                         gravity, drag_x, drag_y, wobble_amp, wobble_freq, wobble_seed_scale,
                         collision_top, wall_tolerance, bounds_margin):
    """
    Numba-accelerated drop step: age, wobble, gravity, frame-rate-compensated
    drag, integration, then terrain collision and expiry. Modifies positions,
    velocities and ages in place and fills outcomes with one code per drop.
    Floor hits have their y snapped to the floor contact point.
    """
    drag_fx = drag_x ** (dt * 60.0)
    drag_fy = drag_y ** (dt * 60.0)
    for i in range(positions.shape[0]):
        ages[i] += dt

        wobble = np.sin(t * wobble_freq + seeds[i] * wobble_seed_scale) * wobble_amp
        velocities[i, 1] += gravity * dt
        velocities[i, 0] += wobble * dt

        velocities[i, 0] *= drag_fx
        velocities[i, 1] *= drag_fy

        positions[i, 0] += velocities[i, 0] * 60.0 * dt
        positions[i, 1] += velocities[i, 1] * 60.0 * dt

        x = positions[i, 0]
        y = positions[i, 1]
        outcomes[i] = DROP_ALIVE

        # No collisions right at the rim, where drops are spawned.
        if y >= collision_top:
            if x <= x_left(y) + wall_tolerance or x >= x_right(y) - wall_tolerance:
                outcomes[i] = DROP_HIT_WALL
                continue
            fy = floor_y(x)
            if y >= fy:
                positions[i, 1] = fy
                outcomes[i] = DROP_HIT_FLOOR
                continue

        if (ages[i] > ttls[i] or x < -bounds_margin or x > WIDTH + bounds_margin
                or y < -bounds_margin or y > HEIGHT + bounds_margin):
            outcomes[i] = DROP_EXPIRED


def splash_count(intensity: float) -> int:
    """Number of splash particles for a collision of the given intensity (half rounds up)."""
    scaled = lerp(float(constants.SPLASH_COUNT_MIN), float(constants.SPLASH_COUNT_MAX),
                  clamp(float(intensity), 0.0, 1.0))
    return int(math.floor(scaled + 0.5))


class ParticleSystem:
    """
    Owns the three particle collections (drops, splashes, ripples) and all of
    their spawn, integrate, collide and expire logic.

    Data Contract:
    - Inputs:
        - rng (np.random.Generator): The master seeded random number generator.
    - Outputs: None. This class modifies its internal state.
    - Side Effects: Manages the lifecycle of all particle data.
    - Invariants: A drop leaves the collection in the same tick it collides
      with the terrain, outlives its ttl, or drifts out of bounds.
      Only floor collisions create ripples.
    """
    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self.drops = Drops()
        self.splashes = Splashes()
        self.ripples = Ripples()

        # --- Per-tick counters for logging ---
        self.wall_hits = 0
        self.floor_hits = 0
        self.expired_drops = 0

    def clear(self):
        self.drops.clear()
        self.splashes.clear()
        self.ripples.clear()

    def emit_stream(self, origin: tuple, target: tuple, strength: float, count: int = 2) -> int:
        """
        Spawns a batch of drops from origin toward target.

        Stronger streams are faster and tighter. A near-zero aim vector has no
        usable angle, so the stream is pointed straight down instead.
        """
        sx, sy = origin
        dx = target[0] - sx
        dy = target[1] - sy
        if abs(dx) + abs(dy) < constants.STREAM_DEGENERATE_LENGTH:
            dy = 1.0

        base = math.atan2(dy, dx)
        rng = self.rng
        spread_scale = constants.STREAM_SPREAD_BASE + (1.0 - strength) * constants.STREAM_SPREAD_WEAK_BONUS
        angles = base + rng.uniform(-constants.STREAM_SPREAD, constants.STREAM_SPREAD, count) * spread_scale
        speeds = lerp(constants.STREAM_SPEED_MIN, constants.STREAM_SPEED_MAX, strength) \
            + rng.uniform(*constants.STREAM_SPEED_JITTER, count)

        jitter = constants.STREAM_POSITION_JITTER
        positions = np.array([sx, sy]) + rng.uniform(-jitter, jitter, (count, 2))
        velocities = np.column_stack((np.cos(angles) * speeds, np.sin(angles) * speeds))

        return self.drops.spawn(
            positions=positions,
            velocities=velocities,
            radii=rng.uniform(*constants.DROP_RADIUS_RANGE, count),
            ages=0.0,
            ttls=rng.uniform(*constants.DROP_TTL_RANGE, count),
            seeds=rng.random(count),
        )

    def splash(self, x: float, y: float, dir_x: float, dir_y: float, intensity: float) -> int:
        """
        Spawns a burst of debris at (x, y). The burst size grows with intensity
        and the debris is biased along (dir_x, dir_y).
        """
        n = splash_count(intensity)
        rng = self.rng
        angles = rng.uniform(-math.pi, math.pi, n)
        speeds = rng.uniform(*constants.SPLASH_SPEED_RANGE, n) + intensity * constants.SPLASH_INTENSITY_SPEED
        vx = np.cos(angles) * speeds + dir_x * rng.uniform(*constants.SPLASH_BIAS_RANGE, n)
        vy = np.sin(angles) * speeds + dir_y * rng.uniform(*constants.SPLASH_BIAS_RANGE, n)
        weights = (np.arange(n) % constants.SPLASH_LIGHT_EVERY == 0).astype(np.int8)

        return self.splashes.spawn(
            positions=(x, y),
            velocities=np.column_stack((vx, vy)),
            ages=0.0,
            ttls=rng.uniform(*constants.SPLASH_TTL_RANGE, n),
            weights=weights,
            sizes=rng.uniform(*constants.SPLASH_SIZE_RANGE, n),
        )

    def add_ripple(self, x: float, y: float):
        self.ripples.spawn(
            positions=(x, y),
            radii=constants.RIPPLE_START_RADIUS,
            ages=0.0,
            ttls=self.rng.uniform(*constants.RIPPLE_TTL_RANGE),
        )

    def _update_drops(self, dt: float, t: float):
        """
        Integrates every drop through the JIT kernel, then turns wall and floor
        hits into splashes (and ripples, for the floor) before removing them.
        """
        drops = self.drops
        self.wall_hits = self.floor_hits = self.expired_drops = 0
        if len(drops) == 0:
            return

        outcomes = np.zeros(len(drops), dtype=np.int8)
        _integrate_drops_jit(
            drops.positions,
            drops.velocities,
            drops.ages,
            drops.ttls,
            drops.seeds,
            outcomes,
            dt,
            t,
            constants.DROP_GRAVITY,
            constants.DROP_DRAG_X,
            constants.DROP_DRAG_Y,
            constants.DROP_WOBBLE_AMPLITUDE,
            constants.DROP_WOBBLE_FREQUENCY,
            constants.DROP_WOBBLE_SEED_SCALE,
            float(RIM_Y) + constants.DROP_COLLISION_MARGIN,
            constants.DROP_WALL_TOLERANCE,
            constants.DROP_BOUNDS_MARGIN
        )

        for i in np.flatnonzero(outcomes == DROP_HIT_WALL):
            (x, y), (vx, vy) = drops.positions[i], drops.velocities[i]
            self.splash(x, y, vx * constants.WALL_SPLASH_BIAS, vy * constants.WALL_SPLASH_BIAS,
                        constants.WALL_SPLASH_INTENSITY)

        for i in np.flatnonzero(outcomes == DROP_HIT_FLOOR):
            (x, y), vx = drops.positions[i], drops.velocities[i, 0]
            self.splash(x, y, vx * constants.FLOOR_SPLASH_BIAS_X, constants.FLOOR_SPLASH_BIAS_Y,
                        constants.FLOOR_SPLASH_INTENSITY)
            self.add_ripple(x, y)

        self.wall_hits = int(np.count_nonzero(outcomes == DROP_HIT_WALL))
        self.floor_hits = int(np.count_nonzero(outcomes == DROP_HIT_FLOOR))
        self.expired_drops = int(np.count_nonzero(outcomes == DROP_EXPIRED))
        drops.keep(outcomes == DROP_ALIVE)

    def _update_splashes(self, dt: float):
        splashes = self.splashes
        if len(splashes) == 0:
            return
        splashes.ages += dt
        splashes.velocities[:, 1] += constants.SPLASH_GRAVITY * dt
        splashes.velocities *= constants.SPLASH_DRAG ** (dt * 60.0)
        splashes.positions += splashes.velocities * 60.0 * dt
        splashes.keep(splashes.ages <= splashes.ttls)

    def _update_ripples(self, dt: float):
        ripples = self.ripples
        if len(ripples) == 0:
            return
        ripples.ages += dt
        ripples.radii += constants.RIPPLE_GROWTH * dt
        ripples.keep(ripples.ages <= ripples.ttls)

    def update(self, dt: float, t: float):
        """
        Advances all three collections by one tick. Splashes and ripples
        created by this tick's collisions are already integrated once, so
        they age in step with everything else.

        - Inputs:
            - dt (float): Clamped frame delta in seconds.
            - t (float): Session time, which drives the drop wobble.
        """
        self._update_drops(dt, t)
        self._update_splashes(dt)
        self._update_ripples(dt)
