# terrain.py

import numpy as np
import numba
from constants import WIDTH, HEIGHT, RIM_Y

# --- JIT-Compiled Terrain Functions ---
# The canyon is defined by three pure curves. They depend only on their
# argument (never on time), so a restarted run sees identical geometry.
# They are compiled with Numba so the drop kernel in particle_system.py can
# call them from nopython mode; plain Python callers get the same results.

@numba.jit(nopython=True)
def clamp(v, lo, hi):
    return max(lo, min(hi, v))

@numba.jit(nopython=True)
def lerp(a, b, t):
    return a + (b - a) * t

@numba.jit(nopython=True)
def canyon_depth(y):
    """Normalized depth: 0 at the rim, 1 at the bottom of the scene."""
    return clamp((y - RIM_Y) / (HEIGHT - RIM_Y), 0.0, 1.0)

@numba.jit(nopython=True)
def x_left(y):
    """
    Horizontal position of the left canyon wall at height y.
    The wall moves inward with depth and carries a small static sinusoidal
    perturbation so the silhouette is not a straight line.
    """
    t = canyon_depth(y)
    inset = lerp(18.0, 44.0, t)
    wobble = np.sin(y * 0.055) * lerp(1.5, 4.5, t)
    return inset + wobble

@numba.jit(nopython=True)
def x_right(y):
    """Horizontal position of the right canyon wall at height y."""
    t = canyon_depth(y)
    inset = lerp(16.0, 52.0, t)
    wobble = np.sin(y * 0.048 + 1.7) * lerp(1.5, 4.0, t)
    return WIDTH - (inset + wobble)

@numba.jit(nopython=True)
def floor_y(x):
    """Height of the canyon floor at horizontal position x (one sine period across the scene)."""
    t = clamp(x / WIDTH, 0.0, 1.0)
    base = HEIGHT - 14.0
    return base + np.sin(t * np.pi * 2.0) * 2.0
