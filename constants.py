# constants.py

"""
Application Constants

This module defines static configuration values for the scene and its physics.
These are not expected to change between runs; per-run tunables live in
config.json.

Data Contract:
- All values are immutable constants.
- Units are scene units (one unit = one low-resolution pixel) and seconds,
  unless noted otherwise in comments.
"""

# Scene dimensions (internal render resolution, scaled up for display)
WIDTH = 240  # Units
HEIGHT = 360  # Units

# Canyon rim height. The actor stands on this line.
RIM_Y = 64  # Units

# Window Title
TITLE = "Canyon Break"

# Physics is tuned per frame at this reference rate.
REFERENCE_FPS = 60.0

# --- Drops (primary stream) ---
DROP_GRAVITY = 5.6            # Units/s^2 (scaled by dt)
DROP_DRAG_X = 0.993           # Per reference frame
DROP_DRAG_Y = 0.994           # Per reference frame
DROP_WOBBLE_AMPLITUDE = 0.03  # Horizontal air drift acceleration
DROP_WOBBLE_FREQUENCY = 6.0   # Radians per second of session time
DROP_WOBBLE_SEED_SCALE = 20.0
DROP_COLLISION_MARGIN = 10.0  # Collisions start this far below the rim
DROP_WALL_TOLERANCE = 1.0     # Units
DROP_BOUNDS_MARGIN = 30.0     # Drops this far outside the scene are discarded

# Emission ranges
STREAM_SPEED_MIN = 1.45
STREAM_SPEED_MAX = 2.85
STREAM_SPEED_JITTER = (-0.03, 0.08)
STREAM_SPREAD = 0.02              # Radians, before strength scaling
STREAM_SPREAD_BASE = 0.40
STREAM_SPREAD_WEAK_BONUS = 0.12   # Extra spread factor at zero strength
STREAM_POSITION_JITTER = 0.25     # Units
STREAM_DEGENERATE_LENGTH = 0.001  # Aim vectors shorter than this point down
DROP_RADIUS_RANGE = (0.50, 0.95)
DROP_TTL_RANGE = (1.3, 2.2)

# --- Splash particles ---
SPLASH_COUNT_MIN = 4
SPLASH_COUNT_MAX = 10
SPLASH_SPEED_RANGE = (0.25, 1.1)
SPLASH_INTENSITY_SPEED = 0.9
SPLASH_BIAS_RANGE = (0.3, 1.2)
SPLASH_TTL_RANGE = (0.35, 0.75)
SPLASH_SIZE_RANGE = (1.0, 2.1)
SPLASH_GRAVITY = 4.8           # Units/s^2, kept below DROP_GRAVITY
SPLASH_DRAG = 0.96
SPLASH_LIGHT_EVERY = 4  # Every Nth splash particle uses the lighter visual weight

WALL_SPLASH_INTENSITY = 0.35
WALL_SPLASH_BIAS = 0.15
FLOOR_SPLASH_INTENSITY = 0.25
FLOOR_SPLASH_BIAS_X = 0.1
FLOOR_SPLASH_BIAS_Y = -0.2

# --- Ripples ---
RIPPLE_START_RADIUS = 1.5
RIPPLE_GROWTH = 22.0  # Units per second
RIPPLE_TTL_RANGE = (1.4, 2.4)

# --- Actor ---
ACTOR_RIM_OFFSET = 3.0     # Actor stands this far back from the left rim edge
ACTOR_EDGE_MARGIN = 4.0
ACTOR_STREAM_HEIGHT = 10.0  # Stream leaves at mid-height (actor is ~20 units tall)
ACTOR_LEAN = (2.0, 1.0)     # Lean offsets while engaged
AIM_SMOOTHING = 0.001       # Fraction of aim error remaining after one second
AIM_START = (0.60, 0.55)    # Fractions of WIDTH / HEIGHT

# Nod animation (seconds unless noted)
NOD_ENGAGED_DEFER = 0.25
NOD_FIRST_DELAY_RANGE = (0.9, 2.2)
NOD_RISE_RANGE = (0.12, 0.20)
NOD_HOLD_RANGE = (0.38, 0.75)
NOD_FALL_RANGE = (0.16, 0.26)
NOD_AMPLITUDE_RANGE = (0.55, 1.05)  # Units
NOD_GAP_RANGE = (1.0, 3.0)

# Colors (RGB / RGBA)
SKY_TOP = (58, 27, 104)
SKY_MID = (194, 74, 102)
SKY_BOTTOM = (255, 227, 161)
SKY_MID_STOP = 0.55
SUN = (255, 244, 225, 204)
HAZE = (255, 248, 238, 31)
FG = (11, 11, 16)
FG2 = (11, 11, 16, 191)
PANEL_FILL = (255, 255, 255, 20)
PANEL_EDGE = (0, 0, 0, 64)
TEXT_SHADOW = (0, 0, 0, 140)
OUTRO_GLOW = (255, 255, 255, 56)

# Text
OVERLAY_TITLE = "CANYON BREAK"
OVERLAY_SUBTITLE = "tap to begin"
HINT_TEXT = "tap & aim"
OUTRO_TEXT = "Ahhhhhh"
