"""Configuration for the 2D planet gravity simulation."""

# =============================================================================
# CORE LIMITS
# =============================================================================

MAX_PLANETS = 100   # Pool capacity, planets beyond this are rejected
GRAVITY = 10.0      # Force constant (tuned for pixels and frames, not SI)

# =============================================================================

WINDOW = {
    "width": 1440,
    "height": 900,
    "title": "N-Body Simulation",
    "target_fps": 60,
}

CAMERA = {
    "initial_zoom": 1.0,
    "pan_speed": 10.0,     # World units per frame while a pan key is held
    "zoom_step": 0.1,      # Per I/O key press
    "min_zoom": 0.1,
    "max_zoom": 10.0,
}

SIMULATION = {
    "max_planets": MAX_PLANETS,
    "G": GRAVITY,

    # Collision hook: "ignore", "detect", "resolve", "fatal"
    "collision": "ignore",
    "restitution": 0.8,    # Only used by "resolve" (1.0 = elastic)

    # "pairwise" updates in place per pair, "two_pass" accumulates then applies
    "scheme": "pairwise",
}

# Initial bodies. Offsets are relative to the centre of the window.
PLANETS = [
    {"name": "Earth", "mass": 20.0, "diameter": 30.0, "offset": (150.0, 150.0), "velocity": (-2.5, 3.5)},
    {"name": "Sun", "mass": 500.0, "diameter": 75.0, "offset": (0.0, 0.0), "velocity": (0.0, 0.0)},
    {"name": "Mars", "mass": 10.0, "diameter": 25.0, "offset": (-150.0, -150.0), "velocity": (-1.5, 2.5)},
]

# Template for planets spawned with the mouse
SPAWN = {
    "name": "Default",
    "mass": 20.0,
    "diameter": 30.0,
    "velocity": (-0.5, 1.5),
}

COLORS = {
    "background": (0.96, 0.96, 0.96, 1.0),   # Off-white
    "planet": (0.9, 0.16, 0.22),             # Red
    "label": (0, 0, 0),
    "hud": (0, 0, 0),
}

LOGGING = {
    "level": "INFO",
    "file": None,
}
