# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They cover the
rendering surface, the particle initialization formula and the default
configuration used when no `config.json` is present.
"""

# Visualization settings
FPS = 60
WINDOW_TITLE = "Peculiar Particles"
BACKGROUND_COLOR = (0.0, 0.0, 0.0, 1.0) # Opaque black, RGBA floats

# The canvas spans the full window width and 101% of its height.
CANVAS_WIDTH_RATIO = 1.0
CANVAS_HEIGHT_RATIO = 1.01

# --- Particle Initialization ---
DEFAULT_PARTICLE_COUNT = 10
# size = ln(i + SIZE_LOG_OFFSET); keeps sizes nearly constant across indices.
SIZE_LOG_OFFSET = 100000
# Red channel ramps from RED_FLOOR up to RED_FLOOR + RED_SPAN.
RED_FLOOR = 0.2
RED_SPAN = 0.8

# Name of the motion rule used when the config does not choose one.
DEFAULT_MOTION_RULE = "orbital"

DEFAULT_CONFIG = {
    "simulation_parameters": {
        "particle_count": DEFAULT_PARTICLE_COUNT,
        "motion_rule": DEFAULT_MOTION_RULE,
    },
    "visualization": {
        "window_title": WINDOW_TITLE,
        "width_ratio": CANVAS_WIDTH_RATIO,
        "height_ratio": CANVAS_HEIGHT_RATIO,
        "window_size": None,
        "fps": FPS,
    },
    "run_control": {
        "log_throttle_frames": 100,
        "profile": False,
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_file": "logs/particles.log",
    },
}
