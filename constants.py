# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties, canvas sizing, the canonical flow-field parameters and the
validated ranges for the configuration surface.
"""

# --- Flow Field ---
# Spatial frequency applied to canvas coordinates before sampling noise.
# Smaller values produce broader, smoother currents.
NOISE_SCALE = 0.002
# Number of full rotations the [0, 1] noise range maps onto.
ANGLE_MULTIPLIER = 4
NOISE_OCTAVES = 4
NOISE_FALLOFF = 0.5
# Size of the gradient permutation table (before duplication).
PERMUTATION_SIZE = 256

# --- Particle Defaults ---
DEFAULT_PARTICLE_COUNT = 10000
DEFAULT_OPACITY = 10
DEFAULT_STROKE_WEIGHT = 0.3
DEFAULT_LIFE_RANGE = (100, 200)
DEFAULT_SPEED_RANGE = (2.0, 4.0)
# Upper bound (exclusive) for randomly chosen seeds.
RANDOM_SEED_LIMIT = 1_000_000

# --- Validated Ranges (inclusive) ---
PARTICLE_COUNT_RANGE = (1, 50000)
OPACITY_RANGE = (1, 255)
STROKE_WEIGHT_RANGE = (0.1, 10.0)
NOISE_OCTAVES_RANGE = (1, 8)

# --- Canvas ---
# The canvas is square, fitted to the container minus a margin and capped.
MAX_CANVAS_SIZE = 800
CANVAS_MARGIN = 32
BACKGROUND_COLOR = (255, 255, 255)  # White paper
STROKE_COLOR = (0, 0, 0)            # Black ink

# Visualization settings
FPS = 60
WINDOW_CAPTION = "Perlin Flow Field"
WINDOW_BACKGROUND_COLOR = (24, 24, 24)
HUD_BACKGROUND_COLOR = (40, 40, 40, 170)
HUD_TEXT_COLOR = (255, 255, 255)
HUD_KEY_COLOR = (200, 200, 200)
HUD_PADDING = 8

# --- Export ---
PNG_FILENAME = "perlin-noise-art.png"
SVG_FILENAME = "perlin_noise_art.svg"
SVG_MAX_SEGMENTS = 2_000_000
# Frames rendered by a headless run when no limit is configured.
HEADLESS_FRAMES = 500
