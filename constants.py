# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover rendering properties, default window sizes and the reference
physics and entropy settings used whenever config.json leaves a value out.
"""

# Visualization settings
FPS = 60
DEFAULT_WINDOW_WIDTH = 1000
DEFAULT_WINDOW_HEIGHT = 800
# Height of the entropy graph strip below the particle area.
DEFAULT_GRAPH_HEIGHT = 200
BACKGROUND_COLOR = (0, 0, 0)

# --- Entropy Graph ---
GRAPH_BACKGROUND_COLOR = (0, 0, 0)
GRAPH_GRID_COLOR = (51, 51, 51)
GRAPH_LINE_COLOR = (0, 255, 0)
GRAPH_TEXT_COLOR = (255, 255, 255)
GRAPH_GRID_ROWS = 5
GRAPH_GRID_COLS = 10
GRAPH_LINE_WIDTH = 3
# The plotted line never reaches the very top edge of the graph.
GRAPH_MAX_FILL = 0.98
GRAPH_PADDING = 10
GRAPH_BOTTOM_PADDING = 25
GRAPH_FONT_SIZE = 16

# --- Particle Colors (HSL) ---
PARTICLE_SATURATION = 50
PARTICLE_LIGHTNESS = 50

# Physics defaults
DEFAULT_PARTICLE_RADIUS = 4.0
INITIAL_PARTICLE_COUNT = 50
# Full width of the uniform range each velocity component is drawn from.
FAST_VELOCITY_SPREAD = 4.0
SLOW_VELOCITY_SPREAD = 0.4
PARTICLES_PER_SPAWN = 5
SPAWN_INTERVAL = 0.1  # seconds between repeated spawns while held
COLLISION_MODES = ("sequential", "simultaneous")

# Entropy defaults
ENTROPY_GRID_SIZE = 32
HISTORY_CAPACITY = 600  # 60 seconds at 10 samples per second
SAMPLE_INTERVAL = 0.1  # seconds
