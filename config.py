"""
General config file for the Orrery
Contains constants which can be altered to tune the render loop.
Changing the screen size here does not resize anything mid-run, it is read once at startup.
"""
from collections import namedtuple

# --- Constants ---
SCREEN_WIDTH = 1200
SCREEN_HEIGHT = 800
FPS = 60
WINDOW_TITLE = "Orrery | Sol |"

# Colors
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
YELLOW = (255, 255, 0)
GUIDE_GREY = (80, 80, 80) # white at 0x50 alpha, pre-blended over black

BACKGROUND_COLOR = BLACK
TEXT_COLOR = WHITE
SOL_COLOR = YELLOW
GUIDE_LINE_COLOR = GUIDE_GREY
FPS_TEXT_COLOR = WHITE

# Body markers (pixels)
SOL_NAME = "Sol"
SOL_RADIUS = 5
BODY_RADIUS = 2

# Fonts
FONT_SIZE = 20 # pygame default font at 20 is roughly 15px sans-serif
FPS_FONT_SIZE = 18

# Label layout
LABEL_X = 10
LABEL_TOP = 20
LABEL_SPACING = 20
GUIDE_ANCHOR_X = 50
DATE_RIGHT_MARGIN = 95
DATE_TOP = 20
DATE_SPACING = 20

# FPS readout, bottom left
FPS_PANEL_X = 10
FPS_PANEL_BOTTOM_MARGIN = 100 # panel top sits this far above the bottom edge
FPS_LINE_SPACING = 18
FPS_WINDOW = 100

# Coordinate clamping limits for Pygame
COORD_MIN = -32760
COORD_MAX = 32760

# --- Loop presets ---
# step_days: simulated days per rendered frame
# zoom_factor: pixels per AU
# use_engine_viewport_hints: size the viewport from the engine's width()/height()
LoopConfig = namedtuple("LoopConfig", ["step_days", "zoom_factor", "use_engine_viewport_hints"])

INNER_SYSTEM = LoopConfig(step_days=10, zoom_factor=30, use_engine_viewport_hints=False)
OUTER_SYSTEM = LoopConfig(step_days=100, zoom_factor=10, use_engine_viewport_hints=True)

DEFAULT_LOOP_CONFIG = INNER_SYSTEM
