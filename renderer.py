import logging
import math
from collections import namedtuple

import pygame

from config import *
from physics import to_calendar_date, validate_snapshot

logger = logging.getLogger(__name__)


class ViewportConfig(namedtuple("ViewportConfig", ["width", "height", "zoom_factor"])):
    """Screen size in pixels plus how many pixels one AU covers. Fixed for the whole run."""
    __slots__ = ()

    @classmethod
    def create(cls, width, height, zoom_factor):
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport must have a positive size, got {width}x{height}")
        if zoom_factor <= 0:
            raise ValueError(f"Zoom factor must be positive, got {zoom_factor}")
        return cls(int(width), int(height), zoom_factor)


# --- Pygame Specific Helper Functions ---
def project(point, viewport):
    """
    Maps a simulation (x, y) in AU to a screen pixel position.

    Screen Y grows downwards while simulation Y grows upwards, hence the flip.
    Nothing is clamped here; a non-finite input gives a non-finite output.
    """
    sx = point[0] * viewport.zoom_factor + viewport.width / 2
    sy = -point[1] * viewport.zoom_factor + viewport.height / 2
    return sx, sy

def is_drawable(screen_point):
    return math.isfinite(screen_point[0]) and math.isfinite(screen_point[1])

def clamp_to_screen(screen_point):
    """Clamp values to prevent Pygame from choking on huge numbers (trial and error)."""
    return (int(max(COORD_MIN, min(screen_point[0], COORD_MAX))),
            int(max(COORD_MIN, min(screen_point[1], COORD_MAX))))


class Canvas:
    """
    Immediate-mode drawing surface on top of a pygame Surface.

    Later calls paint over earlier ones. Overlays (the FPS readout) are drawn last,
    on present(), which also flips the window when drawing straight to the display.
    """
    def __init__(self, surface, font, is_display=False):
        self.surface = surface
        self.font = font
        self.is_display = is_display
        self.overlays = []

    def add_overlay(self, overlay):
        self.overlays.append(overlay)

    def clear(self, color=BACKGROUND_COLOR):
        self.surface.fill(color)

    def text(self, text, pos, color, font=None):
        text_surface = (font or self.font).render(text, True, color)
        self.surface.blit(text_surface, clamp_to_screen(pos))

    def line(self, start, end, color, width=1):
        pygame.draw.line(self.surface, color, clamp_to_screen(start), clamp_to_screen(end), width)

    def circle(self, center, radius, color):
        pygame.draw.circle(self.surface, color, clamp_to_screen(center), radius)

    def present(self):
        for overlay in self.overlays:
            overlay.draw(self)
        if self.is_display:
            pygame.display.flip()


class TextPanel:
    """A block of text lines at a fixed spot. write() replaces the text, draw() puts it on a canvas."""
    def __init__(self, pos, color=TEXT_COLOR, font=None, line_spacing=LABEL_SPACING):
        self.pos = pos
        self.color = color
        self.font = font
        self.line_spacing = line_spacing
        self.lines = []

    def write(self, text):
        self.lines = text.splitlines()

    def draw(self, canvas):
        x, y = self.pos
        for i, line in enumerate(self.lines):
            canvas.text(line, (x, y + i * self.line_spacing), self.color, font=self.font)


# --- Scene ---
class SceneRenderer:
    """
    Draws one snapshot: the date in the top right, then for every body its label,
    a guide line from the label to the body, and the body itself.

    Bodies are drawn in snapshot order so later bodies sit on top of earlier ones.
    The canvas is expected to be cleared already.
    """
    def __init__(self, canvas):
        self.canvas = canvas

    def draw_date(self, epoch, viewport):
        date = to_calendar_date(epoch)
        x = viewport.width - DATE_RIGHT_MARGIN
        self.canvas.text(f"Year: {date.year}", (x, DATE_TOP), TEXT_COLOR)
        self.canvas.text(f"Month: {date.month}", (x, DATE_TOP + DATE_SPACING), TEXT_COLOR)
        self.canvas.text(f"Day: {date.day}", (x, DATE_TOP + 2 * DATE_SPACING), TEXT_COLOR)

    def draw_body(self, index, name, coord, viewport):
        is_sol = name == SOL_NAME
        color = SOL_COLOR if is_sol else TEXT_COLOR
        label_y = LABEL_TOP + LABEL_SPACING * index

        self.canvas.text(name, (LABEL_X, label_y), color)

        p = project(coord, viewport)
        if not is_drawable(p):
            logger.warning(f"Skipping marker for {name} (#{index}): position {tuple(coord)} is not finite")
            return

        self.canvas.line((GUIDE_ANCHOR_X, label_y), p, GUIDE_LINE_COLOR)
        self.canvas.circle(p, SOL_RADIUS if is_sol else BODY_RADIUS, color)

    def render(self, snapshot, viewport):
        validate_snapshot(snapshot)
        self.draw_date(snapshot.epoch, viewport)
        for i, (coord, name) in enumerate(zip(snapshot.coords, snapshot.names)):
            self.draw_body(i, name, coord, viewport)
