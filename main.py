import logging
import sys

import pygame

from config import *
from fps import FrameRateMonitor
from loop import FrameScheduler, SimulationError, SimulationLoop, viewport_for
from physics import KeplerEngine, SnapshotError
from renderer import Canvas, TextPanel

logger = logging.getLogger(__name__)


def main():
    """
    The Main Entry Point.

    Sets up the Pygame window, creates the simulation and hands control to the frame scheduler.
    Everything after that happens in SimulationLoop.cycle(), once per frame:
    sample FPS, clear, step the simulation, draw, schedule the next frame.

    The loop runs until the window is closed. An engine failure stops it and exits with status 1.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = DEFAULT_LOOP_CONFIG
    engine = KeplerEngine(width=SCREEN_WIDTH, height=SCREEN_HEIGHT)
    viewport = viewport_for(engine, config)

    pygame.init()
    screen = pygame.display.set_mode((viewport.width, viewport.height))
    pygame.display.set_caption(WINDOW_TITLE)

    canvas = Canvas(screen, pygame.font.Font(None, FONT_SIZE), is_display=True)
    fps_panel = TextPanel(
        (FPS_PANEL_X, viewport.height - FPS_PANEL_BOTTOM_MARGIN),
        FPS_TEXT_COLOR,
        font=pygame.font.Font(None, FPS_FONT_SIZE),
        line_spacing=FPS_LINE_SPACING,
    )
    canvas.add_overlay(fps_panel)

    monitor = FrameRateMonitor(sink=fps_panel.write)
    scheduler = FrameScheduler(FPS)
    orrery_loop = SimulationLoop(engine, canvas, scheduler, monitor, config, viewport)

    exit_code = 0
    try:
        orrery_loop.start()
        scheduler.run()
    except (SimulationError, SnapshotError) as e:
        logger.error(f"Render loop stopped: {e}")
        exit_code = 1
    finally:
        logger.info(f"Drew {orrery_loop.frame_count} frames")
        pygame.quit()

    sys.exit(exit_code)

if __name__ == '__main__':
    main()
