import logging

import pygame

from config import *
from physics import SnapshotError
from renderer import SceneRenderer, ViewportConfig

"""
RENDER LOOP
-----------
One frame cycle, repeated until the window is closed:

1.  **Instrumentation**: Sample the frame rate and refresh the FPS readout.
2.  **Clear**: Wipe the canvas to the background color.
3.  **Step**: Advance the simulation by a fixed number of days.
4.  **Snapshot**: Ask the engine where everything is now.
5.  **Draw**: Hand the snapshot to the SceneRenderer, then present the frame.
6.  **Reschedule**: Ask the FrameScheduler to run the next cycle on the next tick.

Only one cycle is ever in flight. If the engine fails the loop stops for good rather than
drawing a stale or half-updated system.
"""

logger = logging.getLogger(__name__)

# Loop states
IDLE = "idle"
STEPPING = "stepping"
RENDERING = "rendering"
SCHEDULED = "scheduled"
STOPPED = "stopped"


class SchedulerError(RuntimeError):
    pass


class SimulationError(RuntimeError):
    """The engine failed mid-cycle. The loop has stopped scheduling frames."""


class CancelToken:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FrameScheduler:
    """
    Runs a callback on the next frame tick, pygame style.

    request_frame() queues exactly one callback; asking again before it has run is an error.
    run() keeps ticking until nothing is queued, so a callback that re-requests itself loops forever.
    Closing the window (pygame.QUIT) cancels whatever is queued.
    """
    def __init__(self, fps=FPS, clock=None, event_source=None):
        self.fps = fps
        self.clock = clock or pygame.time.Clock()
        self.event_source = event_source or pygame.event.get
        self._pending = None

    @property
    def pending(self):
        return self._pending is not None

    def request_frame(self, callback):
        if self._pending is not None:
            raise SchedulerError("A frame is already scheduled")
        token = CancelToken()
        self._pending = (callback, token)
        return token

    def run_once(self):
        """Waits for the next tick and runs the queued callback. Returns False once there is nothing left to run."""
        if self._pending is None:
            return False

        self.clock.tick(self.fps)
        callback, token = self._pending
        for event in self.event_source():
            if event.type == pygame.QUIT:
                logger.info("Window closed, cancelling the next frame")
                token.cancel()

        self._pending = None
        if token.cancelled:
            return False
        callback()
        return True

    def run(self):
        while self.run_once():
            pass


def viewport_for(engine, config):
    """Screen size from the engine's hints when the config asks for it, otherwise from config.py."""
    if config.use_engine_viewport_hints and hasattr(engine, "width") and hasattr(engine, "height"):
        return ViewportConfig.create(engine.width(), engine.height(), config.zoom_factor)
    return ViewportConfig.create(SCREEN_WIDTH, SCREEN_HEIGHT, config.zoom_factor)


class SimulationLoop:
    """
    Glues the engine, the renderer, the FPS monitor and the scheduler together.

    The engine handle is created once by start() and lives as long as the loop does.
    """
    def __init__(self, engine, canvas, scheduler, monitor=None, config=DEFAULT_LOOP_CONFIG, viewport=None):
        self.engine = engine
        self.canvas = canvas
        self.scheduler = scheduler
        self.monitor = monitor
        self.config = config
        self.viewport = viewport or viewport_for(engine, config)
        self.renderer = SceneRenderer(canvas)

        self.handle = None
        self.token = None
        self.state = IDLE
        self.frame_count = 0

    def start(self):
        if self.handle is None:
            self.handle = self.engine.create()
            logger.info(
                f"Loop starting: {self.config.step_days} days/frame, zoom {self.config.zoom_factor} px/AU, "
                f"viewport {self.viewport.width}x{self.viewport.height}"
            )
        self.schedule()

    def schedule(self):
        self.token = self.scheduler.request_frame(self.cycle)
        self.state = SCHEDULED

    def stop(self):
        self.state = STOPPED
        if self.token is not None:
            self.token.cancel()

    def cycle(self):
        self.state = IDLE
        if self.monitor is not None:
            self.monitor.sample()
            self.monitor.render()

        self.canvas.clear(BACKGROUND_COLOR)

        self.state = STEPPING
        try:
            self.engine.advance(self.handle, self.config.step_days)
            snapshot = self.engine.snapshot(self.handle)
        except Exception as e:
            self.stop()
            logger.exception(f"Simulation engine failed on frame {self.frame_count + 1}, stopping")
            raise SimulationError(f"Engine failed on frame {self.frame_count + 1}: {e}") from e

        self.state = RENDERING
        try:
            self.renderer.render(snapshot, self.viewport)
        except SnapshotError:
            self.stop()
            logger.error(f"Malformed snapshot on frame {self.frame_count + 1}, stopping")
            raise
        self.canvas.present()

        self.frame_count += 1
        logger.debug(f"Frame {self.frame_count} drawn at JD {snapshot.epoch}")
        self.schedule()
