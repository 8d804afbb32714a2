# visualization.py
"""
Handles drawing and input for the particle simulation using Pygame.

The Visualizer is the render target and the pointer input source; the
ClockScheduler stands in for the display refresh callback.
"""
import logging
import pygame
from typing import Any, Callable, Dict, Optional, Tuple
from constants import CANVAS_HEIGHT_RATIO, CANVAS_WIDTH_RATIO, FPS, WINDOW_TITLE

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import FrameContext


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Side Effects: Initializes Pygame and creates a display surface of
#       width_ratio * display width by height_ratio * display height, or
#       of vis_params["window_size"] when given.
#     - Raises: RendererError if Pygame cannot create the surface.
#
#   - clear(color) / draw_point(size, position, color):
#     - Colors are RGBA floats in [0, 1]; positions are NDC.
#
#   - handle_events(self, context: FrameContext) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Updates the pointer state held by the context.


class RendererError(RuntimeError):
    """The render target could not be set up."""


def to_rgb(color) -> Tuple[int, int, int]:
    """Converts an RGBA float color to a Pygame RGB tuple, clamped to 0-255."""
    return tuple(max(0, min(255, int(round(c * 255)))) for c in color[:3])


class Visualizer:
    """
    Paints particles as filled circles and reports pointer movement.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params or {}
        try:
            pygame.init()
            window_size = vis_params.get('window_size')
            if window_size:
                base_width, base_height = window_size
            else:
                display_info = pygame.display.Info()
                base_width, base_height = display_info.current_w, display_info.current_h

            width_ratio = vis_params.get('width_ratio', CANVAS_WIDTH_RATIO)
            height_ratio = vis_params.get('height_ratio', CANVAS_HEIGHT_RATIO)
            self.width = int(width_ratio * base_width)
            self.height = int(height_ratio * base_height)

            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption(vis_params.get('window_title', WINDOW_TITLE))
        except pygame.error as e:
            logging.critical(f"Could not create the render target: {e}")
            raise RendererError(str(e)) from e

        logging.info(f"Visualizer initialized with Pygame display ({self.width}x{self.height}).")

    def ndc_to_pixel(self, position: Tuple[float, float]) -> Tuple[float, float]:
        """Maps normalized device coordinates onto the surface."""
        x, y = position
        return (x + 1) / 2 * self.width, (1 - y) / 2 * self.height

    def clear(self, color) -> None:
        self.screen.fill(to_rgb(color))

    def draw_point(self, size: float, position: Tuple[float, float], color) -> None:
        """Paints one point of diameter `size` pixels centered at `position`."""
        pygame.draw.circle(self.screen, to_rgb(color), self.ndc_to_pixel(position), size / 2)

    def handle_events(self, context: "FrameContext") -> bool:
        """
        Feeds pointer events into the context.

        Returns:
            bool: False if the window should close, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.MOUSEMOTION:
                context.pointer_moved(*event.pos)
            elif event.type == pygame.WINDOWLEAVE:
                context.pointer_left()
                logging.debug("Pointer left the window.")
        return True

    def present(self) -> None:
        pygame.display.flip()

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()


class ClockScheduler:
    """
    Frame scheduler driven by a Pygame clock.

    Holds at most one pending callback. `run_pending` waits for the next
    tick and runs it.
    """
    def __init__(self, fps: int = FPS, clock=None):
        self.fps = fps
        self.clock = clock if clock is not None else pygame.time.Clock()
        self._next_id = 0
        self._pending: Optional[Tuple[int, Callable[[], None]]] = None

    def request_frame(self, callback: Callable[[], None]) -> int:
        self._next_id += 1
        if self._pending is not None:
            logging.warning(f"Frame {self._pending[0]} was still pending and has been replaced.")
        self._pending = (self._next_id, callback)
        return self._next_id

    def cancel_frame(self, frame_id: int) -> None:
        if self._pending is not None and self._pending[0] == frame_id:
            self._pending = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def run_pending(self) -> bool:
        """
        Runs the pending callback after the next tick.

        Returns:
            bool: True if a callback ran.
        """
        self.clock.tick(self.fps)
        if self._pending is None:
            return False
        _, callback = self._pending
        self._pending = None
        callback()
        return True
