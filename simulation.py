# simulation.py
"""
Handles the motion rules and the per-frame update/draw loop.

This module defines the two cursor-following motion rules, the FrameContext
that carries the per-run selection, canvas size and pointer state into them,
and the Simulation class that drives one frame at a time through a renderer
and a frame scheduler.
"""
import enum
import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple, Callable, Protocol
from numba import jit
from particle import Particle, ParticleSystem
from constants import BACKGROUND_COLOR

# --- Data Contracts ---
#
# linear_follow(particle, context) -> Particle
# orbital_follow(particle, context) -> Particle
#   - Inputs: a Particle and the FrameContext for this frame.
#   - Outputs: the same Particle, updated in place.
#   - Invariants: with context.pointer None the particle is untouched.
#     Only position and velocity change, through Particle.set_state().
#
# class Simulation:
#   - step(self, context: FrameContext) -> None:
#     - Side Effects: clears the renderer, then updates and draws each
#       particle in order.
#   - start(self, context: FrameContext) -> None:
#     - Side Effects: IDLE -> RUNNING, runs the first frame. At most one
#       frame callback is pending at any time afterwards.


class Renderer(Protocol):
    def clear(self, color: Tuple[float, float, float, float]) -> None: ...

    def draw_point(self, size: float, position: Tuple[float, float],
                   color: Tuple[float, float, float, float]) -> None: ...


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> int: ...

    def cancel_frame(self, frame_id: int) -> None: ...


@jit(nopython=True)
def _linear_follow_numba(position, target, scale):
    """Moves straight toward the target by `scale` of the remaining distance."""
    velocity = (target - position) * scale
    return position + velocity, velocity


@jit(nopython=True)
def _orbital_follow_numba(position, velocity, target, scale):
    """
    Attraction toward the target plus the same vector rotated by 90 degrees.

    The existing y velocity is carried into the new y position. Nothing
    under this rule ever sets velocity, so that term stays zero for particles
    that start at rest.
    """
    to_center = target - position
    new_position = np.empty(2)
    new_position[0] = position[0] + to_center[0] * scale - to_center[1] * scale
    new_position[1] = (
        position[1] + to_center[1] * scale + to_center[0] * scale + velocity[1]
    )
    return new_position


def pointer_to_ndc(pointer: Tuple[float, float], width: float, height: float) -> np.ndarray:
    """
    Converts a surface pixel coordinate to normalized device coordinates.

    Screen y grows downward, device y grows upward. A zero-sized canvas
    raises ZeroDivisionError.
    """
    x, y = pointer
    return np.array([2 * x / width - 1, -(2 * y / height - 1)], dtype=np.float64)


@dataclass
class FrameContext:
    """Everything a motion rule needs to know about the current frame."""
    motion: "MotionRule"
    width: float
    height: float
    pointer: Optional[Tuple[float, float]] = None

    def pointer_moved(self, x: float, y: float) -> None:
        self.pointer = (x, y)

    def pointer_left(self) -> None:
        self.pointer = None

    def target(self) -> Optional[np.ndarray]:
        if self.pointer is None:
            return None
        return pointer_to_ndc(self.pointer, self.width, self.height)


def linear_follow(particle: Particle, context: FrameContext) -> Particle:
    target = context.target()
    if target is None:
        return particle
    position, velocity = _linear_follow_numba(particle.position, target, float(particle.scale))
    particle.set_state(position, velocity)
    return particle


def orbital_follow(particle: Particle, context: FrameContext) -> Particle:
    target = context.target()
    if target is None:
        return particle
    position = _orbital_follow_numba(
        particle.position, particle.velocity, target, float(particle.scale)
    )
    particle.set_state(position, particle.velocity)
    return particle


class MotionRule(enum.Enum):
    """The motion rule applied uniformly to every particle in a run."""
    LINEAR_FOLLOW = 0
    ORBITAL_FOLLOW = 1

    def apply(self, particle: Particle, context: FrameContext) -> Particle:
        return _RULES[self](particle, context)

    @classmethod
    def from_config(cls, value) -> "MotionRule":
        """
        Resolves a config value: the integer selector, the member name, or
        the short names "linear" / "orbital".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().upper()
            key = _SHORT_NAMES.get(key, key)
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"Unknown motion rule: {value!r}")


_RULES = {
    MotionRule.LINEAR_FOLLOW: linear_follow,
    MotionRule.ORBITAL_FOLLOW: orbital_follow,
}

_SHORT_NAMES = {
    "LINEAR": "LINEAR_FOLLOW",
    "ORBITAL": "ORBITAL_FOLLOW",
}


class LoopState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class Simulation:
    """
    Runs the frame loop: clear, update and draw every particle, reschedule.
    """
    def __init__(self, particles: ParticleSystem, renderer: Renderer,
                 scheduler: FrameScheduler, run_params: Optional[Dict[str, Any]] = None):
        """
        Initializes the frame loop.

        Args:
            particles (ParticleSystem): The particles to move and draw.
            renderer (Renderer): Paints the background and each particle.
            scheduler (FrameScheduler): Calls back once per display refresh.
            run_params (Dict[str, Any]): The `run_control` config section.
        """
        run_params = run_params or {}
        self.particles = particles
        self.renderer = renderer
        self.scheduler = scheduler
        self.log_throttle = run_params.get('log_throttle_frames', 100)

        self.state = LoopState.IDLE
        self.frame_count = 0
        self.context: Optional[FrameContext] = None
        self._frame_id: Optional[int] = None

        logging.info(f"Simulation initialized with {len(particles)} particles.")

    def step(self, context: FrameContext) -> None:
        """
        Executes one frame against the given context.
        """
        self.renderer.clear(BACKGROUND_COLOR)

        # Each particle is updated and then drawn before the next one.
        for particle in self.particles:
            context.motion.apply(particle, context)
            self.renderer.draw_point(particle.size, tuple(particle.position), particle.color)

        self.frame_count += 1

        if self.log_throttle and self.frame_count % self.log_throttle == 0:
            logging.info(f"Frame {self.frame_count}")
            mean_pos = self.particles.mean_position()
            logging.debug(
                f"Frame {self.frame_count} | Pointer: {context.pointer} | "
                f"Mean position: ({mean_pos[0]:.4f}, {mean_pos[1]:.4f})"
            )

    def start(self, context: FrameContext) -> None:
        """
        Switches the loop to RUNNING and runs the first frame immediately.
        """
        self.context = context
        if self.state is LoopState.IDLE:
            self.state = LoopState.RUNNING
            logging.info(f"Frame loop started with motion rule {context.motion.name}.")
        else:
            logging.debug("Frame loop restarted while running.")
        self._on_frame()

    def _on_frame(self) -> None:
        if self._frame_id is not None:
            self.scheduler.cancel_frame(self._frame_id)
            self._frame_id = None
        self.step(self.context)
        self._frame_id = self.scheduler.request_frame(self._on_frame)
