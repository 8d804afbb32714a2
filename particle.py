# particle.py
"""
Particle state for the simulation.

This module defines the Particle value object and the deterministic
initialization pass that builds the fixed, ordered particle collection.
"""
import logging
import math
import numpy as np
from typing import Dict, Any, Tuple, Iterator
from constants import DEFAULT_PARTICLE_COUNT, SIZE_LOG_OFFSET, RED_FLOOR, RED_SPAN

# --- Data Contracts ---
#
# class Particle:
#   - __init__(self, size, position, velocity, color, scale):
#     - No validation. Out-of-range values are accepted as given.
#     - Invariants:
#       - size, color and scale are read-only after construction.
#       - position and velocity are float64 arrays of shape (2,) and only
#         change together through set_state(). The stored arrays are
#         read-only copies.
#
# create_particles(count: int) -> Tuple[Particle, ...]:
#   - Pure function of count. Every particle starts at (0, 0) at rest.

def _frozen_vector(values) -> np.ndarray:
    vector = np.array(values, dtype=np.float64)
    vector.flags.writeable = False
    return vector


class Particle:
    """
    A single point particle: size, position, velocity, RGBA color and scale.
    """
    def __init__(self, size: float, position, velocity, color, scale: float):
        self._size = size
        self._color = tuple(color)
        self._scale = scale
        self._position = _frozen_vector(position)
        self._velocity = _frozen_vector(velocity)

    @property
    def size(self) -> float:
        return self._size

    @property
    def color(self) -> Tuple[float, float, float, float]:
        return self._color

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def position(self) -> np.ndarray:
        return self._position

    @property
    def velocity(self) -> np.ndarray:
        return self._velocity

    def set_state(self, position, velocity) -> None:
        """Replaces position and velocity in one step."""
        self._position = _frozen_vector(position)
        self._velocity = _frozen_vector(velocity)

    def __repr__(self) -> str:
        return (
            f"Particle(size={self._size!r}, "
            f"position={tuple(self._position.tolist())}, "
            f"velocity={tuple(self._velocity.tolist())}, "
            f"color={self._color}, scale={self._scale!r})"
        )


def create_particles(count: int) -> Tuple[Particle, ...]:
    """
    Builds `count` particles with index-dependent size, color and scale.

    Later particles are slightly larger, redder and faster.
    """
    particles = []
    for i in range(count):
        particle = Particle(
            size=math.log(i + SIZE_LOG_OFFSET),
            position=(0.0, 0.0),
            velocity=(0.0, 0.0),
            color=((i + 1) / (count + 1) * RED_SPAN + RED_FLOOR, 0.0, 0.0, 1.0),
            scale=(i + 1) / (3 * count),
        )
        logging.debug(f"Created particle {i}: {particle!r}")
        particles.append(particle)
    return tuple(particles)


class ParticleSystem:
    """
    The fixed-size ordered collection of particles for one run.
    """
    def __init__(self, params: Dict[str, Any]):
        """
        Initializes the particle system.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.particle_count = params.get('particle_count', DEFAULT_PARTICLE_COUNT)
        self.particles = create_particles(self.particle_count)

        logging.info(f"ParticleSystem initialized with {self.particle_count} particles.")

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def __len__(self) -> int:
        return len(self.particles)

    def __getitem__(self, index: int) -> Particle:
        return self.particles[index]

    def mean_position(self) -> np.ndarray:
        """Average position over all particles, for diagnostics."""
        return np.mean([p.position for p in self.particles], axis=0)
