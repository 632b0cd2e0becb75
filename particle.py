# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which stores the physics
state of every disc (position, velocity, radius) in NumPy arrays and
advances it one frame at a time. Wall reflection and the equal-mass
elastic collision are Numba-compiled kernels that operate on those arrays
by index, so the same code serves both the whole-system step and the
per-particle Particle views.
"""
import logging
import math
import numpy as np
from typing import Dict, Any, Iterator, Optional
from numba import jit

from constants import (
    COLLISION_MODES, DEFAULT_PARTICLE_RADIUS, FAST_VELOCITY_SPREAD,
    INITIAL_PARTICLE_COUNT, SLOW_VELOCITY_SPREAD
)

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], width: float, height: float):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": Optional[int]
#         - "particle_count": int, particles placed at random on start.
#         - "particle_radius": float
#         - "fast_velocity_spread" / "slow_velocity_spread": float
#         - "max_particles": Optional[int], None means unbounded.
#         - "collision_mode": "sequential" | "simultaneous"
#       - width, height: bounds used to place the initial particles.
#     - Side Effects: Allocates the state arrays.
#     - Invariants:
#       - self.positions is a float64 array of shape (N, 2).
#       - self.velocities is a float64 array of shape (N, 2).
#       - self.radii is a float64 array of shape (N,).
#       - N never decreases.
#
#   - step(self, width: float, height: float) -> int:
#     - Side Effects: Moves every particle by one unit time step.
#     - Outputs: Number of pairwise collisions resolved.
#     - Invariants: After the call r <= x <= width - r and
#       r <= y <= height - r for every particle.


@jit(nopython=True)
def _reflect_walls_numba(positions, velocities, radii, i, width, height):
    """
    Reflects particle i off any wall its bounding circle crosses.

    The velocity component is turned to point back inside and the position
    is clamped to [r, dimension - r].
    """
    r = radii[i]
    x = positions[i, 0]
    y = positions[i, 1]

    # Directional rather than a plain negation: a particle pushed past a
    # wall while already heading inward keeps heading inward.
    if x < r:
        velocities[i, 0] = abs(velocities[i, 0])
        positions[i, 0] = max(r, min(width - r, x))
    elif x > width - r:
        velocities[i, 0] = -abs(velocities[i, 0])
        positions[i, 0] = max(r, min(width - r, x))

    if y < r:
        velocities[i, 1] = abs(velocities[i, 1])
        positions[i, 1] = max(r, min(height - r, y))
    elif y > height - r:
        velocities[i, 1] = -abs(velocities[i, 1])
        positions[i, 1] = max(r, min(height - r, y))


@jit(nopython=True)
def _exchange_normal_numba(v1x, v1y, v2x, v2y, cos_a, sin_a):
    """
    Equal-mass elastic collision in the frame of the collision normal.

    Both velocities are rotated so the normal lies on the x axis, the
    normal components are swapped and the tangential ones kept, then the
    result is rotated back.
    """
    n1 = v1x * cos_a + v1y * sin_a
    t1 = v1y * cos_a - v1x * sin_a
    n2 = v2x * cos_a + v2y * sin_a
    t2 = v2y * cos_a - v2x * sin_a

    return (
        n2 * cos_a - t1 * sin_a,
        t1 * cos_a + n2 * sin_a,
        n1 * cos_a - t2 * sin_a,
        t2 * cos_a + n1 * sin_a,
    )


@jit(nopython=True)
def _collide_pair_numba(positions, velocities, radii, i, j):
    """
    Resolves an overlap between particles i and j in place.

    Returns True if the pair was overlapping. Afterwards the centres are
    exactly r_i + r_j apart along the original normal. Coincident centres
    resolve along +x, since atan2(0, 0) is 0.
    """
    dx = positions[j, 0] - positions[i, 0]
    dy = positions[j, 1] - positions[i, 1]
    distance = math.sqrt(dx * dx + dy * dy)
    min_distance = radii[i] + radii[j]

    if distance >= min_distance:
        return False

    angle = math.atan2(dy, dx)
    sin_a = math.sin(angle)
    cos_a = math.cos(angle)

    v1x, v1y, v2x, v2y = _exchange_normal_numba(
        velocities[i, 0], velocities[i, 1],
        velocities[j, 0], velocities[j, 1],
        cos_a, sin_a
    )
    velocities[i, 0] = v1x
    velocities[i, 1] = v1y
    velocities[j, 0] = v2x
    velocities[j, 1] = v2y

    # Half the overlap each
    overlap = (min_distance - distance) / 2.0
    positions[i, 0] -= overlap * cos_a
    positions[i, 1] -= overlap * sin_a
    positions[j, 0] += overlap * cos_a
    positions[j, 1] += overlap * sin_a
    return True


@jit(nopython=True)
def _step_sequential_numba(positions, velocities, radii, width, height):
    """
    One frame with particles processed strictly in container order.

    Each particle bounces off the walls, resolves against every other
    particle (earlier ones included), then integrates. A pair corrected
    while handling the first of the two is seen again, already moved,
    while handling the second.
    """
    particle_count = positions.shape[0]
    collisions = 0

    for i in range(particle_count):
        _reflect_walls_numba(positions, velocities, radii, i, width, height)

        for j in range(particle_count):
            if i == j:
                continue
            if _collide_pair_numba(positions, velocities, radii, i, j):
                collisions += 1

        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]

    # Confinement pass: collisions and integration may have carried any
    # particle over a wall after its own turn.
    for i in range(particle_count):
        _reflect_walls_numba(positions, velocities, radii, i, width, height)

    return collisions


@jit(nopython=True)
def _step_simultaneous_numba(positions, velocities, radii, width, height):
    """
    One frame with every pair resolved from the same snapshot.

    Corrections are accumulated per particle and applied together, so the
    processing order has no influence on the result.
    """
    particle_count = positions.shape[0]
    collisions = 0

    for i in range(particle_count):
        _reflect_walls_numba(positions, velocities, radii, i, width, height)

    start_pos = positions.copy()
    start_vel = velocities.copy()
    delta_pos = np.zeros_like(positions)
    delta_vel = np.zeros_like(velocities)

    for i in range(particle_count):
        for j in range(i + 1, particle_count):
            dx = start_pos[j, 0] - start_pos[i, 0]
            dy = start_pos[j, 1] - start_pos[i, 1]
            distance = math.sqrt(dx * dx + dy * dy)
            min_distance = radii[i] + radii[j]
            if distance >= min_distance:
                continue

            angle = math.atan2(dy, dx)
            sin_a = math.sin(angle)
            cos_a = math.cos(angle)

            v1x, v1y, v2x, v2y = _exchange_normal_numba(
                start_vel[i, 0], start_vel[i, 1],
                start_vel[j, 0], start_vel[j, 1],
                cos_a, sin_a
            )
            delta_vel[i, 0] += v1x - start_vel[i, 0]
            delta_vel[i, 1] += v1y - start_vel[i, 1]
            delta_vel[j, 0] += v2x - start_vel[j, 0]
            delta_vel[j, 1] += v2y - start_vel[j, 1]

            overlap = (min_distance - distance) / 2.0
            delta_pos[i, 0] -= overlap * cos_a
            delta_pos[i, 1] -= overlap * sin_a
            delta_pos[j, 0] += overlap * cos_a
            delta_pos[j, 1] += overlap * sin_a
            collisions += 1

    velocities += delta_vel
    positions += delta_pos
    positions += velocities

    for i in range(particle_count):
        _reflect_walls_numba(positions, velocities, radii, i, width, height)

    return collisions


class Particle:
    """
    A view of one particle's physics state inside a ParticleSystem.

    Reads and writes go straight to the system's arrays, so a view stays
    valid as the system grows.
    """
    __slots__ = ("_system", "index")

    def __init__(self, system: "ParticleSystem", index: int):
        self._system = system
        self.index = index

    @property
    def x(self) -> float:
        return float(self._system.positions[self.index, 0])

    @x.setter
    def x(self, value: float):
        self._system.positions[self.index, 0] = value

    @property
    def y(self) -> float:
        return float(self._system.positions[self.index, 1])

    @y.setter
    def y(self, value: float):
        self._system.positions[self.index, 1] = value

    @property
    def dx(self) -> float:
        return float(self._system.velocities[self.index, 0])

    @dx.setter
    def dx(self, value: float):
        self._system.velocities[self.index, 0] = value

    @property
    def dy(self) -> float:
        return float(self._system.velocities[self.index, 1])

    @dy.setter
    def dy(self, value: float):
        self._system.velocities[self.index, 1] = value

    @property
    def radius(self) -> float:
        return float(self._system.radii[self.index])

    def bounce(self, width: float, height: float) -> None:
        """Reflects this particle off any wall it crosses."""
        s = self._system
        _reflect_walls_numba(s.positions, s.velocities, s.radii, self.index, float(width), float(height))

    def collide(self, other: "Particle") -> bool:
        """Resolves an elastic collision with another particle of the same system."""
        if other._system is not self._system:
            raise ValueError("Particles belong to different systems.")
        if other.index == self.index:
            return False
        s = self._system
        return _collide_pair_numba(s.positions, s.velocities, s.radii, self.index, other.index)

    def kinetic_energy(self) -> float:
        """Kinetic energy of a unit-mass particle, 0.5 * speed^2."""
        speed = math.sqrt(self.dx ** 2 + self.dy ** 2)
        return 0.5 * speed * speed

    def __repr__(self) -> str:
        return (
            f"Particle(index={self.index}, x={self.x:.2f}, y={self.y:.2f}, "
            f"dx={self.dx:.3f}, dy={self.dy:.3f}, radius={self.radius:.1f})"
        )


class ParticleSystem:
    """
    An insertion-ordered container of particles backed by NumPy arrays.
    """
    def __init__(self, params: Dict[str, Any], width: float, height: float):
        """
        Initializes the particle system and places the starting particles.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (float): The width of the simulation area.
            height (float): The height of the simulation area.
        """
        self.radius = float(params.get('particle_radius', DEFAULT_PARTICLE_RADIUS))
        self.fast_velocity_spread = float(params.get('fast_velocity_spread', FAST_VELOCITY_SPREAD))
        self.slow_velocity_spread = float(params.get('slow_velocity_spread', SLOW_VELOCITY_SPREAD))
        max_particles = params.get('max_particles')
        self.max_particles: Optional[int] = int(max_particles) if max_particles is not None else None
        self.collision_mode = params.get('collision_mode', 'sequential')
        self.seed = params.get('seed')

        if self.radius <= 0:
            msg = f"Configuration error: particle_radius must be positive, got {self.radius}."
            logging.critical(msg)
            raise ValueError(msg)
        if self.collision_mode not in COLLISION_MODES:
            msg = (
                f"Configuration error: unknown collision_mode '{self.collision_mode}'. "
                f"Expected one of {', '.join(COLLISION_MODES)}."
            )
            logging.critical(msg)
            raise ValueError(msg)
        if self.max_particles is not None and self.max_particles < 0:
            msg = f"Configuration error: max_particles must be >= 0, got {self.max_particles}."
            logging.critical(msg)
            raise ValueError(msg)

        # All randomness in this module comes from one seeded generator.
        self.rng = np.random.default_rng(self.seed)

        self.positions = np.empty((0, 2), dtype=np.float64)
        self.velocities = np.empty((0, 2), dtype=np.float64)
        self.radii = np.empty(0, dtype=np.float64)
        self._at_capacity = False

        self.populate(params.get('particle_count', INITIAL_PARTICLE_COUNT), width, height)

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} particles "
            f"(radius {self.radius}, collision mode '{self.collision_mode}')."
        )

    @property
    def particle_count(self) -> int:
        return self.positions.shape[0]

    def __len__(self) -> int:
        return self.particle_count

    def __getitem__(self, index: int) -> Particle:
        if index < 0:
            index += self.particle_count
        if not 0 <= index < self.particle_count:
            raise IndexError("particle index out of range")
        return Particle(self, index)

    def __iter__(self) -> Iterator[Particle]:
        for i in range(self.particle_count):
            yield Particle(self, i)

    def populate(self, count: int, width: float, height: float) -> int:
        """
        Appends particles at uniformly random positions inside the bounds,
        with velocities drawn from the fast distribution.
        """
        count = self._room_for(count)
        if count == 0:
            return 0
        r = self.radius
        span = np.maximum([width - 2 * r, height - 2 * r], 0.0)
        positions = r + self.rng.random((count, 2)) * span
        velocities = (self.rng.random((count, 2)) - 0.5) * self.fast_velocity_spread
        return self._append(positions, velocities)

    def spawn(self, x: float, y: float, count: int) -> int:
        """
        Appends `count` particles at (x, y) with small random velocities.

        Returns:
            int: The number of particles actually added.
        """
        count = self._room_for(count)
        if count == 0:
            return 0
        positions = np.tile(np.array([x, y], dtype=np.float64), (count, 1))
        velocities = (self.rng.random((count, 2)) - 0.5) * self.slow_velocity_spread
        added = self._append(positions, velocities)
        logging.debug(f"Spawned {added} particles at ({x:.1f}, {y:.1f}). Total: {self.particle_count}.")
        return added

    def _room_for(self, count: int) -> int:
        count = max(int(count), 0)
        if self.max_particles is None:
            return count
        room = max(self.max_particles - self.particle_count, 0)
        if count > room and not self._at_capacity:
            self._at_capacity = True
            logging.warning(
                f"Particle cap of {self.max_particles} reached; further spawns are dropped."
            )
        return min(count, room)

    def _append(self, positions: np.ndarray, velocities: np.ndarray) -> int:
        count = positions.shape[0]
        self.positions = np.concatenate((self.positions, positions))
        self.velocities = np.concatenate((self.velocities, velocities))
        self.radii = np.concatenate((self.radii, np.full(count, self.radius)))
        return count

    def step(self, width: float, height: float) -> int:
        """
        Advances every particle by one frame.

        Returns:
            int: The number of pairwise collisions resolved.
        """
        if self.collision_mode == 'simultaneous':
            kernel = _step_simultaneous_numba
        else:
            kernel = _step_sequential_numba
        return int(kernel(self.positions, self.velocities, self.radii, float(width), float(height)))

    def kinetic_energies(self) -> np.ndarray:
        """Per-particle kinetic energy, 0.5 * speed^2 for unit mass."""
        return 0.5 * np.sum(self.velocities ** 2, axis=1)
