# simulation.py
"""
Handles the core simulation loop state.

This module defines the Simulation class, the single owner of all mutable
state in a run: the particle system, the current bounds, the entropy
estimator with its history buffer and sampler, and the press-and-hold
spawn task. Several independent Simulation instances can coexist.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional

from constants import (
    ENTROPY_GRID_SIZE, HISTORY_CAPACITY, PARTICLES_PER_SPAWN,
    SAMPLE_INTERVAL, SPAWN_INTERVAL
)
from history import EntropySampler, HistoryBuffer
from particle import ParticleSystem
from spatial_entropy import EntropyEstimator, EntropySample
from spawner import SpawnHandle

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, sim_params, entropy_params, width, height, clock=time.perf_counter):
#     - Inputs:
#       - sim_params: "simulation_parameters" section of config.json.
#       - entropy_params: "entropy" section of config.json.
#         - "grid_size": int
#         - "history_capacity": int
#         - "sample_interval": float, seconds
#       - width, height: initial bounds of the particle area.
#       - clock: zero-argument callable returning seconds.
#
#   - step(self) -> Optional[EntropySample]:
#     - Side Effects: Polls the spawn task, advances the particles one
#       frame, then offers the post-step state to the sampler.
#     - Outputs: The sample recorded this frame, if any.


class Simulation:
    """
    Owns and advances one independent particle-gas simulation.
    """
    def __init__(self, sim_params: Dict[str, Any], entropy_params: Dict[str, Any],
                 width: float, height: float, clock: Callable[[], float] = time.perf_counter):
        """
        Initializes the simulation environment.

        Args:
            sim_params (Dict[str, Any]): Simulation parameters from config.
            entropy_params (Dict[str, Any]): Entropy parameters from config.
            width (float): The width of the simulation area.
            height (float): The height of the simulation area.
            clock (Callable[[], float]): Source of wall-clock seconds.
        """
        self.width = float(width)
        self.height = float(height)
        self.clock = clock

        self.particles = ParticleSystem(sim_params, self.width, self.height)
        self.estimator = EntropyEstimator(entropy_params.get('grid_size', ENTROPY_GRID_SIZE))
        self.history = HistoryBuffer(entropy_params.get('history_capacity', HISTORY_CAPACITY))
        self.sampler = EntropySampler(
            self.estimator, self.history,
            entropy_params.get('sample_interval', SAMPLE_INTERVAL)
        )

        self.particles_per_spawn = int(sim_params.get('particles_per_spawn', PARTICLES_PER_SPAWN))
        self.spawn_interval = float(sim_params.get('spawn_interval', SPAWN_INTERVAL))
        self._spawn_handle: Optional[SpawnHandle] = None

        self.step_count = 0
        self.last_collision_count = 0

        logging.info(
            f"Simulation initialized on a {self.width:.0f}x{self.height:.0f} area. "
            f"History holds {self.history.capacity} samples taken every "
            f"{self.sampler.interval * 1000:.0f} ms."
        )

    @property
    def latest_sample(self) -> Optional[EntropySample]:
        return self.history.latest

    @property
    def spawning(self) -> bool:
        return self._spawn_handle is not None and self._spawn_handle.active

    def resize(self, width: float, height: float) -> None:
        """Updates the bounds. Particles are pulled back inside on the next step."""
        self.width = float(width)
        self.height = float(height)
        logging.debug(f"Simulation area resized to {self.width:.0f}x{self.height:.0f}.")

    def spawn(self, x: float, y: float, count: Optional[int] = None) -> int:
        if count is None:
            count = self.particles_per_spawn
        return self.particles.spawn(x, y, count)

    def start_spawning(self, x: float, y: float) -> SpawnHandle:
        """
        Spawns at (x, y) now and keeps spawning there until stop_spawning().

        Any earlier spawn task is cancelled first.
        """
        self.stop_spawning()
        self.spawn(x, y)
        self._spawn_handle = SpawnHandle(self.spawn, x, y, self.spawn_interval, self.clock())
        return self._spawn_handle

    def move_spawning(self, x: float, y: float) -> None:
        """Retargets the running spawn task, if any."""
        if self._spawn_handle is not None:
            self._spawn_handle.move_to(x, y)

    def stop_spawning(self) -> None:
        if self._spawn_handle is not None:
            self._spawn_handle.cancel()
            self._spawn_handle = None

    def step(self) -> Optional[EntropySample]:
        """
        Executes one frame of the simulation.
        """
        now = self.clock()
        if self._spawn_handle is not None:
            self._spawn_handle.poll(now)

        self.last_collision_count = self.particles.step(self.width, self.height)
        self.step_count += 1

        # Sampling sees post-step positions only.
        return self.sampler.sample(self.particles, self.width, self.height, now)
