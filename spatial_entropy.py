# spatial_entropy.py
"""
Estimates the spatial Shannon entropy of the particle gas.

The bounding rectangle is divided into a fixed G x G occupancy grid. The
entropy of the occupancy distribution, H = -sum(p_i * ln(p_i)), is reported
in nats together with its attainable maximum ln(min(N, G^2)) and the ratio
of the two.
"""
import logging
import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Union

from constants import ENTROPY_GRID_SIZE
from particle import ParticleSystem

# --- Data Contracts ---
#
# class EntropyEstimator:
#   - compute(self, particles, width: float, height: float) -> Optional[EntropySample]:
#     - Inputs:
#       - particles: a ParticleSystem, or an (N, 2) array of positions.
#       - width, height: the bounding rectangle. Values below 1 are treated as 1.
#     - Outputs: None when N == 0, otherwise an EntropySample.
#     - Invariants: 0 <= normalized <= 1; entropy <= max_entropy up to
#       floating point rounding.


@dataclass(frozen=True)
class EntropySample:
    """One entropy measurement. Immutable once created."""
    entropy: float
    max_entropy: float
    normalized: float


class EntropyEstimator:
    """
    Grid-based estimator of spatial occupancy entropy.

    The grid resolution is fixed at construction and does not adapt to the
    number of particles.
    """
    def __init__(self, grid_size: int = ENTROPY_GRID_SIZE):
        if grid_size < 1:
            msg = f"Configuration error: entropy grid_size must be >= 1, got {grid_size}."
            logging.critical(msg)
            raise ValueError(msg)
        self.grid_size = int(grid_size)
        self.cell_count = self.grid_size * self.grid_size
        logging.info(f"EntropyEstimator using a {self.grid_size}x{self.grid_size} occupancy grid.")

    @property
    def max_specific_entropy(self) -> float:
        """ln(G^2), the largest max_entropy any particle count can reach."""
        return math.log(self.cell_count)

    def occupancy(self, particles: Union[ParticleSystem, np.ndarray], width: float, height: float) -> np.ndarray:
        """
        Counts particles per grid cell.

        Returns:
            np.ndarray: int64 array of shape (G, G), indexed [row (y), column (x)].
        """
        positions = _positions_of(particles)
        g = self.grid_size
        if positions.shape[0] == 0:
            return np.zeros((g, g), dtype=np.int64)

        # Clamp so particles on or past the far edge land in the last cell.
        gx = np.floor(positions[:, 0] / max(width, 1) * g)
        gy = np.floor(positions[:, 1] / max(height, 1) * g)
        gx = np.clip(gx, 0, g - 1).astype(np.int64)
        gy = np.clip(gy, 0, g - 1).astype(np.int64)

        counts = np.bincount(gy * g + gx, minlength=self.cell_count)
        return counts.reshape(g, g)

    def compute(self, particles: Union[ParticleSystem, np.ndarray], width: float, height: float) -> Optional[EntropySample]:
        """
        Computes the entropy sample for the current particle positions.

        Returns None if there are no particles.
        """
        counts = self.occupancy(particles, width, height)
        total = int(counts.sum())
        if total == 0:
            return None

        p = counts[counts > 0] / total
        entropy = max(0.0, float(-np.sum(p * np.log(p))))
        max_entropy = math.log(min(total, self.cell_count))
        if max_entropy > 0:
            normalized = min(max(entropy / max_entropy, 0.0), 1.0)
        else:
            normalized = 0.0
        return EntropySample(entropy=entropy, max_entropy=max_entropy, normalized=normalized)


def _positions_of(particles: Union[ParticleSystem, np.ndarray]) -> np.ndarray:
    positions = particles.positions if isinstance(particles, ParticleSystem) else particles
    positions = np.asarray(positions, dtype=np.float64)
    if positions.size == 0:
        return positions.reshape(0, 2)
    return positions
