# history.py
"""
Rolling entropy history and its sampling cadence.

HistoryBuffer keeps the most recent entropy samples in a fixed-capacity
FIFO. EntropySampler decides when a new sample is taken: sampling is
throttled by wall-clock time and is independent of how often frames are
rendered.
"""
import logging
import numpy as np
from collections import deque
from typing import Iterator, Optional

from constants import HISTORY_CAPACITY, SAMPLE_INTERVAL
from spatial_entropy import EntropyEstimator, EntropySample

# --- Data Contracts ---
#
# class HistoryBuffer:
#   - push(self, sample: EntropySample) -> None:
#     - Side Effects: Appends the sample; evicts the oldest one when full.
#     - Invariants: len(self) <= self.capacity. Iteration is oldest-first.
#
# class EntropySampler:
#   - sample(self, particles, width, height, now: float) -> Optional[EntropySample]:
#     - Inputs: now is a wall-clock reading in seconds.
#     - Outputs: The recorded sample, or None when the interval has not
#       elapsed or there are no particles.
#     - Invariants: Two recorded samples are never less than `interval` apart.


class HistoryBuffer:
    """A fixed-capacity, oldest-first buffer of entropy samples."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            msg = f"Configuration error: history capacity must be >= 1, got {capacity}."
            logging.critical(msg)
            raise ValueError(msg)
        self._samples = deque(maxlen=int(capacity))

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    @property
    def is_full(self) -> bool:
        return len(self._samples) == self._samples.maxlen

    @property
    def latest(self) -> Optional[EntropySample]:
        return self._samples[-1] if self._samples else None

    def push(self, sample: EntropySample) -> None:
        self._samples.append(sample)

    def clear(self) -> None:
        self._samples.clear()

    def series(self, field: str = 'normalized') -> np.ndarray:
        """Returns one field of every sample, oldest first."""
        return np.array([getattr(s, field) for s in self._samples], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[EntropySample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> EntropySample:
        return self._samples[index]


class EntropySampler:
    """
    Takes an entropy sample at most once per `interval` seconds.
    """
    def __init__(self, estimator: EntropyEstimator, history: HistoryBuffer, interval: float = SAMPLE_INTERVAL):
        if interval < 0:
            msg = f"Configuration error: sample_interval must be >= 0, got {interval}."
            logging.critical(msg)
            raise ValueError(msg)
        self.estimator = estimator
        self.history = history
        self.interval = float(interval)
        self.last_sample_time: Optional[float] = None

    def due(self, now: float) -> bool:
        return self.last_sample_time is None or now - self.last_sample_time >= self.interval

    def sample(self, particles, width: float, height: float, now: float) -> Optional[EntropySample]:
        if not self.due(now):
            return None
        sample = self.estimator.compute(particles, width, height)
        if sample is None:
            return None
        self.history.push(sample)
        self.last_sample_time = now
        return sample
