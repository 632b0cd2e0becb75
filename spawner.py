# spawner.py
"""
Repeating spawn requests while the pointer is held down.

A SpawnHandle is created when the pointer goes down and is owned by the
Simulation. The main loop polls it once per frame; releasing the pointer
cancels it.
"""
import logging
from typing import Callable


class SpawnHandle:
    """
    A revocable handle for one press-and-hold spawn task.

    `spawn_fn(x, y)` is called at most once per poll, and only after at
    least `interval` seconds have passed since the previous request.
    """
    def __init__(self, spawn_fn: Callable[[float, float], int], x: float, y: float,
                 interval: float, started_at: float):
        if interval < 0:
            msg = f"Configuration error: spawn_interval must be >= 0, got {interval}."
            logging.critical(msg)
            raise ValueError(msg)
        self._spawn_fn = spawn_fn
        self.x = x
        self.y = y
        self.interval = float(interval)
        self._last_request = started_at
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def poll(self, now: float) -> int:
        """Issues a spawn request if one is due. Returns the number spawned."""
        if not self._active or now - self._last_request < self.interval:
            return 0
        self._last_request = now
        return self._spawn_fn(self.x, self.y)

    def cancel(self) -> None:
        """Stops the task. Calling it again has no effect."""
        if self._active:
            self._active = False
            logging.debug(f"Spawn task at ({self.x:.1f}, {self.y:.1f}) cancelled.")
