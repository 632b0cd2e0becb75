import logging

import pytest

from particle import ParticleSystem


class FakeClock:
    """A manually advanced clock returning seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_system():
    """Builds an empty, seeded ParticleSystem with optional overrides."""
    def _make(**overrides):
        params = {'seed': 1234, 'particle_count': 0}
        params.update(overrides)
        return ParticleSystem(params, 200.0, 150.0)
    return _make


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
