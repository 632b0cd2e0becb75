import pytest

from spawner import SpawnHandle


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, x, y):
        self.calls.append((x, y))
        return 5


def test_poll_waits_for_the_interval():
    spawn = Recorder()
    handle = SpawnHandle(spawn, 10.0, 20.0, interval=0.1, started_at=0.0)

    assert handle.poll(0.05) == 0
    assert handle.poll(0.1) == 5
    assert handle.poll(0.15) == 0
    assert handle.poll(0.21) == 5
    assert spawn.calls == [(10.0, 20.0), (10.0, 20.0)]


def test_at_most_one_request_per_poll():
    spawn = Recorder()
    handle = SpawnHandle(spawn, 0.0, 0.0, interval=0.1, started_at=0.0)

    handle.poll(1.0)

    assert len(spawn.calls) == 1


def test_move_to_retargets_later_requests():
    spawn = Recorder()
    handle = SpawnHandle(spawn, 10.0, 20.0, interval=0.1, started_at=0.0)

    handle.move_to(30.0, 40.0)
    handle.poll(0.2)

    assert spawn.calls == [(30.0, 40.0)]


def test_cancel_is_idempotent_and_final():
    spawn = Recorder()
    handle = SpawnHandle(spawn, 10.0, 20.0, interval=0.1, started_at=0.0)

    handle.cancel()
    handle.cancel()

    assert not handle.active
    assert handle.poll(10.0) == 0
    assert spawn.calls == []


def test_negative_interval_is_rejected():
    with pytest.raises(ValueError):
        SpawnHandle(Recorder(), 0.0, 0.0, interval=-0.1, started_at=0.0)
