import numpy as np
import pytest

from simulation import Simulation

SIM_PARAMS = {'seed': 42, 'particle_count': 50}
ENTROPY_PARAMS = {'grid_size': 32, 'history_capacity': 20, 'sample_interval': 0.1}


@pytest.fixture
def sim(clock):
    return Simulation(dict(SIM_PARAMS), dict(ENTROPY_PARAMS), 400.0, 300.0, clock=clock)


def test_components_follow_configuration(sim):
    assert sim.particles.particle_count == 50
    assert sim.estimator.grid_size == 32
    assert sim.history.capacity == 20
    assert sim.sampler.interval == 0.1
    assert sim.latest_sample is None


def test_first_step_records_a_sample(sim):
    sample = sim.step()

    assert sample is not None
    assert sim.latest_sample is sample
    assert sim.step_count == 1


def test_sampling_is_throttled_by_the_clock(sim, clock):
    recorded = 0
    for _ in range(60):
        if sim.step() is not None:
            recorded += 1
        clock.advance(1 / 60)

    assert recorded == len(sim.history)
    assert 8 <= recorded <= 11


def test_history_stays_within_capacity(sim, clock):
    for _ in range(50):
        sim.step()
        clock.advance(0.1)

    assert len(sim.history) == 20


def test_sample_reflects_post_step_positions(sim):
    sample = sim.step()
    expected = sim.estimator.compute(sim.particles, sim.width, sim.height)
    assert sample == expected


def test_spawn_uses_the_configured_count(sim):
    assert sim.spawn(100.0, 100.0) == 5
    assert sim.spawn(100.0, 100.0, 2) == 2
    assert sim.particles.particle_count == 57


def test_press_and_hold_spawning(sim, clock):
    handle = sim.start_spawning(200.0, 150.0)
    assert sim.spawning
    assert sim.particles.particle_count == 55

    clock.advance(0.05)
    sim.step()
    assert sim.particles.particle_count == 55

    clock.advance(0.05)
    sim.step()
    assert sim.particles.particle_count == 60

    sim.move_spawning(10.0, 10.0)
    clock.advance(0.1)
    sim.step()
    assert sim.particles.particle_count == 65

    sim.stop_spawning()
    sim.stop_spawning()
    assert not sim.spawning
    assert not handle.active

    for _ in range(5):
        clock.advance(0.1)
        sim.step()
    assert sim.particles.particle_count == 65


def test_starting_again_cancels_the_previous_task(sim):
    first = sim.start_spawning(10.0, 10.0)
    second = sim.start_spawning(20.0, 20.0)

    assert not first.active
    assert second.active


def test_resize_confines_particles_on_next_step(sim):
    sim.resize(100.0, 80.0)
    sim.step()

    r = sim.particles.radius
    x, y = sim.particles.positions[:, 0], sim.particles.positions[:, 1]
    assert np.all((x >= r) & (x <= 100.0 - r))
    assert np.all((y >= r) & (y <= 80.0 - r))


def test_instances_are_independent(clock):
    a = Simulation(dict(SIM_PARAMS), dict(ENTROPY_PARAMS), 400.0, 300.0, clock=clock)
    b = Simulation(dict(SIM_PARAMS), dict(ENTROPY_PARAMS), 400.0, 300.0, clock=clock)

    a.spawn(50.0, 50.0, 10)
    a.step()

    assert b.particles.particle_count == 50
    assert len(b.history) == 0


def test_empty_simulation_records_nothing(clock):
    sim = Simulation({'particle_count': 0}, {}, 400.0, 300.0, clock=clock)

    assert sim.step() is None
    assert len(sim.history) == 0
