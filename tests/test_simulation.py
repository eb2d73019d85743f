import numpy as np
import pytest

from config import ConfigurationError, SimulationConfig
from simulation import Simulation


@pytest.fixture
def sim(small_config):
    return Simulation(small_config, 400, 400)


def test_tick_advances_frame(sim):
    batch = sim.tick()
    assert len(batch) == 100
    assert sim.frame == 1


def test_paused_simulation_does_not_move(sim):
    sim.tick()
    assert sim.pause_resume() is False
    positions = sim.particles.positions.copy()

    assert sim.tick() is None
    assert sim.frame == 1
    np.testing.assert_array_equal(sim.particles.positions, positions)

    assert sim.pause_resume() is True
    assert sim.tick() is not None
    assert sim.frame == 2


def test_pause_resume_continues_from_stored_state(small_config):
    paused = Simulation(small_config, 400, 400)
    straight = Simulation(small_config, 400, 400)

    paused.tick()
    paused.pause_resume()
    paused.tick()
    paused.pause_resume()
    resumed = paused.tick()

    straight.tick()
    expected = straight.tick()
    np.testing.assert_array_equal(resumed.ends, expected.ends)


def test_regenerate_with_seed(sim):
    sim.tick()
    assert sim.regenerate(seed=1234) == 1234
    assert sim.config.seed == 1234
    assert sim.noise_field.seed == 1234
    assert sim.frame == 0
    assert sim.generation == 2


def test_regenerate_without_seed_draws_one(sim):
    seed = sim.regenerate()
    assert isinstance(seed, int)
    assert sim.config.seed == seed


def test_configure_starts_new_generation(sim, small_config):
    new_config = sim.configure(particle_count=50, opacity=40)
    assert new_config.particle_count == 50
    assert new_config.seed == small_config.seed
    assert sim.particles.positions.shape == (50, 2)
    assert sim.tick().opacity == 40
    assert sim.generation == 2


@pytest.mark.parametrize("changes", [
    {"particle_count": 0},
    {"particle_count": 50001},
    {"opacity": 300},
    {"stroke_weight": 20.0},
])
def test_rejected_configuration_changes_nothing(sim, small_config, changes):
    sim.tick()
    positions = sim.particles.positions.copy()

    with pytest.raises(ConfigurationError):
        sim.configure(**changes)

    assert sim.config == small_config
    assert sim.generation == 1
    assert sim.frame == 1
    np.testing.assert_array_equal(sim.particles.positions, positions)


def test_resize(sim):
    sim.resize(200, 300)
    assert (sim.width, sim.height) == (200, 300)
    sim.tick()
    assert np.all(sim.particles.positions[:, 0] <= 200)
    assert np.all(sim.particles.positions[:, 1] <= 300)


def test_same_seed_same_output():
    config = SimulationConfig(particle_count=100, seed=42)
    a = Simulation(config, 800, 800)
    b = Simulation(config, 800, 800)
    for _ in range(5):
        np.testing.assert_array_equal(a.tick().ends, b.tick().ends)
