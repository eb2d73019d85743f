import os

# pygame must never try to open a real window during tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from config import SimulationConfig


class ConstantField:
    """Noise field stand-in that returns the same value everywhere."""
    def __init__(self, value: float):
        self.constant = value
        self.seeds = []
        self.settings = []

    def sample(self, xs, ys):
        return np.full(len(xs), self.constant, dtype=np.float64)

    def reseed(self, seed):
        self.seeds.append(seed)

    def configure(self, octaves, falloff):
        self.settings.append((octaves, falloff))


@pytest.fixture
def small_config():
    return SimulationConfig(particle_count=100, seed=42)


@pytest.fixture
def constant_field():
    return ConstantField
