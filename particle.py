# particle.py
"""
Manages the state and motion of all particles in the flow field.

This module defines the ParticleSystem class, which stores particle data
(positions, previous positions, speeds, remaining life) in NumPy arrays
and advances it one tick at a time along the heading given by a
NoiseField. Every tick yields one drawable line segment per particle.
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterator, NamedTuple, Optional, Tuple

from config import SimulationConfig, validate_canvas_size
from noise_field import NoiseField

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, config: SimulationConfig, width: int, height: int,
#              noise_field: Optional[NoiseField] = None):
#     - Inputs:
#       - config: Immutable configuration snapshot for this generation.
#       - width, height: Canvas bounds. Must be positive.
#       - noise_field: Anything with `sample(xs, ys) -> np.ndarray`,
#         `reseed(seed)` and `configure(octaves, falloff)`. Defaults to a
#         NoiseField seeded from config.
#     - Side Effects: Allocates the particle arrays and spawns every
#       particle uniformly inside the canvas.
#     - Invariants:
#       - self.positions, self.previous_positions: (N, 2) float64.
#       - self.speeds: (N,) float64. self.lives: (N,) int32.
#       - Between calls, every position lies in [0, width] x [0, height]
#         and every life is >= 0.
#
#   - step(self) -> SegmentBatch:
#     - Advances every particle by exactly one tick and returns one
#       segment per particle, in particle-index order. Particles that
#       expire or leave the canvas are respawned before the segment is
#       emitted, so their segment has zero length.
#
#   - regenerate(self, seed: int, count: Optional[int] = None,
#                config: Optional[SimulationConfig] = None) -> None:
#     - Starts a new generation. The new configuration is validated
#       before anything is modified.
#
#   - resize(self, width: int, height: int, respawn: bool = False) -> None:
#     - Updates the bounds. Particles are left in place unless `respawn`
#       is set; stragglers outside the new bounds respawn on the next tick.


class Segment(NamedTuple):
    start: Tuple[float, float]
    end: Tuple[float, float]
    opacity: int
    weight: float


@dataclass(frozen=True, eq=False)
class SegmentBatch:
    """One tick of draw instructions: row i is particle i's segment."""
    starts: np.ndarray
    ends: np.ndarray
    opacity: int
    weight: float

    def __len__(self) -> int:
        return self.starts.shape[0]

    def __iter__(self) -> Iterator[Segment]:
        for start, end in zip(self.starts, self.ends):
            yield Segment((float(start[0]), float(start[1])),
                          (float(end[0]), float(end[1])),
                          self.opacity, self.weight)

    def lengths(self) -> np.ndarray:
        return np.linalg.norm(self.ends - self.starts, axis=1)


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, config: SimulationConfig, width: int, height: int,
                 noise_field: Optional[NoiseField] = None):
        self.width, self.height = validate_canvas_size(width, height)
        if noise_field is None:
            noise_field = NoiseField(config.seed, config.noise_octaves, config.noise_falloff)
        self.noise_field = noise_field
        self.respawn_count = 0
        self._start_generation(config)

    @property
    def particle_count(self) -> int:
        return self.config.particle_count

    def _start_generation(self, config: SimulationConfig) -> None:
        self.config = config
        # All randomness for this generation comes from one seeded RNG.
        self.rng = np.random.default_rng(config.seed)

        count = config.particle_count
        self.positions = self._random_positions(count)
        self.previous_positions = self.positions.copy()
        self.speeds = self._random_speeds(count)
        self.lives = self._random_lives(count)

        logging.info(
            f"ParticleSystem initialized with {count} particles "
            f"on a {self.width}x{self.height} canvas (seed {config.seed})."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Speeds shape: {self.speeds.shape}, "
            f"Lives shape: {self.lives.shape}"
        )

    def _random_positions(self, count: int) -> np.ndarray:
        return self.rng.uniform(
            low=[0.0, 0.0],
            high=[self.width, self.height],
            size=(count, 2)
        )

    def _random_speeds(self, count: int) -> np.ndarray:
        speed_min, speed_max = self.config.speed_range
        return self.rng.uniform(speed_min, speed_max, size=count)

    def _random_lives(self, count: int) -> np.ndarray:
        life_min, life_max = self.config.life_range
        return self.rng.integers(life_min, life_max, size=count, endpoint=True, dtype=np.int32)

    def _respawn(self, mask: np.ndarray) -> None:
        count = int(np.count_nonzero(mask))
        if count == 0:
            return
        self.positions[mask] = self._random_positions(count)
        self.previous_positions[mask] = self.positions[mask]
        self.lives[mask] = self._random_lives(count)
        if self.config.reroll_speed_on_respawn:
            self.speeds[mask] = self._random_speeds(count)
        self.respawn_count += count

    def step(self) -> SegmentBatch:
        """
        Executes one tick for every particle.
        """
        config = self.config
        pos = self.positions

        # 1. Remember where each particle starts this tick
        self.previous_positions[:] = pos

        # 2. Sample the flow field for a heading
        values = self.noise_field.sample(pos[:, 0] * config.noise_scale,
                                         pos[:, 1] * config.noise_scale)
        angles = values * 2.0 * np.pi * config.angle_multiplier

        # 3. Integrate position along the heading
        pos[:, 0] += self.speeds * np.cos(angles)
        pos[:, 1] += self.speeds * np.sin(angles)

        # 4. Age every particle
        self.lives -= 1

        # 5. Respawn the expired and the out-of-bounds before anything is drawn
        expired = (
            (self.lives < 0)
            | (pos[:, 0] < 0) | (pos[:, 0] > self.width)
            | (pos[:, 1] < 0) | (pos[:, 1] > self.height)
        )
        self._respawn(expired)

        # 6. Emit segments after respawn; respawned rows have zero length
        return SegmentBatch(
            self.previous_positions.copy(), pos.copy(),
            config.opacity, config.stroke_weight
        )

    def regenerate(self, seed: int, count: Optional[int] = None,
                   config: Optional[SimulationConfig] = None) -> None:
        """
        Reseeds the noise field and rebuilds the whole particle collection.
        """
        base = config if config is not None else self.config
        changes = {'seed': seed}
        if count is not None:
            changes['particle_count'] = count
        # Validation happens here, before any state is replaced.
        new_config = base.with_changes(**changes)

        self.noise_field.configure(new_config.noise_octaves, new_config.noise_falloff)
        self.noise_field.reseed(new_config.seed)
        self.respawn_count = 0
        self._start_generation(new_config)

    def resize(self, width: int, height: int, respawn: bool = False) -> None:
        self.width, self.height = validate_canvas_size(width, height)
        if respawn:
            self._respawn(np.ones(self.config.particle_count, dtype=bool))
        logging.info(
            f"ParticleSystem bounds set to {self.width}x{self.height} "
            f"({'particles respawned' if respawn else 'particles kept'})."
        )

    def statistics(self) -> Dict[str, float]:
        """Aggregate metrics for throttled debug logging."""
        return {
            'mean_life': float(np.mean(self.lives)),
            'mean_speed': float(np.mean(self.speeds)),
            'respawns': self.respawn_count,
        }
