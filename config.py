# config.py
"""
Immutable configuration snapshot for one generation of the flow field.

The host UI owns the mutable controls (particle count, opacity, weight).
Whenever they change, a new SimulationConfig is built and validated here
before any simulation state is touched. A valid snapshot starts a new
generation; an invalid one raises ConfigurationError and changes nothing.
"""
import dataclasses
import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple

from constants import (
    DEFAULT_PARTICLE_COUNT, DEFAULT_OPACITY, DEFAULT_STROKE_WEIGHT,
    DEFAULT_LIFE_RANGE, DEFAULT_SPEED_RANGE, NOISE_SCALE, ANGLE_MULTIPLIER,
    NOISE_OCTAVES, NOISE_FALLOFF, PARTICLE_COUNT_RANGE, OPACITY_RANGE,
    STROKE_WEIGHT_RANGE, NOISE_OCTAVES_RANGE, MAX_CANVAS_SIZE, CANVAS_MARGIN,
    RANDOM_SEED_LIMIT
)

# --- Data Contracts ---
#
# class SimulationConfig (frozen dataclass):
#   - Fields: particle_count, opacity, stroke_weight, seed, life_range,
#     speed_range, reroll_speed_on_respawn, noise_scale, angle_multiplier,
#     noise_octaves, noise_falloff.
#   - Invariants: every field lies inside its validated range once the
#     instance exists. Instances are never mutated; `with_changes` returns
#     a new, re-validated snapshot.
#
# validate_canvas_size(width, height) -> Tuple[int, int]:
#   - Raises ConfigurationError for fractional or non-positive dimensions.


class ConfigurationError(ValueError):
    """Raised when a configuration value falls outside its validated range."""


def _reject(msg: str) -> None:
    logging.error(f"Configuration error: {msg}")
    raise ConfigurationError(msg)


def _require_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        _reject(f"{name} must be an integer, got {value!r}.")


def _check_range(name: str, value, bounds) -> None:
    low, high = bounds
    if not low <= value <= high:
        _reject(f"{name}={value} is outside the allowed range [{low}, {high}].")


def random_seed() -> int:
    """Draws a fresh seed for hosts that do not choose one."""
    return int(np.random.default_rng().integers(0, RANDOM_SEED_LIMIT))


@dataclass(frozen=True)
class SimulationConfig:
    particle_count: int = DEFAULT_PARTICLE_COUNT
    opacity: int = DEFAULT_OPACITY
    stroke_weight: float = DEFAULT_STROKE_WEIGHT
    seed: int = 0
    life_range: Tuple[int, int] = DEFAULT_LIFE_RANGE
    speed_range: Tuple[float, float] = DEFAULT_SPEED_RANGE
    reroll_speed_on_respawn: bool = False
    noise_scale: float = NOISE_SCALE
    angle_multiplier: int = ANGLE_MULTIPLIER
    noise_octaves: int = NOISE_OCTAVES
    noise_falloff: float = NOISE_FALLOFF

    def __post_init__(self):
        # Frozen dataclass: normalise sequences from JSON into tuples.
        object.__setattr__(self, 'life_range', tuple(self.life_range))
        object.__setattr__(self, 'speed_range', tuple(self.speed_range))
        self._validate()

    def _validate(self) -> None:
        _require_int('particle_count', self.particle_count)
        _check_range('particle_count', self.particle_count, PARTICLE_COUNT_RANGE)

        _require_int('opacity', self.opacity)
        _check_range('opacity', self.opacity, OPACITY_RANGE)

        if not np.isfinite(self.stroke_weight):
            _reject(f"stroke_weight must be finite, got {self.stroke_weight!r}.")
        _check_range('stroke_weight', self.stroke_weight, STROKE_WEIGHT_RANGE)

        _require_int('seed', self.seed)
        if self.seed < 0:
            _reject(f"seed must be an unsigned integer, got {self.seed}.")

        if len(self.life_range) != 2:
            _reject(f"life_range must be a (min, max) pair, got {self.life_range!r}.")
        life_min, life_max = self.life_range
        _require_int('life_range minimum', life_min)
        _require_int('life_range maximum', life_max)
        if not 0 <= life_min <= life_max:
            _reject(f"life_range {self.life_range} must satisfy 0 <= min <= max.")

        if len(self.speed_range) != 2:
            _reject(f"speed_range must be a (min, max) pair, got {self.speed_range!r}.")
        speed_min, speed_max = self.speed_range
        if not (np.isfinite(speed_min) and np.isfinite(speed_max)) or not 0 < speed_min <= speed_max:
            _reject(f"speed_range {self.speed_range} must satisfy 0 < min <= max.")

        if not (np.isfinite(self.noise_scale) and self.noise_scale > 0):
            _reject(f"noise_scale must be positive, got {self.noise_scale}.")
        _require_int('angle_multiplier', self.angle_multiplier)
        if self.angle_multiplier < 1:
            _reject(f"angle_multiplier must be at least 1, got {self.angle_multiplier}.")
        _require_int('noise_octaves', self.noise_octaves)
        _check_range('noise_octaves', self.noise_octaves, NOISE_OCTAVES_RANGE)
        if not 0 < self.noise_falloff <= 1:
            _reject(f"noise_falloff must lie in (0, 1], got {self.noise_falloff}.")

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "SimulationConfig":
        """
        Builds a snapshot from the `simulation_parameters` section of config.json.

        Unknown keys are ignored with a warning. A missing or null seed is
        replaced by a random one, as the interactive host does on startup.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            logging.warning(f"Ignoring unknown simulation parameters: {unknown}")

        values = {k: v for k, v in params.items() if k in known}
        if values.get('seed') is None:
            values['seed'] = random_seed()
        return cls(**values)

    def with_changes(self, **changes: Any) -> "SimulationConfig":
        """Returns a new validated snapshot; self is left untouched."""
        return dataclasses.replace(self, **changes)


def validate_canvas_size(width: int, height: int) -> Tuple[int, int]:
    """Rejects fractional and non-positive canvas dimensions."""
    _require_int('canvas width', width)
    _require_int('canvas height', height)
    if width <= 0 or height <= 0:
        _reject(f"Canvas dimensions must be positive, got {width}x{height}.")
    return int(width), int(height)


def fit_canvas_size(container_width: Optional[int] = None) -> int:
    """
    Side length of the square canvas for a given container width.

    The canvas fills the container minus a margin, capped at
    MAX_CANVAS_SIZE. Without a container the cap itself is used.
    """
    if container_width is None:
        return MAX_CANVAS_SIZE
    size = min(int(container_width) - CANVAS_MARGIN, MAX_CANVAS_SIZE)
    validate_canvas_size(size, size)
    return size
