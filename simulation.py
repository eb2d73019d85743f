# simulation.py
"""
Host-facing command surface for the flow-field simulation.

This module defines the Simulation class, which wraps one ParticleSystem
and its NoiseField and exposes the commands the UI issues: per-frame
ticks, pause/resume, regeneration, reconfiguration and resizing.
Reconfiguration is modelled as starting a new generation; a rejected
configuration leaves the running generation untouched.
"""
import logging
from typing import Any, Optional

from config import SimulationConfig, random_seed
from noise_field import NoiseField
from particle import ParticleSystem, SegmentBatch

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, config: SimulationConfig, width: int, height: int):
#     - Side Effects: Builds the NoiseField and the first generation.
#
#   - tick(self) -> Optional[SegmentBatch]:
#     - Outputs: The segments for one frame, or None while paused.
#     - Invariants: frame counts only ticks that advanced the particles.
#
#   - regenerate(self, seed: Optional[int] = None) -> int:
#     - Starts a new generation, returns the seed used.
#
#   - configure(self, **changes) -> SimulationConfig:
#     - Validates the changed snapshot first; raises ConfigurationError
#       and changes nothing when it is invalid.
#
#   - pause_resume(self) -> bool:
#     - Toggles animation, returns True when now running.
#
#   - resize(self, width: int, height: int, respawn: bool = False) -> None


class Simulation:
    """
    Owns the running generation and the pause state.
    """
    def __init__(self, config: SimulationConfig, width: int, height: int):
        self.noise_field = NoiseField(config.seed, config.noise_octaves, config.noise_falloff)
        self.particles = ParticleSystem(config, width, height, self.noise_field)
        self.running = True
        self.frame = 0
        self.generation = 1
        logging.info("Simulation logic initialized and configuration validated.")

    @property
    def config(self) -> SimulationConfig:
        return self.particles.config

    @property
    def width(self) -> int:
        return self.particles.width

    @property
    def height(self) -> int:
        return self.particles.height

    def tick(self) -> Optional[SegmentBatch]:
        """
        Advances one frame unless paused.
        """
        if not self.running:
            return None
        self.frame += 1
        return self.particles.step()

    def pause_resume(self) -> bool:
        self.running = not self.running
        logging.info(f"Animation {'resumed' if self.running else 'paused'} at frame {self.frame}.")
        return self.running

    def regenerate(self, seed: Optional[int] = None) -> int:
        """
        Starts a new generation with the current configuration.

        Without a seed a fresh random one is drawn.
        """
        if seed is None:
            seed = random_seed()
        self.particles.regenerate(seed)
        self._new_generation()
        return seed

    def configure(self, **changes: Any) -> SimulationConfig:
        """
        Applies configuration changes as a new generation.

        The seed is kept unless it is one of the changes, so the same
        field is redrawn with the new settings.
        """
        new_config = self.config.with_changes(**changes)
        logging.info(f"Configuration changed: {changes}")
        self.particles.regenerate(new_config.seed, config=new_config)
        self._new_generation()
        return new_config

    def resize(self, width: int, height: int, respawn: bool = False) -> None:
        self.particles.resize(width, height, respawn=respawn)

    def _new_generation(self) -> None:
        self.frame = 0
        self.generation += 1
        logging.info(
            f"Generation {self.generation} started: "
            f"{self.config.particle_count} particles, seed {self.config.seed}."
        )
