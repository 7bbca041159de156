"""
Particle module for the resonance decay simulation.

Defines individual particles and the collection that owns them.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from . import rng
from .kinematics import invariant_mass, isotropic_direction
from .particletype import ParticleType


@dataclass(eq=False)
class Particle:
    """Represents a single particle in the transport simulation."""

    type: ParticleType

    # Four-momentum (E, px, py, pz) in GeV
    momentum: np.ndarray

    # Four-position (t, x, y, z) in fm
    position: np.ndarray

    # Time at which the particle is fully formed (fm)
    formation_time: float = 0.0

    # Assigned by the owning Particles collection
    id: int = -1
    generation: int = 0

    def __post_init__(self):
        self.momentum = np.asarray(self.momentum, dtype=float)
        self.position = np.asarray(self.position, dtype=float)

    @property
    def effective_mass(self) -> float:
        """Invariant mass of the four-momentum (GeV)."""
        return invariant_mass(self.momentum)

    @property
    def time(self) -> float:
        """Time component of the four-position (fm)."""
        return float(self.position[0])

    @property
    def velocity(self) -> np.ndarray:
        return self.momentum[1:] / self.momentum[0]

    def inverse_gamma(self) -> float:
        """
        Inverse Lorentz factor sqrt(1 - v^2).

        The particle's clock runs slower than the lab clock by this factor.
        """
        v = self.velocity
        return float(np.sqrt(1.0 - np.dot(v, v)))

    def __repr__(self):
        return (f"Particle(id={self.id}, type={self.type.name}, "
                f"t={self.time:.3f}, m={self.effective_mass:.4f})")


class Particles:
    """Owns the particles of a simulation and hands out unique ids."""

    def __init__(self):
        self._particles: Dict[int, Particle] = {}
        self._next_id = 0

    def insert(self, particle: Particle) -> Particle:
        """Add a particle and assign it a fresh id."""
        particle.id = self._next_id
        self._next_id += 1
        self._particles[particle.id] = particle
        return particle

    def remove(self, particle: Particle):
        """Remove a particle; raises KeyError if it is not in the collection."""
        if not self.is_valid(particle):
            raise KeyError(f"{particle!r} is not part of this collection")
        del self._particles[particle.id]

    def replace(self, old: List[Particle], new: List[Particle]) -> List[Particle]:
        """Remove ``old`` particles and insert ``new`` ones in their place."""
        for particle in old:
            self.remove(particle)
        return [self.insert(particle) for particle in new]

    def update(
        self,
        particle: Particle,
        momentum: Optional[np.ndarray] = None,
        position: Optional[np.ndarray] = None,
    ):
        """
        Change the state of a particle as the result of a process.

        Bumps the particle's generation so that pending actions created for
        the previous state are recognized as stale.
        """
        if not self.is_valid(particle):
            raise KeyError(f"{particle!r} is not part of this collection")
        if momentum is not None:
            particle.momentum = np.asarray(momentum, dtype=float)
        if position is not None:
            particle.position = np.asarray(position, dtype=float)
        particle.generation += 1

    def is_valid(self, particle: Particle) -> bool:
        """True if this exact particle object is still in the collection."""
        return self._particles.get(particle.id) is particle

    def __iter__(self) -> Iterator[Particle]:
        return iter(list(self._particles.values()))

    def __len__(self) -> int:
        return len(self._particles)

    def create_particles(
        self,
        particle_type: ParticleType,
        num_particles: int,
        box_length: float = 10.0,
        momentum_spread: float = 0.3,
        formation_time_max: float = 0.0,
        start_time: float = 0.0,
    ):
        """
        Create particles uniformly distributed in a cubic box.

        Args:
            particle_type: Species of the new particles
            num_particles: Number of particles to create
            box_length: Edge length of the box (fm), centered on the origin
            momentum_spread: Mean momentum magnitude (GeV), exponentially distributed
            formation_time_max: Formation times are uniform in
                [start_time, start_time + formation_time_max]
            start_time: Time coordinate of the created particles (fm)
        """
        half = 0.5 * box_length
        for _ in range(num_particles):
            x = [rng.uniform(-half, half) for _ in range(3)]
            p_abs = rng.exponential(1.0 / momentum_spread) if momentum_spread > 0 else 0.0
            p = p_abs * isotropic_direction(rng)
            energy = np.sqrt(particle_type.mass ** 2 + np.dot(p, p))
            formation = start_time
            if formation_time_max > 0.0:
                formation += rng.uniform(0.0, formation_time_max)
            self.insert(Particle(
                type=particle_type,
                momentum=np.concatenate(([energy], p)),
                position=np.array([start_time, *x]),
                formation_time=formation,
            ))

    def get_unstable_particles(self) -> List[Particle]:
        """Return list of particles whose species can decay."""
        return [p for p in self if not p.type.is_stable()]

    def get_positions(self) -> np.ndarray:
        """
        Get spatial positions of all particles.

        Returns:
            Array of shape (n, 3) with [x, y, z]
        """
        if not self._particles:
            return np.array([]).reshape(0, 3)
        return np.array([p.position[1:] for p in self])
