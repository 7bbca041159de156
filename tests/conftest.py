"""
Shared fixtures for the decay simulator tests.
"""

import numpy as np
import pytest
from decay_sim import rng
from decay_sim.catalog import build_default_catalog
from decay_sim.particle import Particle, Particles


@pytest.fixture(scope="session")
def catalog():
    return build_default_catalog()


@pytest.fixture(autouse=True)
def seeded_rng():
    """Every test starts from the same random state."""
    rng.set_seed(20240517)


@pytest.fixture
def particles():
    return Particles()


@pytest.fixture
def make_particle(catalog, particles):
    """Factory inserting a particle of the given species into ``particles``."""

    def _make(name, momentum=(0.0, 0.0, 0.0), position=(0.0, 0.0, 0.0, 0.0),
              formation_time=0.0, mass=None):
        ptype = catalog[name]
        m = ptype.mass if mass is None else mass
        p = np.asarray(momentum, dtype=float)
        energy = np.sqrt(m * m + np.dot(p, p))
        return particles.insert(Particle(
            type=ptype,
            momentum=np.concatenate(([energy], p)),
            position=np.asarray(position, dtype=float),
            formation_time=formation_time,
        ))

    return _make
