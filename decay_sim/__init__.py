"""
Decay Simulator - resonance decays for a particle transport simulation.

This package provides the decay action finder, the Clebsch-Gordan coefficient
cache used for isospin branching ratios, and a small box simulation driving them.
"""

__version__ = "0.1.0"
__author__ = "decay_sim contributors"

from .action import Action, DecayAction, EmptyDecayChannelsError
from .catalog import ParticleCatalog, build_default_catalog
from .clebsch_gordan import ClebschGordanCache, coefficient, get_default_cache
from .finder import DecayActionsFinder
from .particle import Particle, Particles
from .particletype import DecayBranch, ParticleType
from .simulator import DecaySimulator

__all__ = [
    "Action",
    "DecayAction",
    "EmptyDecayChannelsError",
    "ParticleCatalog",
    "build_default_catalog",
    "ClebschGordanCache",
    "coefficient",
    "get_default_cache",
    "DecayActionsFinder",
    "Particle",
    "Particles",
    "DecayBranch",
    "ParticleType",
    "DecaySimulator",
]
