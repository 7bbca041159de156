"""
Species catalog: the built-in particle table and its decay channels.

Hadronic decays are declared once per isospin multiplet and expanded into
the individual charge states with squared isospin Clebsch-Gordan
coefficients. Dilepton decays violate isospin and are declared per state.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .clebsch_gordan import ClebschGordanCache, isospin_clebsch_gordan_sqr_2to1
from .constants import ELECTRON_MASS
from .particletype import DecayMode, ParticleType

logger = logging.getLogger(__name__)

# ==================== SPECIES TABLE ====================
# name, mass [GeV], pole width [GeV], PDG code, 2*I, 2*I3, charge

SPECIES = [
    ("pi+", 0.138, 0.0, 211, 2, 2, 1),
    ("pi0", 0.138, 0.0, 111, 2, 0, 0),
    ("pi-", 0.138, 0.0, -211, 2, -2, -1),
    ("p", 0.938, 0.0, 2212, 1, 1, 1),
    ("n", 0.938, 0.0, 2112, 1, -1, 0),
    ("K+", 0.494, 0.0, 321, 1, 1, 1),
    ("K0", 0.494, 0.0, 311, 1, -1, 0),
    ("e-", ELECTRON_MASS, 0.0, 11, 0, 0, -1),
    ("e+", ELECTRON_MASS, 0.0, -11, 0, 0, 1),
    ("rho+", 0.776, 0.149, 213, 2, 2, 1),
    ("rho0", 0.776, 0.149, 113, 2, 0, 0),
    ("rho-", 0.776, 0.149, -213, 2, -2, -1),
    ("Delta++", 1.232, 0.117, 2224, 3, 3, 2),
    ("Delta+", 1.232, 0.117, 2214, 3, 1, 1),
    ("Delta0", 1.232, 0.117, 2114, 3, -1, 0),
    ("Delta-", 1.232, 0.117, 1114, 3, -3, -1),
    ("K*+", 0.892, 0.0473, 323, 1, 1, 1),
    ("K*0", 0.892, 0.0473, 313, 1, -1, 0),
]

MULTIPLETS = {
    "pi": ("pi+", "pi0", "pi-"),
    "N": ("p", "n"),
    "K": ("K+", "K0"),
    "rho": ("rho+", "rho0", "rho-"),
    "Delta": ("Delta++", "Delta+", "Delta0", "Delta-"),
    "K*": ("K*+", "K*0"),
}

# ==================== DECAY TABLE ====================
# resonance multiplet, product multiplets, branching ratio, L

MULTIPLET_DECAYS = [
    ("rho", ("pi", "pi"), 1.0, 1),
    ("Delta", ("N", "pi"), 1.0, 1),
    ("K*", ("K", "pi"), 1.0, 1),
]

# resonance, products, branching ratio, L
DILEPTON_DECAYS = [
    ("rho0", ("e+", "e-"), 4.72e-5, 1),
]


class ParticleCatalog:
    """Name-indexed collection of ParticleType objects."""

    def __init__(self, types: Sequence[ParticleType] = ()):
        self._types: Dict[str, ParticleType] = {}
        for t in types:
            self.add(t)

    def add(self, particle_type: ParticleType):
        if particle_type.name in self._types:
            raise ValueError(f"Duplicate particle type '{particle_type.name}'")
        self._types[particle_type.name] = particle_type

    def __getitem__(self, name: str) -> ParticleType:
        try:
            return self._types[name]
        except KeyError:
            raise KeyError(
                f"Unknown particle type '{name}'. Known: {sorted(self._types)}"
            ) from None

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[ParticleType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def multiplet(self, name: str) -> List[ParticleType]:
        """All charge states of the named isospin multiplet."""
        return [self[state] for state in MULTIPLETS[name]]


def expand_multiplet_decay(
    resonance: ParticleType,
    product_multiplets: Tuple[List[ParticleType], List[ParticleType]],
    branching_ratio: float,
    angular_momentum: int,
    cache: Optional[ClebschGordanCache] = None,
) -> List[DecayMode]:
    """
    Split a multiplet-level decay into the channels of one charge state.

    Each product combination gets the branching ratio times its squared
    isospin coefficient. Combinations that only differ in ordering are
    merged and forbidden ones are dropped.

    Args:
        resonance: The decaying charge state
        product_multiplets: The two product multiplets
        branching_ratio: Branching ratio of the whole multiplet channel
        angular_momentum: Orbital angular momentum L of the final state
        cache: Clebsch-Gordan cache (process-wide cache if None)

    Returns:
        List of DecayMode, one per distinct final state
    """
    weights: Dict[Tuple[str, ...], List] = {}
    multiplet_a, multiplet_b = product_multiplets
    for type_a in multiplet_a:
        for type_b in multiplet_b:
            factor = isospin_clebsch_gordan_sqr_2to1(type_a, type_b, resonance, cache)
            if factor <= 0.0:
                continue
            key = tuple(sorted((type_a.name, type_b.name)))
            if key in weights:
                weights[key][1] += factor
            else:
                weights[key] = [(type_a, type_b), factor]

    return [
        DecayMode(products, branching_ratio * factor, angular_momentum)
        for products, factor in weights.values()
    ]


def _normalize_branching_ratios(particle_type: ParticleType):
    total = sum(mode.branching_ratio for mode in particle_type.decay_modes)
    if total <= 0.0 or abs(total - 1.0) < 1e-12:
        return
    logger.debug("Renormalizing branching ratios of %s (sum was %.6f)",
                 particle_type.name, total)
    for mode in particle_type.decay_modes:
        mode.branching_ratio /= total


def build_default_catalog(cache: Optional[ClebschGordanCache] = None) -> ParticleCatalog:
    """
    Build the built-in catalog with all decay channels filled in.

    Args:
        cache: Clebsch-Gordan cache for the isospin factors
               (process-wide cache if None)

    Returns:
        ParticleCatalog with pions, nucleons, kaons, electrons and the
        rho, Delta and K* resonances
    """
    catalog = ParticleCatalog(
        ParticleType(name, mass, width, pdg, isospin, isospin3, charge)
        for name, mass, width, pdg, isospin, isospin3, charge in SPECIES
    )

    for res_multiplet, (name_a, name_b), br, L in MULTIPLET_DECAYS:
        products = (catalog.multiplet(name_a), catalog.multiplet(name_b))
        for resonance in catalog.multiplet(res_multiplet):
            resonance.decay_modes.extend(
                expand_multiplet_decay(resonance, products, br, L, cache)
            )

    for res_name, (name_a, name_b), br, L in DILEPTON_DECAYS:
        catalog[res_name].decay_modes.append(
            DecayMode((catalog[name_a], catalog[name_b]), br, L, dilepton=True)
        )

    for particle_type in catalog:
        if not particle_type.is_stable():
            if not particle_type.decay_modes:
                raise ValueError(f"Unstable type '{particle_type.name}' has no decay modes")
            _normalize_branching_ratios(particle_type)

    logger.debug("Built particle catalog with %d types", len(catalog))
    return catalog
