"""
Species descriptors and mass-dependent decay widths.

A ParticleType owns its decay modes and turns them into weighted decay
branches for a given effective mass. Types are filled in once by the
catalog and only read afterwards.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .constants import INTERACTION_RADIUS, WIDTH_CUTOFF
from .kinematics import blatt_weisskopf_sqr, pcm


@dataclass(frozen=True)
class DecayBranch:
    """One candidate final state with its partial width at a given mass."""

    products: Tuple["ParticleType", ...]
    weight: float  # partial width [GeV]
    hadronic: bool = True

    @property
    def product_names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self.products)


def total_weight(branches: List[DecayBranch]) -> float:
    """Sum of the branch weights (total width for partial widths)."""
    return sum(branch.weight for branch in branches)


@dataclass(eq=False)
class DecayMode:
    """
    A two-body decay channel of one species.

    Attributes:
        products: The two outgoing particle types
        branching_ratio: Fraction of the pole width going into this channel
        angular_momentum: Orbital angular momentum L of the final state
        dilepton: True for electromagnetic decays into a lepton pair
    """

    products: Tuple["ParticleType", ...]
    branching_ratio: float
    angular_momentum: int = 0
    dilepton: bool = False

    def __post_init__(self):
        if len(self.products) != 2:
            raise ValueError(
                f"Only two-body decays are supported, got {len(self.products)} products"
            )
        if self.branching_ratio < 0.0:
            raise ValueError(f"Negative branching ratio {self.branching_ratio}")

    @property
    def threshold(self) -> float:
        """Minimal mass needed to open the channel (GeV)."""
        return sum(t.mass for t in self.products)

    def _rho(self, mass: float) -> float:
        if mass <= self.threshold:
            return 0.0
        p = pcm(mass, self.products[0].mass, self.products[1].mass)
        return p / mass * blatt_weisskopf_sqr(p * INTERACTION_RADIUS, self.angular_momentum)

    def width(self, pole_mass: float, pole_width: float, mass: float) -> float:
        """
        Partial width at the given mass.

        Hadronic channels follow the Manley-Saleski parametrization
        Gamma0 * BR * rho(m) / rho(m0); dilepton channels scale as (m0/m)^3.

        Args:
            pole_mass: Pole mass of the decaying species (GeV)
            pole_width: Pole width of the decaying species (GeV)
            mass: Effective mass of the decaying particle (GeV)

        Returns:
            Partial width in GeV, 0.0 below threshold
        """
        if mass <= self.threshold:
            return 0.0
        if self.dilepton:
            return pole_width * self.branching_ratio * (pole_mass / mass) ** 3
        rho_pole = self._rho(pole_mass)
        if rho_pole <= 0.0:
            return 0.0
        return pole_width * self.branching_ratio * self._rho(mass) / rho_pole


@dataclass(eq=False)
class ParticleType:
    """
    Immutable-by-convention species descriptor.

    Isospin and its projection are doubled integers (nucleon: 1, +-1).
    """

    name: str
    mass: float  # GeV
    width: float  # GeV, at the pole
    pdgcode: int
    isospin: int = 0
    isospin3: int = 0
    charge: int = 0
    decay_modes: List[DecayMode] = field(default_factory=list, repr=False)

    def is_stable(self) -> bool:
        """True if the species never decays within the simulation."""
        return self.width < WIDTH_CUTOFF

    def _branches(self, mass: float, hadronic_only: bool) -> List[DecayBranch]:
        branches = []
        for mode in self.decay_modes:
            if hadronic_only and mode.dilepton:
                continue
            w = mode.width(self.mass, self.width, mass)
            if w > 0.0:
                branches.append(DecayBranch(mode.products, w, not mode.dilepton))
        return branches

    def partial_widths(self, mass: float) -> List[DecayBranch]:
        """All decay branches with a positive partial width at ``mass``."""
        return self._branches(mass, hadronic_only=False)

    def partial_widths_hadronic(self, mass: float) -> List[DecayBranch]:
        """Like :meth:`partial_widths` but without dilepton channels."""
        return self._branches(mass, hadronic_only=True)

    def total_width(self, mass: float) -> float:
        """Total decay width at ``mass`` (GeV)."""
        return total_weight(self.partial_widths(mass))
