"""
Pending actions produced by the action finders.

An action refers to its particle without owning it. It records the
particle's id and generation at creation time so that the scheduler can
throw it away once the particle has been removed or has taken part in
another process.
"""

from typing import Iterable, List, Tuple

from .particle import Particle, Particles
from .particletype import DecayBranch, total_weight


class EmptyDecayChannelsError(ValueError):
    """Raised when a decay action would be built without any decay channel."""


class Action:
    """Base class of everything the scheduler can execute."""

    def __init__(self, particle: Particle, time_from_now: float):
        """
        Initialize an action.

        Args:
            particle: The incoming particle (not owned)
            time_from_now: Delay relative to the particle's time coordinate (fm)
        """
        self.particle = particle
        self.time_of_execution = particle.time + time_from_now
        self._particle_id = particle.id
        self._generation = particle.generation

    def is_valid(self, particles: Particles) -> bool:
        """True if the particle is unchanged since the action was created."""
        return (
            particles.is_valid(self.particle)
            and self.particle.id == self._particle_id
            and self.particle.generation == self._generation
        )


class DecayAction(Action):
    """
    Decay of one particle into one of several candidate final states.

    The channel is picked when the action is executed, with probability
    proportional to its weight.
    """

    def __init__(self, particle: Particle, time_from_now: float):
        super().__init__(particle, time_from_now)
        self._branches: List[DecayBranch] = []

    def add_decay(self, branch: DecayBranch):
        if branch.weight < 0.0:
            raise ValueError(f"Negative decay weight {branch.weight}")
        self._branches.append(branch)

    def add_decays(self, branches: Iterable[DecayBranch]):
        """Add all candidate channels; raises if there are none."""
        branches = list(branches)
        if not branches:
            raise EmptyDecayChannelsError(
                f"No decay channels for {self.particle!r} "
                f"at mass {self.particle.effective_mass:.4f} GeV"
            )
        for branch in branches:
            self.add_decay(branch)

    @property
    def branches(self) -> Tuple[DecayBranch, ...]:
        return tuple(self._branches)

    @property
    def total_width(self) -> float:
        return total_weight(self._branches)

    def __repr__(self):
        channels = ", ".join(
            f"{'+'.join(b.product_names)}:{b.weight:.4g}" for b in self._branches
        )
        return f"DecayAction({self.particle!r} @ {self.time_of_execution:.3f} -> [{channels}])"
