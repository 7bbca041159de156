"""
Decay action finder.

Scans the particles of one cell and produces DecayActions for the resonances
that decay within the current time step, plus a forced pass that decays every
remaining resonance at the end of the run.
"""

import logging
from typing import Iterable, List

from . import rng
from .action import Action, DecayAction, EmptyDecayChannelsError
from .constants import HBARC
from .particle import Particle
from .particletype import total_weight

logger = logging.getLogger(__name__)


def sample_decay_time(width: float, inverse_gamma: float) -> float:
    """
    Draw a decay delay in the lab frame.

    The proper decay rate width/hbarc is slowed down by the inverse Lorentz
    factor. The exponential law is memoryless, so drawing a fresh delay each
    step reproduces the decay law without remembering earlier draws.

    Args:
        width: Total decay width (GeV), must be positive
        inverse_gamma: 1/gamma of the particle

    Returns:
        Delay in fm
    """
    return rng.exponential(width * inverse_gamma / HBARC)


def is_formed_at(particle: Particle, delay: float) -> bool:
    """True if the particle is formed by the time it would decay."""
    return particle.formation_time <= particle.time + delay


class DecayActionsFinder:
    """Finds decays of unstable particles, one cell at a time."""

    def find_actions_in_cell(self, search_list: Iterable[Particle], dt: float) -> List[Action]:
        """
        Find the particles that decay within the next time step.

        Args:
            search_list: Particles of one cell
            dt: Length of the time step (fm)

        Returns:
            List of DecayAction, one per decaying particle
        """
        actions: List[Action] = []

        for p in search_list:
            if p.type.is_stable():
                continue

            branches = p.type.partial_widths_hadronic(p.effective_mass)
            width = total_weight(branches)
            if not width > 0.0:
                continue

            decay_time = sample_decay_time(width, p.inverse_gamma())

            # decay_time in [0, dt) and formed by then
            if 0.0 <= decay_time < dt and is_formed_at(p, decay_time):
                action = DecayAction(p, decay_time)
                action.add_decays(branches)
                actions.append(action)

        if actions:
            logger.debug("Found %d decays in cell", len(actions))
        return actions

    def find_final_actions(self, search_list: Iterable[Particle]) -> List[Action]:
        """
        Decay every remaining unstable particle immediately.

        Uses the full set of channels, dilepton ones included.

        Args:
            search_list: All particles left at the end of the run

        Returns:
            List of zero-delay DecayAction

        Raises:
            EmptyDecayChannelsError: An unstable species has no open channel
                at the particle's mass
        """
        actions: List[Action] = []

        for p in search_list:
            if p.type.is_stable():
                continue
            action = DecayAction(p, 0.0)
            try:
                action.add_decays(p.type.partial_widths(p.effective_mass))
            except EmptyDecayChannelsError:
                logger.error("Species %s cannot decay at mass %.4f GeV",
                             p.type.name, p.effective_mass)
                raise
            actions.append(action)

        logger.info("Final decay pass: %d resonances forced to decay", len(actions))
        return actions
