"""
Main simulator module integrating all components.

Runs a box of particles forward in time, letting resonances decay.
"""

import logging
from collections import Counter
from typing import Callable, List, Optional

import numpy as np

from . import rng
from .action import Action, DecayAction
from .catalog import ParticleCatalog, build_default_catalog
from .config import SimulationConfig
from .finder import DecayActionsFinder
from .grid import partition
from .kinematics import boost, isotropic_direction, pcm
from .particle import Particle, Particles

logger = logging.getLogger(__name__)


class DecaySimulator:
    """
    Resonance decay transport simulator.

    Each step the particles are sorted into cells, the decay finder is run on
    every cell and the resulting actions are executed in time order. At the
    end of the run all remaining resonances are forced to decay once.
    """

    def __init__(
        self,
        particles: Particles,
        catalog: Optional[ParticleCatalog] = None,
        time_step: float = 0.1,
        end_time: float = 20.0,
        cell_length: float = 2.0,
        start_time: float = 0.0,
    ):
        """
        Initialize decay simulator.

        Args:
            particles: Initial particle collection (taken over by the simulator)
            catalog: Species catalog the particles were created from
            time_step: Default time step (fm)
            end_time: Time at which the run stops (fm)
            cell_length: Edge length of the search cells (fm)
            start_time: Initial simulation time (fm)
        """
        self.particles = particles
        self.catalog = catalog if catalog is not None else build_default_catalog()
        self.time_step = time_step
        self.end_time = end_time
        self.cell_length = cell_length
        self.finder = DecayActionsFinder()

        # Simulation state
        self.current_time = start_time
        self.finalized = False
        self.decay_counts: Counter = Counter()
        self.final_decay_counts: Counter = Counter()
        self.actions_found = 0
        self.actions_discarded = 0

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "DecaySimulator":
        """Seed the random generator and populate a box as configured."""
        rng.set_seed(config.seed)
        catalog = build_default_catalog()
        particles = Particles()
        for name, count in config.particles.items():
            particles.create_particles(
                catalog[name],
                count,
                box_length=config.box_length,
                momentum_spread=config.momentum_spread,
                formation_time_max=config.formation_time_max,
            )
        return cls(
            particles,
            catalog=catalog,
            time_step=config.dt,
            end_time=config.end_time,
            cell_length=config.cell_length,
        )

    def _execute(self, actions: List[Action], counts: Counter):
        for action in sorted(actions, key=lambda a: a.time_of_execution):
            if not action.is_valid(self.particles):
                self.actions_discarded += 1
                logger.debug("Discarding stale %r", action)
                continue
            self._perform_decay(action)
            counts[action.particle.type.name] += 1

    def _perform_decay(self, action: DecayAction) -> List[Particle]:
        """
        Execute a decay: pick a channel and create the products.

        Products are emitted back to back in the rest frame of the parent,
        boosted to the lab and formed at the decay time.
        """
        parent = action.particle
        branches = action.branches
        branch = branches[rng.discrete([b.weight for b in branches])]

        t = action.time_of_execution
        velocity = parent.velocity
        position = parent.position + (t - parent.time) * np.concatenate(([1.0], velocity))

        type_a, type_b = branch.products
        p_star = pcm(parent.effective_mass, type_a.mass, type_b.mass)
        direction = isotropic_direction(rng)

        products = []
        for sign, product_type in ((1.0, type_a), (-1.0, type_b)):
            k = sign * p_star * direction
            energy = np.sqrt(product_type.mass ** 2 + np.dot(k, k))
            products.append(Particle(
                type=product_type,
                momentum=boost(np.concatenate(([energy], k)), velocity),
                position=position.copy(),
                formation_time=t,
            ))

        logger.debug("%s -> %s at t=%.3f", parent.type.name,
                     " + ".join(branch.product_names), t)
        return self.particles.replace([parent], products)

    def _propagate(self, t: float):
        """Move all particles on straight lines to time t."""
        for p in self.particles:
            p.position = p.position + (t - p.time) * np.concatenate(([1.0], p.velocity))

    def step(self, dt: Optional[float] = None):
        """
        Advance simulation by one time step.

        Args:
            dt: Time step in fm (uses default if None)
        """
        if dt is None:
            dt = self.time_step

        actions: List[Action] = []
        for cell in partition(self.particles, self.cell_length):
            actions.extend(self.finder.find_actions_in_cell(cell, dt))
        self.actions_found += len(actions)

        self._execute(actions, self.decay_counts)

        self.current_time += dt
        self._propagate(self.current_time)

    def run(self, progress_callback: Optional[Callable[[float, int], None]] = None):
        """
        Run simulation until the end time, then perform the final decays.

        Args:
            progress_callback: Optional callback function(time, unstable_count)
        """
        steps = int(round((self.end_time - self.current_time) / self.time_step))
        logger.info("Running %d steps of %.3f fm with %d particles",
                    steps, self.time_step, len(self.particles))

        for step_num in range(steps):
            self.step()

            if progress_callback and (step_num % 10 == 0):
                unstable_count = len(self.particles.get_unstable_particles())
                progress_callback(self.current_time, unstable_count)

            # Early termination if all resonances decayed
            if not self.particles.get_unstable_particles():
                logger.info("No resonances left at t=%.3f fm", self.current_time)
                break

        self.finalize()

    def finalize(self):
        """Force every remaining resonance to decay; allowed only once."""
        if self.finalized:
            raise RuntimeError("Final decays have already been performed")
        actions = self.finder.find_final_actions(self.particles)
        self.actions_found += len(actions)
        self._execute(actions, self.final_decay_counts)
        self.finalized = True

    def get_statistics(self) -> dict:
        """
        Get simulation statistics.

        Returns:
            Dictionary with statistics
        """
        species = Counter(p.type.name for p in self.particles)
        return {
            "total_particles": len(self.particles),
            "unstable_particles": len(self.particles.get_unstable_particles()),
            "decays": sum(self.decay_counts.values()),
            "final_decays": sum(self.final_decay_counts.values()),
            "decays_by_species": dict(self.decay_counts),
            "actions_found": self.actions_found,
            "actions_discarded": self.actions_discarded,
            "species": dict(species),
            "simulation_time": self.current_time,
        }
