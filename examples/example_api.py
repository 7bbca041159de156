"""
Example script demonstrating the Python API.
"""

import math

from decay_sim import DecayActionsFinder, DecaySimulator, Particles, build_default_catalog
from decay_sim import rng


def main():
    """Run example simulation."""
    rng.set_seed(1234)

    print("Building particle catalog...")
    catalog = build_default_catalog()
    for name in ("rho0", "Delta+", "K*+"):
        ptype = catalog[name]
        channels = ", ".join(
            f"{'+'.join(b.product_names)} ({b.weight / ptype.width:.3f})"
            for b in ptype.partial_widths(ptype.mass)
        )
        print(f"  {name}: {channels}")

    print("\nPopulating box...")
    particles = Particles()
    particles.create_particles(catalog["rho0"], 500, box_length=8.0, formation_time_max=0.5)
    particles.create_particles(catalog["Delta++"], 300, box_length=8.0)
    particles.create_particles(catalog["pi+"], 500, box_length=8.0)

    finder = DecayActionsFinder()
    actions = finder.find_actions_in_cell(particles, dt=math.inf)
    mean_delay = sum(a.time_of_execution for a in actions) / len(actions)
    print(f"  Candidate decays: {len(actions)}, mean delay {mean_delay:.2f} fm")

    print("\nRunning simulation...")

    def progress(time, unstable):
        print(f"  Time: {time:.1f} fm, Resonances: {unstable}")

    simulator = DecaySimulator(particles, catalog=catalog, time_step=0.2, end_time=10.0)
    simulator.run(progress_callback=progress)

    print("\nSimulation statistics:")
    stats = simulator.get_statistics()
    for key, value in stats.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
