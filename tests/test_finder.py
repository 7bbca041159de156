"""
Tests for the decay action finder.
"""

import math

import numpy as np
import pytest
from decay_sim import rng
from decay_sim.action import DecayAction, EmptyDecayChannelsError
from decay_sim.constants import HBARC
from decay_sim.finder import DecayActionsFinder, is_formed_at, sample_decay_time


def _summary(actions):
    return [
        (a.particle.id, a.time_of_execution,
         tuple((b.product_names, b.weight) for b in a.branches))
        for a in actions
    ]


def test_stable_particles_never_decay(make_particle):
    """Neither entry point produces actions for stable species."""
    stable = [make_particle(name) for name in ("pi+", "pi0", "p", "n", "K+", "e-")]
    finder = DecayActionsFinder()

    assert finder.find_actions_in_cell(stable, dt=math.inf) == []
    assert finder.find_final_actions(stable) == []


def test_closed_hadronic_channels_skip_without_drawing(make_particle):
    """A rho below the two-pion threshold neither decays nor consumes a draw."""
    rho = make_particle("rho0", mass=0.25)
    assert rho.type.partial_widths_hadronic(rho.effective_mass) == []

    rng.set_seed(7)
    expected_next = rng.canonical()

    rng.set_seed(7)
    actions = DecayActionsFinder().find_actions_in_cell([rho], dt=math.inf)

    assert actions == []
    assert rng.canonical() == expected_next


def test_decay_delays_follow_exponential_law(make_particle):
    """Accepted delays are exponential with rate width * inverse_gamma / hbarc."""
    n = 20000
    momentum = (0.0, 0.0, 0.5)
    rhos = [make_particle("rho0", momentum=momentum, position=(2.0, 0, 0, 0))
            for _ in range(n)]

    actions = DecayActionsFinder().find_actions_in_cell(rhos, dt=math.inf)
    assert len(actions) == n

    rho = rhos[0]
    width = sum(b.weight for b in rho.type.partial_widths_hadronic(rho.effective_mass))
    rate = width * rho.inverse_gamma() / HBARC

    delays = np.array([a.time_of_execution - 2.0 for a in actions])
    assert np.all(delays >= 0.0)
    assert np.mean(delays) == pytest.approx(1.0 / rate, rel=0.03)
    assert np.mean(delays < 1.0 / rate) == pytest.approx(1.0 - math.exp(-1.0), abs=0.015)


def test_time_dilation_slows_decays(make_particle):
    """Fast particles decay later on average."""
    slow = [make_particle("Delta+") for _ in range(10000)]
    fast = [make_particle("Delta+", momentum=(0.0, 0.0, 3.0)) for _ in range(10000)]
    finder = DecayActionsFinder()

    slow_mean = np.mean([a.time_of_execution for a in finder.find_actions_in_cell(slow, math.inf)])
    fast_mean = np.mean([a.time_of_execution for a in finder.find_actions_in_cell(fast, math.inf)])

    gamma_fast = fast[0].momentum[0] / fast[0].effective_mass
    assert fast_mean / slow_mean == pytest.approx(gamma_fast, rel=0.05)


def test_only_decays_within_step_are_accepted(make_particle):
    """Delays beyond the step length produce no action."""
    deltas = [make_particle("Delta++") for _ in range(2000)]
    finder = DecayActionsFinder()

    assert finder.find_actions_in_cell(deltas, dt=0.0) == []

    dt = 0.5
    actions = finder.find_actions_in_cell(deltas, dt=dt)
    assert all(0.0 <= a.time_of_execution < dt for a in actions)

    width = deltas[0].type.total_width(deltas[0].effective_mass)
    expected = 1.0 - math.exp(-width * dt / HBARC)
    assert len(actions) / len(deltas) == pytest.approx(expected, abs=0.04)


def test_unformed_particles_never_decay(make_particle):
    """A particle formed after t + delay gets no action."""
    late = [make_particle("rho+", formation_time=1e9) for _ in range(500)]
    assert DecayActionsFinder().find_actions_in_cell(late, dt=math.inf) == []


def test_formation_gate_holds_for_every_action(make_particle):
    """Every accepted action happens after the particle's formation."""
    forming = [make_particle("K*+", formation_time=f)
               for f in np.linspace(0.0, 10.0, 1000)]
    actions = DecayActionsFinder().find_actions_in_cell(forming, dt=math.inf)

    assert 0 < len(actions) < len(forming)
    for action in actions:
        assert action.particle.formation_time <= action.time_of_execution


def test_formation_gate_boundary(make_particle):
    """Formation exactly at the decay instant passes the gate."""
    p = make_particle("rho0", position=(1.0, 0, 0, 0), formation_time=1.5)
    assert is_formed_at(p, 0.5)
    assert not is_formed_at(p, 0.4)


def test_actions_carry_all_hadronic_branches(make_particle):
    """Test the candidate channels of a Delta+ decay."""
    delta = make_particle("Delta+")
    actions = DecayActionsFinder().find_actions_in_cell([delta], dt=math.inf)

    assert len(actions) == 1
    action = actions[0]
    assert isinstance(action, DecayAction)
    assert action.particle is delta

    weights = {frozenset(b.product_names): b.weight for b in action.branches}
    assert set(weights) == {frozenset(("p", "pi0")), frozenset(("n", "pi+"))}
    assert weights[frozenset(("p", "pi0"))] / weights[frozenset(("n", "pi+"))] == pytest.approx(2.0)
    assert action.total_width == pytest.approx(delta.type.width)


def test_dilepton_channels_only_in_final_pass(make_particle):
    """The forced pass uses the full channel list, the step scan does not."""
    rho = make_particle("rho0")
    finder = DecayActionsFinder()

    step_actions = finder.find_actions_in_cell([rho], dt=math.inf)
    final_actions = finder.find_final_actions([rho])

    assert all(b.hadronic for b in step_actions[0].branches)
    assert any(not b.hadronic for b in final_actions[0].branches)


def test_final_pass_decays_every_resonance(make_particle):
    """N unstable and M stable particles give N zero-delay actions."""
    unstable = [make_particle(name, position=(3.5, 1.0, 0.0, 0.0))
                for name in ("rho0", "rho-", "Delta0", "K*0", "Delta++") * 4]
    stable = [make_particle(name) for name in ("pi-", "p", "K0") * 5]

    actions = DecayActionsFinder().find_final_actions(stable + unstable)

    assert len(actions) == len(unstable)
    assert {a.particle.id for a in actions} == {p.id for p in unstable}
    for action in actions:
        assert action.time_of_execution == action.particle.time


def test_final_pass_without_open_channel_is_fatal(make_particle):
    """An unstable particle that cannot decay at its mass raises."""
    delta = make_particle("Delta++", mass=1.0)

    with pytest.raises(EmptyDecayChannelsError):
        DecayActionsFinder().find_final_actions([delta])


def test_fixed_seed_reproduces_actions(make_particle):
    """The same seed and input give identical action lists."""
    cell = [make_particle(name, momentum=(0.1 * i, 0.0, 0.2), formation_time=0.05 * i)
            for i, name in enumerate(("rho0", "Delta+", "K*+", "pi0", "rho+") * 20)]
    finder = DecayActionsFinder()

    rng.set_seed(99)
    first = _summary(finder.find_actions_in_cell(cell, dt=1.0))
    rng.set_seed(99)
    second = _summary(finder.find_actions_in_cell(cell, dt=1.0))

    assert first
    assert first == second


def test_scan_leaves_particles_untouched(make_particle):
    """Finding actions does not modify the particles."""
    cell = [make_particle("rho0", momentum=(0.3, 0.1, 0.0)) for _ in range(50)]
    before = [(p.momentum.copy(), p.position.copy(), p.generation) for p in cell]

    finder = DecayActionsFinder()
    finder.find_actions_in_cell(cell, dt=10.0)
    finder.find_final_actions(cell)

    for p, (momentum, position, generation) in zip(cell, before):
        assert np.array_equal(p.momentum, momentum)
        assert np.array_equal(p.position, position)
        assert p.generation == generation


def test_sample_decay_time_mean():
    """Test the sampler on its own."""
    samples = [sample_decay_time(0.2, 0.5) for _ in range(20000)]
    assert np.mean(samples) == pytest.approx(HBARC / (0.2 * 0.5), rel=0.03)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
