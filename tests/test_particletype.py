"""
Tests for species descriptors and the built-in catalog.
"""

import pytest
from decay_sim.catalog import ParticleCatalog, build_default_catalog
from decay_sim.clebsch_gordan import ClebschGordanCache
from decay_sim.particletype import DecayMode, ParticleType


def _ratios(particle_type):
    return {
        tuple(sorted(t.name for t in mode.products)): mode.branching_ratio
        for mode in particle_type.decay_modes
        if not mode.dilepton
    }


def test_stability(catalog):
    """Test which species count as stable."""
    for name in ("pi+", "pi0", "p", "n", "K+", "K0", "e+", "e-"):
        assert catalog[name].is_stable()
        assert catalog[name].decay_modes == []
    for name in ("rho0", "Delta++", "K*0"):
        assert not catalog[name].is_stable()


def test_delta_isospin_branching(catalog):
    """Test isospin branching of the Delta states."""
    assert _ratios(catalog["Delta++"]) == pytest.approx({("p", "pi+"): 1.0})
    assert _ratios(catalog["Delta+"]) == pytest.approx(
        {("p", "pi0"): 2.0 / 3.0, ("n", "pi+"): 1.0 / 3.0}
    )
    assert _ratios(catalog["Delta0"]) == pytest.approx(
        {("n", "pi0"): 2.0 / 3.0, ("p", "pi-"): 1.0 / 3.0}
    )
    assert _ratios(catalog["Delta-"]) == pytest.approx({("n", "pi-"): 1.0})


def test_rho_charge_orderings_are_merged(catalog):
    """rho0 decays into pi+ pi- only; both orderings end up in one channel."""
    ratios = _ratios(catalog["rho0"])
    assert list(ratios) == [("pi+", "pi-")]
    assert ratios[("pi+", "pi-")] == pytest.approx(1.0, abs=1e-4)

    assert _ratios(catalog["rho+"]) == pytest.approx({("pi+", "pi0"): 1.0})


def test_kstar_isospin_branching(catalog):
    """Test K* -> K pi branching."""
    assert _ratios(catalog["K*+"]) == pytest.approx(
        {("K0", "pi+"): 2.0 / 3.0, ("K+", "pi0"): 1.0 / 3.0}
    )


def test_total_width_at_pole(catalog):
    """Branching ratios are normalized so the pole width is recovered."""
    for particle_type in catalog:
        if not particle_type.is_stable():
            assert particle_type.total_width(particle_type.mass) == pytest.approx(
                particle_type.width
            )


def test_widths_are_mass_dependent(catalog):
    """Test threshold behaviour and growth of the p-wave width."""
    rho = catalog["rho0"]

    assert rho.partial_widths_hadronic(0.27) == []
    assert rho.total_width(0.5) < rho.total_width(rho.mass)
    assert rho.total_width(0.9) > rho.total_width(rho.mass)
    for branch in rho.partial_widths(0.9):
        assert branch.weight > 0.0


def test_dilepton_width_below_hadronic_threshold(catalog):
    """Only the dilepton channel stays open below the two-pion threshold."""
    rho = catalog["rho0"]
    branches = rho.partial_widths(0.25)

    assert len(branches) == 1
    assert not branches[0].hadronic
    assert set(branches[0].product_names) == {"e+", "e-"}


def test_catalog_lookup():
    """Test catalog access."""
    catalog = build_default_catalog(cache=ClebschGordanCache())

    assert "Delta+" in catalog
    assert catalog["p"].pdgcode == 2212
    assert [t.name for t in catalog.multiplet("N")] == ["p", "n"]
    with pytest.raises(KeyError):
        catalog["Omega-"]


def test_duplicate_type_rejected():
    """Test that names are unique."""
    pion = ParticleType("pi+", 0.138, 0.0, 211, 2, 2, 1)
    with pytest.raises(ValueError):
        ParticleCatalog([pion, pion])


def test_only_two_body_modes():
    """Decay modes must have exactly two products."""
    pion = ParticleType("pi0", 0.138, 0.0, 111, 2, 0, 0)
    with pytest.raises(ValueError):
        DecayMode((pion, pion, pion), 1.0)
    with pytest.raises(ValueError):
        DecayMode((pion, pion), -0.1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
