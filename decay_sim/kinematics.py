"""
Relativistic kinematics helpers.

Four-vectors are numpy arrays ``(E, px, py, pz)`` or ``(t, x, y, z)``.
"""

import numpy as np


def pcm(srts: float, mass_a: float, mass_b: float) -> float:
    """
    Center-of-mass momentum of a two-body system.

    Args:
        srts: Invariant mass of the system (GeV)
        mass_a: Mass of the first body (GeV)
        mass_b: Mass of the second body (GeV)

    Returns:
        Momentum magnitude in the rest frame, 0.0 below threshold
    """
    s = srts * srts
    pcm_sqr = (s - (mass_a + mass_b) ** 2) * (s - (mass_a - mass_b) ** 2) / (4.0 * s)
    return float(np.sqrt(pcm_sqr)) if pcm_sqr > 0.0 else 0.0


def blatt_weisskopf_sqr(x: float, angular_momentum: int) -> float:
    """
    Squared Blatt-Weisskopf barrier factor.

    Args:
        x: Product of momentum and interaction radius (dimensionless)
        angular_momentum: Orbital angular momentum L (0, 1 or 2)

    Returns:
        Barrier factor for the given L
    """
    x2 = x * x
    if angular_momentum == 0:
        return 1.0
    if angular_momentum == 1:
        return x2 / (1.0 + x2)
    if angular_momentum == 2:
        x4 = x2 * x2
        return x4 / (9.0 + 3.0 * x2 + x4)
    raise ValueError(f"Blatt-Weisskopf factor not implemented for L={angular_momentum}")


def invariant_mass(four_momentum: np.ndarray) -> float:
    """Invariant mass sqrt(E^2 - p^2), 0.0 for space-like vectors."""
    m_sqr = four_momentum[0] ** 2 - np.dot(four_momentum[1:], four_momentum[1:])
    return float(np.sqrt(m_sqr)) if m_sqr > 0.0 else 0.0


def velocity(four_momentum: np.ndarray) -> np.ndarray:
    """Three-velocity p/E."""
    return four_momentum[1:] / four_momentum[0]


def boost(four_vector: np.ndarray, beta: np.ndarray) -> np.ndarray:
    """
    Lorentz-transform a four-vector into a frame moving with velocity -beta.

    A vector given in the rest frame of a particle moving with ``beta`` in
    the lab comes out in the lab frame.
    """
    beta_sqr = float(np.dot(beta, beta))
    if beta_sqr <= 0.0:
        return np.array(four_vector, dtype=float)
    gamma = 1.0 / np.sqrt(1.0 - beta_sqr)
    t = four_vector[0]
    r = np.asarray(four_vector[1:], dtype=float)
    beta_r = float(np.dot(beta, r))
    t_new = gamma * (t + beta_r)
    r_new = r + ((gamma - 1.0) * beta_r / beta_sqr + gamma * t) * beta
    return np.concatenate(([t_new], r_new))


def isotropic_direction(rng) -> np.ndarray:
    """Unit vector drawn uniformly on the sphere."""
    cos_theta = rng.uniform(-1.0, 1.0)
    phi = rng.uniform(0.0, 2.0 * np.pi)
    sin_theta = np.sqrt(1.0 - cos_theta * cos_theta)
    return np.array([sin_theta * np.cos(phi), sin_theta * np.sin(phi), cos_theta])
