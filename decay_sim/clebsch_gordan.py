"""
Clebsch-Gordan coefficients with a process-wide, thread-safe lookup cache.

All angular momenta and projections are passed *doubled* so that half-integer
values become integers: an isospin-1/2 state with projection -1/2 is
``(j, m) = (1, -1)``.

The cache keys are hashed with the combinatorial index of Rasch & Yu
(SIAM J. Sci. Comput. 25, 1416 (2004)), which maps the coupling quantum
numbers onto the natural numbers instead of mixing six small integers with a
generic hash function.
"""

import logging
import threading
from dataclasses import dataclass
from fractions import Fraction
from math import factorial, sqrt
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Pre-computed coefficients shipped with the package
DEFAULT_TABLE = Path(__file__).parent / "data" / "clebsch_gordan.csv"


def spin_index(j1: int, j2: int, j3: int, m1: int, m2: int, m3: int) -> int:
    """
    Map a set of coupling quantum numbers onto a natural number.

    Args:
        j1, j2, j3: Doubled angular momenta
        m1, m2, m3: Doubled projections

    Returns:
        Index >= 1 for every physically valid input
    """
    S = -j1 + j2 + j3
    L = +j1 - j2 + j3
    X = +j1 - m1
    B = +j2 - m2
    T = +j3 + m3
    return (
        L * (24 + L * (50 + L * (35 + L * (10 + L)))) // 120
        + X * (6 + X * (11 + X * (6 + X))) // 24
        + T * (2 + T * (3 + T)) // 6
        + B * (B + 1) // 2
        + S
        + 1
    )


@dataclass(frozen=True)
class ThreeSpins:
    """Lookup key: three doubled angular momenta and their projections."""

    j1: int
    j2: int
    j3: int
    m1: int
    m2: int
    m3: int

    def __hash__(self):
        return spin_index(self.j1, self.j2, self.j3, self.m1, self.m2, self.m3)


def calculate_coefficient(
    j_a: int, j_b: int, j_c: int, m_a: int, m_b: int, m_c: int
) -> float:
    """
    Evaluate <j_a m_a; j_b m_b | j_c m_c> with the Racah formula.

    The sum is carried out in exact rational arithmetic, so the only
    rounding happens in the final square root.

    Args:
        j_a: Doubled angular momentum of the first state
        j_b: Doubled angular momentum of the second state
        j_c: Doubled angular momentum of the coupled state
        m_a: Doubled projection of the first state
        m_b: Doubled projection of the second state
        m_c: Doubled projection of the coupled state

    Returns:
        The coefficient, 0.0 if a selection rule forbids the coupling
    """
    if m_a + m_b != m_c:
        return 0.0
    if abs(m_a) > j_a or abs(m_b) > j_b or abs(m_c) > j_c:
        return 0.0
    if j_c > j_a + j_b or j_c < abs(j_a - j_b):
        return 0.0

    # Undoubled combinations; all of them are integers for valid input
    ab_c = (j_a + j_b - j_c) // 2
    ac_b = (j_a - j_b + j_c) // 2
    bc_a = (-j_a + j_b + j_c) // 2
    abc_1 = (j_a + j_b + j_c) // 2 + 1
    a_minus = (j_a - m_a) // 2
    a_plus = (j_a + m_a) // 2
    b_minus = (j_b - m_b) // 2
    b_plus = (j_b + m_b) // 2
    c_minus = (j_c - m_c) // 2
    c_plus = (j_c + m_c) // 2
    shift_a = (j_c - j_b + m_a) // 2
    shift_b = (j_c - j_a - m_b) // 2

    k_min = max(0, -shift_a, -shift_b)
    k_max = min(ab_c, a_minus, b_plus)

    racah_sum = Fraction(0)
    for k in range(k_min, k_max + 1):
        denominator = (
            factorial(k)
            * factorial(ab_c - k)
            * factorial(a_minus - k)
            * factorial(b_plus - k)
            * factorial(shift_a + k)
            * factorial(shift_b + k)
        )
        racah_sum += Fraction((-1) ** k, denominator)

    if racah_sum == 0:
        return 0.0

    triangle = Fraction(
        factorial(ab_c) * factorial(ac_b) * factorial(bc_a), factorial(abc_1)
    )
    norm = (
        (j_c + 1)
        * factorial(c_plus)
        * factorial(c_minus)
        * factorial(a_minus)
        * factorial(a_plus)
        * factorial(b_minus)
        * factorial(b_plus)
    )
    magnitude = sqrt(racah_sum * racah_sum * triangle * norm)
    return magnitude if racah_sum > 0 else -magnitude


class ClebschGordanCache:
    """
    Memoizing store of Clebsch-Gordan coefficients.

    Lookups are plain dictionary reads. On a miss the coefficient is computed
    outside the lock and inserted with ``setdefault`` under the lock, so when
    two threads race for the same key both return the value of whichever
    inserted first. The stored values are never modified afterwards.

    One instance is normally created at startup via :func:`get_default_cache`
    and lives until the interpreter exits.
    """

    def __init__(self, rows: Optional[Iterable[Sequence[float]]] = None):
        """
        Initialize the cache.

        Args:
            rows: Optional pre-computed rows ``(j1, j2, j3, m1, m2, m3, value)``
        """
        self._table: Dict[ThreeSpins, float] = {}
        self._lock = threading.Lock()
        if rows is not None:
            self.seed(rows)

    @classmethod
    def from_table(cls, path=DEFAULT_TABLE) -> "ClebschGordanCache":
        """Create a cache pre-seeded from a comma-separated table."""
        data = np.loadtxt(path, delimiter=",", comments="#", ndmin=2)
        cache = cls(data)
        logger.debug("Seeded Clebsch-Gordan cache with %d entries from %s",
                     len(cache), path)
        return cache

    def seed(self, rows: Iterable[Sequence[float]]):
        """Insert pre-computed rows; keys already present are kept."""
        with self._lock:
            for row in rows:
                j1, j2, j3, m1, m2, m3 = (int(round(v)) for v in row[:6])
                self._table.setdefault(
                    ThreeSpins(j1, j2, j3, m1, m2, m3), float(row[6])
                )

    def coefficient(
        self, j_a: int, j_b: int, j_c: int, m_a: int, m_b: int, m_c: int
    ) -> float:
        """
        Return <j_a m_a; j_b m_b | j_c m_c>, computing and storing it on a miss.

        Arguments are doubled angular momenta and projections, see
        :func:`calculate_coefficient`.
        """
        key = ThreeSpins(j_a, j_b, j_c, m_a, m_b, m_c)
        value = self._table.get(key)
        if value is not None:
            return value

        value = calculate_coefficient(j_a, j_b, j_c, m_a, m_b, m_c)
        with self._lock:
            return self._table.setdefault(key, value)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: ThreeSpins) -> bool:
        return key in self._table


_default_cache: Optional[ClebschGordanCache] = None
_default_cache_lock = threading.Lock()


def get_default_cache() -> ClebschGordanCache:
    """Return the process-wide cache, creating and seeding it on first use."""
    global _default_cache
    if _default_cache is None:
        with _default_cache_lock:
            if _default_cache is None:
                _default_cache = ClebschGordanCache.from_table(DEFAULT_TABLE)
    return _default_cache


def coefficient(j_a: int, j_b: int, j_c: int, m_a: int, m_b: int, m_c: int) -> float:
    """Clebsch-Gordan coefficient from the process-wide cache."""
    return get_default_cache().coefficient(j_a, j_b, j_c, m_a, m_b, m_c)


def isospin_clebsch_gordan_sqr_2to1(type_a, type_b, type_res, cache=None) -> float:
    """
    Squared isospin coefficient for the coupling a + b -> res.

    Args:
        type_a: First ParticleType
        type_b: Second ParticleType
        type_res: Resonance ParticleType
        cache: ClebschGordanCache to use (process-wide cache if None)

    Returns:
        Isospin factor between 0 and 1
    """
    if cache is None:
        cache = get_default_cache()
    cg = cache.coefficient(
        type_a.isospin, type_b.isospin, type_res.isospin,
        type_a.isospin3, type_b.isospin3, type_res.isospin3,
    )
    return cg * cg
