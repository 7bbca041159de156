"""
Spatial partition of the particles into cubic cells.
"""

from typing import Dict, Iterable, List, Tuple

import numpy as np

from .particle import Particle


def cell_index(position: np.ndarray, cell_length: float) -> Tuple[int, int, int]:
    """Integer cell coordinates of a spatial position."""
    ix, iy, iz = np.floor(np.asarray(position) / cell_length).astype(int)
    return int(ix), int(iy), int(iz)


def partition(particles: Iterable[Particle], cell_length: float) -> List[List[Particle]]:
    """
    Group particles by cell.

    Args:
        particles: Particles to distribute
        cell_length: Edge length of a cell (fm)

    Returns:
        Non-empty cells sorted by cell index; particles keep their
        iteration order within a cell
    """
    if not cell_length > 0.0:
        raise ValueError(f"cell_length must be positive, got {cell_length}")

    cells: Dict[Tuple[int, int, int], List[Particle]] = {}
    for p in particles:
        cells.setdefault(cell_index(p.position[1:], cell_length), []).append(p)
    return [cells[key] for key in sorted(cells)]
