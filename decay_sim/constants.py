"""
Physical and numerical constants used throughout the decay simulation.

Natural units: energies and masses in GeV, lengths and times in fm (fm/c).
"""

# ==================== PHYSICAL CONSTANTS ====================

HBARC = 0.197327053  # GeV fm - converts widths [GeV] to rates [1/fm]

ELECTRON_MASS = 0.000511  # GeV

# Interaction radius for the Blatt-Weisskopf barrier factors [GeV^-1]
# (1 fm expressed in inverse GeV)
INTERACTION_RADIUS = 1.0 / HBARC

# ==================== NUMERICAL THRESHOLDS ====================

# Species with a pole width below this value [GeV] are treated as stable
WIDTH_CUTOFF = 1e-5
