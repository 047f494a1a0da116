"""
Global constants for conway_graph
=================================

All sentinels, thresholds and delays in ONE place.
"""

import numpy as np

# Distance matrix cell values
IDENTITY = 0                          # D[v][v]
ADJACENT = 1                          # D[v][u] for an edge (v, u)
DISCONNECTED = int(np.iinfo(np.int64).max)  # "not (yet) known / disconnected"
DISTANCE_DTYPE = np.int64

# Springs (layout hint only): pairs at distance <= SPRING_NEAR, or within
# SPRING_FAR_SLACK of the diameter
SPRING_NEAR = 2
SPRING_FAR_SLACK = 1

# Euler characteristic of a genus-0 polyhedral graph: V - E + F = 2
EULER_CHARACTERISTIC = 2

# Smallest face (a triangle)
MIN_FACE_SIZE = 3

# Contraction gate: endpoints closer than this (layout units) count as merged
CONTRACTION_EPSILON = 0.08

# Contraction animation: fraction of the remaining gap closed per second
CONTRACTION_RATE = 10.0

# Settling barrier inserted between the phases of composite operators (seconds)
PHASE_WAIT = 0.5

# Default random seed (for reproducible initial layouts)
DEFAULT_SEED = 42

# Notation letters (Conway polyhedron notation)
NOTATION_DUAL = "d"
NOTATION_JOIN = "j"
NOTATION_AMBO = "a"
NOTATION_KIS = "k"
NOTATION_TRUNCATE = "t"
NOTATION_EXPAND = "e"
NOTATION_SNUB = "s"
NOTATION_BEVEL = "b"

# Preset seed symbols (T = Y3, C = P4, O = aT, I, D)
SYMBOL_PRISM = "P"
SYMBOL_ANTIPRISM = "A"
SYMBOL_PYRAMID = "Y"

# =============================================================================
# REFERENCE POLYHEDRA (V, E, F)
# =============================================================================
#
# Used to validate the composite operators. Every entry satisfies
# V - E + F = 2.
#
REFERENCE_COUNTS = {
    "T": (4, 6, 4),      # tetrahedron = Y3
    "C": (8, 12, 6),     # cube = P4
    "O": (6, 12, 8),     # octahedron = aT
    "D": (20, 30, 12),   # dodecahedron = dI
    "I": (12, 30, 20),   # icosahedron = k5 A5 = sT
    "aC": (12, 24, 14),  # cuboctahedron
    "tT": (12, 18, 8),   # truncated tetrahedron
    "eT": (12, 24, 14),  # eT = aaT = cuboctahedron
    "kT": (8, 18, 12),   # triakis tetrahedron
    "jT": (8, 12, 6),    # jT = cube
    "dC": (6, 12, 8),    # dC = octahedron
    "eC": (24, 48, 26),  # rhombicuboctahedron
    "bC": (48, 72, 26),  # truncated cuboctahedron
    "sC": (24, 60, 38),  # snub cube
}

# Noise (layout units) added when a new vertex is seeded at its origins' mean
POSITION_JITTER = 0.01
