"""
conway_graph
============

Conway polyhedron operators on a combinatorial graph.

Layers (each depends only on those below it):
    transactions - operator scripts, positions, Polyhedron orchestrator
    builders     - prism / antiprism / pyramid and the platonic solids
    analysis     - reference APSP, Euler checks, isomorphism
    operators    - truncate, ambo, expand, kis, join, bevel, dual, snub
    graph        - Distance (matrix + pst), Cycles (faces), Shape
    spec         - constants, errors, shape contract

Requirements:
    Python >= 3.9
    numpy >= 1.20
    scipy >= 1.11
"""

import sys

# Python version check
if sys.version_info < (3, 9):
    raise ImportError(f"conway_graph requires Python >= 3.9, got {sys.version}")

# scipy version check (csgraph reference APSP)
import scipy
_scipy_version = tuple(int(p) for p in scipy.__version__.split('.')[:2] if p.isdigit())
if _scipy_version < (1, 11):
    raise ImportError(f"conway_graph requires scipy >= 1.11, got {scipy.__version__}")

# numpy version check
import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"conway_graph requires numpy >= 1.20, got {np.__version__}")

from .graph import Distance, Cycles, Shape
from .transactions import ConwayOperator, Polyhedron

__version__ = "0.1.0"
