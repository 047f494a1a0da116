"""
Analysis functions - depend on the graph layer.

Separated from builders to maintain clean layering:
    builders → operators → graph → spec
    analysis → graph → spec

Includes:
- verify_topology: reference APSP, Euler checks, face statistics, isomorphism
"""

from .verify_topology import (
    adjacency_matrix,
    floyd_warshall,
    verify_pst,
    verify_euler,
    assert_euler,
    face_statistics,
    find_isomorphism,
    isomorphic,
)
