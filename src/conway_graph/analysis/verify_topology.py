"""
Topology Verification Functions
===============================

Independent checks on Distance / Shape results.

These functions are in analysis/ layer because they depend on the graph layer.

REFERENCE APSP:
    floyd_warshall() runs scipy.sparse.csgraph on the adjacency alone, so it
    shares no code with Distance.pst(); the two must agree cell for cell.
"""

import logging
from typing import Dict, List, Optional

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import floyd_warshall as _csgraph_floyd_warshall

from ..spec.constants import ADJACENT, DISCONNECTED, DISTANCE_DTYPE, EULER_CHARACTERISTIC
from ..spec.errors import InvariantViolation

logger = logging.getLogger(__name__)


def adjacency_matrix(distance) -> np.ndarray:
    """(n, n) 0/1 matrix of the edges of `distance`."""
    return (distance.matrix() == ADJACENT).astype(np.int8)


def floyd_warshall(distance) -> np.ndarray:
    """
    All-pairs unweighted shortest paths in Distance cell encoding.

    Returns:
        (n, n) int64 matrix; unreachable pairs are DISCONNECTED
    """
    n = distance.order
    if n == 0:
        return np.zeros((0, 0), dtype=DISTANCE_DTYPE)
    graph = csr_matrix(adjacency_matrix(distance))
    paths = _csgraph_floyd_warshall(graph, directed=False, unweighted=True)
    result = np.full((n, n), DISCONNECTED, dtype=DISTANCE_DTYPE)
    finite = np.isfinite(paths)
    result[finite] = paths[finite].astype(DISTANCE_DTYPE)
    return result


def verify_pst(distance) -> Dict:
    """
    Run pst() on a copy and compare against floyd_warshall().

    Returns:
        dict with verification results
    """
    trial = distance.copy()
    resolved = trial.pst()
    reference = floyd_warshall(distance)
    computed = trial.matrix()
    mismatches = np.argwhere(computed != reference)

    return {
        'resolved': resolved,
        'matches_floyd_warshall': len(mismatches) == 0,
        'n_mismatches': int(len(mismatches) // 2),
        'first_mismatch': tuple(int(i) for i in mismatches[0]) if len(mismatches) else None,
        'diameter': trial.diameter(),
    }


def verify_euler(shape) -> Dict:
    """
    Check V - E + F = 2 with F counted by face discovery.

    Returns:
        dict with verification results
    """
    V, E, F = shape.counts()
    chi = V - E + F
    return {
        'V': V,
        'E': E,
        'F': F,
        'chi': chi,
        'expected_F': shape.distance.face_count(),
        'euler_holds': chi == EULER_CHARACTERISTIC,
    }


def assert_euler(shape, label: str = "shape"):
    """Raise InvariantViolation unless Euler holds."""
    result = verify_euler(shape)
    if not result['euler_holds']:
        logger.error(f"{label}: Euler failed {result}")
        raise InvariantViolation(
            f"{label}: V - E + F = {result['V']} - {result['E']} + {result['F']} "
            f"= {result['chi']}, expected {EULER_CHARACTERISTIC}"
        )


def face_statistics(shape) -> Dict:
    """
    Face size histogram and vertex degree histogram.

    Example:
        face_statistics(cube())
        → {'face_sizes': {4: 6}, 'degrees': {3: 8}, 'mean_face_size': 4.0, ...}
    """
    distance = shape.distance
    sizes = np.array([len(face) for face in shape.cycles], dtype=int)
    degrees = np.array([distance.degree(v) for v in distance.vertices()], dtype=int)

    def histogram(values: np.ndarray) -> Dict[int, int]:
        keys, counts = np.unique(values, return_counts=True)
        return {int(k): int(c) for k, c in zip(keys, counts)}

    return {
        'face_sizes': histogram(sizes),
        'degrees': histogram(degrees),
        'mean_face_size': float(sizes.mean()) if sizes.size else 0.0,
        'mean_degree': float(degrees.mean()) if degrees.size else 0.0,
        'is_regular': bool(degrees.size and np.all(degrees == degrees[0])),
        'is_simplicial': bool(sizes.size and np.all(sizes == 3)),
    }


def find_isomorphism(a, b) -> Optional[List[int]]:
    """
    Vertex map a -> b preserving adjacency, or None.

    Backtracking, pruned by each vertex's sorted shortest-path profile.
    Intended for the small polyhedra used in checks (tens of vertices).
    """
    if a.order != b.order or a.edge_count() != b.edge_count():
        return None
    n = a.order
    da, db = floyd_warshall(a), floyd_warshall(b)
    profile_a = [tuple(sorted(row)) for row in da.tolist()]
    profile_b = [tuple(sorted(row)) for row in db.tolist()]
    if sorted(profile_a) != sorted(profile_b):
        return None

    candidates = [[w for w in range(n) if profile_b[w] == profile_a[v]] for v in range(n)]
    mapping = [-1] * n
    used = [False] * n

    def extend(v: int) -> bool:
        if v == n:
            return True
        for w in candidates[v]:
            if used[w]:
                continue
            if any(da[v, u] != db[w, mapping[u]] for u in range(v)):
                continue
            mapping[v] = w
            used[w] = True
            if extend(v + 1):
                return True
            used[w] = False
        mapping[v] = -1
        return False

    return list(mapping) if extend(0) else None


def isomorphic(a, b) -> bool:
    return find_isomorphism(a, b) is not None
