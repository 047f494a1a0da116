"""
Conway Operators
================

Topology rewrites on a Shape, in place.

OPERATORS (Conway notation, read right to left):
    t  truncate    every vertex becomes a face
    a  ambo        truncate, then contract every pre-existing edge
    e  expand      aa
    k  kis         a pyramid apex on every face
    j  join        kis, then drop the pre-kis edges
    b  bevel       ta (ambo first, then truncate)
    d  dual        faces become vertices
    s  snub        flag construction, 5 edges per new vertex

COUNTS (V, E, F) -> result:
    t: (V, E, F)  -> (2E, 3E, V + F)
    a: (V, E, F)  -> (E, 2E, V + F)
    k: (V, E, F)  -> (V + F, 3E, 2E)
    j: (V, E, F)  -> (V + F, 2E, E)
    d: (V, E, F)  -> (F, E, V)
    s: (V, E, F)  -> (2E, 5E, 3E + 2)

Operators that leave edges for a later phase (ambo without contraction,
kis before join) return them as VertexId pairs valid right after the call.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from ..graph.shape import Shape
from ..spec.structures import Edge

logger = logging.getLogger(__name__)


def truncate(shape: Shape, degree: Optional[int] = None) -> List[Edge]:
    """
    Split every vertex (or every vertex of the given degree) into a face.

    Returns:
        edges of all new faces
    """
    distance = shape.distance
    targets = [
        v for v in distance.vertices()
        if degree is None or distance.degree(v) == degree
    ]
    cycles = shape.cycles
    rings = {v: cycles.sorted_connections(v) for v in targets}

    # Splits only append vertices, so ids stay valid. Splitting v attaches
    # ring[i] to ordered[i]; pending rings swap v for that vertex in place.
    new_edges = []
    for v in targets:
        ordered = rings.pop(v)
        first = distance.order
        new_edges.extend(distance.split_vertex(v, ordered))
        ring = [v] + list(range(first, distance.order))
        for c, attached in zip(ordered, ring):
            if c in rings:
                rings[c] = [attached if x == v else x for x in rings[c]]

    logger.debug(f"truncate(degree={degree}): split {len(targets)} vertices")
    return new_edges


def ambo(shape: Shape, contract: bool = False) -> List[Edge]:
    """
    Truncate, then merge each pre-existing edge into a single vertex.

    Args:
        contract: contract immediately; otherwise the edges are returned so
            the caller can contract them later (e.g. once the layout has
            pulled their endpoints together)

    Returns:
        the edges still to contract (empty if contract=True)
    """
    face_edges = set(truncate(shape))
    stale = [edge for edge in shape.distance.edges() if edge not in face_edges]
    if contract:
        shape.contraction(stale)
        return []
    return stale


def expand(shape: Shape):
    """e = aa."""
    ambo(shape, contract=True)
    ambo(shape, contract=True)


def bevel(shape: Shape):
    """b = ta: truncate the ambo."""
    ambo(shape, contract=True)
    truncate(shape)


def kis(shape: Shape, degree: Optional[int] = None) -> List[Edge]:
    """
    Raise a pyramid on every face (or every face with `degree` sides).

    Returns:
        the edges that existed before kis
    """
    distance = shape.distance
    original = list(distance.edges())
    faces = [face for face in shape.cycles if degree is None or len(face) == degree]

    for face in faces:
        apex = distance.insert(origin=[distance.handle(v) for v in face])
        for v in face:
            distance.connect((apex, v))

    logger.debug(f"kis(degree={degree}): raised {len(faces)} apexes")
    return original


def join(shape: Shape):
    """j = dual of ambo: kis, then drop the original edges."""
    original = kis(shape)
    shape.release(original)


def dual(shape: Shape):
    """
    Replace every face by a vertex; two new vertices are adjacent iff their
    faces share an edge.
    """
    distance = shape.distance
    cycles = shape.cycles
    n = distance.order

    centres = [
        distance.insert(origin=[distance.handle(v) for v in face])
        for face in cycles
    ]
    for f, g in cycles.edge_faces().values():
        distance.connect((centres[f], centres[g]))

    distance.delete_all(range(n))
    logger.debug(f"dual: {n} vertices -> {len(centres)} vertices")


def snub(shape: Shape):
    """
    Flag construction: one new vertex per (vertex, face) incidence.

    EDGES:
        face ring    (v, f) - (w, f)   for v, w consecutive in f
        vertex ring  (v, f) - (v, g)   for f, g on either side of an edge at v
        diagonal     (v, f) - (w, g)   for v -> w in oriented f, g across {v, w}

    Every new vertex has degree 5; the diagonals all lean the same way
    because the faces are consistently oriented.
    """
    distance = shape.distance
    cycles = shape.cycles
    faces = cycles.orient()
    sides = cycles.edge_faces()
    n = distance.order

    flag = {}
    for f, face in enumerate(faces):
        face_handles = [distance.handle(v) for v in face]
        for v in face:
            flag[v, f] = distance.insert(origin=[distance.handle(v)] + face_handles)

    for f, face in enumerate(faces):
        for v, w in face.directed_edges():
            distance.connect((flag[v, f], flag[w, f]))

    for (v, w), (f, g) in sides.items():
        distance.connect((flag[v, f], flag[v, g]))
        distance.connect((flag[w, f], flag[w, g]))

    for f, face in enumerate(faces):
        for v, w in face.directed_edges():
            g = _across(sides, f, v, w)
            distance.connect((flag[v, f], flag[w, g]))

    distance.delete_all(range(n))
    logger.debug(f"snub: {n} vertices -> {len(flag)} vertices")


def _across(sides, f: int, v: int, w: int) -> int:
    a, b = sides[(v, w) if v < w else (w, v)]
    return b if a == f else a


def contract(shape: Shape, edges: Iterable[Sequence[int]]):
    shape.contraction(edges)


def release(shape: Shape, edges: Iterable[Sequence[int]]):
    shape.release(edges)
