"""
Preset Polyhedra
================

Seed shapes for Conway notation.

FAMILIES:
    P_n  prism       (2n, 3n, n + 2)
    A_n  antiprism   (2n, 4n, 2n + 2)
    Y_n  pyramid     (n + 1, 2n, n + 1)

PLATONIC SOLIDS (built from the families and operators):
    T = Y3           (4, 6, 4)
    C = P4           (8, 12, 6)
    O = aT           (6, 12, 8)
    I = k5 A5        (12, 30, 20)
    D = dI           (20, 30, 12)

Every builder returns a fresh Shape and checks its own counts.
"""

from typing import Callable, Dict, List, Optional

from ..graph.shape import Shape
from ..operators.conway import ambo, dual, kis
from ..spec.constants import (
    MIN_FACE_SIZE,
    REFERENCE_COUNTS,
    SYMBOL_ANTIPRISM,
    SYMBOL_PRISM,
    SYMBOL_PYRAMID,
)
from ..spec.structures import Edge


def _check_sides(n: int):
    if n < MIN_FACE_SIZE:
        raise ValueError(f"Polygon needs at least {MIN_FACE_SIZE} sides, got {n}")


def _check_counts(shape: Shape, symbol: str) -> Shape:
    expected = REFERENCE_COUNTS[symbol]
    actual = shape.counts()
    if actual != expected:
        raise ValueError(f"{symbol}: expected (V, E, F) = {expected}, got {actual}")
    return shape


def _ring(n: int, offset: int = 0) -> List[Edge]:
    return [(offset + i, offset + (i + 1) % n) for i in range(n)]


def prism(n: int) -> Shape:
    """
    Two n-gons (0..n-1 and n..2n-1) joined rung by rung.

    TOPOLOGY:
        V = 2n, E = 3n, F = n + 2
    """
    _check_sides(n)
    edges = _ring(n) + _ring(n, n) + [(i, i + n) for i in range(n)]
    return Shape.from_edges(2 * n, edges)


def anti_prism(n: int) -> Shape:
    """
    Prism plus one diagonal per side face, splitting it into two triangles.

    TOPOLOGY:
        V = 2n, E = 4n, F = 2n + 2
    """
    _check_sides(n)
    edges = (
        _ring(n) + _ring(n, n)
        + [(i, i + n) for i in range(n)]
        + [(i, (i + 1) % n + n) for i in range(n)]
    )
    return Shape.from_edges(2 * n, edges)


def pyramid(n: int) -> Shape:
    """
    n-gon (0..n-1) plus apex n.

    TOPOLOGY:
        V = n + 1, E = 2n, F = n + 1
    """
    _check_sides(n)
    edges = _ring(n) + [(i, n) for i in range(n)]
    return Shape.from_edges(n + 1, edges)


def tetrahedron() -> Shape:
    return _check_counts(pyramid(3), "T")


def cube() -> Shape:
    return _check_counts(prism(4), "C")


def octahedron() -> Shape:
    """O = aT (the medial graph of the tetrahedron)."""
    shape = pyramid(3)
    ambo(shape, contract=True)
    return _check_counts(shape, "O")


def icosahedron() -> Shape:
    """I = k5 A5: cap both pentagons of the pentagonal antiprism."""
    shape = anti_prism(5)
    kis(shape, 5)
    return _check_counts(shape, "I")


def dodecahedron() -> Shape:
    """D = dI."""
    shape = icosahedron()
    dual(shape)
    return _check_counts(shape, "D")


PLATONIC: Dict[str, Callable[[], Shape]] = {
    "T": tetrahedron,
    "C": cube,
    "O": octahedron,
    "I": icosahedron,
    "D": dodecahedron,
}

FAMILIES: Dict[str, Callable[[int], Shape]] = {
    SYMBOL_PRISM: prism,
    SYMBOL_ANTIPRISM: anti_prism,
    SYMBOL_PYRAMID: pyramid,
}


def preset(name: str, n: Optional[int] = None) -> Shape:
    """
    Build a seed by notation symbol.

    Args:
        name: "T", "C", "O", "I", "D", or a family symbol "P", "A", "Y"
        n: polygon size, required for families

    Example:
        preset("P", 5)  → pentagonal prism
        preset("O")     → octahedron
    """
    if name in PLATONIC:
        return PLATONIC[name]()
    if name in FAMILIES:
        if n is None:
            raise ValueError(f"Preset family '{name}' needs a polygon size")
        return FAMILIES[name](n)
    raise ValueError(
        f"Unknown preset '{name}': expected one of "
        f"{sorted(PLATONIC) + sorted(FAMILIES)}"
    )
