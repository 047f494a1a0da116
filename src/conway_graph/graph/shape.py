"""
Shape
=====

Distance + derived Cycles + derived springs.

Cycles and springs are never patched in place: each is rebuilt on read
whenever Distance.version has moved since it was last computed.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

from ..spec.structures import Edge, validate_shape
from .cycles import Cycles
from .distance import Distance

logger = logging.getLogger(__name__)


class Shape:
    """
    Combinatorial polyhedron.

    Attributes:
        distance: the single source of truth for topology
        cycles: faces (recomputed on read when stale)
        springs: layout pairs (recomputed on read when stale; runs pst)
    """

    def __init__(self, distance: Distance = None):
        self.distance = distance if distance is not None else Distance()
        self._cycles = None
        self._cycles_version = None
        self._springs = None
        self._springs_version = None

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[Sequence[int]]) -> "Shape":
        return cls(Distance.from_edges(n, edges))

    @property
    def cycles(self) -> Cycles:
        if self._cycles_version != self.distance.version:
            self._cycles = Cycles.from_distance(self.distance)
            self._cycles_version = self.distance.version
        return self._cycles

    @property
    def springs(self) -> List[Edge]:
        if self._springs_version != self.distance.version:
            self.distance.pst()
            self._springs = self.distance.springs()
            self._springs_version = self.distance.version
        return self._springs

    def recompute(self):
        """Eagerly rebuild distances, faces and springs."""
        self.distance.pst()
        self._cycles = Cycles.from_distance(self.distance)
        self._cycles_version = self.distance.version
        self._springs = self.distance.springs()
        self._springs_version = self.distance.version
        logger.debug(f"Recomputed {self!r}")

    # =========================================================================
    # Mutators
    # =========================================================================

    def release(self, edges: Iterable[Sequence[int]]):
        """Disconnect `edges`, then recompute."""
        for edge in edges:
            self.distance.disconnect(edge)
        self.recompute()

    def contraction(self, edges: Iterable[Sequence[int]]):
        """Contract `edges` (tracking the index shift), then recompute."""
        self.distance.contract_edges(edges)
        self.recompute()

    # =========================================================================
    # Queries
    # =========================================================================

    def counts(self) -> Tuple[int, int, int]:
        """(V, E, F)."""
        return (self.distance.order, self.distance.edge_count(), len(self.cycles))

    def validate(self, strict: bool = True) -> Tuple[bool, List[str]]:
        return validate_shape(self, strict=strict)

    def copy(self) -> "Shape":
        return Shape(self.distance.copy())

    def __repr__(self) -> str:
        V, E = self.distance.order, self.distance.edge_count()
        return f"Shape(V={V}, E={E}, F={E - V + 2})"
