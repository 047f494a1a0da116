"""
Face Discovery
==============

Faces of a polyhedral graph, derived from adjacency alone.

ALGORITHM (triplet extension):
    1. Seed: for every u and neighbours x < y of u with u < x, the path
       (x, u, y) is a triangle if x ~ y, else an open triplet.
    2. Extend (FIFO): pop (x0, ..., xt); for each neighbour v of xt with
       v > x1 and v adjacent to none of x1..x(t-1), append v. If v ~ x0
       the path closes, else it is queued again.
    3. Stop once face_count() = 2 + |E| - |V| faces are accepted.

    Every face has a unique minimum vertex m; it sits at x1 of exactly one
    seed, so each face is derived once. A closed cycle is accepted only if
    removing its vertices leaves the rest connected (non-separating induced
    cycles are exactly the faces of a 3-connected planar graph).

Faces are not stored anywhere else: Shape rebuilds Cycles whenever the
adjacency version changes.
"""

import logging
from collections import deque
from itertools import combinations
from typing import Dict, Iterator, List, Sequence, Set

from ..spec.errors import FaceDiscoveryExhausted, InvariantViolation
from ..spec.structures import Edge, Face, canonical_edge

logger = logging.getLogger(__name__)


class Cycles:
    """Ordered collection of Faces. Indexing wraps around."""

    def __init__(self, faces: Sequence = ()):
        self._faces = [face if isinstance(face, Face) else Face(face) for face in faces]

    @classmethod
    def from_distance(cls, distance) -> "Cycles":
        """
        Discover every face of `distance`.

        Raises:
            FaceDiscoveryExhausted: the queue emptied before face_count()
                faces were accepted (graph is not polyhedral)
        """
        target = distance.face_count()
        if target <= 0 or distance.edge_count() == 0:
            return cls()

        neighbours = [set(distance.connections(v)) for v in distance.vertices()]
        accepted: List[Face] = []
        seen: Set[Face] = set()

        def accept(path) -> bool:
            face = Face(path)
            if face not in seen and distance.is_connected(exclude=path):
                seen.add(face)
                accepted.append(face)
            return len(accepted) >= target

        queue = deque()
        for u in distance.vertices():
            for x, y in combinations(sorted(neighbours[u]), 2):
                if x < u:
                    continue
                if y in neighbours[x]:
                    if accept((x, u, y)):
                        return cls(accepted)
                else:
                    queue.append((x, u, y))

        while queue:
            path = queue.popleft()
            x0, x1, xt = path[0], path[1], path[-1]
            interior = path[1:-1]
            for v in sorted(neighbours[xt]):
                if v <= x1 or any(v in neighbours[w] for w in interior):
                    continue
                extended = path + (v,)
                if x0 in neighbours[v]:
                    if accept(extended):
                        return cls(accepted)
                else:
                    queue.append(extended)

        logger.error(
            f"Face discovery exhausted: {len(accepted)}/{target} faces "
            f"(V={distance.order}, E={distance.edge_count()})"
        )
        raise FaceDiscoveryExhausted(len(accepted), target)

    # =========================================================================
    # Sequence protocol
    # =========================================================================

    def __len__(self) -> int:
        return len(self._faces)

    def __iter__(self) -> Iterator[Face]:
        return iter(self._faces)

    def __getitem__(self, index: int) -> Face:
        if not self._faces:
            raise IndexError("Cycles is empty")
        return self._faces[index % len(self._faces)]

    def __contains__(self, face) -> bool:
        return face in self._faces

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cycles):
            return NotImplemented
        return set(self._faces) == set(other._faces)

    def __repr__(self) -> str:
        return f"Cycles({[list(face) for face in self._faces]})"

    # =========================================================================
    # Queries
    # =========================================================================

    def faces_containing(self, v: int) -> List[Face]:
        return [face for face in self._faces if v in face]

    def edge_faces(self) -> Dict[Edge, List[int]]:
        """Canonical edge -> indices of the faces bounded by it."""
        table: Dict[Edge, List[int]] = {}
        for i, face in enumerate(self._faces):
            for edge in face.edges():
                table.setdefault(edge, []).append(i)
        return table

    def sorted_connections(self, v: int) -> List[int]:
        """
        Neighbours of v in cyclic order around v.

        Each face through v contributes its (previous, next) pair; the pairs
        are chained end to end until every one is used.
        """
        pairs = [list(face.around(v)) for face in self.faces_containing(v)]
        if not pairs:
            return []

        current = pairs[0][0]
        chain = [current]
        while pairs:
            for i, (a, b) in enumerate(pairs):
                if current == a or current == b:
                    current = b if current == a else a
                    chain.append(current)
                    del pairs[i]
                    break
            else:
                raise InvariantViolation(
                    f"Faces around vertex {v} do not form a single ring: "
                    f"chained {chain}, left over {pairs}"
                )
        return chain[1:]

    def orient(self) -> List[Face]:
        """
        Faces reoriented so that two faces sharing an edge traverse it in
        opposite directions. The first face of each component keeps its order.
        """
        oriented: List[Face] = [None] * len(self._faces)
        table = self.edge_faces()

        for start in range(len(self._faces)):
            if oriented[start] is not None:
                continue
            oriented[start] = self._faces[start]
            queue = deque([start])
            while queue:
                i = queue.popleft()
                for a, b in oriented[i].directed_edges():
                    for j in table[canonical_edge(a, b)]:
                        if oriented[j] is not None:
                            continue
                        face = self._faces[j]
                        if (a, b) in face.directed_edges():
                            face = face.reversed()
                        oriented[j] = face
                        queue.append(j)
        return oriented

    def histogram(self) -> Dict[int, int]:
        """Face size -> count."""
        sizes: Dict[int, int] = {}
        for face in self._faces:
            sizes[len(face)] = sizes.get(len(face), 0) + 1
        return dict(sorted(sizes.items()))
