"""
Distance Matrix
===============

Single source of truth for topology.

STORAGE:
    Symmetric n×n matrix kept as a flat lower-triangular (jagged) array:

        [ 0 ]
        [ M | 0 ]
        [ M | M | 0 ]
        ...
        [ M | M | M | ... | M | 0 ]

    D[x][y] (x >= y) lives at x(x+1)/2 + y.

CELL SEMANTICS:
    0             identity (D[v][v])
    1             adjacency (edge (v, u) exists)
    DISCONNECTED  not (yet) known / unreachable
    k > 1         unweighted shortest-path length (valid after pst())

VERTEX IDS:
    VertexIds are dense (0..n-1). delete(v) shifts every higher id down by one.
    Alongside the dense ids the matrix keeps an arena of STABLE handles (one per
    row, never reused), so per-vertex data living outside the matrix can be
    keyed by handle and survive deletions untouched.

ALL-PAIRS SHORTEST PATH (pst):
    Level-synchronous multi-source frontier expansion. Depth 1 records direct
    neighbours; depth d extends every unresolved vertex's depth-(d-1) frontier
    by one hop. First assignment wins. Produces exactly the Floyd–Warshall
    matrix (see analysis.verify_topology.floyd_warshall).
"""

import logging
import warnings
from collections import deque
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from ..spec.constants import (
    ADJACENT,
    DISCONNECTED,
    DISTANCE_DTYPE,
    EULER_CHARACTERISTIC,
    IDENTITY,
    MIN_FACE_SIZE,
    SPRING_FAR_SLACK,
    SPRING_NEAR,
)
from ..spec.errors import DisconnectedGraph, UnknownVertex
from ..spec.structures import Edge, canonical_edge

logger = logging.getLogger(__name__)


def _flat(v: int, u: int) -> int:
    x, y = (v, u) if v >= u else (u, v)
    return x * (x + 1) // 2 + y


def _empty_cells(n: int) -> np.ndarray:
    cells = np.full(n * (n + 1) // 2, DISCONNECTED, dtype=DISTANCE_DTYPE)
    diag = np.arange(n)
    cells[diag * (diag + 1) // 2 + diag] = IDENTITY
    return cells


class Distance:
    """
    Symmetric distance matrix over a dense vertex index space.

    Args:
        n: number of vertices, all mutually DISCONNECTED
    """

    def __init__(self, n: int = 0):
        if n < 0:
            raise ValueError(f"Vertex count must be >= 0, got {n}")
        self._order = n
        self._cells = _empty_cells(n)
        self._handles = list(range(n))
        self._next_handle = n
        self._origins = {}
        # Bumped whenever adjacency changes (consumers compare to detect staleness)
        self.version = 0
        # True iff the last pst() resolved every pair and nothing changed since
        self.resolved = False

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[Sequence[int]]) -> "Distance":
        distance = cls(n)
        for edge in edges:
            distance.connect(edge)
        return distance

    # =========================================================================
    # Indexing
    # =========================================================================

    @property
    def order(self) -> int:
        """Vertex count."""
        return self._order

    def __len__(self) -> int:
        return self._order

    def _check(self, v) -> int:
        if not isinstance(v, (int, np.integer)) or isinstance(v, bool) or not 0 <= v < self._order:
            raise UnknownVertex(v, self._order)
        return int(v)

    def __getitem__(self, pair: Sequence[int]) -> int:
        v, u = pair
        return int(self._cells[_flat(self._check(v), self._check(u))])

    def __setitem__(self, pair: Sequence[int], value: int):
        v, u = (self._check(w) for w in pair)
        if v == u and value != IDENTITY:
            raise ValueError(f"D[{v}][{v}] is always {IDENTITY}")
        i = _flat(v, u)
        if (self._cells[i] == ADJACENT) != (value == ADJACENT):
            self._touch()
        self._cells[i] = value
        self.resolved = False

    def __eq__(self, other) -> bool:
        if not isinstance(other, Distance):
            return NotImplemented
        return self._order == other._order and np.array_equal(self._cells, other._cells)

    def _touch(self):
        self.version += 1
        self.resolved = False

    def copy(self) -> "Distance":
        dupe = Distance.__new__(Distance)
        dupe._order = self._order
        dupe._cells = self._cells.copy()
        dupe._handles = list(self._handles)
        dupe._next_handle = self._next_handle
        dupe._origins = dict(self._origins)
        dupe.version = self.version
        dupe.resolved = self.resolved
        return dupe

    def row(self, v: int) -> np.ndarray:
        """D[v][u] for every u."""
        v = self._check(v)
        u = np.arange(self._order)
        x = np.maximum(u, v)
        y = np.minimum(u, v)
        return self._cells[x * (x + 1) // 2 + y]

    def matrix(self) -> np.ndarray:
        """Dense symmetric (n, n) copy."""
        n = self._order
        full = np.empty((n, n), dtype=DISTANCE_DTYPE)
        rows, cols = np.tril_indices(n)
        full[rows, cols] = self._cells
        full[cols, rows] = self._cells
        return full

    # =========================================================================
    # Stable handles
    # =========================================================================

    def handles(self) -> List[int]:
        """Stable handle of every dense vertex, in VertexId order."""
        return list(self._handles)

    def handle(self, v: int) -> int:
        return self._handles[self._check(v)]

    def index(self, handle: int) -> int:
        """Current dense VertexId of a stable handle."""
        try:
            return self._handles.index(handle)
        except ValueError:
            raise UnknownVertex(handle, kind="handle") from None

    def origin(self, handle: int) -> Tuple[int, ...]:
        """Handles the vertex grew out of (empty for seed vertices)."""
        return self._origins.get(handle, ())

    # =========================================================================
    # Structural edits
    # =========================================================================

    def connect(self, edge: Sequence[int]):
        """Set D[v][u] = 1. Idempotent; self-pairs are rejected."""
        v, u = (self._check(w) for w in edge)
        if v == u:
            raise ValueError(f"Cannot connect vertex {v} to itself")
        i = _flat(v, u)
        if self._cells[i] != ADJACENT:
            self._cells[i] = ADJACENT
            self._touch()

    def disconnect(self, edge: Sequence[int]):
        """Clear an edge back to DISCONNECTED. Idempotent; self-pairs are rejected."""
        v, u = (self._check(w) for w in edge)
        if v == u:
            raise ValueError(f"Cannot disconnect vertex {v} from itself")
        i = _flat(v, u)
        if self._cells[i] == ADJACENT:
            self._cells[i] = DISCONNECTED
            self._touch()

    def insert(self, origin: Iterable[int] = ()) -> int:
        """
        Append a vertex with every distance unknown.

        Args:
            origin: stable handles the new vertex grows out of

        Returns:
            the new VertexId (always the previous order)
        """
        n = self._order
        self._cells = np.concatenate([
            self._cells,
            np.full(n, DISCONNECTED, dtype=DISTANCE_DTYPE),
            np.array([IDENTITY], dtype=DISTANCE_DTYPE),
        ])
        self._order = n + 1
        handle = self._next_handle
        self._next_handle += 1
        self._handles.append(handle)
        origin = tuple(origin)
        if origin:
            self._origins[handle] = origin
        self._touch()
        return n

    def delete(self, v: int):
        """Remove row/column v; every VertexId above v shifts down by one."""
        self.delete_all([v])

    def delete_all(self, vertices: Iterable[int]):
        """delete() several vertices at once (ids refer to the current indexing)."""
        doomed = {self._check(v) for v in vertices}
        if not doomed:
            return
        keep = [i for i in range(self._order) if i not in doomed]
        full = self.matrix()[np.ix_(keep, keep)]
        self._cells = full[np.tril_indices(len(keep))]
        for i in doomed:
            self._origins.pop(self._handles[i], None)
        self._handles = [self._handles[i] for i in keep]
        self._order = len(keep)
        self._touch()
        logger.debug(f"Deleted vertices {sorted(doomed)}, order is now {self._order}")

    # =========================================================================
    # Queries
    # =========================================================================

    def connections(self, v: int) -> List[int]:
        """VertexIds at distance 1 from v, ascending."""
        return np.flatnonzero(self.row(v) == ADJACENT).tolist()

    def degree(self, v: int) -> int:
        return int(np.count_nonzero(self.row(v) == ADJACENT))

    def vertices(self) -> range:
        return range(self._order)

    def vertex_pairs(self) -> Iterator[Edge]:
        """Every unordered pair (u, v), u < v."""
        for v in range(self._order):
            for u in range(v):
                yield (u, v)

    def edges(self) -> Iterator[Edge]:
        """Every (u, v), u < v, with D[u][v] == 1."""
        rows, cols = np.tril_indices(self._order)
        mask = self._cells == ADJACENT
        for v, u in zip(rows[mask].tolist(), cols[mask].tolist()):
            yield (u, v)

    def edge_count(self) -> int:
        return int(np.count_nonzero(self._cells == ADJACENT))

    def diameter(self) -> int:
        """Largest finite distance (0 for an empty or edgeless matrix)."""
        finite = self._cells[self._cells != DISCONNECTED]
        return int(finite.max()) if finite.size else 0

    def face_count(self) -> int:
        """2 + |E| - |V|: the face count Euler's formula demands (a target, not a guarantee)."""
        return EULER_CHARACTERISTIC + self.edge_count() - self._order

    def springs(self) -> List[Edge]:
        """
        Layout pairs: distance <= 2, or >= diameter - 1.

        Only meaningful after pst(); unknown pairs are never springs.
        """
        diameter = self.diameter()
        springs = []
        for u, v in self.vertex_pairs():
            d = self._cells[_flat(v, u)]
            if d == DISCONNECTED:
                continue
            if d <= SPRING_NEAR or d >= diameter - SPRING_FAR_SLACK:
                springs.append((u, v))
        return springs

    def is_connected(self, exclude: Iterable[int] = ()) -> bool:
        """True if the graph minus `exclude` is connected (an empty graph is)."""
        excluded = set(exclude)
        remaining = [v for v in self.vertices() if v not in excluded]
        if not remaining:
            return True
        seen = {remaining[0]}
        queue = deque([remaining[0]])
        while queue:
            w = queue.popleft()
            for x in self.connections(w):
                if x not in seen and x not in excluded:
                    seen.add(x)
                    queue.append(x)
        return len(seen) == len(remaining)

    # =========================================================================
    # All-pairs shortest path
    # =========================================================================

    def pst(self) -> bool:
        """
        Recompute every distance from the adjacency alone.

        ALGORITHM:
            counters[v] = n - 1 unresolved partners per vertex
            queues[v]   = FIFO of (partner, depth) discoveries
            depth 1: v records its neighbours at distance 1
            depth d: v drains its depth-(d-1) entries w; every neighbour x of w
                     with D[v][x] unknown gets D[v][x] = d, is queued on both
                     v and x, and both counters drop
            stop: every counter is zero (resolved), or a full pass resolved
                  nothing (disconnected: warn, keep the partial matrix)

        Returns:
            True if every pair was resolved
        """
        n = self._order
        result = _empty_cells(n)
        children = [self.connections(v) for v in range(n)]
        counters = [n - 1] * n
        queues = [deque() for _ in range(n)]

        depth = 1
        resolved = True
        while True:
            unresolved = [v for v in range(n) if counters[v]]
            if not unresolved:
                break

            progressed = False
            for v in unresolved:
                if depth == 1:
                    for w in children[v]:
                        result[_flat(v, w)] = ADJACENT
                        queues[v].append((w, 1))
                        counters[v] -= 1
                        progressed = True
                    continue

                queue = queues[v]
                while queue and queue[0][1] == depth - 1:
                    w, _ = queue.popleft()
                    for x in children[w]:
                        i = _flat(v, x)
                        if x != v and result[i] == DISCONNECTED:
                            # First assignment wins
                            result[i] = depth
                            queue.append((x, depth))
                            queues[x].append((v, depth))
                            counters[v] -= 1
                            counters[x] -= 1
                            progressed = True

            depth += 1
            if not progressed:
                resolved = False
                unresolved_pairs = sum(counters) // 2
                logger.warning(
                    f"pst: {unresolved_pairs} vertex pairs unreachable "
                    f"(order={n}); keeping partial distances"
                )
                warnings.warn(
                    f"Disconnected graph: {unresolved_pairs} pairs unresolved",
                    DisconnectedGraph,
                    stacklevel=2,
                )
                break

        self._cells = result
        self.resolved = resolved
        return resolved

    # =========================================================================
    # Contraction / splitting
    # =========================================================================

    def contract_edge(self, edge: Sequence[int]):
        """
        Merge v into u for edge (v, u): every neighbour of v is reconnected to u,
        then v is deleted (ids above v shift down).
        """
        v, u = (self._check(w) for w in edge)
        if v == u:
            raise ValueError(f"Cannot contract self-pair ({v}, {u})")
        for w in self.connections(v):
            if w != u:
                self.connect((w, u))
        self.delete(v)

    def contract_edges(self, edges: Iterable[Sequence[int]]):
        """
        Contract edges one at a time, tracking the index shift.

        Each contraction deletes the larger endpoint. Queued edges referring to
        it are redirected to the survivor; ids above it are decremented; pairs
        that collapse onto one vertex are dropped.
        """
        pending = [list(edge) for edge in edges]
        while pending:
            a, b = pending.pop(0)
            if a == b:
                continue
            v, u = max(a, b), min(a, b)
            self.contract_edge((v, u))

            for edge in pending:
                for k in range(2):
                    if edge[k] == v:
                        edge[k] = u
                    elif edge[k] > v:
                        edge[k] -= 1
            pending = [edge for edge in pending if edge[0] != edge[1]]

    def split_vertex(self, v: int, connections: Sequence[int]) -> List[Edge]:
        """
        Replace v by a ring of deg(v) vertices, one per incident edge.

        Args:
            v: vertex to split (keeps its id as the first ring vertex)
            connections: v's neighbours in cyclic (planar) order, as given by
                Cycles.sorted_connections(v)

        Returns:
            the edges of the new face, canonical

        FAIL-FAST:
            Raises ValueError if `connections` is not exactly v's neighbourhood
            or if v has fewer than 3 neighbours.
        """
        v = self._check(v)
        connections = [self._check(c) for c in connections]
        if sorted(connections) != self.connections(v):
            raise ValueError(
                f"Ordered connections {connections} do not match the "
                f"neighbours {self.connections(v)} of vertex {v}"
            )
        if len(connections) < MIN_FACE_SIZE:
            raise ValueError(
                f"Cannot split vertex {v} of degree {len(connections)} into a face"
            )

        handle = self._handles[v]
        ring = [v] + [self.insert(origin=(handle,)) for _ in connections[1:]]

        for c in connections:
            self.disconnect((v, c))
        for w, c in zip(ring, connections):
            self.connect((w, c))

        new_edges = []
        for i in range(len(ring)):
            edge = (ring[i], ring[(i + 1) % len(ring)])
            self.connect(edge)
            new_edges.append(canonical_edge(*edge))
        return new_edges

    # =========================================================================
    # Display
    # =========================================================================

    def __repr__(self) -> str:
        return f"Distance(order={self._order}, edges={self.edge_count()})"

    def __str__(self) -> str:
        lines = ["\t|" + "".join(f" {i} |" for i in self.vertices())]
        lines.append("\t" + "____" * self._order)
        for v in self.vertices():
            cells = []
            for d in self.row(v):
                cells.append("_" if d == DISCONNECTED else str(int(d)))
            lines.append(f"{v}:\t|" + "".join(f" {c} |" for c in cells))
        return "\n".join(lines)
