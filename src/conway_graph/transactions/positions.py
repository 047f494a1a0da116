"""
Position Store
==============

Stand-in for the external layout: one 3-vector per stable handle.

The store never re-indexes. sync() seeds handles that appeared since the last
call (at the mean of their origins, plus jitter) and forgets dead ones.
"""

import logging
from typing import Dict, Iterable, List, Tuple

import numpy as np

from ..spec.constants import DEFAULT_SEED, POSITION_JITTER
from ..spec.errors import InvariantViolation, UnknownVertex

logger = logging.getLogger(__name__)


class PositionStore:

    def __init__(self, seed: int = DEFAULT_SEED):
        self._rng = np.random.default_rng(seed)
        self._positions: Dict[int, np.ndarray] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, handle) -> bool:
        return handle in self._positions

    def __getitem__(self, handle: int) -> np.ndarray:
        try:
            return self._positions[handle]
        except KeyError:
            raise UnknownVertex(handle, kind="handle") from None

    def __setitem__(self, handle: int, position):
        self._positions[handle] = np.asarray(position, dtype=float)

    def handles(self) -> List[int]:
        return sorted(self._positions)

    def _random_unit(self) -> np.ndarray:
        v = self._rng.normal(size=3)
        return v / np.linalg.norm(v)

    def sync(self, distance):
        """Match the store to the live handles of `distance`."""
        live = distance.handles()
        seeded = 0
        # Ascending handles: an origin created earlier in the same edit is placed first
        for handle in sorted(h for h in live if h not in self._positions):
            anchors = [self._positions[o] for o in distance.origin(handle) if o in self._positions]
            if anchors:
                centre = np.mean(anchors, axis=0)
                self._positions[handle] = centre + self._rng.normal(scale=POSITION_JITTER, size=3)
            else:
                self._positions[handle] = self._random_unit()
            seeded += 1

        alive = set(live)
        dead = [h for h in self._positions if h not in alive]
        for handle in dead:
            del self._positions[handle]

        if seeded or dead:
            logger.debug(f"Positions: seeded {seeded}, dropped {len(dead)}, live {len(alive)}")

    def check(self, distance):
        """Raise InvariantViolation unless the store covers exactly the live handles."""
        live = set(distance.handles())
        stored = set(self._positions)
        if live != stored:
            raise InvariantViolation(
                f"Position store misaligned: {len(stored - live)} stale, "
                f"{len(live - stored)} missing"
            )

    def separation(self, a: int, b: int) -> float:
        return float(np.linalg.norm(self[a] - self[b]))

    def pull(self, pairs: Iterable[Tuple[int, int]], fraction: float):
        """Move both ends of every pair `fraction` of the way to their midpoint."""
        fraction = min(max(fraction, 0.0), 1.0)
        for a, b in pairs:
            pa, pb = self[a], self[b]
            middle = (pa + pb) / 2
            self._positions[a] = pa + (middle - pa) * fraction
            self._positions[b] = pb + (middle - pb) * fraction

    def array(self, distance) -> np.ndarray:
        """(n, 3) positions in current VertexId order."""
        if distance.order == 0:
            return np.zeros((0, 3))
        return np.array([self[h] for h in distance.handles()])
