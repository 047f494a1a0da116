"""
Polyhedron
==========

Shape + positions + transaction queue, advanced one tick at a time.

TICK:
    1. If a Contraction is at the head, pull its endpoints together.
    2. Process the head transaction once (at most one step per tick).

Nothing blocks: a Contraction waits for its endpoints to converge and a Wait
for its deadline, both re-checked every tick.
"""

import logging
import time
from collections import deque
from typing import Callable, Optional, Union

from ..builders.presets import preset
from ..graph.shape import Shape
from ..spec.constants import CONTRACTION_EPSILON, CONTRACTION_RATE, DEFAULT_SEED
from .positions import PositionStore
from .transaction import (
    Contraction,
    Conway,
    ConwayOperator,
    Name,
    Noop,
    Release,
    ShortenName,
    Wait,
    lower,
    rename,
    to_vertices,
)

logger = logging.getLogger(__name__)


class Polyhedron:
    """
    Orchestrates Conway operators on a Shape.

    Attributes:
        name: running Conway notation (e.g. "taC")
        shape: the combinatorial polyhedron
        positions: per-handle layout positions
        transactions: FIFO of pending transactions
    """

    def __init__(
        self,
        shape: Shape,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
        seed: int = DEFAULT_SEED,
    ):
        self.name = name
        self.shape = shape
        self.positions = PositionStore(seed)
        self.transactions = deque()
        self.clock = clock
        self.positions.sync(shape.distance)

    @classmethod
    def preset(cls, symbol: str, n: Optional[int] = None, **kwargs) -> "Polyhedron":
        name = symbol if n is None else f"{symbol}{n}"
        return cls(preset(symbol, n), name=name, **kwargs)

    # =========================================================================
    # Queue
    # =========================================================================

    def push(self, *transactions):
        self.transactions.extend(transactions)

    def request(self, operator: Union[ConwayOperator, str]):
        """Enqueue a Conway operator by enum or notation letter."""
        self.push(Conway(ConwayOperator(operator)))

    def settled(self) -> bool:
        return not self.transactions

    def converged(self, transaction: Contraction) -> bool:
        return all(
            self.positions.separation(a, b) < CONTRACTION_EPSILON
            for a, b in transaction.edges
        )

    # =========================================================================
    # Tick
    # =========================================================================

    def tick(self, second: float = 0.0, now: Optional[float] = None):
        """
        Advance by one frame.

        Args:
            second: frame duration (drives the contraction pull)
            now: clock reading; taken from self.clock when omitted

        Returns:
            the transaction that completed this tick, or None
        """
        head = self.transactions[0] if self.transactions else None
        if isinstance(head, Contraction):
            self.positions.pull(head.edges, CONTRACTION_RATE * second)
        return self.process_transactions(now)

    def process_transactions(self, now: Optional[float] = None):
        """Run one step of the head transaction; return it if it completed."""
        if not self.transactions:
            return None
        now = self.clock() if now is None else now
        head = self.transactions[0]

        if isinstance(head, Contraction):
            if not self.converged(head):
                return None
            self.shape.contraction(to_vertices(self.shape.distance, head.edges))
            self._structural(head)

        elif isinstance(head, Release):
            self.shape.release(to_vertices(self.shape.distance, head.edges))
            self._structural(head)

        elif isinstance(head, Conway):
            # Operators edit in place; a failure must leave shape and queue untouched
            work = self.shape.copy()
            script = lower(head.operator, work, now)
            self.shape = work
            self.transactions.popleft()
            self.transactions.extendleft(reversed(script))
            self._sync()
            logger.info(f"{head.operator.name}: queued {len(script)} transactions")
            return head

        elif isinstance(head, (Name, ShortenName)):
            self.name = rename(self.name, head)

        elif isinstance(head, Wait):
            if now < head.deadline:
                return None

        elif isinstance(head, Noop):
            return None

        else:
            raise TypeError(f"Unknown transaction {head!r}")

        self.transactions.popleft()
        return head

    def _structural(self, transaction):
        self._sync()
        logger.info(f"{type(transaction).__name__}: {len(transaction.edges)} edges, now {self.shape!r}")

    def _sync(self):
        self.positions.sync(self.shape.distance)
        self.positions.check(self.shape.distance)
        self.shape.validate(strict=True)

    def run(self, second: float = 1.0, limit: int = 10_000):
        """
        Tick until the queue drains or a Noop reaches the head.

        Simulated time: each tick advances `now` by `second` from the clock's
        current reading, so Wait deadlines pass without sleeping.
        """
        now = self.clock()
        for _ in range(limit):
            if not self.transactions or isinstance(self.transactions[0], Noop):
                return
            now += second
            self.tick(second, now)
        raise RuntimeError(f"Transactions still pending after {limit} ticks: {list(self.transactions)}")
