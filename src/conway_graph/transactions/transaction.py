"""
Transactions
============

Queued units of work on a Polyhedron, and the script table that lowers
Conway operators into them.

VARIANTS:
    Contraction(edges)   wait until every edge's endpoints have met, then contract
    Release(edges)       disconnect the edges
    Conway(operator)     expand into a script pushed onto the FRONT of the queue
    Name(char)           prepend a notation letter to the running name
    ShortenName(count)   drop the first `count` letters of the running name
    Wait(deadline)       block until the clock passes `deadline`
    Noop()               terminal; never leaves the head

Edges inside Contraction / Release are pairs of STABLE handles, resolved to
VertexIds only when the transaction executes.

SCRIPT TABLE:
    primitive operators  handler(shape) edits the shape, returns its follow-up
    composite operators  static script; Delay(s) becomes Wait(now + s)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple, Union

from ..operators.conway import ambo, dual, kis, snub, truncate
from ..spec.constants import (
    NOTATION_AMBO,
    NOTATION_BEVEL,
    NOTATION_DUAL,
    NOTATION_EXPAND,
    NOTATION_JOIN,
    NOTATION_KIS,
    NOTATION_SNUB,
    NOTATION_TRUNCATE,
    PHASE_WAIT,
)

HandlePair = Tuple[int, int]


class ConwayOperator(Enum):
    DUAL = NOTATION_DUAL
    JOIN = NOTATION_JOIN
    AMBO = NOTATION_AMBO
    KIS = NOTATION_KIS
    TRUNCATE = NOTATION_TRUNCATE
    EXPAND = NOTATION_EXPAND
    SNUB = NOTATION_SNUB
    BEVEL = NOTATION_BEVEL


@dataclass(frozen=True)
class Contraction:
    edges: Tuple[HandlePair, ...]


@dataclass(frozen=True)
class Release:
    edges: Tuple[HandlePair, ...]


@dataclass(frozen=True)
class Conway:
    operator: ConwayOperator


@dataclass(frozen=True)
class Name:
    char: str


@dataclass(frozen=True)
class ShortenName:
    count: int


@dataclass(frozen=True)
class Wait:
    deadline: float


@dataclass(frozen=True)
class Noop:
    pass


@dataclass(frozen=True)
class Delay:
    """Relative wait inside a static script."""
    seconds: float


Transaction = Union[Contraction, Release, Conway, Name, ShortenName, Wait, Noop]


# =============================================================================
# Handle <-> VertexId
# =============================================================================

def to_handles(distance, edges: Sequence[Sequence[int]]) -> Tuple[HandlePair, ...]:
    return tuple((distance.handle(v), distance.handle(u)) for v, u in edges)


def to_vertices(distance, edges: Sequence[HandlePair]) -> List[Tuple[int, int]]:
    return [(distance.index(a), distance.index(b)) for a, b in edges]


def rename(name: str, transaction) -> str:
    """Apply a Name / ShortenName to the running notation string."""
    if isinstance(transaction, ShortenName):
        return name[transaction.count:]
    if transaction.char == NOTATION_DUAL and name.startswith(NOTATION_DUAL):
        return name[1:]
    return transaction.char + name


# =============================================================================
# Script table
# =============================================================================

def _ambo(shape) -> List[Transaction]:
    edges = ambo(shape)
    return [Contraction(to_handles(shape.distance, edges)), Name(NOTATION_AMBO)]


def _truncate(shape) -> List[Transaction]:
    truncate(shape)
    return [Name(NOTATION_TRUNCATE)]


def _kis(shape) -> List[Transaction]:
    kis(shape)
    return [Name(NOTATION_KIS)]


def _join(shape) -> List[Transaction]:
    original = kis(shape)
    return [Release(to_handles(shape.distance, original)), Name(NOTATION_JOIN)]


def _dual(shape) -> List[Transaction]:
    dual(shape)
    return [Name(NOTATION_DUAL)]


def _snub(shape) -> List[Transaction]:
    snub(shape)
    return [Name(NOTATION_SNUB)]


PRIMITIVES: Dict[ConwayOperator, Callable] = {
    ConwayOperator.AMBO: _ambo,
    ConwayOperator.TRUNCATE: _truncate,
    ConwayOperator.KIS: _kis,
    ConwayOperator.JOIN: _join,
    ConwayOperator.DUAL: _dual,
    ConwayOperator.SNUB: _snub,
}

COMPOSITES: Dict[ConwayOperator, tuple] = {
    # b = ta
    ConwayOperator.BEVEL: (
        Conway(ConwayOperator.AMBO),
        Delay(PHASE_WAIT),
        Conway(ConwayOperator.TRUNCATE),
        ShortenName(2),
        Name(NOTATION_BEVEL),
    ),
    # e = aa
    ConwayOperator.EXPAND: (
        Conway(ConwayOperator.AMBO),
        Delay(PHASE_WAIT),
        Conway(ConwayOperator.AMBO),
        ShortenName(2),
        Name(NOTATION_EXPAND),
    ),
}


def lower(operator: ConwayOperator, shape, now: float) -> List[Transaction]:
    """
    Script for one Conway transaction.

    Primitive operators edit `shape` immediately; composites only schedule.
    """
    if operator in COMPOSITES:
        return [
            Wait(now + step.seconds) if isinstance(step, Delay) else step
            for step in COMPOSITES[operator]
        ]
    return PRIMITIVES[operator](shape)
