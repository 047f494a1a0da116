"""
Transaction interpreter: operator scripts, positions, orchestration.
"""

from .transaction import (
    ConwayOperator,
    Contraction,
    Release,
    Conway,
    Name,
    ShortenName,
    Wait,
    Noop,
    Delay,
    PRIMITIVES,
    COMPOSITES,
    lower,
    rename,
)
from .positions import PositionStore
from .polyhedron import Polyhedron
