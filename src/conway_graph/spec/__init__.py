"""Constants, error types and the shape contract."""

from .constants import (
    IDENTITY,
    ADJACENT,
    DISCONNECTED,
    EULER_CHARACTERISTIC,
    CONTRACTION_EPSILON,
    PHASE_WAIT,
    DEFAULT_SEED,
    REFERENCE_COUNTS,
)
from .errors import (
    UnknownVertex,
    FaceDiscoveryExhausted,
    InvariantViolation,
    DisconnectedGraph,
)
from .structures import (
    Edge,
    Face,
    canonical_edge,
    canonical_face,
    validate_shape,
)
