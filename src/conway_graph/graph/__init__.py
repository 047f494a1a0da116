"""
Graph layer: distance matrix, faces, shape.
"""

from .distance import Distance
from .cycles import Cycles
from .shape import Shape
