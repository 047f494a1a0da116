"""
Seed polyhedra.
"""

from .presets import (
    prism,
    anti_prism,
    pyramid,
    tetrahedron,
    cube,
    octahedron,
    icosahedron,
    dodecahedron,
    preset,
)
