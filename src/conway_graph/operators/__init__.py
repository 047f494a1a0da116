"""
Conway operators on a Shape.
"""

from .conway import (
    truncate,
    ambo,
    expand,
    bevel,
    kis,
    join,
    dual,
    snub,
    contract,
    release,
)
