"""
Mapspace dimensions.

A mapping is identified by one index along each of four independent
dimensions. The enum order is also the search nesting order: the first
dimension varies slowest.
"""

from enum import IntEnum


class Dimension(IntEnum):
    """Independent axes of mapping choices."""
    INDEX_FACTORIZATION = 0
    LOOP_PERMUTATION = 1
    SPATIAL = 2
    DATATYPE_BYPASS = 3

    @property
    def label(self) -> str:
        return DIMENSION_LABELS[self]


DIMENSION_LABELS = {
    Dimension.INDEX_FACTORIZATION: "IndexFactorization",
    Dimension.LOOP_PERMUTATION: "LoopPermutation",
    Dimension.SPATIAL: "Spatial",
    Dimension.DATATYPE_BYPASS: "DatatypeBypass",
}

NUM_DIMENSIONS = len(Dimension)

# Outermost to innermost loop of the exhaustive search.
SEARCH_ORDER = tuple(Dimension)
