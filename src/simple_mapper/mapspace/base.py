"""
Abstract mapspace interface consumed by the search loop.
"""

from abc import ABC, abstractmethod
from typing import Optional

from simple_mapper.mapspace.dimension import Dimension
from simple_mapper.utils import product


class MapSpace(ABC):
    """
    A discrete space of candidate mappings.

    Subclasses report each dimension's size and turn a full MappingID into
    a mapping. Construction is pure and deterministic; it returns
    (False, None) when the coordinate denotes an illegal combination.
    """

    @abstractmethod
    def size(self, dimension: Dimension) -> int:
        """Number of legal-range values along one dimension."""

    def all_sizes(self) -> tuple[int, ...]:
        return tuple(self.size(d) for d in Dimension)

    def total_size(self) -> int:
        """Number of points in the product space."""
        return product(self.all_sizes())

    @abstractmethod
    def construct_mapping(self, mapping_id) -> tuple[bool, Optional[object]]:
        """Build the mapping addressed by mapping_id."""
