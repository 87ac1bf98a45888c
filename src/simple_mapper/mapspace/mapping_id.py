"""
Mapping ID: a composite coordinate over the mapspace dimensions.

Sizes and values are plain Python ints, so a mapspace whose product of
dimension sizes exceeds 64 (or 128) bits is still addressable.
"""

from typing import Sequence

from simple_mapper.mapspace.dimension import Dimension, NUM_DIMENSIONS


class InvalidCoordinate(ValueError):
    """Raised when a coordinate value is outside its dimension's range."""


class MappingID:
    """
    One point in the product space of the mapspace dimensions.

    Usage:
        mapping_id = MappingID(mapspace.all_sizes())
        mapping_id.set(Dimension.SPATIAL, 3)
    """

    def __init__(self, sizes: Sequence[int]):
        sizes = tuple(sizes)
        if len(sizes) != NUM_DIMENSIONS:
            raise ValueError(
                f"Expected {NUM_DIMENSIONS} dimension sizes, got {len(sizes)}"
            )
        for d, size in enumerate(sizes):
            if not isinstance(size, int) or size < 0:
                raise ValueError(
                    f"Size of {Dimension(d).label} must be a non-negative int, got {size!r}"
                )
        self._sizes = sizes
        self._values = [0] * NUM_DIMENSIONS

    @classmethod
    def from_values(cls, sizes: Sequence[int], values: Sequence[int]) -> "MappingID":
        """Build a mapping ID and set every dimension, validating bounds."""
        mapping_id = cls(sizes)
        if len(values) != NUM_DIMENSIONS:
            raise ValueError(
                f"Expected {NUM_DIMENSIONS} coordinate values, got {len(values)}"
            )
        for d, value in enumerate(values):
            mapping_id.set(d, value)
        return mapping_id

    def set(self, dimension: int, value: int) -> None:
        """Record the value for one dimension."""
        dim = Dimension(dimension)
        size = self._sizes[dim]
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidCoordinate(f"{dim.label} value must be an int, got {value!r}")
        if value < 0 or value >= size:
            raise InvalidCoordinate(
                f"{dim.label} value {value} outside [0, {size})"
            )
        self._values[dim] = value

    def get(self, dimension: int) -> int:
        return self._values[Dimension(dimension)]

    def __getitem__(self, dimension: int) -> int:
        return self.get(dimension)

    @property
    def sizes(self) -> tuple[int, ...]:
        return self._sizes

    @property
    def values(self) -> tuple[int, ...]:
        return tuple(self._values)

    @property
    def integer(self) -> int:
        """Linear index in search order (first dimension most significant)."""
        index = 0
        for size, value in zip(self._sizes, self._values):
            index = index * size + value
        return index

    def __eq__(self, other) -> bool:
        if not isinstance(other, MappingID):
            return NotImplemented
        return self._sizes == other._sizes and self._values == other._values

    def __hash__(self):
        return hash((self._sizes, tuple(self._values)))

    def __repr__(self) -> str:
        return f"MappingID({self.values})"
