"""
Mapping class: one concrete schedule of a workload on an architecture.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from simple_mapper.workload import DATATYPE_NAMES, DIM_NAMES


@dataclass
class Mapping:
    """
    Represents a mapping of a workload onto a storage hierarchy.

    Attributes:
        loop_bounds: Nested dictionary of loop bounds
            [storage_level]["spatial"/"temporal"][dimension] = factor
        permutation: Temporal loop order per level, inner to outer
            [storage_level][position] = dimension
        spatial_axes: Mesh axis of each spatial loop
            [storage_level][dimension] = "X" or "Y"
        keep: Datatypes held at each level
            [storage_level][datatype] = True (kept) / False (bypassed)
        mapping_id: Coordinate values the mapping was built from
    """
    loop_bounds: dict = field(default_factory=dict)
    permutation: dict = field(default_factory=dict)
    spatial_axes: dict = field(default_factory=dict)
    keep: dict = field(default_factory=dict)

    mapping_id: Optional[tuple] = None
    workload_name: str = ""
    workload_bounds: list = field(default_factory=list)

    @property
    def num_levels(self) -> int:
        return len(self.loop_bounds)

    def factor(self, level: int, kind: str, dimension: int) -> int:
        return self.loop_bounds.get(level, {}).get(kind, {}).get(dimension, 1)

    def get_tile_size(self, level: int, dimension: int) -> int:
        """
        Get the tile extent of a dimension at a storage level.

        This is the product of spatial and temporal bounds from
        level 0 up to and including the specified level.
        """
        tile = 1
        for m in range(level + 1):
            for s in ("spatial", "temporal"):
                tile *= self.factor(m, s, dimension)
        return tile

    def get_tile_extents(self, level: int) -> list[int]:
        return [self.get_tile_size(level, j) for j in range(len(DIM_NAMES))]

    def get_loop_order(self, level: int) -> list:
        """Get the temporal loop order (inner to outer) at a level."""
        if level not in self.permutation:
            return []
        perm = self.permutation[level]
        return [perm[p] for p in sorted(perm.keys())]

    def is_kept(self, level: int, datatype: int) -> bool:
        if level not in self.keep:
            return True
        return self.keep[level].get(datatype, True)

    def pretty_print(
        self,
        storage_level_names: Optional[Sequence[str]] = None,
        tile_sizes: Optional[Sequence[Sequence[int]]] = None,
    ) -> str:
        """
        Render the loop nest, outermost level first.

        Args:
            storage_level_names: Name of each storage level (inner to outer)
            tile_sizes: [level][datatype] tile size in words, for the headers
        """
        lines = []
        indent = 0
        for m in reversed(range(self.num_levels)):
            name = storage_level_names[m] if storage_level_names else f"Level {m}"

            kept = []
            for t, dt_name in enumerate(DATATYPE_NAMES):
                if not self.is_kept(m, t):
                    continue
                if tile_sizes is not None:
                    kept.append(f"{dt_name}:{tile_sizes[m][t]}")
                else:
                    kept.append(dt_name)
            header = f"{name} [ {' '.join(kept)} ]"
            lines.append(header)
            lines.append("-" * len(header))

            for j in reversed(self.get_loop_order(m)):
                bound = self.factor(m, "temporal", j)
                if bound > 1:
                    lines.append(f"|{'  ' * indent} for {DIM_NAMES[j]} in [0:{bound})")
                    indent += 1

            for j in range(len(DIM_NAMES)):
                bound = self.factor(m, "spatial", j)
                if bound > 1:
                    axis = self.spatial_axes.get(m, {}).get(j, "X")
                    lines.append(
                        f"|{'  ' * indent} for {DIM_NAMES[j]} in [0:{bound}) (Spatial-{axis})"
                    )
                    indent += 1

            lines.append("")

        return "\n".join(lines)
