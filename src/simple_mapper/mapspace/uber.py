"""
Reference mapspace over loop factorizations, permutations, spatial
splits and datatype bypass.

Tiling levels, innermost first: for each storage level, a spatial tiling
level (only when the level has a fanout) followed by a temporal tiling level.
"""

import logging
import math
from typing import Optional, Sequence

from simple_mapper.arch import ArchSpecs
from simple_mapper.mapping import Mapping
from simple_mapper.mapspace.base import MapSpace
from simple_mapper.mapspace.constraints import LevelConstraints, parse_constraints
from simple_mapper.mapspace.dimension import Dimension
from simple_mapper.utils import enumerate_factorizations, product
from simple_mapper.workload import DIM_NAMES, NUM_DATATYPES, NUM_DIMS, Workload


logger = logging.getLogger(__name__)


def decode_mixed_radix(index: int, radices: Sequence[int]) -> list[int]:
    """Split index into digits; the first radix is the most significant."""
    digits = []
    for radix in reversed(radices):
        index, digit = divmod(index, radix)
        digits.append(digit)
    return digits[::-1]


def nth_permutation(items: Sequence, index: int) -> list:
    """Permutation number `index` of items in lexicographic order (factorial base)."""
    pool = list(items)
    result = []
    for remaining in range(len(pool), 0, -1):
        block = math.factorial(remaining - 1)
        pos, index = divmod(index, block)
        result.append(pool.pop(pos))
    return result


class UberMapSpace(MapSpace):
    """
    The full mapspace of a workload on an architecture, under constraints.

    Usage:
        mapspace = UberMapSpace(specs, workload, constraints)
        ok, mapping = mapspace.construct_mapping(mapping_id)
    """

    def __init__(
        self,
        specs: ArchSpecs,
        workload: Workload,
        constraints: Optional[dict[int, LevelConstraints]] = None,
    ):
        self.specs = specs
        self.workload = workload
        self.constraints = constraints or {}

        self.tiling_levels = []
        for m in range(specs.num_levels):
            if specs.fanouts[m] > 1:
                self.tiling_levels.append((m, "spatial"))
            self.tiling_levels.append((m, "temporal"))
        self.spatial_levels = [m for m, kind in self.tiling_levels if kind == "spatial"]

        self._init_factorizations()
        self._init_permutations()
        self._init_spatial()
        self._init_bypass()

        self._sizes = (
            product(len(f) for f in self.factorizations),
            product(math.factorial(len(free)) for _, free, _ in self.permutation_parts),
            product(self.spatial_choices),
            2 ** len(self.free_bypass),
        )
        logger.info(
            "Mapspace sizes: "
            + ", ".join(f"{d.label}={s}" for d, s in zip(Dimension, self._sizes))
            + f" (total {self.total_size()})"
        )

    def _init_factorizations(self):
        """Admissible factorizations of each problem dimension."""
        num_tiling = len(self.tiling_levels)
        fixed = []
        for m, lc in self.constraints.items():
            if self.specs.fanouts[m] == 1:
                for j, factor in lc.spatial_factors.items():
                    if factor != 1:
                        raise ValueError(
                            f"{self.specs.storage[m].name} has no fanout; "
                            f"spatial factor {DIM_NAMES[j]}={factor} is impossible"
                        )
            for k, (level, kind) in enumerate(self.tiling_levels):
                if level == m:
                    for j, factor in lc.factors(kind).items():
                        fixed.append((k, j, factor))

        self.factorizations = []
        for j, bound in enumerate(self.workload.bounds):
            pins = [(k, factor) for k, dim, factor in fixed if dim == j]
            options = [
                f for f in enumerate_factorizations(bound, num_tiling)
                if all(f[k] == factor for k, factor in pins)
            ]
            if not options:
                raise ValueError(
                    f"No factorization of {DIM_NAMES[j]}={bound} satisfies the constraints"
                )
            self.factorizations.append(options)

    def _init_permutations(self):
        """
        Per level: (fixed inner prefix, free dimensions, unit dimensions).

        A dimension whose problem bound is 1 never iterates, so its position
        does not change the mapping; such dimensions are appended outermost
        in index order instead of being permuted.
        """
        self.permutation_parts = []
        for m in range(self.specs.num_levels):
            prefix = list(self.constraints.get(m, LevelConstraints()).permutation)
            rest = [j for j in range(NUM_DIMS) if j not in prefix]
            free = [j for j in rest if self.workload.bounds[j] > 1]
            unit = [j for j in rest if self.workload.bounds[j] == 1]
            self.permutation_parts.append((prefix, free, unit))

    def _init_spatial(self):
        """Per spatial tiling level: number of X/Y assignments."""
        self.spatial_choices = []
        for m in self.spatial_levels:
            lc = self.constraints.get(m)
            if lc is not None and lc.spatial_x is not None:
                self.spatial_choices.append(1)
            else:
                self.spatial_choices.append(2 ** NUM_DIMS)

    def _init_bypass(self):
        """Keep/bypass choices left open by the constraints."""
        self.fixed_keep = {}
        self.free_bypass = []
        outermost = self.specs.num_levels - 1
        for m in range(self.specs.num_levels):
            lc = self.constraints.get(m, LevelConstraints())
            for t in range(NUM_DATATYPES):
                if m == outermost or t in lc.keep:
                    self.fixed_keep[m, t] = True
                elif t in lc.bypass:
                    self.fixed_keep[m, t] = False
                else:
                    self.free_bypass.append((m, t))

    def size(self, dimension: Dimension) -> int:
        return self._sizes[Dimension(dimension)]

    def construct_mapping(self, mapping_id) -> tuple[bool, Optional[Mapping]]:
        mapping = Mapping(
            mapping_id=tuple(mapping_id.values),
            workload_name=self.workload.name,
            workload_bounds=list(self.workload.bounds),
        )

        # Index factorization
        digits = decode_mixed_radix(
            mapping_id.get(Dimension.INDEX_FACTORIZATION),
            [len(f) for f in self.factorizations],
        )
        for m in range(self.specs.num_levels):
            mapping.loop_bounds[m] = {
                "spatial": {j: 1 for j in range(NUM_DIMS)},
                "temporal": {j: 1 for j in range(NUM_DIMS)},
            }
        for j, digit in enumerate(digits):
            for (m, kind), factor in zip(self.tiling_levels, self.factorizations[j][digit]):
                mapping.loop_bounds[m][kind][j] = factor

        # Loop permutation
        digits = decode_mixed_radix(
            mapping_id.get(Dimension.LOOP_PERMUTATION),
            [math.factorial(len(free)) for _, free, _ in self.permutation_parts],
        )
        for m, ((prefix, free, unit), digit) in enumerate(zip(self.permutation_parts, digits)):
            order = prefix + nth_permutation(free, digit) + unit
            mapping.permutation[m] = {p: j for p, j in enumerate(order)}

        # Spatial X/Y split
        digits = decode_mixed_radix(mapping_id.get(Dimension.SPATIAL), self.spatial_choices)
        for m, digit in zip(self.spatial_levels, digits):
            lc = self.constraints.get(m)
            spatial = mapping.loop_bounds[m]["spatial"]
            if lc is not None and lc.spatial_x is not None:
                axes = {j: ("X" if j in lc.spatial_x else "Y") for j in range(NUM_DIMS)}
            else:
                axes = {j: ("Y" if digit >> j & 1 else "X") for j in range(NUM_DIMS)}
                # Unit loops live on X; the Y twin of a unit loop is a duplicate.
                if any(axes[j] == "Y" and spatial[j] == 1 for j in range(NUM_DIMS)):
                    return False, None
            x_extent = product(spatial[j] for j in range(NUM_DIMS) if axes[j] == "X")
            y_extent = product(spatial[j] for j in range(NUM_DIMS) if axes[j] == "Y")
            if x_extent > self.specs.fanout_x[m] or y_extent > self.specs.fanout_y[m]:
                return False, None
            mapping.spatial_axes[m] = axes

        # Datatype bypass
        bits = mapping_id.get(Dimension.DATATYPE_BYPASS)
        for m in range(self.specs.num_levels):
            mapping.keep[m] = {}
        for (m, t), kept in self.fixed_keep.items():
            mapping.keep[m][t] = kept
        for k, (m, t) in enumerate(self.free_bypass):
            mapping.keep[m][t] = not (bits >> k & 1)

        return True, mapping


def parse_and_construct(node, specs: ArchSpecs, workload: Workload) -> UberMapSpace:
    """Build the mapspace from a 'mapspace' or 'mapspace_constraints' section."""
    return UberMapSpace(specs, workload, parse_constraints(node, specs))
