"""
Analytical cost model engine.

Scores a mapping on an architecture: per-level capacity checks, access
counts, energy, cycles and utilization.

Key Concepts:
- A level's tile of a datatype is refetched once per iteration of the
  temporal loops above it, except the innermost run of loops that do not
  index the datatype (the tile stays resident across them).
- Spatial loops over dimensions irrelevant to a datatype multicast (or,
  for Outputs, reduce) instead of fetching distinct data.
"""

import copy
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from simple_mapper.arch import ArchSpecs
from simple_mapper.mapping import Mapping
from simple_mapper.utils import product
from simple_mapper.workload import DATATYPE_NAMES, NUM_DATATYPES, NUM_DIMS, Workload


OUTPUTS = 2


@dataclass
class EvalStatus:
    """Outcome of evaluating a mapping at one storage level."""
    success: bool = True
    fail_reason: str = ""


@dataclass
class TopologyStats:
    """
    Statistics of one successful evaluation.

    Attributes:
        level_names: Storage level names, inner to outer
        level_tile_sizes: [level][datatype] words per instance (0 if bypassed)
        utilized_instances: [level] instances holding data
        reads: [level, datatype] word reads, all instances
        writes: [level, datatype] word writes, all instances
        energy: [level, datatype] pJ
        level_cycles: [level] cycles needed by bandwidth (0 if unbounded)
        utilized_macs: MAC units doing work
        mac_energy: pJ spent in the MACs
        compute_cycles: Temporal iterations per MAC unit
        cycles: Overall cycles
    """
    level_names: list
    level_tile_sizes: list
    utilized_instances: list
    reads: np.ndarray
    writes: np.ndarray
    energy: np.ndarray
    level_cycles: list
    num_maccs: int
    utilized_macs: int
    mac_energy: float
    compute_cycles: int
    cycles: float
    utilization: float

    def storage_level_names(self) -> list:
        return list(self.level_names)

    def tile_sizes(self) -> list:
        return [list(sizes) for sizes in self.level_tile_sizes]

    def maccs(self) -> int:
        return self.num_maccs

    @property
    def total_energy(self) -> float:
        return float(self.energy.sum()) + self.mac_energy


class Engine:
    """
    Cost model engine.

    Usage:
        engine = Engine(specs)
        status = engine.evaluate(mapping, workload)
        if all(s.success for s in status):
            print(engine.energy(), engine.utilization())
    """

    def __init__(self, specs: Optional[ArchSpecs] = None):
        self._specs = None
        self._stats: Optional[TopologyStats] = None
        if specs is not None:
            self.spec(specs)

    def spec(self, specs: ArchSpecs) -> None:
        """Bind an architecture."""
        self._specs = specs
        self._stats = None

    def is_specced(self) -> bool:
        return self._specs is not None

    def is_evaluated(self) -> bool:
        return self._stats is not None

    def evaluate(self, mapping: Mapping, workload: Workload) -> list[EvalStatus]:
        """
        Evaluate a mapping.

        Returns:
            One EvalStatus per storage level. Statistics are only available
            when every level succeeds.
        """
        if self._specs is None:
            raise RuntimeError("Engine.evaluate() called before spec()")
        self._stats = None
        specs = self._specs
        num_levels = specs.num_levels

        tile_sizes = []
        for m in range(num_levels):
            extents = mapping.get_tile_extents(m)
            tile_sizes.append([
                workload.data_space_size(t, extents) if mapping.is_kept(m, t) else 0
                for t in range(NUM_DATATYPES)
            ])

        status = []
        for m, level in enumerate(specs.storage):
            used = sum(tile_sizes[m])
            if level.entries is not None and used > level.entries:
                status.append(EvalStatus(
                    success=False,
                    fail_reason=f"{level.name}: mapped tile size {used} exceeds "
                                f"buffer capacity {level.entries}",
                ))
            else:
                status.append(EvalStatus())

        if all(s.success for s in status):
            self._stats = self._compute_stats(mapping, workload, tile_sizes)
        return status

    def _compute_stats(self, mapping: Mapping, workload: Workload, tile_sizes: list) -> TopologyStats:
        specs = self._specs
        num_levels = specs.num_levels
        maccs = workload.maccs

        spatial = [
            [mapping.factor(m, "spatial", j) for j in range(NUM_DIMS)]
            for m in range(num_levels)
        ]
        # Instances of level m in use = spatial fanout of all levels above it.
        utilized = [
            product(product(spatial[k]) for k in range(m + 1, num_levels))
            for m in range(num_levels)
        ]
        utilized_macs = product(product(s) for s in spatial)

        def multicast(t: int, lo: int, hi: int) -> int:
            """Irrelevant spatial fanout of levels in [lo, hi]."""
            return product(
                spatial[m][j]
                for m in range(lo, hi + 1)
                for j in range(NUM_DIMS)
                if not workload.is_relevant(j, t)
            )

        reads = np.zeros((num_levels, NUM_DATATYPES))
        writes = np.zeros((num_levels, NUM_DATATYPES))

        for t in range(NUM_DATATYPES):
            kept = [m for m in range(num_levels) if mapping.is_kept(m, t)]
            child = None
            for m in kept:
                if child is None:
                    demand = maccs / multicast(t, 0, m)
                else:
                    transfers = (
                        tile_sizes[child][t]
                        * self._refills(mapping, workload, child, t)
                        * utilized[child]
                    )
                    demand = transfers / multicast(t, child + 1, m)
                    if t != OUTPUTS:
                        writes[child, t] = transfers

                reads[m, t] = demand
                if t == OUTPUTS:
                    writes[m, t] = demand
                child = m

        read_energy = np.array([[level.read_energy] for level in specs.storage])
        write_energy = np.array([[level.write_energy] for level in specs.storage])
        energy = reads * read_energy + writes * write_energy
        mac_energy = maccs * specs.arithmetic.energy

        compute_cycles = product(
            mapping.factor(m, "temporal", j)
            for m in range(num_levels)
            for j in range(NUM_DIMS)
        )
        level_cycles = []
        for m, level in enumerate(specs.storage):
            if level.bandwidth is None or level.bandwidth <= 0:
                level_cycles.append(0)
                continue
            accesses = reads[m].sum() + writes[m].sum()
            level_cycles.append(math.ceil(accesses / (level.bandwidth * utilized[m])))

        cycles = max([compute_cycles] + level_cycles)
        utilization = maccs / (cycles * specs.arithmetic.instances)

        return TopologyStats(
            level_names=specs.storage_level_names(),
            level_tile_sizes=tile_sizes,
            utilized_instances=utilized,
            reads=reads,
            writes=writes,
            energy=energy,
            level_cycles=level_cycles,
            num_maccs=maccs,
            utilized_macs=utilized_macs,
            mac_energy=mac_energy,
            compute_cycles=compute_cycles,
            cycles=cycles,
            utilization=utilization,
        )

    @staticmethod
    def _refills(mapping: Mapping, workload: Workload, level: int, datatype: int) -> int:
        """How many times the level's tile of a datatype is (re)filled."""
        refills = 1
        stationary = True
        for m in range(level + 1, mapping.num_levels):
            for j in mapping.get_loop_order(m):
                bound = mapping.factor(m, "temporal", j)
                if stationary and (bound == 1 or not workload.is_relevant(j, datatype)):
                    continue
                stationary = False
                refills *= bound
        return refills

    def _require_stats(self) -> TopologyStats:
        if self._stats is None:
            raise RuntimeError("Engine has not successfully evaluated a mapping")
        return self._stats

    def energy(self) -> float:
        """Total energy in pJ."""
        return self._require_stats().total_energy

    def utilization(self) -> float:
        return self._require_stats().utilization

    def cycles(self) -> float:
        return self._require_stats().cycles

    def get_topology(self) -> TopologyStats:
        return self._require_stats()

    def snapshot(self) -> "Engine":
        """Detached copy; later evaluations of self do not affect it."""
        return copy.copy(self)

    def __str__(self) -> str:
        if self._stats is None:
            return "Engine (not evaluated)"
        return format_stats(self._specs, self._stats)


def format_stats(specs: ArchSpecs, stats: TopologyStats) -> str:
    """Full statistics dump of an evaluation."""
    arith = specs.arithmetic
    lines = [
        "Buffer and Arithmetic Levels",
        "----------------------------",
        "Level 0",
        "-------",
        f"=== {arith.name} ===",
        "",
        "    SPECS",
        "    -----",
        f"    Word bits             : {arith.word_bits}",
        f"    Instances             : {arith.instances} ({arith.mesh_x}*{arith.mesh_y})",
        f"    Compute energy        : {arith.energy:.2f} pJ",
        "",
        "    STATS",
        "    -----",
        f"    Utilized instances    : {stats.utilized_macs}",
        f"    Cycles                : {stats.compute_cycles}",
        f"    Algorithmic Computes  : {stats.num_maccs}",
        f"    Energy (total)        : {stats.mac_energy:.2f} pJ",
        "",
    ]

    for m, level in enumerate(specs.storage):
        entries = "-" if level.entries is None else level.entries
        bandwidth = "-" if level.bandwidth is None else level.bandwidth
        title = f"Level {m + 1}"
        lines += [
            title,
            "-" * len(title),
            f"=== {level.name} ===",
            "",
            "    SPECS",
            "    -----",
            f"        Size                : {entries}",
            f"        Word bits           : {level.word_bits}",
            f"        Instances           : {level.instances} ({level.mesh_x}*{level.mesh_y})",
            f"        Fanout              : {specs.fanouts[m]} "
            f"({specs.fanout_x[m]}*{specs.fanout_y[m]})",
            f"        Bandwidth           : {bandwidth}",
            f"        Vector read energy  : {level.read_energy:.2f} pJ",
            f"        Vector write energy : {level.write_energy:.2f} pJ",
            "",
            "    STATS",
            "    -----",
            f"    Utilized instances      : {stats.utilized_instances[m]}",
            f"    Bandwidth cycles        : {stats.level_cycles[m]}",
        ]
        for t, dt_name in enumerate(DATATYPE_NAMES):
            lines += [
                f"    {dt_name}:",
                f"        Tile size                  : {stats.level_tile_sizes[m][t]}",
                f"        Reads (total)              : {stats.reads[m, t]:.0f}",
                f"        Writes (total)             : {stats.writes[m, t]:.0f}",
                f"        Energy (total)             : {stats.energy[m, t]:.2f} pJ",
            ]
        lines.append("")

    maccs = stats.num_maccs
    lines += [
        "Summary Stats",
        "-------------",
        f"Utilization: {stats.utilization:.2f}",
        f"Cycles: {stats.cycles}",
        f"Energy: {stats.total_energy / 1e6:.2f} uJ",
        f"MACCs = {maccs}",
        "pJ/Compute",
        f"    {arith.name:<20} = {stats.mac_energy / maccs:.3f}",
    ]
    for m, name in enumerate(stats.level_names):
        lines.append(f"    {name:<20} = {stats.energy[m].sum() / maccs:.3f}")
    lines.append(f"    {'Total':<20} = {stats.total_energy / maccs:.3f}")
    return "\n".join(lines)
