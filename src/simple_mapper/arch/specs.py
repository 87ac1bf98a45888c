"""
Architecture specification: an arithmetic array below a storage hierarchy.
"""

import logging
import re
from typing import Optional

from simple_mapper.arch.storage import ArithmeticUnit, StorageLevel


logger = logging.getLogger(__name__)

# Keys of a hierarchical (Accelergy-style) description; their presence
# requests the energy characterization step.
ENERGY_CHARACTERIZATION_KEYS = ("subtree", "local")

READ_ACTIONS = ("read",)
WRITE_ACTIONS = ("write", "update")
MAC_ACTIONS = ("mac_random", "compute", "mac")


class ArchSpecs:
    """
    Accelerator architecture definition.

    Storage levels are ordered from innermost (next to the MACs) to
    outermost (backing store). The fanout of level i is the number of
    child instances (level i-1, or MACs for level 0) each instance feeds.

    Usage:
        specs = ArchSpecs.from_dict(config["architecture"])
        print(specs.storage_level_names())
    """

    def __init__(
        self,
        arithmetic: Optional[ArithmeticUnit] = None,
        storage: Optional[list[StorageLevel]] = None,
    ):
        self.arithmetic = arithmetic if arithmetic is not None else ArithmeticUnit()
        if storage is None:
            storage = [StorageLevel(name="DRAM", read_energy=200.0, write_energy=200.0)]
        if not storage:
            raise ValueError("Architecture needs at least one storage level")

        self.storage = storage
        self._build_fanouts()

    def _build_fanouts(self):
        """Compute per-level fanout and its X/Y split."""
        self.fanouts = []
        self.fanout_x = []
        self.fanout_y = []

        child_instances = self.arithmetic.instances
        child_mesh_x = self.arithmetic.mesh_x
        child_mesh_y = self.arithmetic.mesh_y
        for level in self.storage:
            if child_instances % level.instances != 0:
                raise ValueError(
                    f"{level.name}: {level.instances} instances cannot feed "
                    f"{child_instances} children"
                )
            if child_mesh_x % level.mesh_x != 0 or child_mesh_y % level.mesh_y != 0:
                raise ValueError(
                    f"{level.name}: mesh {level.mesh_x}x{level.mesh_y} does not tile "
                    f"child mesh {child_mesh_x}x{child_mesh_y}"
                )
            self.fanouts.append(child_instances // level.instances)
            self.fanout_x.append(child_mesh_x // level.mesh_x)
            self.fanout_y.append(child_mesh_y // level.mesh_y)

            child_instances = level.instances
            child_mesh_x, child_mesh_y = level.mesh_x, level.mesh_y

    @property
    def num_levels(self) -> int:
        return len(self.storage)

    def storage_level_names(self) -> list[str]:
        return [level.name for level in self.storage]

    def level_index(self, name: str) -> int:
        for i, level in enumerate(self.storage):
            if level.name == name:
                return i
        raise ValueError(
            f"Unknown storage level {name!r}; expected one of {self.storage_level_names()}"
        )

    def apply_ert(self, ert: dict) -> int:
        """
        Override per-action energies from an energy reference table.

        Args:
            ert: {component_name: {action_name: energy_pJ}}

        Returns:
            Number of components updated
        """
        updated = 0
        for level in self.storage:
            actions = ert.get(level.name)
            if not actions:
                continue
            read = _first_action(actions, READ_ACTIONS)
            write = _first_action(actions, WRITE_ACTIONS)
            if read is not None:
                level.read_energy = read
            if write is not None:
                level.write_energy = write
            updated += 1

        actions = ert.get(self.arithmetic.name)
        if actions:
            mac = _first_action(actions, MAC_ACTIONS)
            if mac is not None:
                self.arithmetic.energy = mac
            updated += 1

        logger.info(f"Applied energy reference table to {updated} components")
        return updated

    def summary(self) -> str:
        """Human-readable description of the hierarchy."""
        a = self.arithmetic
        lines = [
            "Architecture",
            f"  [{a.name}] instances={a.instances} mesh={a.mesh_x}x{a.mesh_y} "
            f"energy={a.energy} pJ/MACC",
        ]
        for i, level in enumerate(self.storage):
            entries = "unbounded" if level.is_unbounded else level.entries
            bandwidth = "unbounded" if level.bandwidth is None else level.bandwidth
            lines.append(
                f"  [L{i}] {level.name}: entries={entries} instances={level.instances} "
                f"fanout={self.fanouts[i]} ({self.fanout_x[i]}x{self.fanout_y[i]}) "
                f"read={level.read_energy} pJ write={level.write_energy} pJ "
                f"bandwidth={bandwidth}"
            )
        return "\n".join(lines)

    @staticmethod
    def needs_energy_characterization(config: dict) -> bool:
        """Check whether an architecture section requests the ERT step."""
        return any(key in config for key in ENERGY_CHARACTERIZATION_KEYS)

    @classmethod
    def from_dict(cls, config: dict) -> "ArchSpecs":
        """
        Create ArchSpecs from an 'architecture' mapping.

        Args:
            config: Mapping with 'arithmetic' and 'storage' keys

        Returns:
            ArchSpecs instance
        """
        if not isinstance(config, dict):
            raise ValueError(f"'architecture' must be a mapping, got {config!r}")
        if "architecture" in config:
            return cls.from_dict(config["architecture"])

        arith_cfg = config.get("arithmetic") or {}
        if not isinstance(arith_cfg, dict):
            raise ValueError(f"'arithmetic' must be a mapping, got {arith_cfg!r}")
        arithmetic = ArithmeticUnit(
            name=arith_cfg.get("name", "MAC"),
            instances=arith_cfg.get("instances", 1),
            mesh_x=arith_cfg.get("mesh_x"),
            word_bits=arith_cfg.get("word_bits", 16),
            energy=arith_cfg.get("energy", 0.56),
        )

        if "storage" not in config:
            raise ValueError("Architecture section is missing 'storage'")
        if not isinstance(config["storage"], list) or not config["storage"]:
            raise ValueError(f"'storage' must be a non-empty list, got {config['storage']!r}")
        storage = [StorageLevel.from_dict(level_cfg) for level_cfg in config["storage"]]

        names = [level.name for level in storage]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate storage level names: {names}")

        return cls(arithmetic=arithmetic, storage=storage)


def component_short_name(path: str) -> str:
    """'system.chip.PE[0..15].RegisterFile[0..3]' -> 'RegisterFile'"""
    return re.sub(r"\[[^\]]*\]", "", path).split(".")[-1]


def _first_action(actions: dict, names: tuple) -> Optional[float]:
    for name in names:
        if name in actions:
            return float(actions[name])
    return None
