"""
Mapspace constraint parsing.

Constraints pin parts of a mapping per storage level:

    mapspace_constraints:
      - target: GlobalBuffer
        type: temporal
        factors: R=3 S=3
        permutation: RS        # innermost loops, the rest stay free
      - target: GlobalBuffer
        type: spatial
        factors: K=4
        permutation: KC
        split: 1               # loops before split on X, the rest on Y
      - target: RegisterFile
        type: bypass
        keep: [Weights]
        bypass: [Inputs, Outputs]
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from simple_mapper.arch import ArchSpecs
from simple_mapper.workload import datatype_index, dim_index


CONSTRAINT_TYPES = ("temporal", "spatial", "bypass")


@dataclass
class LevelConstraints:
    """All constraints that apply to one storage level."""
    temporal_factors: dict = field(default_factory=dict)
    spatial_factors: dict = field(default_factory=dict)
    permutation: list = field(default_factory=list)
    spatial_x: Optional[list] = None
    keep: set = field(default_factory=set)
    bypass: set = field(default_factory=set)

    def factors(self, kind: str) -> dict:
        return self.temporal_factors if kind == "temporal" else self.spatial_factors


def constraint_entries(node) -> list:
    """
    Normalize a 'mapspace' or 'mapspace_constraints' section to a list.

    Accepts a list of entries, or a mapping holding the list under
    'constraints' or 'targets'. None (an empty YAML value) is no constraints.
    """
    if node is None:
        return []
    if isinstance(node, list):
        return node
    if isinstance(node, dict):
        for key in ("constraints", "targets"):
            if key in node:
                return node[key] or []
        return []
    raise ValueError(f"Mapspace section must be a list or a mapping, got {type(node).__name__}")


def parse_factors(value) -> dict[int, int]:
    """Parse 'R=3 S=1' (or a {R: 3} mapping) to {dim_idx: factor}."""
    if value is None:
        return {}
    if isinstance(value, dict):
        items = value.items()
    elif isinstance(value, str):
        items = []
        for token in value.split():
            match = re.fullmatch(r"([A-Za-z])=?(\d+)", token)
            if match is None:
                raise ValueError(f"Malformed factor {token!r} in {value!r}")
            items.append((match.group(1), match.group(2)))
    else:
        raise ValueError(f"Factors must be a string or a mapping, got {value!r}")

    factors = {}
    for name, factor in items:
        if isinstance(factor, bool) or not isinstance(factor, (int, str)) or not str(factor).isdigit():
            raise ValueError(f"Factor for {name} must be a positive int, got {factor!r}")
        factor = int(factor)
        if factor < 1:
            raise ValueError(f"Factor for {name} must be >= 1, got {factor}")
        factors[dim_index(str(name))] = factor
    return factors


def parse_permutation(value) -> list[int]:
    """Parse 'RSC' (inner to outer) to a list of dimension indices."""
    if not value:
        return []
    dims = [dim_index(ch) for ch in str(value).replace(" ", "")]
    if len(set(dims)) != len(dims):
        raise ValueError(f"Repeated dimension in permutation {value!r}")
    return dims


def parse_constraints(node, specs: ArchSpecs) -> dict[int, LevelConstraints]:
    """
    Parse a mapspace section into per-level constraints.

    Args:
        node: The 'mapspace' or 'mapspace_constraints' section
        specs: Architecture the targets refer to

    Returns:
        {storage_level_index: LevelConstraints}
    """
    constraints = {}
    for entry in constraint_entries(node):
        if not isinstance(entry, dict):
            raise ValueError(f"Constraint entry must be a mapping, got {entry!r}")
        if "target" not in entry or "type" not in entry:
            raise ValueError(f"Constraint needs 'target' and 'type': {entry}")

        level = specs.level_index(entry["target"])
        ctype = entry["type"]
        if ctype not in CONSTRAINT_TYPES:
            raise ValueError(f"Unknown constraint type {ctype!r}; expected one of {CONSTRAINT_TYPES}")

        lc = constraints.setdefault(level, LevelConstraints())

        if ctype == "bypass":
            keep = _datatypes(entry, "keep")
            bypass = _datatypes(entry, "bypass")
            if keep & bypass:
                raise ValueError(f"{entry['target']}: datatype both kept and bypassed")
            if bypass and level == specs.num_levels - 1:
                raise ValueError(f"{entry['target']}: the outermost level cannot bypass data")
            lc.keep |= keep
            lc.bypass |= bypass
            continue

        lc.factors(ctype).update(parse_factors(entry.get("factors")))
        permutation = parse_permutation(entry.get("permutation"))

        if ctype == "temporal":
            lc.permutation = permutation
        elif "split" in entry:
            split = entry["split"]
            if isinstance(split, bool) or not isinstance(split, int):
                raise ValueError(f"{entry['target']}: split must be an int, got {split!r}")
            if not permutation or not 0 <= split <= len(permutation):
                raise ValueError(f"{entry['target']}: split={split} needs a permutation of at least that length")
            lc.spatial_x = permutation[:split]
        elif permutation:
            raise ValueError(
                f"{entry['target']}: a spatial permutation only takes effect with 'split'"
            )

    return constraints


def _datatypes(entry: dict, key: str) -> set[int]:
    """Datatype indices listed under a bypass entry's 'keep' or 'bypass' key."""
    names = entry.get(key) or []
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise ValueError(f"{entry['target']}: '{key}' must be a list of datatype names, got {names!r}")
    return {datatype_index(n) for n in names}
