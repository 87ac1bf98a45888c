"""
Storage level and arithmetic unit definitions.
"""

from dataclasses import dataclass
from typing import Optional


# None means "unbounded" (or "same as instances" for mesh_x).
NULLABLE_FIELDS = ("entries", "mesh_x", "bandwidth")


@dataclass
class ArithmeticUnit:
    """
    The MAC array at the bottom of the hierarchy.

    Attributes:
        name: Component name (used to match energy tables)
        instances: Number of MAC units
        mesh_x: Units along the X axis (instances / mesh_x along Y)
        word_bits: Operand precision
        energy: Energy per MACC (pJ)
    """
    name: str = "MAC"
    instances: int = 1
    mesh_x: Optional[int] = None
    word_bits: int = 16
    energy: float = 0.56

    def __post_init__(self):
        _check_types(self, ints=("instances", "mesh_x", "word_bits"), numbers=("energy",))
        if self.mesh_x is None:
            self.mesh_x = self.instances
        _check_mesh(self.name, self.instances, self.mesh_x)

    @property
    def mesh_y(self) -> int:
        return self.instances // self.mesh_x


@dataclass
class StorageLevel:
    """
    Definition of a single storage level in the hierarchy.

    Attributes:
        name: Name of this level (e.g., "RegisterFile", "GlobalBuffer", "DRAM")
        entries: Capacity in words per instance. None means unbounded.
        instances: Number of instances at this level
        mesh_x: Instances along the X axis
        word_bits: Word width in bits
        read_energy: Energy per word read (pJ)
        write_energy: Energy per word written (pJ)
        bandwidth: Words per cycle per instance. None means unbounded.
    """
    name: str
    entries: Optional[int] = None
    instances: int = 1
    mesh_x: Optional[int] = None
    word_bits: int = 16
    read_energy: float = 1.0
    write_energy: float = 1.0
    bandwidth: Optional[float] = None

    def __post_init__(self):
        _check_types(
            self,
            ints=("entries", "instances", "mesh_x", "word_bits"),
            numbers=("read_energy", "write_energy", "bandwidth"),
        )
        if self.entries is not None and self.entries < 0:
            self.entries = None
        if self.mesh_x is None:
            self.mesh_x = self.instances
        _check_mesh(self.name, self.instances, self.mesh_x)

    @property
    def mesh_y(self) -> int:
        return self.instances // self.mesh_x

    @property
    def is_unbounded(self) -> bool:
        return self.entries is None

    @classmethod
    def from_dict(cls, config: dict) -> "StorageLevel":
        if not isinstance(config, dict):
            raise ValueError(f"Storage level must be a mapping, got {config!r}")
        if "name" not in config:
            raise ValueError(f"Storage level is missing 'name': {config}")
        return cls(
            name=config["name"],
            entries=config.get("entries"),
            instances=config.get("instances", 1),
            mesh_x=config.get("mesh_x"),
            word_bits=config.get("word_bits", 16),
            read_energy=config.get("read_energy", 1.0),
            write_energy=config.get("write_energy", config.get("read_energy", 1.0)),
            bandwidth=config.get("bandwidth"),
        )


def _check_types(obj, ints=(), numbers=()) -> None:
    """Numeric fields must hold ints (or any real number); None only where unbounded."""
    for names, types in ((ints, int), (numbers, (int, float))):
        for field_name in names:
            value = getattr(obj, field_name)
            if value is None and field_name in NULLABLE_FIELDS:
                continue
            if isinstance(value, bool) or not isinstance(value, types):
                raise ValueError(
                    f"{obj.name}: '{field_name}' must be a number, got {value!r}"
                )


def _check_mesh(name: str, instances: int, mesh_x: int) -> None:
    if instances < 1:
        raise ValueError(f"{name}: instances must be >= 1, got {instances}")
    if mesh_x < 1 or instances % mesh_x != 0:
        raise ValueError(f"{name}: mesh_x={mesh_x} does not divide instances={instances}")
