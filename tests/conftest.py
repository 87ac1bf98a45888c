"""
Shared fixtures and stub collaborators for the mapper tests.
"""

import copy
from pathlib import Path

import pytest

from simple_mapper.arch import ArchSpecs, ArithmeticUnit, StorageLevel
from simple_mapper.mapspace import MapSpace
from simple_mapper.model import EvalStatus
from simple_mapper.workload import Workload


EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


class StubMapping:
    """Mapping that only remembers the linear index it came from."""

    def __init__(self, index: int):
        self.index = index

    def pretty_print(self, storage_level_names=None, tile_sizes=None) -> str:
        return f"stub mapping {self.index} on {storage_level_names} tiles {tile_sizes}"


class StubMapSpace(MapSpace):
    """
    Mapspace over fixed sizes; `legal(index)` decides which linear indices
    construct successfully. Records every construct_mapping call.
    """

    def __init__(self, sizes, legal=lambda index: True):
        self.sizes = tuple(sizes)
        self.legal = legal
        self.calls = []

    def size(self, dimension):
        return self.sizes[dimension]

    def construct_mapping(self, mapping_id):
        self.calls.append(mapping_id.values)
        index = mapping_id.integer
        if not self.legal(index):
            return False, None
        return True, StubMapping(index)


class StubTopology:
    def __init__(self, maccs: int):
        self._maccs = maccs

    def maccs(self) -> int:
        return self._maccs

    def tile_sizes(self) -> list:
        return [[1, 1, 1]]


class StubEngine:
    """
    Engine with a known energy per mapping index.

    Indices in `failing` fail their first evaluation level.
    """

    def __init__(self, energies, failing=(), utilization=0.5, maccs=20):
        self.energies = energies
        self.failing = set(failing)
        self._utilization = utilization
        self._maccs = maccs
        self.current = None
        self.evaluations = 0

    def evaluate(self, mapping, workload):
        self.evaluations += 1
        self.current = mapping.index
        return [
            EvalStatus(success=mapping.index not in self.failing, fail_reason="stub"),
            EvalStatus(),
        ]

    def energy(self) -> float:
        return self.energies[self.current]

    def utilization(self) -> float:
        return self._utilization

    def get_topology(self) -> StubTopology:
        return StubTopology(self._maccs)

    def snapshot(self) -> "StubEngine":
        return copy.copy(self)

    def __str__(self) -> str:
        return f"stub stats for mapping {self.current}: energy {self.energy()}"


@pytest.fixture
def tiny_workload():
    """K=2, P=3; every other dimension is 1."""
    return Workload(name="tiny", R=1, S=1, P=3, Q=1, C=1, K=2, N=1)


@pytest.fixture
def two_level_specs():
    """One MAC below a buffer and a DRAM."""
    return ArchSpecs(
        arithmetic=ArithmeticUnit(name="MAC", instances=1, energy=0.0),
        storage=[
            StorageLevel(name="Buffer", entries=100, read_energy=1.0, write_energy=1.0),
            StorageLevel(name="DRAM", read_energy=10.0, write_energy=10.0),
        ],
    )


@pytest.fixture
def pe_row_specs():
    """Four MACs with private register files, a shared buffer and DRAM."""
    return ArchSpecs(
        arithmetic=ArithmeticUnit(name="MAC", instances=4, mesh_x=4, energy=0.56),
        storage=[
            StorageLevel(name="RegisterFile", entries=16, instances=4, mesh_x=4,
                         read_energy=0.12, write_energy=0.12),
            StorageLevel(name="GlobalBuffer", entries=256, instances=1,
                         read_energy=2.0, write_energy=2.0, bandwidth=16),
            StorageLevel(name="DRAM", instances=1, read_energy=200.0, write_energy=200.0),
        ],
    )


@pytest.fixture
def example_config():
    return EXAMPLES_DIR / "conv1.yaml"
