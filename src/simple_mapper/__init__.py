"""
Simple Mapper - exhaustive mapping search for DNN accelerators.

This package enumerates every point of a mapspace (loop factorizations,
loop permutations, spatial splits, datatype bypass), skips illegal ones,
scores the rest with an analytical cost model and keeps the lowest-energy
mapping.

Main components:
- Application: config in, reports out
- UberMapSpace: reference mapspace under constraints
- Engine: analytical cost model
- run_search / BestTracker: the exhaustive search

Quick Start:
    from simple_mapper import Application, CompoundConfig

    app = Application(CompoundConfig(["examples/conv1.yaml"]), out_prefix="conv1")
    result = app.run()
    print(result.stats.summary())
"""

__version__ = "0.1.0"

from simple_mapper.application import Application
from simple_mapper.arch import ArchSpecs, ArithmeticUnit, StorageLevel
from simple_mapper.config import CompoundConfig, MapSpaceConfigError
from simple_mapper.mapping import Mapping
from simple_mapper.mapspace import (
    Dimension,
    InvalidCoordinate,
    MapSpace,
    MappingID,
    UberMapSpace,
)
from simple_mapper.model import Engine, EvalStatus
from simple_mapper.search import BestTracker, SearchResult, run_search
from simple_mapper.workload import Workload

__all__ = [
    # Main classes
    "Application",
    "CompoundConfig",
    "Workload",
    "ArchSpecs",
    "UberMapSpace",
    "Engine",
    "Mapping",

    # Search
    "run_search",
    "BestTracker",
    "SearchResult",

    # Helper classes
    "ArithmeticUnit",
    "StorageLevel",
    "MapSpace",
    "MappingID",
    "Dimension",
    "EvalStatus",

    # Errors
    "InvalidCoordinate",
    "MapSpaceConfigError",
]
