"""
Mapspace: the discrete space of candidate mappings.
"""

from simple_mapper.mapspace.base import MapSpace
from simple_mapper.mapspace.constraints import LevelConstraints, parse_constraints
from simple_mapper.mapspace.dimension import Dimension, NUM_DIMENSIONS, SEARCH_ORDER
from simple_mapper.mapspace.mapping_id import InvalidCoordinate, MappingID
from simple_mapper.mapspace.uber import UberMapSpace, parse_and_construct

__all__ = [
    "MapSpace",
    "UberMapSpace",
    "Dimension",
    "NUM_DIMENSIONS",
    "SEARCH_ORDER",
    "MappingID",
    "InvalidCoordinate",
    "LevelConstraints",
    "parse_constraints",
    "parse_and_construct",
]
