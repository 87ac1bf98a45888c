"""
Architecture module for the simple mapper.
"""

from simple_mapper.arch.specs import ArchSpecs, component_short_name
from simple_mapper.arch.storage import ArithmeticUnit, StorageLevel

__all__ = [
    "ArchSpecs",
    "ArithmeticUnit",
    "StorageLevel",
    "component_short_name",
]
