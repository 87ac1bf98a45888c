"""
Cost model for the simple mapper.
"""

from simple_mapper.model.engine import Engine, EvalStatus, TopologyStats, format_stats

__all__ = [
    "Engine",
    "EvalStatus",
    "TopologyStats",
    "format_stats",
]
