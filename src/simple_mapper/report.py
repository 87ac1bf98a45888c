"""
Report writer for the best mapping found by the search.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from simple_mapper.search import BestTracker


logger = logging.getLogger(__name__)

NO_MAPPING_MESSAGE = "MESSAGE: no valid mappings found within search criteria."


def output_paths(out_prefix: str) -> tuple[Path, Path]:
    """(<prefix>.map.txt, <prefix>.stats.txt)"""
    return Path(f"{out_prefix}.map.txt"), Path(f"{out_prefix}.stats.txt")


def energy_per_macc(engine) -> float:
    return engine.energy() / engine.get_topology().maccs()


def summary_line(engine) -> str:
    return (
        f"  Utilization = {engine.utilization():4.2f} | "
        f"pJ/MACC = {energy_per_macc(engine):8.3f}"
    )


def write_reports(
    best: BestTracker,
    storage_level_names: Sequence[str],
    out_prefix: str,
) -> Optional[tuple[Path, Path]]:
    """
    Write the mapping and statistics of the best mapping.

    Returns:
        (map_path, stats_path), or None when there is no best mapping
    """
    if not best.is_set:
        return None

    map_path, stats_path = output_paths(out_prefix)
    topology = best.engine.get_topology()

    with map_path.open("w", encoding="utf-8") as fh:
        fh.write(best.mapping.pretty_print(storage_level_names, topology.tile_sizes()))
        fh.write("\n")

    with stats_path.open("w", encoding="utf-8") as fh:
        fh.write(str(best.engine))
        fh.write("\n")

    logger.info(f"Wrote {map_path} and {stats_path}")
    return map_path, stats_path


def report(
    best: BestTracker,
    storage_level_names: Sequence[str],
    out_prefix: str,
) -> Optional[tuple[Path, Path]]:
    """Write the artifacts and print the summary, or the empty-result notice."""
    paths = write_reports(best, storage_level_names, out_prefix)
    if paths is None:
        print(NO_MAPPING_MESSAGE)
        return None

    print()
    print("Summary stats for best mapping found by mapper:")
    print(summary_line(best.engine))
    return paths
