"""
Configuration loading.

One or more YAML files are merged into a single root mapping; a later file
overrides top-level keys of earlier ones. The root holds 'problem',
'architecture', and exactly one of 'mapspace' / 'mapspace_constraints'.
"""

import logging
from pathlib import Path
from typing import Any, Sequence

import yaml


logger = logging.getLogger(__name__)

MAPSPACE_KEYS = ("mapspace", "mapspace_constraints")


class MapSpaceConfigError(ValueError):
    """Neither mapspace section is present."""

    def __init__(self):
        super().__init__(
            'found neither "mapspace" nor "mapspace_constraints" directive. '
            "To run the mapper without any constraints set mapspace_constraints "
            "as an empty list []."
        )


class CompoundConfig:
    """
    Merged configuration from one or more YAML files.

    Usage:
        config = CompoundConfig(["arch.yaml", "problem.yaml", "constraints.yaml"])
        problem = config.lookup("problem")
    """

    def __init__(self, in_files: Sequence[str | Path] = (), root: dict = None):
        self.in_files = [Path(f) for f in in_files]
        self.root = dict(root) if root is not None else {}

        for path in self.in_files:
            self.root.update(self._load(path))

    @staticmethod
    def _load(path: Path) -> dict:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
        logger.info(f"Loaded {path} ({', '.join(data.keys())})")
        return data

    def exists(self, key: str) -> bool:
        return key in self.root

    def lookup(self, key: str) -> Any:
        if key not in self.root:
            raise KeyError(f"Missing required config section '{key}'")
        return self.root[key]

    def mapspace_section(self) -> Any:
        """
        The mapspace definition; 'mapspace' takes precedence.

        Raises:
            MapSpaceConfigError: if neither section exists
        """
        for key in MAPSPACE_KEYS:
            if key in self.root:
                return self.root[key]
        raise MapSpaceConfigError()
