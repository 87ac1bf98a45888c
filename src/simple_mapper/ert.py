"""
Energy characterization step.

When the architecture section carries a hierarchical (Accelergy-style)
description, the external `accelergy` tool is run on the input files to
produce an energy reference table (ERT). The table is then merged into the
architecture specs before the search starts.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

import yaml

from simple_mapper.arch import ArchSpecs, component_short_name


logger = logging.getLogger(__name__)

ACCELERGY_EXECUTABLE = "accelergy"


def ert_path(out_prefix: str) -> Path:
    return Path(f"{out_prefix}.ERT.yaml")


def invoke_accelergy(
    input_files: Sequence[str | Path],
    out_prefix: str,
    executable: str = ACCELERGY_EXECUTABLE,
) -> Path:
    """
    Run Accelergy on the input files.

    Args:
        input_files: Configuration files describing the architecture
        out_prefix: Output prefix; the table is written to <prefix>.ERT.yaml
        executable: Name or path of the accelergy executable

    Returns:
        Path of the generated ERT file
    """
    if shutil.which(executable) is None:
        raise RuntimeError(
            f"Energy characterization requested but '{executable}' was not found on PATH"
        )

    out_path = ert_path(out_prefix)
    out_dir = out_path.parent
    cmd = [
        executable,
        *[str(f) for f in input_files],
        "--oprefix", f"{Path(out_prefix).name}.",
        "-o", str(out_dir) if str(out_dir) else ".",
    ]
    logger.info(f"Running energy characterization: {' '.join(cmd)}")

    result = subprocess.run(cmd, capture_output=True, text=True)
    log_path = Path(f"{out_prefix}.accelergy.log")
    log_path.write_text(result.stdout + result.stderr, encoding="utf-8")

    if result.returncode != 0:
        raise RuntimeError(
            f"Accelergy failed with exit status {result.returncode} (see {log_path}):\n"
            f"{result.stderr}"
        )
    if not out_path.exists():
        raise RuntimeError(f"Accelergy finished but produced no table at {out_path}")

    return out_path


def load_ert(path: str | Path) -> dict[str, dict[str, float]]:
    """
    Load an energy reference table.

    Returns:
        {component_short_name: {action_name: energy_pJ}}. When an action is
        listed several times (different arguments), the first entry wins.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"ERT file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    root = data.get("ERT", data)
    tables = root.get("tables")
    if tables is None:
        raise ValueError(f"{path}: no 'tables' list in energy reference table")

    ert = {}
    for table in tables:
        name = component_short_name(table["name"])
        actions = ert.setdefault(name, {})
        for action in table.get("actions", []):
            if "energy" not in action:
                continue
            actions.setdefault(action["name"], float(action["energy"]))
    return ert


def run_energy_characterization(
    specs: ArchSpecs,
    input_files: Sequence[str | Path],
    out_prefix: str,
) -> Path:
    """Invoke Accelergy and merge its table into specs."""
    path = invoke_accelergy(input_files, out_prefix)
    specs.apply_ert(load_ert(path))
    return path
