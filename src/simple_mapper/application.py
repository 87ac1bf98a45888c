"""
Mapper application: configuration in, best mapping reports out.
"""

import logging

from simple_mapper.arch import ArchSpecs
from simple_mapper.config import CompoundConfig
from simple_mapper.ert import run_energy_characterization
from simple_mapper.mapspace import MapSpace, parse_and_construct
from simple_mapper.model import Engine
from simple_mapper.report import report
from simple_mapper.search import SearchResult, run_search
from simple_mapper.utils import Timer
from simple_mapper.workload import Workload


logger = logging.getLogger(__name__)

DEFAULT_OUT_PREFIX = "simple-mapper"


class Application:
    """
    Exhaustive mapper.

    This class wires the pieces together:
    1. Parse the workload and the architecture
    2. Run the energy characterization step if the architecture asks for it
    3. Build the mapspace from the constraints
    4. Search it exhaustively and report the best mapping

    Usage:
        app = Application(CompoundConfig(["mapper.yaml"]))
        result = app.run()
    """

    def __init__(
        self,
        config: CompoundConfig,
        out_prefix: str = DEFAULT_OUT_PREFIX,
        progress: bool = False,
    ):
        self.out_prefix = out_prefix
        self.progress = progress
        self.timer = Timer()

        # Fails before anything is parsed or written.
        mapspace_node = config.mapspace_section()

        self.workload = Workload.from_dict(config.lookup("problem"), name="problem")

        arch = config.lookup("architecture")
        self.arch_specs = ArchSpecs.from_dict(arch)
        if ArchSpecs.needs_energy_characterization(arch):
            run_energy_characterization(self.arch_specs, config.in_files, out_prefix)

        self.mapspace: MapSpace = parse_and_construct(
            mapspace_node, self.arch_specs, self.workload
        )

    def run(self) -> SearchResult:
        """Run the mapper and write the reports."""
        engine = Engine(self.arch_specs)

        self.timer.start("search")
        result = run_search(self.mapspace, engine, self.workload, progress=self.progress)
        self.timer.stop("search")

        report(result.best, self.arch_specs.storage_level_names(), self.out_prefix)
        logger.debug(self.timer.report())
        return result
