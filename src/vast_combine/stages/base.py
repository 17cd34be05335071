from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..config_schema import RunConfig
from ..lib import tools
from ..lib.paths import CombinePaths, inclusion_table_name
from ..selection import Pipeline, SelectionPlan
from .stage_utils import make_vast_cmd


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """The table artifact a sub-pipeline is expected to have written."""

    pipeline: Pipeline
    path: Path

    @property
    def exists(self) -> bool:
        return self.path.exists()


class StageBase(ABC):
    """
    Abstract base for one sub-pipeline invocation.

    Subclasses must implement:
      • build_cmd()
      • expected_output()

    A stage is a single blocking collaborator call run from the output
    directory; any failure raises SubPipelineError and ends the run.
    """

    pipeline: Pipeline
    description: str = ""

    def __init__(self, cfg: RunConfig, plan: SelectionPlan, paths: CombinePaths):
        self.cfg = cfg
        self.plan = plan
        self.paths = paths

    @property
    def name(self) -> str:
        return self.pipeline.value

    @property
    def sample_count(self) -> int:
        return self.plan.sample_count

    # ─────────────────────────────── Required API ───────────────────────────────

    @abstractmethod
    def build_cmd(self) -> List[str]:
        """Return the collaborator command line for this stage."""
        ...

    @abstractmethod
    def expected_output(self) -> Path:
        ...

    # ─────────────────────────────── Main runner ────────────────────────────────

    def run(self) -> PipelineResult:
        cmd = self.build_cmd()
        logger.info("Building %s", self.description or f"table for {self.name}")
        start_ts = time.time()
        tools.run_tool(
            cmd,
            name=self.name,
            cwd=self.paths.output_dir,
            log_path=self.paths.tool_log(self.name),
        )
        runtime_sec = round(time.time() - start_ts, 2)
        logger.debug("[%s] finished in %ss", self.name, runtime_sec)
        return PipelineResult(self.pipeline, self.expected_output())


class InclusionTableStage(StageBase):
    """Stage writing a merge-ready ``raw_incl/INCLUSION_LEVELS_<TAG>-<sp><N>-n.tab``."""

    script: str

    def extra_args(self) -> List[str]:
        return []

    def build_cmd(self) -> List[str]:
        return make_vast_cmd(self.script, self.cfg, extra=self.extra_args())

    def expected_output(self) -> Path:
        name = inclusion_table_name(self.name, self.cfg.species, self.sample_count)
        return self.paths.raw_incl / name
