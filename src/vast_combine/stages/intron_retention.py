# src/vast_combine/stages/intron_retention.py
# ------------------------------------------
# Intron retention runs as two stages: a per-run coverage key (quality
# scores) is built from the IR files in to_combine/, then the PIR table is
# computed from it. Both must succeed.

from __future__ import annotations

from pathlib import Path
from typing import List

from ..lib.paths import inclusion_table_name
from ..lib.tools import resolve_tool
from ..selection import Pipeline
from .base import StageBase
from .stage_utils import IR_VERSION_INFIX, coverage_key_name, flag


class CoverageKeyStage(StageBase):
    pipeline = Pipeline.IR_COVERAGE

    @property
    def description(self) -> str:
        return f"quality score table for intron retention (version {self.cfg.ir_version})"

    @property
    def script(self) -> str:
        return f"RI_MakeCoverageKey{IR_VERSION_INFIX[self.cfg.ir_version]}.pl"

    def build_cmd(self) -> List[str]:
        cfg = self.cfg
        return [
            resolve_tool(self.script, cfg.bin_dir),
            "-sp", cfg.species,
            "-dbDir", str(cfg.db_dir),
            str(self.paths.to_combine),
        ]

    def expected_output(self) -> Path:
        return self.paths.to_combine / coverage_key_name(
            self.cfg.species, self.sample_count, self.cfg.ir_version
        )


class IntronRetentionTableStage(StageBase):
    pipeline = Pipeline.IR_TABLE
    script = "RI_MakeTablePIR.R"

    @property
    def description(self) -> str:
        return f"Table for intron retention (version {self.cfg.ir_version})"

    def build_cmd(self) -> List[str]:
        cfg = self.cfg
        coverage_key = CoverageKeyStage(cfg, self.plan, self.paths).expected_output()
        return [
            resolve_tool(self.script, cfg.bin_dir),
            "--verbose", flag(cfg.verbose),
            "-s", str(cfg.db_dir),
            "--IR_version", str(cfg.ir_version),
            "-c", str(self.paths.to_combine),
            "-q", str(coverage_key),
            "-o", str(self.paths.raw_incl),
        ]

    def expected_output(self) -> Path:
        # IR tables are merged as written, without the "-n" variant
        name = inclusion_table_name(self.name, self.cfg.species, self.sample_count, normalized=False)
        return self.paths.raw_incl / name
