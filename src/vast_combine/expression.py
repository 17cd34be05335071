from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .config_schema import RunConfig
from .discovery import SampleFileSet, discover_expression
from .lib import tools
from .lib.compress import gzip_files
from .lib.paths import CombinePaths, expression_table_names
from .lib.tools import resolve_tool


logger = logging.getLogger(__name__)

EXPRESSION_SCRIPT = "MakeTableRPKMs.pl"
EXPRESSION_STEP = "EXPRESSION"


@dataclass
class ExpressionSummary:
    """Outcome of the expression branch; ``tables`` is empty when nothing ran."""

    samples: SampleFileSet
    tables: Dict[str, Path] = field(default_factory=dict)

    @property
    def sample_count(self) -> int:
        return self.samples.count


def expected_tables(cfg: RunConfig, paths: CombinePaths, m: int) -> Dict[str, Path]:
    names = expression_table_names(cfg.species, m)
    wanted = ["crpkm"]
    if cfg.counts_in_expression:
        wanted.append("counts")
    if cfg.normalize_expression:
        wanted.append("norm")
    return {k: paths.output_dir / names[k] for k in wanted}


def build_expression_cmd(cfg: RunConfig) -> List[str]:
    cmd = [
        resolve_tool(EXPRESSION_SCRIPT, cfg.bin_dir),
        f"-sp={cfg.species}",
        f"-dbDir={cfg.db_dir}",
    ]
    if cfg.counts_in_expression:
        cmd.append("-C")
    if cfg.normalize_expression:
        cmd.append("-norm")
    if cfg.install_normalization_dependency:
        cmd.append("-install_limma")
    return cmd


def combine_expression_tables(cfg: RunConfig, paths: CombinePaths) -> ExpressionSummary:
    """Aggregate expr_out/*.cRPKM into cross-sample cRPKM tables."""
    samples = discover_expression(paths)
    summary = ExpressionSummary(samples)
    if cfg.skip_expression:
        logger.debug("Expression tables disabled (%d cRPKM files ignored)", samples.count)
        return summary
    if not samples:
        return summary

    logger.info("Combining cRPKMs into a single table")
    tools.run_tool(
        build_expression_cmd(cfg),
        name=EXPRESSION_STEP,
        cwd=paths.output_dir,
        log_path=paths.tool_log(EXPRESSION_STEP),
    )

    tables = expected_tables(cfg, paths, samples.count)
    for key, path in tables.items():
        if not path.exists():
            logger.warning("Expected expression table was not written: %s", path)

    if cfg.compress:
        logger.info("Compressing files")
        crpkm = tables["crpkm"]
        gzip_files([*samples.files, crpkm])
        gz = crpkm.with_name(crpkm.name + ".gz")
        if gz.exists():
            tables["crpkm"] = gz

    labels = {
        "crpkm": "Final cRPKM table",
        "counts": "Final cRPKM and COUNTS table",
        "norm": "Final normalized cRPKM table",
    }
    for key, path in tables.items():
        logger.info("%s saved as: %s", labels[key], path)
    summary.tables = tables
    return summary
