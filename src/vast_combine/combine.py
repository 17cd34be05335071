# src/vast_combine/combine.py
# ---------------------------
# Top-level sequence of a combine run:
#   discovery -> selection -> sub-pipelines -> FULL table -> liftover
#   -> (independently) expression tables
# Everything is sequential; the first fatal error ends the run.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .assembler import assemble_final_table
from .config_schema import RunConfig
from .discovery import SampleDiscovery, discover_samples
from .expression import ExpressionSummary, combine_expression_tables
from .invoker import invoke_pipelines
from .lib.command_log import append_command_log
from .lib.compress import gzip_files
from .lib.paths import CombinePaths
from .liftover import lift_over_final_table, liftover_dictionary
from .selection import Pipeline, SelectionPlan, select_pipelines
from .stages import PipelineResult


logger = logging.getLogger(__name__)


@dataclass
class CombineSummary:
    samples: SampleDiscovery
    plan: SelectionPlan
    results: Dict[Pipeline, PipelineResult] = field(default_factory=dict)
    final_table: Optional[Path] = None
    lifted_over: bool = False
    expression: Optional[ExpressionSummary] = None

    @property
    def no_input_found(self) -> bool:
        m = self.expression.sample_count if self.expression else 0
        return self.plan.sample_count + m == 0


def _compress_splicing_outputs(paths: CombinePaths, final_table: Path) -> Path:
    logger.info("Compressing files")
    targets: List[Path] = [
        *sorted(paths.raw_incl.glob("*.tab")),
        *sorted(paths.raw_reads.glob("*.tab")),
        final_table,
    ]
    gzip_files(targets)
    return final_table.with_name(final_table.name + ".gz")


def run_splicing_branch(cfg: RunConfig, plan: SelectionPlan, paths: CombinePaths, summary: CombineSummary) -> None:
    if cfg.needs_liftover:
        # resolved before any sub-pipeline runs
        liftover_dictionary(cfg)

    summary.results = invoke_pipelines(cfg, plan, paths)
    final_table = assemble_final_table(cfg, plan, paths)

    if cfg.needs_liftover:
        try:
            lift_over_final_table(cfg, final_table, paths)
        except Exception:
            # the merged table is still in native coordinates
            logger.error("Liftover failed; removing %s", final_table.name)
            final_table.unlink(missing_ok=True)
            raise
        summary.lifted_over = True

    logger.info("Final table saved as: %s", final_table)

    if cfg.compress:
        final_table = _compress_splicing_outputs(paths, final_table)
    summary.final_table = final_table


def _report_no_input() -> None:
    logger.info("Could not find any files to combine. If they are compressed, please decompress them first.")
    logger.info("The path specified by -o needs to contain the sub-folder to_combine or expr_out.")
    logger.info("By default this is -o vast_out, which contains vast_out/to_combine.")


def run_combine(cfg: RunConfig, version: str = __version__) -> CombineSummary:
    """Run every combine step for an already validated configuration."""
    paths = CombinePaths(cfg.output_dir)
    paths.bootstrap()

    logger.info("VAST-TOOLS v%s", version)
    logger.info("Using VASTDB -> %s", cfg.db_dir)

    samples = discover_samples(cfg, paths)
    append_command_log(paths.command_log, cfg, version)

    plan = select_pipelines(cfg, samples)
    summary = CombineSummary(samples=samples, plan=plan)

    if plan.runs_splicing:
        run_splicing_branch(cfg, plan, paths, summary)

    summary.expression = combine_expression_tables(cfg, paths)

    if summary.no_input_found:
        _report_no_input()
    return summary
