"""
assembler
=========

Builds the final ``INCLUSION_LEVELS_FULL`` table: selects and orders the
per-pipeline tables that take part in the merge, checks they were written,
and pipes their concatenation through the merge collaborator, which
de-duplicates events and reconciles columns.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from .config_schema import RunConfig
from .errors import MissingArtifactError
from .lib import tools
from .lib.paths import CombinePaths, final_table_name, format_path
from .selection import Pipeline, RunMode, SelectionPlan
from .stages import STAGE_REGISTRY, PipelineResult
from .stages.stage_utils import make_vast_cmd


logger = logging.getLogger(__name__)

MERGE_SCRIPT = "Add_to_FULL.pl"
MERGE_STEP = "FULL"

# Order in which the per-pipeline tables are concatenated
EXON_SKIPPING_MERGE_ORDER = (Pipeline.EXSK, Pipeline.MULTI, Pipeline.COMBI, Pipeline.MIC)
ALT_SS_MERGE_ORDER = (Pipeline.ALT3, Pipeline.ALT5)


def merge_pipelines(cfg: RunConfig, plan: SelectionPlan) -> List[Pipeline]:
    """Pipelines whose tables make up the final table, in merge order."""
    if not plan.runs_splicing:
        return []
    if plan.mode is RunMode.INTRON_RETENTION_ONLY:
        return [Pipeline.IR_TABLE]

    order = list(EXON_SKIPPING_MERGE_ORDER)
    if plan.mode is RunMode.DEFAULT:
        order.extend(ALT_SS_MERGE_ORDER)
    if not cfg.skip_annotation:
        order.append(Pipeline.ANNOT)
    if plan.mode is RunMode.DEFAULT and plan.intron_retention_ran:
        order.append(Pipeline.IR_TABLE)
    return order


def merge_inputs(cfg: RunConfig, plan: SelectionPlan, paths: CombinePaths) -> List[PipelineResult]:
    """Expected table artifacts feeding the merge, in merge order."""
    return [
        PipelineResult(p, STAGE_REGISTRY[p](cfg, plan, paths).expected_output())
        for p in merge_pipelines(cfg, plan)
    ]


def final_table_path(cfg: RunConfig, plan: SelectionPlan, paths: CombinePaths) -> Path:
    return paths.output_dir / final_table_name(cfg.species, plan.sample_count, cfg.assembly_suffix)


def check_inputs(inputs: List[PipelineResult]) -> None:
    for item in inputs:
        if not item.exists:
            logger.error("Merge input missing: %s", item.path)
            raise MissingArtifactError(item.path, stage=item.pipeline.value)


def assemble_final_table(cfg: RunConfig, plan: SelectionPlan, paths: CombinePaths) -> Path:
    """Merge the per-pipeline tables into the FULL table and return its path.

    The merge writes ``<final>.tmp`` first and only renames it onto the final
    name once the collaborator exits cleanly.
    """
    inputs = merge_inputs(cfg, plan, paths)
    if not inputs:
        raise ValueError("Nothing to merge: no sub-pipelines were selected")
    check_inputs(inputs)

    final = final_table_path(cfg, plan, paths)
    staged = final.with_name(final.name + ".tmp")
    logger.info("Combining results into a single table")
    logger.debug(
        "Merge inputs: %s", ", ".join(format_path(i.path, paths.output_dir) for i in inputs)
    )
    try:
        tools.run_piped(
            make_vast_cmd(MERGE_SCRIPT, cfg),
            [i.path for i in inputs],
            staged,
            name=MERGE_STEP,
            cwd=paths.output_dir,
            log_path=paths.tool_log(MERGE_STEP),
        )
    except Exception:
        staged.unlink(missing_ok=True)
        raise
    os.replace(staged, final)
    return final
