"""
selection
=========

Pure decision logic mapping a RunConfig plus the discovered sample counts
to the ordered list of sub-pipelines a combine run invokes.

Mode precedence, highest first:

    only_expression > only_intron_retention > only_exon_skipping > default

A lower "only" flag is ignored when a higher one is set, and
``only_intron_retention`` also wins over ``skip_intron_retention``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .config_schema import RunConfig
from .discovery import SampleDiscovery


logger = logging.getLogger(__name__)


class Pipeline(Enum):
    """Sub-pipelines, declared in the order they are invoked."""

    COMBI = "COMBI"              # splice-site based
    EXSK = "EXSK"                # transcript based, single exon
    MULTI = "MULTI"              # transcript based, multi-exon
    MIC = "MIC"                  # microexons
    ANNOT = "ANNOT"              # annotation based
    IR_COVERAGE = "IR_COVERAGE"  # intron retention, stage 1
    IR_TABLE = "IR"              # intron retention, stage 2
    ALT5 = "ALT5"
    ALT3 = "ALT3"


INVOCATION_ORDER: Tuple[Pipeline, ...] = tuple(Pipeline)
EXON_SKIPPING_PIPELINES = (Pipeline.COMBI, Pipeline.EXSK, Pipeline.MULTI, Pipeline.MIC)
INTRON_RETENTION_PIPELINES = (Pipeline.IR_COVERAGE, Pipeline.IR_TABLE)
ALT_SS_PIPELINES = (Pipeline.ALT5, Pipeline.ALT3)


class RunMode(Enum):
    EXPRESSION_ONLY = "expression_only"
    INTRON_RETENTION_ONLY = "intron_retention_only"
    EXON_SKIPPING_ONLY = "exon_skipping_only"
    DEFAULT = "default"


class IntronRetentionStatus(Enum):
    RUN = "run"
    DISABLED = "disabled"                  # user asked for --noIR
    NO_SAMPLES = "no_samples"              # no files for the selected IR version
    EXCLUDED_BY_MODE = "excluded_by_mode"


@dataclass(frozen=True)
class SelectionPlan:
    mode: RunMode
    # N: embedded in every splicing output name of this run
    sample_count: int
    pipelines: Tuple[Pipeline, ...]
    intron_retention: IntronRetentionStatus
    notes: Tuple[str, ...] = ()

    @property
    def runs_splicing(self) -> bool:
        return bool(self.pipelines)

    @property
    def intron_retention_ran(self) -> bool:
        return Pipeline.IR_TABLE in self.pipelines


def resolve_mode(cfg: RunConfig) -> Tuple[RunMode, Tuple[str, ...]]:
    """Apply the precedence table; return the mode and notes on ignored flags."""
    notes = []
    if cfg.only_expression:
        mode = RunMode.EXPRESSION_ONLY
        if cfg.only_intron_retention or cfg.only_exon_skipping:
            notes.append("--exprONLY takes precedence over --onlyIR/--onlyEX")
    elif cfg.only_intron_retention:
        mode = RunMode.INTRON_RETENTION_ONLY
        if cfg.only_exon_skipping:
            notes.append("--onlyIR takes precedence over --onlyEX")
        if cfg.skip_intron_retention:
            notes.append("--onlyIR takes precedence over --noIR")
    elif cfg.only_exon_skipping:
        mode = RunMode.EXON_SKIPPING_ONLY
    else:
        mode = RunMode.DEFAULT
    return mode, tuple(notes)


def _intron_retention_status(cfg: RunConfig, mode: RunMode, ir_count: int) -> IntronRetentionStatus:
    if mode in (RunMode.EXPRESSION_ONLY, RunMode.EXON_SKIPPING_ONLY):
        return IntronRetentionStatus.EXCLUDED_BY_MODE
    if mode is RunMode.DEFAULT and cfg.skip_intron_retention:
        return IntronRetentionStatus.DISABLED
    if ir_count == 0:
        return IntronRetentionStatus.NO_SAMPLES
    return IntronRetentionStatus.RUN


def select_pipelines(cfg: RunConfig, samples: SampleDiscovery) -> SelectionPlan:
    """Decide which sub-pipelines run, in invocation order."""
    mode, notes = resolve_mode(cfg)
    notes = list(notes)

    ir_status = _intron_retention_status(cfg, mode, samples.intron_retention.count)
    if ir_status is IntronRetentionStatus.NO_SAMPLES:
        notes.append(
            f"No intron retention files for version {cfg.ir_version}; skipping intron retention"
        )

    if mode is RunMode.INTRON_RETENTION_ONLY:
        n = samples.intron_retention.count
    else:
        n = samples.exon_skipping.count

    selected: list[Pipeline] = []
    if mode is RunMode.EXPRESSION_ONLY:
        pass
    elif n == 0:
        notes.append("No splicing sample files to combine")
    elif mode is RunMode.INTRON_RETENTION_ONLY:
        selected.extend(INTRON_RETENTION_PIPELINES)
    else:
        selected.extend(EXON_SKIPPING_PIPELINES)
        if not cfg.skip_annotation:
            selected.append(Pipeline.ANNOT)
        if mode is RunMode.DEFAULT:
            if ir_status is IntronRetentionStatus.RUN:
                selected.extend(INTRON_RETENTION_PIPELINES)
            selected.extend(ALT_SS_PIPELINES)

    ordered = tuple(p for p in INVOCATION_ORDER if p in selected)
    plan = SelectionPlan(
        mode=mode,
        sample_count=n,
        pipelines=ordered,
        intron_retention=ir_status,
        notes=tuple(notes),
    )
    for note in plan.notes:
        logger.info(note)
    logger.debug("Selected pipelines (%s, N=%d): %s", mode.value, n, [p.value for p in ordered])
    return plan
