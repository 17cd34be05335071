"""
discovery
=========

Counts the per-sample intermediate files left by ``align`` in an output
directory. Each pipeline family is discovered independently because a
sample may be present in one family only (e.g. expression-only samples).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple

from .config_schema import RunConfig
from .lib.paths import CombinePaths


logger = logging.getLogger(__name__)


class Family(Enum):
    EXON_SKIPPING = "exon_skipping"
    INTRON_RETENTION = "intron_retention"
    EXPRESSION = "expression"


EXON_SKIPPING_PATTERN = "*exskX"
EXPRESSION_PATTERN = "*.cRPKM"
# IR analysis version -> file suffix of its per-sample files
INTRON_RETENTION_PATTERNS = {1: "*.IR", 2: "*.IR2"}


@dataclass(frozen=True)
class SampleFileSet:
    family: Family
    files: Tuple[Path, ...] = ()

    @property
    def count(self) -> int:
        return len(self.files)

    def __bool__(self) -> bool:
        return bool(self.files)


@dataclass(frozen=True)
class SampleDiscovery:
    """Splicing-family file sets found for one run."""

    exon_skipping: SampleFileSet
    intron_retention: SampleFileSet


def discover_files(directory: Path, pattern: str, family: Family) -> SampleFileSet:
    """Return the sorted files in ``directory`` matching ``pattern``.

    A missing directory is not an error: it simply holds no samples.
    """
    if not directory.is_dir():
        logger.debug("No %s directory at %s", family.value, directory)
        return SampleFileSet(family)
    files = tuple(sorted(p for p in directory.glob(pattern) if p.is_file()))
    return SampleFileSet(family, files)


def discover_intron_retention(paths: CombinePaths, ir_version: int) -> SampleFileSet:
    return discover_files(
        paths.to_combine, INTRON_RETENTION_PATTERNS[ir_version], Family.INTRON_RETENTION
    )


def discover_expression(paths: CombinePaths) -> SampleFileSet:
    return discover_files(paths.expr_out, EXPRESSION_PATTERN, Family.EXPRESSION)


def discover_samples(cfg: RunConfig, paths: CombinePaths) -> SampleDiscovery:
    exsk = discover_files(paths.to_combine, EXON_SKIPPING_PATTERN, Family.EXON_SKIPPING)
    ir = discover_intron_retention(paths, cfg.ir_version)
    logger.info(
        "Found %d exon skipping and %d intron retention (v%d) sample files in %s",
        exsk.count,
        ir.count,
        cfg.ir_version,
        paths.to_combine,
    )
    return SampleDiscovery(exon_skipping=exsk, intron_retention=ir)
