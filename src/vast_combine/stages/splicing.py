# src/vast_combine/stages/splicing.py
# ----------------------------------
# Exon-level and alternative splice-site sub-pipelines. Each one calls a
# quantification script that adds the samples found in to_combine/ to a
# raw_incl/ inclusion table.

from __future__ import annotations

from typing import List

from ..selection import Pipeline
from .base import InclusionTableStage
from .stage_utils import flag


class CombiStage(InclusionTableStage):
    """Splice-site based module (a posteriori exon skipping)."""

    pipeline = Pipeline.COMBI
    script = "Add_to_COMBI.pl"
    description = "Table for COMBI (splice-site based pipeline)"

    def extra_args(self) -> List[str]:
        return [
            f"-use_all_excl_eej={flag(self.cfg.use_all_exclusion_junctions)}",
            f"-extra_eej={self.cfg.extra_eej}",
        ]


class TranscriptStage(InclusionTableStage):
    """Transcript-based (a priori) module; ``event_type`` selects simple vs complex."""

    script = "Add_to_APR.pl"
    event_type: str

    def extra_args(self) -> List[str]:
        return [f"-type={self.event_type}"]


class ExskStage(TranscriptStage):
    pipeline = Pipeline.EXSK
    event_type = "exskX"
    description = "Table for EXSK (transcript-based pipeline, single)"


class MultiStage(TranscriptStage):
    pipeline = Pipeline.MULTI
    event_type = "MULTI3X"
    description = "Table for MULTI (transcript-based pipeline, multiexon)"


class MicStage(InclusionTableStage):
    pipeline = Pipeline.MIC
    script = "Add_to_MIC.pl"
    description = "Table for MIC (microexon pipeline)"


class AnnotStage(InclusionTableStage):
    """PSIs for all annotated exons directly."""

    pipeline = Pipeline.ANNOT
    script = "GetPSI_allannot_VT.pl"
    description = "Table for ANNOT (annotation-based pipeline)"

    def extra_args(self) -> List[str]:
        return [f"-extra_eej={self.cfg.extra_eej}"]


class Alt5Stage(InclusionTableStage):
    pipeline = Pipeline.ALT5
    script = "Add_to_ALT5.pl"
    description = "Table for Alternative 5'ss choice events"


class Alt3Stage(InclusionTableStage):
    pipeline = Pipeline.ALT3
    script = "Add_to_ALT3.pl"
    description = "Table for Alternative 3'ss choice events"
