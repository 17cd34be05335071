from .base import PipelineResult, StageBase
from .intron_retention import CoverageKeyStage, IntronRetentionTableStage
from .splicing import (
    AnnotStage,
    Alt3Stage,
    Alt5Stage,
    CombiStage,
    ExskStage,
    MicStage,
    MultiStage,
)


STAGE_REGISTRY = {
    CombiStage.pipeline: CombiStage,
    ExskStage.pipeline: ExskStage,
    MultiStage.pipeline: MultiStage,
    MicStage.pipeline: MicStage,
    AnnotStage.pipeline: AnnotStage,
    CoverageKeyStage.pipeline: CoverageKeyStage,
    IntronRetentionTableStage.pipeline: IntronRetentionTableStage,
    Alt5Stage.pipeline: Alt5Stage,
    Alt3Stage.pipeline: Alt3Stage,
}

__all__ = ["STAGE_REGISTRY", "PipelineResult", "StageBase"]
