from __future__ import annotations

import logging
from typing import Dict, List

from .config_schema import RunConfig
from .lib.paths import CombinePaths
from .selection import Pipeline, SelectionPlan
from .stages import STAGE_REGISTRY, PipelineResult


logger = logging.getLogger(__name__)


def invoke_pipelines(
    cfg: RunConfig, plan: SelectionPlan, paths: CombinePaths
) -> Dict[Pipeline, PipelineResult]:
    """Run the selected sub-pipelines one after another, in plan order.

    The first failure propagates as SubPipelineError; the artifacts written by
    earlier stages stay on disk.
    """
    results: Dict[Pipeline, PipelineResult] = {}
    completed: List[str] = []
    for pipeline in plan.pipelines:
        StageCls = STAGE_REGISTRY[pipeline]
        stage = StageCls(cfg, plan, paths)
        try:
            result = stage.run()
        except Exception:
            if completed:
                logger.error("Aborting after %s; completed stages: %s", stage.name, ", ".join(completed))
            raise
        results[pipeline] = result
        completed.append(stage.name)
    return results
