# src/vast_combine/errors.py
# --------------------------
# Exception hierarchy for a combine run. Every fatal condition is a
# CombineError carrying a short machine-readable ``code``.

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class CombineError(Exception):
    """Base class for all fatal combine errors."""

    code = "COMBINE_ERROR"


class InvalidConfigError(CombineError):
    """Raised before any work starts when the run options are unusable."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class SubPipelineError(CombineError):
    """A collaborator exited non-zero (or could not be launched)."""

    code = "SUB_PIPELINE_FAILURE"

    def __init__(self, stage: str, cmd: Sequence[str], returncode: int | None, reason: str = ""):
        self.stage = stage
        self.cmd = [str(c) for c in cmd]
        self.returncode = returncode
        detail = reason or f"exit code {returncode}"
        super().__init__(f"{stage} failed ({detail}): {' '.join(self.cmd)}")


class MissingArtifactError(CombineError):
    """A sub-pipeline reported success but its table is not on disk."""

    code = "MISSING_EXPECTED_ARTIFACT"

    def __init__(self, path: Path, stage: str | None = None):
        self.path = Path(path)
        self.stage = stage
        owner = f" (expected from {stage})" if stage else ""
        super().__init__(f"Expected table is missing: {self.path}{owner}")


class MissingLiftoverDictionaryError(CombineError):
    code = "MISSING_LIFTOVER_DICTIONARY"

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Liftover dictionary not found: {self.path}")
