# src/vast_combine/lib/tools.py
# -----------------------------
# Subprocess wrappers for the external collaborators (the per-pipeline
# quantification scripts, the merger, the liftover and the cRPKM tabler).
# Every call is blocking; a non-zero exit status is raised as a
# SubPipelineError and never retried.

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import IO, Iterable, Sequence

from ..errors import SubPipelineError


logger = logging.getLogger(__name__)


def resolve_tool(script: str, bin_dir: Path | None = None) -> str:
    """Return the executable to call for ``script``.

    With a ``bin_dir`` the script is taken from that directory, otherwise it is
    left to ``PATH`` lookup.
    """
    if bin_dir is None:
        return script
    return str(Path(bin_dir) / script)


def _launch(cmd: Sequence[str], name: str, **kwargs) -> subprocess.Popen:
    try:
        return subprocess.Popen([str(c) for c in cmd], **kwargs)
    except OSError as e:
        logger.error("[%s] Could not launch %s: %s", name, cmd[0], e)
        raise SubPipelineError(name, cmd, None, reason=str(e)) from e


def run_tool(
    cmd: Sequence[str],
    *,
    name: str,
    cwd: Path,
    log_path: Path | None = None,
) -> int:
    """
    Run a single collaborator command inside ``cwd``.
    stdout/stderr are captured in ``log_path`` when given; raises on non-zero exit.
    """
    printable = " ".join(str(c) for c in cmd)
    logger.debug("[%s] Running: %s", name, printable)

    if log_path is not None:
        with open(log_path, "w") as logf:
            proc = _launch(cmd, name, stdout=logf, stderr=subprocess.STDOUT, cwd=cwd)
            proc.wait()
    else:
        proc = _launch(cmd, name, cwd=cwd)
        proc.wait()

    if proc.returncode != 0:
        logger.error("[%s] Command failed: %s (exit %s)", name, printable, proc.returncode)
        raise SubPipelineError(name, cmd, proc.returncode)
    return proc.returncode


def _feed(stdin: IO[bytes], inputs: Iterable[Path]) -> None:
    try:
        for p in inputs:
            with open(p, "rb") as fh:
                shutil.copyfileobj(fh, stdin)
    except BrokenPipeError:
        # The collaborator stopped reading; its exit status tells the story.
        pass
    finally:
        try:
            stdin.close()
        except BrokenPipeError:
            pass


def run_piped(
    cmd: Sequence[str],
    inputs: Sequence[Path],
    output: Path,
    *,
    name: str,
    cwd: Path,
    log_path: Path | None = None,
) -> int:
    """Stream the concatenation of ``inputs`` into ``cmd`` and write its stdout to ``output``.

    This is the ``cat a b c | tool > output`` idiom without a shell.
    """
    printable = " ".join(str(c) for c in cmd)
    logger.debug("[%s] Running: cat %s | %s > %s", name, " ".join(map(str, inputs)), printable, output)

    logf = open(log_path, "w") if log_path is not None else None
    try:
        with open(output, "wb") as out_fh:
            proc = _launch(
                cmd,
                name,
                stdin=subprocess.PIPE,
                stdout=out_fh,
                stderr=logf,
                cwd=cwd,
            )
            _feed(proc.stdin, inputs)
            proc.wait()
    finally:
        if logf is not None:
            logf.close()

    if proc.returncode != 0:
        logger.error("[%s] Command failed: %s (exit %s)", name, printable, proc.returncode)
        raise SubPipelineError(name, cmd, proc.returncode)
    return proc.returncode
