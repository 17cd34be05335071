from __future__ import annotations

import gzip
import logging
import shutil
from pathlib import Path
from typing import Iterable, List


logger = logging.getLogger(__name__)


def gzip_file(fp: Path) -> Path:
    """Compress ``fp`` to ``fp.gz`` and remove the original, like ``gzip``."""
    gz = fp.with_name(fp.name + ".gz")
    with open(fp, "rb") as src, gzip.open(gz, "wb") as dst:
        shutil.copyfileobj(src, dst)
    fp.unlink()
    logger.info("Compressed %s", gz.name)
    return gz


def gzip_files(paths: Iterable[Path]) -> List[Path]:
    """Compress every existing, not yet compressed path; return the new paths."""
    out: List[Path] = []
    for p in paths:
        p = Path(p)
        if p.suffix == ".gz" or not p.is_file():
            continue
        out.append(gzip_file(p))
    return out
