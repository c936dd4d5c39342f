"""
Restore Script: Shell script that brings mirrored images back under their
original names.

For each record the script pulls the mirrored target and tags it as the
source reference, so ``docker run <source>`` works on the consumer's side
without touching the source registry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from .models.record import MirrorRecord
from .validation import OutputError

logger = logging.getLogger(__name__)

SCRIPT_HEADER = "#!/bin/sh\n"


def render_block(record: MirrorRecord) -> str:
    lines: List[str] = []
    if record.repository:
        lines.append("# if your repository is private, please login...")
        lines.append(f"# docker login {record.repository} --username={{your username}}")
    lines.append(f"docker pull {record.target}")
    lines.append(f"docker tag {record.target} {record.source}")
    return "\n".join(lines) + "\n"


def render_restore_script(records: Iterable[MirrorRecord]) -> str:
    """Render the full script, one block per record."""
    blocks = [render_block(record) for record in records]
    return SCRIPT_HEADER + "\n" + "\n".join(blocks)


def write_restore_script(path: Path, records: Iterable[MirrorRecord]) -> Path:
    """
    Write the restore script and mark it executable.

    Uses atomic write (write to temp, then rename).

    Raises:
        OutputError: the directory or file could not be written
    """
    records = list(records)
    temp_path = path.with_name(path.name + ".tmp")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with temp_path.open("w", encoding="utf-8") as f:
            f.write(render_restore_script(records))
        temp_path.chmod(0o755)
        temp_path.replace(path)
    except OSError as e:
        # Don't leave a partial script behind
        if temp_path.exists():
            temp_path.unlink()
        raise OutputError(f"cannot write restore script to {path}: {e}")

    logger.info(f"Restore script written: {len(records)} image(s) → {path}")
    return path
