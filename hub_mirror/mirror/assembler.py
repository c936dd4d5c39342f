"""
Manifest Assembler: Publish the destination manifest list.

Joins the platform tags pushed by the worker into one multi-arch list named
after the destination stem. `create --amend` replaces any list of the same
name left by an earlier run, and `push --purge` drops the local copy.

Either step failing leaves the destination half-published, so both raise
AssemblyError, which aborts the run.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ..registry.docker_cli import DockerClient, DockerCommandError
from ..validation import AssemblyError

logger = logging.getLogger(__name__)


def assemble(client: DockerClient, stem: str, platform_tags: Sequence[str]) -> None:
    """Create and push the manifest list ``stem`` from ``platform_tags``."""
    if not platform_tags:
        raise AssemblyError("no platform tags to assemble", image=stem)

    try:
        client.manifest_create(stem, list(platform_tags))
    except DockerCommandError as e:
        raise AssemblyError(f"manifest create failed: {e.stderr or e}", image=stem)

    try:
        client.manifest_push(stem)
    except DockerCommandError as e:
        raise AssemblyError(f"manifest push failed: {e.stderr or e}", image=stem)

    logger.info(f"[assemble] Published {stem} ({len(platform_tags)} platform(s))", extra={"image": stem})
