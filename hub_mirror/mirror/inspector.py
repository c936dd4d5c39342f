"""
Manifest Inspector: Fetch and parse the manifest list for a source image.

An inspect that fails (missing image, unreachable registry, timeout) only
skips that image. An inspect that succeeds but returns something that is
not a manifest list aborts the run.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import ValidationError

from ..models.manifest import ManifestList
from ..registry.docker_cli import DockerClient, DockerCommandError
from ..validation import InspectError, ManifestParseError

logger = logging.getLogger(__name__)


def parse_manifest_list(raw: str, source: str) -> ManifestList:
    """Parse `docker manifest inspect` output."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"inspect output is not JSON: {e}", image=source)

    try:
        return ManifestList.model_validate(data)
    except ValidationError as e:
        raise ManifestParseError(
            "inspect output is not a manifest list",
            image=source,
            details={"errors": e.errors()},
        )


def fetch_manifest_list(client: DockerClient, source: str) -> ManifestList:
    """
    Inspect and parse, raising on any failure.

    Raises:
        InspectError: the inspect call failed, or the list has no entries
        ManifestParseError: the payload is not a manifest list
    """
    try:
        raw = client.manifest_inspect(source)
    except DockerCommandError as e:
        raise InspectError(f"manifest inspect failed: {e.stderr or e}", image=source)

    manifest = parse_manifest_list(raw, source)
    if not manifest.entries:
        raise InspectError("not a multi-platform manifest list (no entries)", image=source)
    return manifest


def inspect_manifest(client: DockerClient, source: str) -> Optional[ManifestList]:
    """Return the manifest list, or None when the image should be skipped."""
    try:
        manifest = fetch_manifest_list(client, source)
    except InspectError as e:
        logger.warning(f"[inspect] Skipping {source}: {e.message}", extra={"image": source})
        return None

    platforms = ", ".join(entry.platform_label for entry in manifest.entries)
    logger.info(f"[inspect] {source}: {len(manifest.entries)} platform(s) [{platforms}]")
    return manifest
