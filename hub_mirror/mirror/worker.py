"""
Platform Sync Worker: Copy each platform variant of an image.

For every manifest-list entry the worker pulls ``source@digest``, tags the
pulled image for the destination and pushes it.

Two strategies share this worker:

- multi-arch (default): each platform goes to its own tag,
  ``<stem>-<os>-<arch>[-<variant>]``, and the pushed tags are later joined
  into a manifest list by the assembler. When two entries of one image map
  to the same tag (Windows images ship one entry per ``os.version``), the
  later entry gets ``-<os.version>`` appended.
- direct: every platform is tagged as ``<stem>`` itself. Each entry
  overwrites the previous one, so only the last platform processed ends up
  published under the final tag.

A failing entry is logged and skipped; the remaining entries still run.
"""

from __future__ import annotations

import logging
import re
from typing import Collection, List, Sequence

from ..models.manifest import ManifestEntry, Platform
from ..registry.docker_cli import DockerClient, DockerCommandError
from ..validation import PlatformSyncError

logger = logging.getLogger(__name__)

# Characters allowed in a docker tag
_TAG_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def platform_tag(stem: str, platform: Platform, with_os_version: bool = False) -> str:
    """Platform-qualified destination tag, e.g. ``alice/nginx:latest-linux-amd64``."""
    tag = f"{stem}-{platform.suffix}"
    if with_os_version and platform.os_version:
        tag += "-" + _TAG_UNSAFE.sub("_", platform.os_version)
    return tag


class PlatformSyncWorker:
    """Pull, retag and push the platform entries of one image."""

    def __init__(self, client: DockerClient, multi_arch: bool = True):
        self.client = client
        self.multi_arch = multi_arch

    def destination_for(self, stem: str, entry: ManifestEntry, taken: Collection[str] = ()) -> str:
        """
        Destination tag for one entry.

        ``taken`` holds the tags already pushed for this image.

        Raises:
            PlatformSyncError: no platform to build a tag from, or the tag
                would overwrite an earlier entry
        """
        if not self.multi_arch:
            return stem

        if entry.platform is None:
            raise PlatformSyncError(f"{entry.platform_label} has no platform to tag")

        destination = platform_tag(stem, entry.platform)
        if destination in taken:
            destination = platform_tag(stem, entry.platform, with_os_version=True)
        if destination in taken:
            raise PlatformSyncError(f"{entry.platform_label} duplicates the tag {destination} of an earlier entry")
        return destination

    def sync_entry(self, source: str, stem: str, entry: ManifestEntry, taken: Collection[str] = ()) -> str:
        """
        Copy one platform entry to the destination.

        Returns the pushed destination tag.

        Raises:
            PlatformSyncError: no usable tag, or pull, tag or push failed
        """
        pinned = f"{source}@{entry.digest}"
        platform = entry.platform_label
        try:
            destination = self.destination_for(stem, entry, taken)
        except PlatformSyncError as e:
            raise PlatformSyncError(e.message, image=source, platform=platform)

        steps = (
            ("pull", lambda: self.client.pull(pinned)),
            ("tag", lambda: self.client.tag(pinned, destination)),
            ("push", lambda: self.client.push(destination)),
        )
        for step, call in steps:
            try:
                call()
            except DockerCommandError as e:
                raise PlatformSyncError(
                    f"{step} failed for {platform}: {e.stderr or e}",
                    image=source,
                    platform=platform,
                )

        logger.info(f"[sync] {pinned} → {destination}", extra={"image": source, "platform": platform})
        return destination

    def sync(self, source: str, stem: str, entries: Sequence[ManifestEntry]) -> List[str]:
        """
        Copy every entry, skipping the ones that fail.

        Returns the destination tags that were pushed, in entry order.
        """
        if not self.multi_arch and len(entries) > 1:
            logger.warning(
                f"[sync] Direct mode with {len(entries)} platforms: each push overwrites "
                f"{stem}, only the last platform stays published",
                extra={"image": source},
            )

        pushed: List[str] = []
        for entry in entries:
            try:
                pushed.append(self.sync_entry(source, stem, entry, taken=pushed))
            except PlatformSyncError as e:
                logger.error(f"[sync] Skipping platform: {e}", extra={"image": source, "platform": e.platform})

        logger.info(f"[sync] {source}: {len(pushed)}/{len(entries)} platform(s) pushed")
        return pushed
