"""Data models for manifests and mirror results."""

from hub_mirror.models.manifest import ManifestEntry, ManifestList, Platform
from hub_mirror.models.record import MirrorRecord

__all__ = ["ManifestEntry", "ManifestList", "Platform", "MirrorRecord"]
