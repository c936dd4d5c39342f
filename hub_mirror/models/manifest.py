"""
Manifest Models: Pydantic schemas for `docker manifest inspect` output.

Only the manifest list (OCI index / Docker manifest list v2) shape is
modelled. Field names follow the registry JSON; Python attributes are
snake_case with aliases.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Platform(BaseModel):
    """One OS/architecture/variant combination."""

    model_config = ConfigDict(populate_by_name=True)

    architecture: str
    os: str
    os_version: Optional[str] = Field(default=None, alias="os.version")
    variant: Optional[str] = None

    @property
    def suffix(self) -> str:
        """Tag suffix for this platform, e.g. ``linux-arm-v7``."""
        parts = [self.os, self.architecture]
        if self.variant:
            parts.append(self.variant)
        return "-".join(parts)

    def __str__(self) -> str:
        label = f"{self.os}/{self.architecture}"
        if self.variant:
            label += f"/{self.variant}"
        return label


class ManifestEntry(BaseModel):
    """A single platform-specific manifest referenced from a list."""

    model_config = ConfigDict(populate_by_name=True)

    media_type: str = Field(alias="mediaType")
    size: int
    digest: str
    platform: Optional[Platform] = None

    @property
    def platform_label(self) -> str:
        return str(self.platform) if self.platform is not None else f"unknown platform ({self.digest})"


class ManifestList(BaseModel):
    """Multi-platform manifest list for one reference."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(alias="schemaVersion")
    media_type: str = Field(default="", alias="mediaType")
    entries: List[ManifestEntry] = Field(default_factory=list, alias="manifests")

    @field_validator("entries")
    @classmethod
    def _unique_digests(cls, entries: List[ManifestEntry]) -> List[ManifestEntry]:
        seen = set()
        for entry in entries:
            if entry.digest in seen:
                raise ValueError(f"duplicate digest in manifest list: {entry.digest}")
            seen.add(entry.digest)
        return entries

    @property
    def digests(self) -> List[str]:
        return [entry.digest for entry in self.entries]
