"""
Mirror Record: Result of one fully mirrored image.

A record is only created after inspect, every platform sync and the
manifest assembly have succeeded for the image.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class MirrorRecord(BaseModel):
    """Source/target pair written to the restore script."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    repository: Optional[str] = None
