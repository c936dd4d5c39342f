"""
Validation: Error taxonomy for a mirror run.

Every failure in the mirroring pipeline is a ``MirrorError``. The ``fatal``
flag decides whether the error aborts the whole run or is absorbed at the
task/entry boundary where it was raised.

## Usage

    from hub_mirror.validation import MirrorError

    try:
        records = orchestrator.run()
    except MirrorError as e:
        print(f"Mirror failed: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class MirrorError(Exception):
    """Base class for all mirror failures."""

    fatal: bool = True

    def __init__(self, message: str, image: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.image = image
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.image:
            return f"{self.image}: {self.message}"
        return self.message


class ConfigurationError(MirrorError):
    """Raised when configuration is missing or invalid."""


class AuthenticationError(MirrorError):
    """Raised when the registry login is rejected."""


class InspectError(MirrorError):
    """Manifest inspect failed; the image is skipped."""

    fatal = False


class ManifestParseError(MirrorError):
    """Inspect succeeded but returned something that is not a manifest list."""


class PlatformSyncError(MirrorError):
    """Pull, tag or push failed for one platform entry; the entry is skipped."""

    fatal = False

    def __init__(self, message: str, image: Optional[str] = None, platform: Optional[str] = None, **kwargs):
        self.platform = platform
        super().__init__(message, image=image, **kwargs)


class AssemblyError(MirrorError):
    """Manifest list create or push failed at the destination."""


class EmptyResultError(MirrorError):
    """No image was mirrored successfully."""


class OutputError(MirrorError):
    """The restore script could not be written."""
