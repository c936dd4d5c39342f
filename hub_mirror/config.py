"""
Mirror Configuration: One immutable settings value per run.

Settings are built once from CLI options (which fall back to HUB_MIRROR_*
environment variables) and passed explicitly into the orchestrator.

The image list arrives as a JSON payload:

    {"hub-mirror": ["nginx:latest", "foo/bar:1.0$myalias"]}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .validation import ConfigurationError

logger = logging.getLogger(__name__)

CONTENT_KEY = "hub-mirror"
DEFAULT_MAX_CONTENT = 10
DEFAULT_OUTPUT_PATH = "output.sh"


def parse_content(payload: str) -> List[str]:
    """
    Parse the content JSON into the raw list of source entries.

    Empty entries are kept here; they count toward the max-content limit
    and are filtered out by the orchestrator.
    """
    try:
        data: Any = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"content is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f'content must be a JSON object with a "{CONTENT_KEY}" list')

    entries = data.get(CONTENT_KEY, [])
    if entries is None:
        entries = []
    if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
        raise ConfigurationError(f'"{CONTENT_KEY}" must be a list of strings')

    return [e.strip() for e in entries]


@dataclass(frozen=True)
class MirrorSettings:
    """Configuration for a single mirror run."""

    content: Tuple[str, ...]
    username: str
    password: str = field(default="", repr=False)
    max_content: int = DEFAULT_MAX_CONTENT
    output_path: Path = Path(DEFAULT_OUTPUT_PATH)
    repository: Optional[str] = None
    multi_arch: bool = True

    @classmethod
    def from_options(
        cls,
        content: str,
        username: str = "",
        password: str = "",
        max_content: int = DEFAULT_MAX_CONTENT,
        output_path: str = DEFAULT_OUTPUT_PATH,
        repository: Optional[str] = None,
        multi_arch: bool = True,
    ) -> "MirrorSettings":
        """Build settings from raw option values."""
        if max_content < 0:
            raise ConfigurationError(f"maxContent must be non-negative, got {max_content}")

        entries = parse_content(content)
        settings = cls(
            content=tuple(entries),
            username=(username or "").strip(),
            password=password or "",
            max_content=max_content,
            output_path=Path(output_path or DEFAULT_OUTPUT_PATH),
            repository=(repository or "").strip() or None,
            multi_arch=multi_arch,
        )
        logger.debug(
            f"Settings loaded: {len(entries)} entries, max={max_content}, "
            f"namespace={settings.namespace}, multi_arch={multi_arch}"
        )
        return settings

    @property
    def namespace(self) -> str:
        """Destination prefix: the repository if set, else the username."""
        return self.repository or self.username

    @property
    def sources(self) -> List[str]:
        """Non-empty source entries in input order."""
        return [entry for entry in self.content if entry]

    def check_credentials(self) -> None:
        """Fail before any registry call when credentials are missing."""
        if not self.username or not self.password:
            raise ConfigurationError("username or password cannot be empty")
