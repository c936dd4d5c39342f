"""
Target Naming: Derive the destination reference for a source image.

    nginx:latest              -> <namespace>/nginx:latest
    quay.io/coreos/etcd:v3.5  -> <namespace>/quay.io.coreos.etcd:v3.5
    foo/bar:1.0$myalias       -> <namespace>/myalias:1.0  (source foo/bar:1.0)

The namespace is the configured repository, or the username when no
repository is set. Slashes are flattened to dots because some registries
only accept single-level repository names.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from ..validation import ConfigurationError

OVERRIDE_DELIMITER = "$"
DIGEST_DELIMITER = "@"


class ResolvedName(NamedTuple):
    source: str
    target: str


def _split_override(source: str) -> ResolvedName:
    """Split ``base$alias`` into (base, alias:tag)."""
    if source.count(OVERRIDE_DELIMITER) > 1:
        raise ConfigurationError("only one '$' override is allowed", image=source)

    base, _, alias = source.partition(OVERRIDE_DELIMITER)
    base = base.strip()
    alias = alias.strip()
    if not base or not alias:
        raise ConfigurationError("override must look like 'image:tag$name'", image=source)
    if ":" in alias:
        raise ConfigurationError("override name must not carry a tag", image=source)

    if ":" not in base:
        raise ConfigurationError("image with an override must carry an explicit tag", image=source)
    tag = base.rsplit(":", 1)[1]
    # A trailing segment with a slash is a registry port, not a tag
    if not tag or "/" in tag:
        raise ConfigurationError("image with an override must carry an explicit tag", image=source)

    return ResolvedName(source=base, target=f"{alias}:{tag}")


def resolve_target(source: str, username: str, repository: Optional[str] = None) -> ResolvedName:
    """
    Resolve the effective source and the destination reference.

    Raises:
        ConfigurationError: malformed override syntax, a digest-pinned
            source, or no namespace
    """
    source = source.strip()
    # Platform entries are pulled as source@digest, so the source needs a tag
    if DIGEST_DELIMITER in source:
        raise ConfigurationError("digest-pinned sources are not supported, use a tag", image=source)
    if OVERRIDE_DELIMITER in source:
        source, stem = _split_override(source)
    else:
        stem = source

    namespace = repository or username
    if not namespace:
        raise ConfigurationError("no destination namespace (set repository or username)", image=source)

    return ResolvedName(source=source, target=f"{namespace}/{stem.replace('/', '.')}")
