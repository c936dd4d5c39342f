"""
Test helpers: manifest payload builders and a scripted docker client.

FakeDockerClient stands in for DockerClient so the pipeline can run
without a docker daemon or registry.
"""

from __future__ import annotations

import json
import threading
from typing import Dict, List, Optional, Tuple

from hub_mirror.registry.docker_cli import DockerCommandError


AMD64 = {"architecture": "amd64", "os": "linux"}
ARM64 = {"architecture": "arm64", "os": "linux", "variant": "v8"}
ARMV7 = {"architecture": "arm", "os": "linux", "variant": "v7"}
WINDOWS_1809 = {"architecture": "amd64", "os": "windows", "os.version": "10.0.17763.5329"}
WINDOWS_2022 = {"architecture": "amd64", "os": "windows", "os.version": "10.0.20348.2227"}


def manifest_json(*platforms: Optional[dict]) -> str:
    """Build `docker manifest inspect` output; None leaves out the platform."""
    entries = []
    for i, platform in enumerate(platforms, start=1):
        entry = {
            "mediaType": "application/vnd.docker.distribution.manifest.v2+json",
            "size": 1000 + i,
            "digest": digest(i),
        }
        if platform is not None:
            entry["platform"] = platform
        entries.append(entry)

    return json.dumps({
        "schemaVersion": 2,
        "mediaType": "application/vnd.docker.distribution.manifest.list.v2+json",
        "manifests": entries,
    })


def digest(n: int) -> str:
    """Digest of the n-th (1-based) entry built by manifest_json."""
    return f"sha256:{n:064x}"


class FakeDockerClient:
    """Records every call; fails the ones listed in ``failures``."""

    def __init__(
        self,
        manifests: Optional[Dict[str, str]] = None,
        failures: Optional[Dict[Tuple[str, str], str]] = None,
    ):
        self.manifests = manifests or {}
        self.failures = failures or {}
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def _call(self, op: str, key: str, *args) -> None:
        with self._lock:
            self.calls.append((op, key) + args)
        if (op, key) in self.failures:
            raise DockerCommandError(["docker", op, key], 1, self.failures[(op, key)])

    def ops(self, op: str) -> List[tuple]:
        with self._lock:
            return [call for call in self.calls if call[0] == op]

    def login(self, username, password, registry=None):
        self._call("login", username, registry)

    def manifest_inspect(self, ref):
        self._call("inspect", ref)
        if ref not in self.manifests:
            raise DockerCommandError(["docker", "manifest", "inspect", ref], 1, "no such manifest")
        return self.manifests[ref]

    def pull(self, ref):
        self._call("pull", ref)

    def tag(self, source, target):
        self._call("tag", source, target)

    def push(self, ref):
        self._call("push", ref)

    def manifest_create(self, name, refs):
        self._call("manifest_create", name, list(refs))

    def manifest_push(self, name):
        self._call("manifest_push", name)
