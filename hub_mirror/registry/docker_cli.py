"""
Docker CLI: Registry transport through the `docker` binary.

Every registry capability the mirror needs is one docker subcommand:

    login             docker login --username U --password-stdin [REGISTRY]
    manifest inspect  docker manifest inspect REF
    pull / tag / push docker pull|tag|push ...
    manifest create   docker manifest create --amend LIST TAG...
    manifest push     docker manifest push --purge LIST

The client holds no mutable state after construction, so one instance is
shared by all mirroring threads.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 600


class DockerCommandError(Exception):
    """A docker subcommand exited non-zero, timed out, or could not start."""

    def __init__(self, args: Sequence[str], returncode: Optional[int], stderr: str = ""):
        self.cmd = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or "no output"
        super().__init__(f"{' '.join(self.cmd)} failed (exit {returncode}): {detail}")


class DockerClient:
    """Thin wrapper around the docker CLI."""

    def __init__(self, docker_bin: str = "docker", timeout: int = DEFAULT_TIMEOUT):
        self.docker_bin = docker_bin
        self.timeout = timeout

    def _run(self, *args: str, input: Optional[str] = None, redact: bool = False) -> subprocess.CompletedProcess:
        """Run a docker command; raise DockerCommandError unless it exits 0."""
        cmd = [self.docker_bin] + list(args)
        logger.debug(f"[docker] {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                input=input,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise DockerCommandError(cmd, None, f"timed out after {self.timeout}s")
        except OSError as e:
            raise DockerCommandError(cmd, None, str(e))

        if result.returncode != 0:
            raise DockerCommandError(cmd, result.returncode, result.stderr or result.stdout)

        if result.stdout and not redact:
            logger.debug(f"[docker] {result.stdout.strip()}")
        return result

    # ─── Session ────────────────────────────────────────────

    def login(self, username: str, password: str, registry: Optional[str] = None) -> None:
        args = ["login", "--username", username, "--password-stdin"]
        if registry:
            args.append(registry)
        self._run(*args, input=password, redact=True)

    # ─── Images ─────────────────────────────────────────────

    def pull(self, ref: str) -> None:
        self._run("pull", ref)

    def tag(self, source: str, target: str) -> None:
        self._run("tag", source, target)

    def push(self, ref: str) -> None:
        self._run("push", ref)

    # ─── Manifest lists ─────────────────────────────────────

    def manifest_inspect(self, ref: str) -> str:
        """Return the raw manifest JSON for a reference."""
        return self._run("manifest", "inspect", ref, redact=True).stdout

    def manifest_create(self, name: str, refs: List[str]) -> None:
        """Create or replace (amend) a local manifest list."""
        self._run("manifest", "create", "--amend", name, *refs)

    def manifest_push(self, name: str) -> None:
        """Push a manifest list and drop the local copy."""
        self._run("manifest", "push", "--purge", name)
