"""
Mirror Orchestrator: Mirror every source image concurrently.

One thread per source image runs the whole pipeline:

    resolve name → inspect → sync each platform → assemble → record

Successful images are collected into a lock-guarded result list. Soft
failures (inspect, single platform) end inside their thread; fatal ones are
handed back to the calling thread and re-raised there as soon as they are
seen, without waiting for the other threads.

## Usage

    from hub_mirror.mirror.orchestrator import MirrorOrchestrator, authenticate

    authenticate(client, settings)
    records = MirrorOrchestrator(settings, client).run()
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence, Tuple

from ..config import MirrorSettings
from ..models.record import MirrorRecord
from ..registry.docker_cli import DockerClient, DockerCommandError
from ..validation import AuthenticationError, ConfigurationError, EmptyResultError, MirrorError
from .assembler import assemble
from .inspector import inspect_manifest
from .naming import ResolvedName, resolve_target
from .worker import PlatformSyncWorker

logger = logging.getLogger(__name__)


def registry_host(repository: Optional[str]) -> Optional[str]:
    """
    Registry server for ``docker login``, taken from the repository.

    ``registry.example.com/team`` -> ``registry.example.com``; a plain
    namespace such as ``team`` lives on the default registry (None).
    """
    if not repository:
        return None
    host = repository.split("/", 1)[0]
    if "." in host or ":" in host or host == "localhost":
        return host
    return None


def authenticate(client: DockerClient, settings: MirrorSettings) -> None:
    """Log in to the destination registry before any mirroring starts."""
    settings.check_credentials()
    registry = registry_host(settings.repository)
    try:
        client.login(settings.username, settings.password, registry)
    except DockerCommandError as e:
        raise AuthenticationError(f"registry login failed for {settings.username}: {e.stderr or e}")
    logger.info(f"[mirror] Logged in as {settings.username} ({registry or 'default registry'})")


class _RunState:
    """Results and first fatal error of a single run, shared with its threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._results: List[Tuple[int, MirrorRecord]] = []
        self._fatal: Optional[BaseException] = None

    def add(self, index: int, record: MirrorRecord) -> None:
        with self._lock:
            self._results.append((index, record))

    def set_fatal(self, error: BaseException) -> None:
        with self._lock:
            if self._fatal is None:
                self._fatal = error

    def raise_if_fatal(self) -> None:
        with self._lock:
            error = self._fatal
        if error is not None:
            raise error

    def records(self) -> List[MirrorRecord]:
        """Collected records in input order."""
        with self._lock:
            results = sorted(self._results, key=lambda item: item[0])
        return [record for _, record in results]


class MirrorOrchestrator:
    """Fan out one mirroring thread per source image and collect the results."""

    def __init__(self, settings: MirrorSettings, client: DockerClient, poll_interval: float = 0.2):
        self.settings = settings
        self.client = client
        self.worker = PlatformSyncWorker(client, multi_arch=settings.multi_arch)
        self.poll_interval = poll_interval

    # ─── Validation ─────────────────────────────────────────

    def resolve_all(self) -> List[ResolvedName]:
        """Check the entry count and resolve every target name up front."""
        count = len(self.settings.content)
        if count > self.settings.max_content:
            raise ConfigurationError(
                f"content is too long: {count} entries, maxContent is {self.settings.max_content}"
            )

        return [
            resolve_target(source, self.settings.username, self.settings.repository)
            for source in self.settings.sources
        ]

    # ─── Per-image pipeline ─────────────────────────────────

    def mirror_image(self, name: ResolvedName) -> Optional[MirrorRecord]:
        """
        Run the pipeline for one image.

        Returns the record, or None when the image was skipped.
        Fatal MirrorErrors propagate.
        """
        source, target = name
        logger.info(f"[mirror] Start {source} → {target}", extra={"image": source})

        manifest = inspect_manifest(self.client, source)
        if manifest is None:
            return None

        pushed = self.worker.sync(source, target, manifest.entries)
        if not pushed:
            logger.warning(f"[mirror] Skipping {source}: no platform could be copied", extra={"image": source})
            return None

        if self.settings.multi_arch:
            assemble(self.client, target, pushed)

        logger.info(f"[mirror] Done {source} → {target}", extra={"image": source})
        return MirrorRecord(source=source, target=target, repository=self.settings.repository)

    def _run_task(self, state: _RunState, index: int, name: ResolvedName) -> None:
        try:
            record = self.mirror_image(name)
        except MirrorError as e:
            if not e.fatal:
                logger.warning(f"[mirror] Skipping {name.source}: {e}", extra={"image": name.source})
                return
            state.set_fatal(e)
            return
        except Exception as e:  # noqa: BLE001
            logger.exception(f"[mirror] Unexpected error while mirroring {name.source}")
            state.set_fatal(e)
            return

        if record is not None:
            state.add(index, record)

    # ─── Run ────────────────────────────────────────────────

    def run(self, names: Optional[Sequence[ResolvedName]] = None) -> List[MirrorRecord]:
        """
        Mirror every source and return the records in input order.

        Args:
            names: Names already returned by resolve_all(); resolved here
                   when omitted.

        Raises:
            ConfigurationError: too many entries or a malformed override
            ManifestParseError, AssemblyError: raised by any image
            EmptyResultError: no image was mirrored
        """
        if names is None:
            names = self.resolve_all()

        # Threads left over from an aborted run keep writing to their own state
        state = _RunState()
        threads = [
            threading.Thread(
                target=self._run_task,
                args=(state, index, name),
                name=f"mirror-{index}",
                daemon=True,
            )
            for index, name in enumerate(names)
        ]
        logger.info(f"[mirror] Mirroring {len(threads)} image(s)")
        for thread in threads:
            thread.start()

        for thread in threads:
            while thread.is_alive():
                thread.join(self.poll_interval)
                state.raise_if_fatal()
        state.raise_if_fatal()

        records = state.records()
        if not records:
            raise EmptyResultError("no image was mirrored successfully")

        logger.info(f"[mirror] Mirrored {len(records)}/{len(names)} image(s)")
        return records
