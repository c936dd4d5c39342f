"""
Hub Mirror: CLI Entry Point

Usage:
    hub-mirror --content '{"hub-mirror": ["nginx:latest"]}' \
        --username alice --password "$TOKEN" [--repository registry.example.com/ns]
    python -m hub_mirror --help
"""

from __future__ import annotations

# Load .env file FIRST, before options fall back to environment variables
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import logging

import click

from .config import DEFAULT_MAX_CONTENT, DEFAULT_OUTPUT_PATH, MirrorSettings
from .logging_config import setup_logging
from .mirror.orchestrator import MirrorOrchestrator, authenticate
from .registry.docker_cli import DEFAULT_TIMEOUT, DockerClient
from .restore import write_restore_script
from .validation import MirrorError

logger = logging.getLogger(__name__)


@click.command()
@click.option("--content", envvar="HUB_MIRROR_CONTENT", required=True,
              help='Source images as JSON: {"hub-mirror": [...]}')
@click.option("--maxContent", "--max-content", "max_content", envvar="HUB_MIRROR_MAX_CONTENT",
              type=int, default=DEFAULT_MAX_CONTENT, show_default=True, help="Maximum number of source images")
@click.option("--username", envvar="HUB_MIRROR_USERNAME", default="",
              help="Registry username (default destination namespace)")
@click.option("--password", envvar="HUB_MIRROR_PASSWORD", default="", help="Registry password or token")
@click.option("--outputPath", "--output-path", "output_path", envvar="HUB_MIRROR_OUTPUT_PATH",
              default=DEFAULT_OUTPUT_PATH, show_default=True, help="Where to write the restore script")
@click.option("--repository", envvar="HUB_MIRROR_REPOSITORY", default="",
              help="Destination registry/namespace; defaults to the username namespace")
@click.option("--multi-arch/--direct", "multi_arch", envvar="HUB_MIRROR_MULTI_ARCH", default=True,
              show_default=True, help="Per-platform tags + manifest list, or direct retag")
@click.option("--docker-bin", envvar="HUB_MIRROR_DOCKER_BIN", default="docker", help="docker executable")
@click.option("--timeout", envvar="HUB_MIRROR_TIMEOUT", type=int, default=DEFAULT_TIMEOUT,
              show_default=True, help="Per-command timeout in seconds")
@click.option("--log-level", envvar="LOG_LEVEL", default="INFO", help="DEBUG, INFO, WARNING, ERROR")
@click.option("--log-format", envvar="LOG_FORMAT", type=click.Choice(["text", "json"]), default="text")
def cli(
    content: str,
    max_content: int,
    username: str,
    password: str,
    output_path: str,
    repository: str,
    multi_arch: bool,
    docker_bin: str,
    timeout: int,
    log_level: str,
    log_format: str,
) -> None:
    """Mirror multi-platform images and write a restore script."""
    setup_logging(log_level, log_format)

    try:
        click.echo("Validating content")
        settings = MirrorSettings.from_options(
            content=content,
            username=username,
            password=password,
            max_content=max_content,
            output_path=output_path,
            repository=repository,
            multi_arch=multi_arch,
        )
        click.echo(f"  {len(settings.sources)} image(s) → {settings.namespace or '?'}/")

        client = DockerClient(docker_bin=docker_bin, timeout=timeout)
        orchestrator = MirrorOrchestrator(settings, client)
        # Count and naming problems should fail before the login round-trip
        names = orchestrator.resolve_all()

        click.echo("Logging in to registry")
        authenticate(client, settings)

        click.echo("Mirroring images")
        records = orchestrator.run(names)

        path = write_restore_script(settings.output_path, records)
    except MirrorError as e:
        logger.error(f"Mirror run aborted: {e}")
        raise click.ClickException(str(e))

    click.echo("")
    for record in records:
        click.echo(f"  {record.source} → {record.target}")
    click.secho(f"✓ Mirrored {len(records)} image(s), restore script: {path}", fg="green")


if __name__ == "__main__":
    cli()
