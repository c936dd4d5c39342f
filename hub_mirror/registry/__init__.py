"""
Registry transport used by the mirror pipeline.
"""

from hub_mirror.registry.docker_cli import DockerClient, DockerCommandError

__all__ = ["DockerClient", "DockerCommandError"]
