"""
Tests for the docker CLI transport.

subprocess.run is mocked, so no docker binary is needed.
"""

import subprocess
from unittest import mock

import pytest

from hub_mirror.registry.docker_cli import DockerClient, DockerCommandError


def _result(returncode: int = 0, stdout: str = "", stderr: str = ""):
    return subprocess.CompletedProcess(args=["docker"], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def mock_run():
    with mock.patch("hub_mirror.registry.docker_cli.subprocess.run") as run:
        run.return_value = _result()
        yield run


class TestCommands:

    def test_pull(self, mock_run):
        DockerClient().pull("nginx@sha256:abc")
        assert mock_run.call_args[0][0] == ["docker", "pull", "nginx@sha256:abc"]

    def test_tag(self, mock_run):
        DockerClient().tag("nginx@sha256:abc", "alice/nginx:latest-linux-amd64")
        assert mock_run.call_args[0][0] == ["docker", "tag", "nginx@sha256:abc", "alice/nginx:latest-linux-amd64"]

    def test_push(self, mock_run):
        DockerClient(docker_bin="/usr/local/bin/docker").push("alice/nginx:latest")
        assert mock_run.call_args[0][0] == ["/usr/local/bin/docker", "push", "alice/nginx:latest"]

    def test_manifest_create_uses_amend(self, mock_run):
        DockerClient().manifest_create("alice/nginx:latest", ["alice/nginx:latest-linux-amd64", "alice/nginx:latest-linux-arm64-v8"])
        assert mock_run.call_args[0][0] == [
            "docker", "manifest", "create", "--amend", "alice/nginx:latest",
            "alice/nginx:latest-linux-amd64", "alice/nginx:latest-linux-arm64-v8",
        ]

    def test_manifest_push_purges(self, mock_run):
        DockerClient().manifest_push("alice/nginx:latest")
        assert mock_run.call_args[0][0] == ["docker", "manifest", "push", "--purge", "alice/nginx:latest"]

    def test_manifest_inspect_returns_stdout(self, mock_run):
        mock_run.return_value = _result(stdout='{"schemaVersion": 2}')
        assert DockerClient().manifest_inspect("nginx:latest") == '{"schemaVersion": 2}'
        assert mock_run.call_args[0][0] == ["docker", "manifest", "inspect", "nginx:latest"]

    def test_timeout_passed(self, mock_run):
        DockerClient(timeout=42).pull("nginx")
        assert mock_run.call_args[1]["timeout"] == 42


class TestLogin:

    def test_password_goes_to_stdin(self, mock_run):
        DockerClient().login("alice", "s3cret")
        cmd = mock_run.call_args[0][0]
        assert cmd == ["docker", "login", "--username", "alice", "--password-stdin"]
        assert "s3cret" not in cmd
        assert mock_run.call_args[1]["input"] == "s3cret"

    def test_registry_appended(self, mock_run):
        DockerClient().login("alice", "s3cret", "registry.example.com")
        assert mock_run.call_args[0][0][-1] == "registry.example.com"


class TestFailures:

    def test_nonzero_exit_raises(self, mock_run):
        mock_run.return_value = _result(returncode=1, stderr="manifest unknown\n")
        with pytest.raises(DockerCommandError) as exc:
            DockerClient().pull("nginx:nope")
        assert exc.value.returncode == 1
        assert exc.value.stderr == "manifest unknown"
        assert exc.value.cmd == ["docker", "pull", "nginx:nope"]

    def test_stdout_used_when_stderr_empty(self, mock_run):
        mock_run.return_value = _result(returncode=1, stdout="denied")
        with pytest.raises(DockerCommandError) as exc:
            DockerClient().push("alice/x")
        assert exc.value.stderr == "denied"

    def test_timeout_raises(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="docker", timeout=5)
        with pytest.raises(DockerCommandError) as exc:
            DockerClient(timeout=5).pull("nginx")
        assert exc.value.returncode is None
        assert "timed out" in exc.value.stderr

    def test_missing_binary_raises(self, mock_run):
        mock_run.side_effect = FileNotFoundError("docker")
        with pytest.raises(DockerCommandError):
            DockerClient().pull("nginx")
