"""
Tests for the manifest inspector.
"""

import pytest

from helpers import AMD64, ARM64, FakeDockerClient, manifest_json
from hub_mirror.mirror.inspector import fetch_manifest_list, inspect_manifest, parse_manifest_list
from hub_mirror.validation import InspectError, ManifestParseError


class TestParse:

    def test_valid_list(self):
        manifest = parse_manifest_list(manifest_json(AMD64, ARM64), "nginx:latest")
        assert len(manifest.entries) == 2
        assert manifest.entries[1].platform.variant == "v8"

    def test_not_json_is_fatal(self):
        with pytest.raises(ManifestParseError) as exc:
            parse_manifest_list("not json", "nginx:latest")
        assert exc.value.fatal is True
        assert exc.value.image == "nginx:latest"

    def test_wrong_shape_is_fatal(self):
        with pytest.raises(ManifestParseError):
            parse_manifest_list('{"manifests": "nope"}', "nginx:latest")

    def test_json_array_is_fatal(self):
        with pytest.raises(ManifestParseError):
            parse_manifest_list("[]", "nginx:latest")


class TestInspect:

    def test_returns_manifest(self):
        client = FakeDockerClient(manifests={"nginx:latest": manifest_json(AMD64)})
        manifest = inspect_manifest(client, "nginx:latest")
        assert manifest is not None
        assert manifest.entries[0].platform.architecture == "amd64"
        assert client.ops("inspect") == [("inspect", "nginx:latest")]

    def test_inspect_failure_skips(self):
        client = FakeDockerClient()
        assert inspect_manifest(client, "missing:1") is None

    def test_inspect_failure_is_soft_error(self):
        with pytest.raises(InspectError) as exc:
            fetch_manifest_list(FakeDockerClient(), "missing:1")
        assert exc.value.fatal is False

    def test_single_platform_manifest_skips(self):
        client = FakeDockerClient(manifests={"app:1": '{"schemaVersion": 2, "mediaType": "x", "config": {}}'})
        assert inspect_manifest(client, "app:1") is None

    def test_parse_failure_propagates(self):
        client = FakeDockerClient(manifests={"app:1": "garbage"})
        with pytest.raises(ManifestParseError):
            inspect_manifest(client, "app:1")
