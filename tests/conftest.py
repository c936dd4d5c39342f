"""
Shared fixtures for mirror tests.
"""

from __future__ import annotations

import pytest

from hub_mirror.config import MirrorSettings

from helpers import FakeDockerClient


@pytest.fixture
def fake_client():
    return FakeDockerClient()


@pytest.fixture
def make_settings():
    """Factory for MirrorSettings with test defaults."""

    def _make(*sources: str, **overrides) -> MirrorSettings:
        values = {
            "content": tuple(sources),
            "username": "alice",
            "password": "secret",
        }
        values.update(overrides)
        return MirrorSettings(**values)

    return _make
