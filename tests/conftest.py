"""Shared fixtures for MultiversX mechanism tests."""

import pytest

from helpers import FakeBroadcaster, FakeSimulator


@pytest.fixture
def simulator():
    return FakeSimulator()


@pytest.fixture
def broadcaster():
    return FakeBroadcaster()
