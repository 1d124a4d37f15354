# Shared fixtures for the gpusnap test suite.
import numpy as np
import pytest

from gpusnap.config import SnapshotMode
from gpusnap.snapshot import SnapshotSession


@pytest.fixture
def update_session():
    return SnapshotSession(mode=SnapshotMode.UPDATE)


@pytest.fixture
def assert_session():
    return SnapshotSession(mode=SnapshotMode.ASSERT)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
