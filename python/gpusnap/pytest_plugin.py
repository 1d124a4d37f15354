# python/gpusnap/pytest_plugin.py
# pytest integration: one snapshot session per test run and a `snapshot` fixture.
# Enable with `pytest_plugins = ["gpusnap.pytest_plugin"]` in a root conftest.py.
# RELEVANT FILES: python/gpusnap/snapshot/session.py, python/gpusnap/snapshot/assertion.py, tests/test_plugin.py

from __future__ import annotations

import pytest

from .config import SnapshotMode, load_snapshot_config, mode_from_env
from .snapshot import SnapshotAssertion, SnapshotSession

_SESSION_KEY = pytest.StashKey[SnapshotSession]()


def pytest_addoption(parser):
    group = parser.getgroup("gpusnap", "GPU capture snapshots")
    group.addoption(
        "--snapshot-update",
        "--update",
        action="store_true",
        dest="snapshot_update",
        default=False,
        help="Overwrite stored snapshots instead of comparing against them",
    )
    parser.addini(
        "gpusnap_directory",
        help="Name of the snapshot directory created next to each test file",
        default="__snapshots__",
    )
    parser.addini(
        "gpusnap_default_extension",
        help="Extension for snapshots that do not request one",
        default="snap",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "gpu: tests that need a real GPU device"
    )
    snap_config = load_snapshot_config(
        {
            "directory_name": config.getini("gpusnap_directory"),
            "default_extension": config.getini("gpusnap_default_extension"),
        }
    )
    update = config.getoption("snapshot_update") or mode_from_env() is SnapshotMode.UPDATE
    mode = SnapshotMode.UPDATE if update else SnapshotMode.ASSERT
    config.stash[_SESSION_KEY] = SnapshotSession(snap_config, mode=mode)


def get_snapshot_session(config) -> SnapshotSession:
    """Return the snapshot session created for this pytest run."""
    return config.stash[_SESSION_KEY]


def _test_identity(node) -> str:
    """Node ID without the module part, e.g. ``TestTwo::test_render[8]``."""
    parts = node.nodeid.split("::")
    return "::".join(parts[1:]) or node.name


@pytest.fixture
def snapshot(request) -> SnapshotAssertion:
    """Snapshot assertions keyed by the requesting test's file and node ID."""
    return SnapshotAssertion(
        request.path,
        _test_identity(request.node),
        session=get_snapshot_session(request.config),
    )


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    session = config.stash.get(_SESSION_KEY, None)
    if session is None:
        return
    written = session.written
    if not written:
        return
    terminalreporter.write_sep("-", "gpusnap")
    terminalreporter.write_line(f"{len(written)} snapshot(s) written")
    if config.getoption("verbose") > 0:
        for path in written:
            terminalreporter.write_line(f"  {path}")
