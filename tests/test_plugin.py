"""
pytest plugin tests for gpusnap

Runs small inline test sessions with pytester to check the `snapshot`
fixture end to end: recording with --snapshot-update, passing on a re-run,
and failing with a readable message when pixels change.

The inner test modules read their input from data files so that only data,
never the module source, changes between runs.
"""
import pytest

pytestmark = pytest.mark.usefixtures("clean_update_env")


@pytest.fixture
def clean_update_env(monkeypatch):
    monkeypatch.delenv("GPUSNAP_UPDATE", raising=False)


_BYTES_TEST = """
from pathlib import Path

def test_values(snapshot):
    payload = (Path(__file__).parent / "payload.bin").read_bytes()
    snapshot.assert_bytes(payload)
    snapshot.assert_json({"materials": [0, 1, 2]})
"""

_CAPTURE_TEST = """
from pathlib import Path

from gpusnap import create_capture

class Buffer:
    def __init__(self, data):
        self.data = data
    def map_sync(self, mode):
        pass
    def read_mapped(self):
        return self.data
    def unmap(self):
        pass

def _frame(capture, value):
    row = bytes([value]) * (capture.width * 4)
    pad = bytes(capture.bytes_per_row - len(row))
    return (row + pad) * capture.height

def test_clear(snapshot):
    value = int((Path(__file__).parent / "value.txt").read_text())
    capture = create_capture(32, 32, format="rgba8unorm")
    snapshot.assert_capture(Buffer(_frame(capture, value)), capture)
"""


@pytest.fixture
def snap_project(pytester):
    pytester.makeconftest('pytest_plugins = ["gpusnap.pytest_plugin"]')
    pytester.makepyfile(test_render=_BYTES_TEST)
    return pytester


def _set_payload(pytester, payload: bytes):
    (pytester.path / "payload.bin").write_bytes(payload)


def test_update_then_assert(snap_project):
    _set_payload(snap_project, b"abc")

    result = snap_project.runpytest("--snapshot-update")
    result.assert_outcomes(passed=1)
    result.stdout.fnmatch_lines(["*2 snapshot(s) written*"])

    snaps = snap_project.path / "__snapshots__"
    assert sorted(p.name for p in snaps.iterdir()) == [
        "test_render.py.test-values.0.snap",
        "test_render.py.test-values.1.snap",
    ]
    assert (snaps / "test_render.py.test-values.0.snap").read_bytes() == b"abc"
    assert (snaps / "test_render.py.test-values.1.snap").read_bytes() == b'{"materials":[0,1,2]}'

    result = snap_project.runpytest()
    result.assert_outcomes(passed=1)
    assert "snapshot(s) written" not in result.stdout.str()


def test_update_alias(snap_project):
    _set_payload(snap_project, b"abc")
    snap_project.runpytest("--update").assert_outcomes(passed=1)
    snap_project.runpytest().assert_outcomes(passed=1)


def test_missing_snapshot_fails(snap_project):
    _set_payload(snap_project, b"abc")

    result = snap_project.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*SnapshotMissingError*"])


def test_changed_bytes_fail_with_offset(snap_project):
    _set_payload(snap_project, b"abc")
    snap_project.runpytest("--snapshot-update").assert_outcomes(passed=1)

    _set_payload(snap_project, b"abd")
    result = snap_project.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*Snapshot content mismatch at byte 2: expected 99, got 100*"])


def test_length_change_fails(snap_project):
    _set_payload(snap_project, b"abc")
    snap_project.runpytest("--snapshot-update").assert_outcomes(passed=1)

    _set_payload(snap_project, b"abcd")
    result = snap_project.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*Snapshot length mismatch: expected 3, got 4*"])


def test_env_var_enables_update(snap_project, monkeypatch):
    _set_payload(snap_project, b"abc")
    monkeypatch.setenv("GPUSNAP_UPDATE", "1")
    snap_project.runpytest().assert_outcomes(passed=1)
    monkeypatch.delenv("GPUSNAP_UPDATE")
    snap_project.runpytest().assert_outcomes(passed=1)


def test_capture_snapshot_is_png(pytester):
    pytester.makeconftest('pytest_plugins = ["gpusnap.pytest_plugin"]')
    pytester.makepyfile(test_capture=_CAPTURE_TEST)
    value_file = pytester.path / "value.txt"

    value_file.write_text("200")
    pytester.runpytest("--snapshot-update").assert_outcomes(passed=1)
    png = pytester.path / "__snapshots__" / "test_capture.py.test-clear.0.png"
    assert png.read_bytes().startswith(b"\x89PNG")

    pytester.runpytest().assert_outcomes(passed=1)

    value_file.write_text("201")
    pytester.runpytest().assert_outcomes(failed=1)


def test_ini_options(snap_project):
    snap_project.makeini(
        """
        [pytest]
        gpusnap_directory = golden
        gpusnap_default_extension = bin
        """
    )
    _set_payload(snap_project, b"abc")

    snap_project.runpytest("--snapshot-update").assert_outcomes(passed=1)

    assert (snap_project.path / "golden" / "test_render.py.test-values.0.bin").exists()
    assert not (snap_project.path / "__snapshots__").exists()


def test_parametrized_names_are_slugged(pytester):
    pytester.makeconftest('pytest_plugins = ["gpusnap.pytest_plugin"]')
    pytester.makepyfile(
        test_param="""
        import pytest

        @pytest.mark.parametrize("size", [8, 16])
        def test_sizes(snapshot, size):
            snapshot.assert_json({"size": size})
        """
    )
    pytester.runpytest("--snapshot-update").assert_outcomes(passed=2)
    names = sorted(p.name for p in (pytester.path / "__snapshots__").iterdir())
    assert names == [
        "test_param.py.test-sizes-16.0.snap",
        "test_param.py.test-sizes-8.0.snap",
    ]


def test_classes_sharing_a_method_name_get_separate_snapshots(pytester):
    pytester.makeconftest('pytest_plugins = ["gpusnap.pytest_plugin"]')
    pytester.makepyfile(
        test_cls="""
        class TestOne:
            def test_render(self, snapshot):
                snapshot.assert_bytes(b"one")

        class TestTwo:
            def test_render(self, snapshot):
                snapshot.assert_bytes(b"two")
        """
    )

    pytester.runpytest("--snapshot-update").assert_outcomes(passed=2)

    snaps = pytester.path / "__snapshots__"
    assert sorted(p.name for p in snaps.iterdir()) == [
        "test_cls.py.testone-test-render.0.snap",
        "test_cls.py.testtwo-test-render.0.snap",
    ]
    assert (snaps / "test_cls.py.testtwo-test-render.0.snap").read_bytes() == b"two"

    pytester.runpytest("-k", "TestTwo").assert_outcomes(passed=1, deselected=1)
    pytester.runpytest().assert_outcomes(passed=2)
