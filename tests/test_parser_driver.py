"""End-to-end tests for parse_file / parse_lines."""

import numpy as np
import pytest

from slamlog.trajectory.dataset import PoseConvention
from slamlog.trajectory.errors import (
    IncompleteIntrinsic,
    IncompletePose,
    LineReadFailure,
    SourceUnavailable,
    TrajectoryError,
    UnexpectedPixel,
)
from slamlog.trajectory.parser import parse_file, parse_lines


def test_parse_tiny_log(tiny_log_path):
    """Cameras, pixels, points and K from the sample log."""
    ds = parse_file(tiny_log_path)

    assert len(ds.cameras) == 2
    assert len(ds.points) == 3
    assert ds.pixel_count == 3
    assert ds.has_intrinsics
    np.testing.assert_array_equal(ds.intrinsics, [[500, 0, 320], [0, 500, 240], [0, 0, 1]])

    cam0, cam1 = ds.cameras
    assert cam0.label == "cam0"
    np.testing.assert_array_equal(cam0.rotation, np.identity(3))
    np.testing.assert_array_equal(cam0.translation, [0, 0, 0])
    assert cam0.pixels == ((100.0, 200.0), (150.5, 250.25))

    assert cam1.label == "cam1"
    np.testing.assert_array_equal(cam1.rotation, [[0, -1, 0], [1, 0, 0], [0, 0, 1]])
    np.testing.assert_array_equal(cam1.translation, [1, 2, 3])
    assert cam1.pixels == ((320.0, 240.0),)

    assert ds.points == ((5.0, 6.0, 7.0), (-1.5, 2.0, 3.25), (1.0, 1.0, 1.0))


def test_end_to_end_example_raises_unexpected_pixel(unexpected_pixel_path):
    with pytest.raises(UnexpectedPixel) as exc_info:
        parse_file(unexpected_pixel_path)
    assert exc_info.value.line_no == 7
    assert "10.0 20.0" in str(exc_info.value)


def test_end_to_end_example_prefix():
    """Same input without the offending last line."""
    ds = parse_lines([
        "CAMERA_ID cam0", "1 0 0 0", "0 1 0 0", "0 0 1 0",
        "100.0 200.0", "5.0 6.0 7.0",
    ])
    assert len(ds.cameras) == 1
    cam = ds.cameras[0]
    assert cam.label == "cam0"
    np.testing.assert_array_equal(cam.rotation, np.identity(3))
    np.testing.assert_array_equal(cam.translation, np.zeros(3))
    assert cam.pixels == ((100.0, 200.0),)
    assert ds.points == ((5.0, 6.0, 7.0),)


def test_intrinsic_example():
    ds = parse_lines(["MATRIX K", "500 0 320", "0 500 240", "0 0 1"])
    np.testing.assert_array_equal(ds.intrinsics, [[500, 0, 320], [0, 500, 240], [0, 0, 1]])


def test_intrinsic_example_interrupted():
    with pytest.raises(IncompleteIntrinsic):
        parse_lines(["MATRIX K", "500 0 320", "0 500 240 1"])


def test_pose_values_are_exact():
    """Rotation and translation carry the input columns unchanged, in order."""
    rows = [
        ["0.36 0.48 -0.8 12.125", "-0.8 0.6 0 -3.5", "0.48 0.64 0.6 0.0625"],
        ["1e-3 2.5e2 -7 1", "3 -0.001 8 2", "9 10 11 3"],
    ]
    ds = parse_lines(rows[0] + ["5 5 5"] + rows[1])
    for cam, block in zip(ds.cameras, rows):
        expected = np.array([[float(v) for v in r.split()] for r in block])
        np.testing.assert_array_equal(cam.rotation, expected[:, :3])
        np.testing.assert_array_equal(cam.translation, expected[:, 3])


def test_default_intrinsics_identity():
    ds = parse_lines(["1 2 3"])
    np.testing.assert_array_equal(ds.intrinsics, np.identity(3))
    assert not ds.has_intrinsics


def test_dangling_label_is_discarded():
    ds = parse_lines(["1 0 0 0", "0 1 0 0", "0 0 1 0", "CAMERA_ID orphan"])
    assert ds.cameras[0].label is None


def test_truncated_pose_at_end_is_not_an_error(truncated_pose_path):
    """An open block at end of input is dropped without an error."""
    ds = parse_file(truncated_pose_path)
    assert ds.cameras == ()
    assert ds.points == ()


def test_truncated_intrinsics_at_end_is_not_an_error():
    ds = parse_lines(["MATRIX K", "500 0 320"])
    assert not ds.has_intrinsics


def test_incomplete_pose_stops_parse():
    with pytest.raises(IncompletePose) as exc_info:
        parse_lines(["1 0 0 0", "0 1 0 0", "7 8 9", "1 0 0 0"])
    assert exc_info.value.line_no == 3
    assert isinstance(exc_info.value, TrajectoryError)


def test_convention_passed_through():
    ds = parse_lines(["1 0 0 0", "0 1 0 0", "0 0 1 0"], convention=PoseConvention.CAMERA_TO_WORLD)
    assert ds.cameras[0].convention is PoseConvention.CAMERA_TO_WORLD


def test_convention_accepts_string():
    ds = parse_lines(["1 0 0 0", "0 1 0 0", "0 0 1 0"], convention="camera_to_world")
    assert ds.cameras[0].convention is PoseConvention.CAMERA_TO_WORLD


def test_missing_file(tmp_path):
    with pytest.raises(SourceUnavailable, match="cannot open"):
        parse_file(tmp_path / "does_not_exist.txt")


def test_directory_is_unavailable(tmp_path):
    with pytest.raises(SourceUnavailable):
        parse_file(tmp_path)


def test_undecodable_line(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_bytes(b"# a\n# b\n# c\n\xff\xfe garbage\n")
    with pytest.raises(LineReadFailure) as exc_info:
        parse_file(path)
    assert exc_info.value.line_no == 4


def test_grammar_error_before_undecodable_line_wins(tmp_path):
    """Lines are decoded one at a time, so the earlier IncompletePose surfaces first."""
    path = tmp_path / "bad.txt"
    path.write_bytes(b"1 0 0 0\n5 6\n\xff\n")
    with pytest.raises(IncompletePose) as exc_info:
        parse_file(path)
    assert exc_info.value.line_no == 2


def test_undecodable_line_after_valid_records(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_bytes(b"1 0 0 0\n0 1 0 0\n0 0 1 0\n4 5\n\xff\n1 2 3\n")
    with pytest.raises(LineReadFailure) as exc_info:
        parse_file(path)
    assert exc_info.value.line_no == 5


def test_latin1_encoding(tmp_path):
    path = tmp_path / "latin1.txt"
    path.write_bytes(b"CAMERA_ID cam\xe9ra\n1 0 0 0\n0 1 0 0\n0 0 1 0\n")
    ds = parse_file(path, encoding="latin-1")
    assert ds.cameras[0].label == "caméra"


def test_crlf_file(tmp_path):
    path = tmp_path / "crlf.txt"
    path.write_bytes(b"CAMERA_ID c\r\n1 0 0 0\r\n0 1 0 0\r\n0 0 1 0\r\n4 5\r\n")
    ds = parse_file(path)
    assert ds.cameras[0].label == "c"
    assert ds.cameras[0].pixels == ((4.0, 5.0),)


def test_write_log_fixture(write_log):
    path = write_log(["# header", "", "CAMERA_ID x", "1 0 0 0", "0 1 0 0", "0 0 1 0", "[1, 2]"])
    ds = parse_file(path)
    assert ds.cameras[0].pixels == ((1.0, 2.0),)
