"""Shared test fixtures."""

from pathlib import Path

import pytest

from slamlog.trajectory.parser import TrajectoryParser

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def test_data_dir():
    return TEST_DATA


@pytest.fixture
def tiny_log_path(test_data_dir):
    return test_data_dir / "tiny_trajectory.txt"


@pytest.fixture
def unexpected_pixel_path(test_data_dir):
    return test_data_dir / "unexpected_pixel.txt"


@pytest.fixture
def truncated_pose_path(test_data_dir):
    return test_data_dir / "truncated_pose.txt"


@pytest.fixture
def parser():
    return TrajectoryParser()


@pytest.fixture
def write_log(tmp_path):
    """Write lines to a log file under tmp_path and return its path."""
    def _write(lines, name="log.txt"):
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines))
        return path
    return _write
