"""Order-sensitive state machine that turns a trajectory log into a Dataset.

Lines carry no type tags: a four-float line is a pose row, a three-float line
is either a point or an intrinsic row, a two-float line is a pixel seen from
the last camera. Which one applies depends on the current parse state, so
each line is offered to five rules in a fixed order:

    1. camera label    2. four floats    3. three floats
    4. two floats      5. intrinsic tag

A rule returns the next state, returns ``None`` (not applicable, try the next
rule) or raises a ``TrajectoryError``. Lines no rule accepts are skipped.
"""

import logging
from pathlib import Path
from typing import Iterable

import numpy as np

from ..core.constants import INTRINSIC_BLOCK_ROWS, POSE_BLOCK_ROWS
from . import classifiers
from .dataset import CameraRecord, Dataset, Pixel, Point3, PoseConvention, freeze_dataset
from .errors import (
    IncompleteIntrinsic,
    IncompletePose,
    LineReadFailure,
    MissingCamera,
    SourceUnavailable,
    UnexpectedPixel,
)
from .state import (
    INITIAL_STATE,
    AfterPoint,
    Empty,
    InIntrinsic,
    InPose,
    IntrinsicRow,
    ParseState,
    PoseRow,
    describe,
    is_open_block,
)

logger = logging.getLogger(__name__)


class Aggregator:
    """Owns the dataset under construction and the pending camera label."""

    def __init__(self, convention: PoseConvention = PoseConvention.WORLD_TO_CAMERA):
        self.convention = PoseConvention(convention)
        self.cameras: list[CameraRecord] = []
        self.points: list[Point3] = []
        self.intrinsics = np.identity(3)
        self.has_intrinsics = False
        self.pending_label: str | None = None

    def set_pending_label(self, label: str) -> None:
        self.pending_label = label

    def commit_pose(self, rows: tuple[PoseRow, ...]) -> CameraRecord:
        """Create a camera from three pose rows, consuming the pending label."""
        block = np.array(rows, dtype=np.float64)
        camera = CameraRecord(
            rotation=block[:, :3].copy(),
            translation=block[:, 3].copy(),
            pixels=[],
            label=self.pending_label,
            convention=self.convention,
        )
        self.pending_label = None
        self.cameras.append(camera)
        logger.debug("Committed camera %d (label=%r)", len(self.cameras) - 1, camera.label)
        return camera

    def commit_point(self, xyz: Point3) -> None:
        self.points.append(tuple(xyz))

    def commit_intrinsics(self, rows: tuple[IntrinsicRow, ...]) -> None:
        """Overwrite the intrinsic matrix; a later block replaces an earlier one."""
        if self.has_intrinsics:
            logger.debug("Replacing previously committed intrinsic matrix")
        self.intrinsics = np.array(rows, dtype=np.float64)
        self.has_intrinsics = True

    def append_pixel(self, xy: Pixel) -> None:
        if not self.cameras:
            raise MissingCamera("pixel observation routed to aggregator before any camera pose")
        self.cameras[-1].pixels.append(tuple(xy))

    def freeze(self) -> Dataset:
        return freeze_dataset(self.cameras, self.points, self.intrinsics, self.has_intrinsics)


class TrajectoryParser:
    """Feed lines one at a time, then call ``finish()`` for the Dataset."""

    def __init__(self, convention: PoseConvention = PoseConvention.WORLD_TO_CAMERA):
        self.state: ParseState = INITIAL_STATE
        self.aggregator = Aggregator(convention)
        self.line_no = 0

    @property
    def pending_block(self) -> bool:
        """True while a pose or intrinsic block is still open."""
        return is_open_block(self.state)

    def feed(self, line: str) -> None:
        """Apply the first rule that accepts ``line``; skip it if none does."""
        self.line_no += 1
        for rule in (
            self._try_camera_label,
            self._try_four_floats,
            self._try_three_floats,
            self._try_two_floats,
            self._try_intrinsic_tag,
        ):
            new_state = rule(line)
            if new_state is not None:
                logger.debug("line %d: %s -> %s via %s", self.line_no,
                             describe(self.state), describe(new_state), rule.__name__)
                self.state = new_state
                return
        logger.debug("line %d: skipped %r", self.line_no, line)

    def finish(self) -> Dataset:
        """Return the dataset; an unfinished block at the end is not an error."""
        if self.pending_block:
            logger.warning("Input ended inside an open block (%s); block discarded",
                           describe(self.state))
        return self.aggregator.freeze()

    # ── Transition rules ─────────────────────────────────────────

    def _try_camera_label(self, line: str) -> ParseState | None:
        if isinstance(self.state, InPose):
            return None
        label = classifiers.camera_label(line)
        if label is None:
            return None
        self.aggregator.set_pending_label(label)
        return self.state

    def _try_four_floats(self, line: str) -> ParseState | None:
        state = self.state
        if isinstance(state, InIntrinsic):
            return None
        row = classifiers.four_floats(line)
        if isinstance(state, InPose):
            if row is None:
                raise IncompletePose(line_no=self.line_no, line=line)
            rows = state.rows + (row,)
            if len(rows) == POSE_BLOCK_ROWS:
                self.aggregator.commit_pose(rows)
                return Empty()
            return InPose(rows)
        if row is None:
            return None
        return InPose((row,))

    def _try_three_floats(self, line: str) -> ParseState | None:
        state = self.state
        if isinstance(state, InPose):
            return None
        row = classifiers.three_floats(line)
        if isinstance(state, InIntrinsic):
            if row is None:
                raise IncompleteIntrinsic(line_no=self.line_no, line=line)
            rows = state.rows + (row,)
            if len(rows) == INTRINSIC_BLOCK_ROWS:
                self.aggregator.commit_intrinsics(rows)
                return Empty()
            return InIntrinsic(rows)
        if row is None:
            return None
        self.aggregator.commit_point(row)
        return AfterPoint()

    def _try_two_floats(self, line: str) -> ParseState | None:
        state = self.state
        if isinstance(state, InPose):
            raise IncompletePose(line_no=self.line_no, line=line)
        if isinstance(state, InIntrinsic):
            raise IncompleteIntrinsic(line_no=self.line_no, line=line)
        pixel = classifiers.two_floats(line)
        if pixel is None:
            return None
        if isinstance(state, AfterPoint):
            raise UnexpectedPixel(line_no=self.line_no, line=line)
        self.aggregator.append_pixel(pixel)
        return state

    def _try_intrinsic_tag(self, line: str) -> ParseState | None:
        if not classifiers.intrinsic_tag(line):
            return None
        return InIntrinsic()


# ── Driver ───────────────────────────────────────────────────────


def parse_lines(
    lines: Iterable[str],
    convention: PoseConvention = PoseConvention.WORLD_TO_CAMERA,
) -> Dataset:
    """Parse lines in order; the first error propagates, nothing partial is returned."""
    parser = TrajectoryParser(convention)
    for line in lines:
        parser.feed(line)
    return parser.finish()


def parse_file(
    path: str | Path,
    convention: PoseConvention = PoseConvention.WORLD_TO_CAMERA,
    encoding: str = "utf-8",
) -> Dataset:
    """Parse a trajectory log from disk.

    Raises:
        SourceUnavailable: the file cannot be opened.
        LineReadFailure: a line cannot be decoded.
        IncompletePose, IncompleteIntrinsic, UnexpectedPixel: grammar violations.
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise SourceUnavailable(f"cannot open {path}: {e.strerror or e}") from e

    parser = TrajectoryParser(convention)
    with f:
        try:
            for raw in f:
                try:
                    line = raw.decode(encoding)
                except UnicodeDecodeError as e:
                    raise LineReadFailure(f"cannot decode {path}: {e.reason}",
                                          line_no=parser.line_no + 1) from e
                parser.feed(line)
        except OSError as e:
            raise LineReadFailure(f"cannot read {path}: {e}", line_no=parser.line_no + 1) from e

    logger.info("Parsed %s: %d cameras, %d points, %d pixels",
                path, len(parser.aggregator.cameras), len(parser.aggregator.points),
                sum(len(c.pixels) for c in parser.aggregator.cameras))
    return parser.finish()
