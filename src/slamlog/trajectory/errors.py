"""Errors raised while reading a trajectory log.

Every ``TrajectoryError`` is fatal: the driver stops at the first one and no
partial dataset is returned.
"""


class TrajectoryError(Exception):
    """Base class for trajectory parse failures."""

    reason = "trajectory parse error"

    def __init__(self, message: str = "", line_no: int | None = None, line: str | None = None):
        self.line_no = line_no
        self.line = line
        text = message or self.reason
        if line_no is not None:
            text = f"line {line_no}: {text}"
        if line is not None:
            shown = line.rstrip("\r\n")
            text = f"{text} ({shown!r})"
        super().__init__(text)


class SourceUnavailable(TrajectoryError):
    reason = "cannot open trajectory source"


class LineReadFailure(TrajectoryError):
    reason = "cannot decode line"


class IncompletePose(TrajectoryError):
    reason = "pose block interrupted before its third row"


class IncompleteIntrinsic(TrajectoryError):
    reason = "intrinsic matrix block interrupted before its third row"


class UnexpectedPixel(TrajectoryError):
    reason = "pixel observation follows a 3D point without an intervening pose"


class MissingCamera(RuntimeError):
    """A pixel was routed to the aggregator before any camera was committed."""
