"""Parse states of the trajectory grammar.

A state is one of four frozen variants; the partial rows of an open block live
only inside the variant that owns them. Transition rules return the next state,
return ``None`` when the line is outside their grammar, or raise.
"""

from dataclasses import dataclass

PoseRow = tuple[float, float, float, float]
IntrinsicRow = tuple[float, float, float]


@dataclass(frozen=True)
class Empty:
    """No open block; the last committed record was a pose or a matrix."""


@dataclass(frozen=True)
class InPose:
    """Collecting the rows of a pose block."""
    rows: tuple[PoseRow, ...] = ()


@dataclass(frozen=True)
class InIntrinsic:
    """Collecting the rows of an intrinsic matrix block."""
    rows: tuple[IntrinsicRow, ...] = ()


@dataclass(frozen=True)
class AfterPoint:
    """No open block, but a pixel here would have no camera to attach to."""


ParseState = Empty | InPose | InIntrinsic | AfterPoint

INITIAL_STATE: ParseState = AfterPoint()


def is_open_block(state: ParseState) -> bool:
    return isinstance(state, (InPose, InIntrinsic))


def describe(state: ParseState) -> str:
    """Short human-readable form for log messages."""
    if isinstance(state, (InPose, InIntrinsic)):
        return f"{type(state).__name__}({len(state.rows)} rows)"
    return type(state).__name__
