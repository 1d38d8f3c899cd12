"""Data model for a parsed trajectory log."""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from ..core.constants import CONVENTION_CAMERA_TO_WORLD, CONVENTION_WORLD_TO_CAMERA

Point3 = tuple[float, float, float]
Pixel = tuple[float, float]


class PoseConvention(str, Enum):
    """How a pose block's rotation and translation map between frames."""
    WORLD_TO_CAMERA = CONVENTION_WORLD_TO_CAMERA  # rows hold R_cw | t_cw
    CAMERA_TO_WORLD = CONVENTION_CAMERA_TO_WORLD  # rows hold R_wc | t_wc


@dataclass(frozen=True, eq=False)
class CameraRecord:
    """One committed camera pose and the pixels observed from it.

    ``pixels`` is a list while the parser is still appending to it and a
    tuple once the dataset has been frozen.
    """
    rotation: np.ndarray  # 3x3
    translation: np.ndarray  # (3,)
    pixels: list[Pixel] | tuple[Pixel, ...] = field(default_factory=list)
    label: str | None = None
    convention: PoseConvention = PoseConvention.WORLD_TO_CAMERA


@dataclass(frozen=True, eq=False)
class Dataset:
    """Cameras, free-standing points and the intrinsic matrix of one log."""
    cameras: tuple[CameraRecord, ...] = ()
    points: tuple[Point3, ...] = ()
    intrinsics: np.ndarray = field(default_factory=lambda: _readonly(np.identity(3)))
    has_intrinsics: bool = False

    @property
    def pixel_count(self) -> int:
        return sum(len(cam.pixels) for cam in self.cameras)

    def points_array(self) -> np.ndarray:
        """Points as an Nx3 float64 array (empty logs give shape (0, 3))."""
        if not self.points:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array(self.points, dtype=np.float64)


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def freeze_camera(camera: CameraRecord) -> CameraRecord:
    """Copy a camera with tuple pixels and read-only arrays."""
    return CameraRecord(
        rotation=_readonly(camera.rotation.copy()),
        translation=_readonly(camera.translation.copy()),
        pixels=tuple(camera.pixels),
        label=camera.label,
        convention=camera.convention,
    )


def freeze_dataset(cameras: list[CameraRecord], points: list[Point3],
                   intrinsics: np.ndarray, has_intrinsics: bool) -> Dataset:
    """Build the immutable Dataset handed to downstream consumers."""
    return Dataset(
        cameras=tuple(freeze_camera(cam) for cam in cameras),
        points=tuple(points),
        intrinsics=_readonly(intrinsics.copy()),
        has_intrinsics=has_intrinsics,
    )
