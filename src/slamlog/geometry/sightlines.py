"""World-frame camera geometry and pixel sightlines.

Read-only consumers of a parsed Dataset: a renderer draws each camera at its
world position and a ray from that position through every observed pixel.
"""

from dataclasses import dataclass

import numpy as np

from ..core.constants import DEFAULT_RAY_LENGTH
from ..trajectory.dataset import CameraRecord, Dataset, Pixel, PoseConvention


@dataclass(frozen=True, eq=False)
class Sightline:
    """Segment from a camera center along the ray through one pixel."""
    camera_index: int
    pixel: Pixel
    origin: np.ndarray  # (3,)
    end: np.ndarray  # (3,)


def world_pose(camera: CameraRecord) -> tuple[np.ndarray, np.ndarray]:
    """Return (R_wc, t_wc): camera-to-world rotation and camera center.

    World-to-camera records are inverted: R_wc = R_cw^T, t_wc = -R_wc @ t_cw.
    """
    if camera.convention == PoseConvention.CAMERA_TO_WORLD:
        return np.array(camera.rotation, dtype=np.float64), np.array(camera.translation, dtype=np.float64)
    r_wc = np.asarray(camera.rotation, dtype=np.float64).T
    t_wc = -(r_wc @ np.asarray(camera.translation, dtype=np.float64))
    return r_wc, t_wc


def camera_center(camera: CameraRecord) -> np.ndarray:
    return world_pose(camera)[1]


def invert_intrinsics(k: np.ndarray) -> np.ndarray:
    """Invert a 3x3 intrinsic matrix, raising ValueError if it is singular."""
    k = np.asarray(k, dtype=np.float64)
    if k.shape != (3, 3):
        raise ValueError(f"Intrinsic matrix must be 3x3, got shape {k.shape}")
    try:
        return np.linalg.inv(k)
    except np.linalg.LinAlgError as e:
        raise ValueError("Intrinsic matrix is singular") from e


def back_project(pixel: Pixel, k_inv: np.ndarray) -> np.ndarray:
    """Direction in the camera frame: K^-1 @ [x, y, 1]."""
    return k_inv @ np.array([pixel[0], pixel[1], 1.0])


def sightline(camera: CameraRecord, pixel: Pixel, k_inv: np.ndarray,
              length: float = DEFAULT_RAY_LENGTH, camera_index: int = -1) -> Sightline:
    r_wc, t_wc = world_pose(camera)
    direction = r_wc @ back_project(pixel, k_inv)
    return Sightline(
        camera_index=camera_index,
        pixel=tuple(pixel),
        origin=t_wc,
        end=t_wc + length * direction,
    )


def dataset_sightlines(dataset: Dataset, intrinsics: np.ndarray | None = None,
                       length: float = DEFAULT_RAY_LENGTH) -> list[Sightline]:
    """One sightline per pixel of every camera, in camera then pixel order.

    Uses ``intrinsics`` when given, otherwise the dataset's own matrix.
    """
    k_inv = invert_intrinsics(dataset.intrinsics if intrinsics is None else intrinsics)
    lines = []
    for i, camera in enumerate(dataset.cameras):
        for pixel in camera.pixels:
            lines.append(sightline(camera, pixel, k_inv, length, camera_index=i))
    return lines
