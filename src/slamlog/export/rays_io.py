"""JSON export of cameras and pixel sightlines."""

import json
from pathlib import Path

from scipy.spatial.transform import Rotation

from ..geometry.sightlines import Sightline, world_pose
from ..trajectory.dataset import Dataset


def camera_summaries(dataset: Dataset) -> list[dict]:
    """World-frame center and orientation (qw, qx, qy, qz) of every camera."""
    cameras = []
    for i, cam in enumerate(dataset.cameras):
        r_wc, t_wc = world_pose(cam)
        qx, qy, qz, qw = Rotation.from_matrix(r_wc).as_quat()
        cameras.append({
            "index": i,
            "label": cam.label,
            "center": [float(v) for v in t_wc],
            "quaternion_wc": [float(qw), float(qx), float(qy), float(qz)],
            "pixel_count": len(cam.pixels),
        })
    return cameras


def build_rays_document(dataset: Dataset, sightlines: list[Sightline]) -> dict:
    return {
        "cameras": camera_summaries(dataset),
        "intrinsics": dataset.intrinsics.tolist(),
        "has_intrinsics": dataset.has_intrinsics,
        "rays": [
            {
                "camera_index": line.camera_index,
                "pixel": [float(line.pixel[0]), float(line.pixel[1])],
                "origin": [float(v) for v in line.origin],
                "end": [float(v) for v in line.end],
            }
            for line in sightlines
        ],
    }


def write_rays_json(path: str | Path, dataset: Dataset, sightlines: list[Sightline]) -> dict:
    """Write the rays document to ``path`` and return it."""
    doc = build_rays_document(dataset, sightlines)
    Path(path).write_text(json.dumps(doc, indent=2))
    return doc
