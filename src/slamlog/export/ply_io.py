"""Binary PLY writer and reader for parsed points and camera centers."""

from pathlib import Path

import numpy as np

from ..core.constants import DEFAULT_CAMERA_COLOR, DEFAULT_POINT_COLOR
from ..geometry.sightlines import camera_center
from ..trajectory.dataset import Dataset

VERTEX_DTYPE = np.dtype([
    ("x", "<f4"), ("y", "<f4"), ("z", "<f4"),
    ("red", "u1"), ("green", "u1"), ("blue", "u1"),
])


def _to_rgb8(color: tuple[float, float, float]) -> tuple[int, int, int]:
    """Convert a 0.0-1.0 color to 0-255 channels."""
    return tuple(int(round(max(0.0, min(1.0, c)) * 255)) for c in color)


def dataset_to_vertices(dataset: Dataset,
                        point_color: tuple[float, float, float] = DEFAULT_POINT_COLOR,
                        camera_color: tuple[float, float, float] = DEFAULT_CAMERA_COLOR,
                        include_cameras: bool = True) -> tuple[np.ndarray, np.ndarray]:
    """Return (xyz Nx3 float64, rgb Nx3 uint8): points first, then camera centers."""
    xyz = [dataset.points_array()]
    rgb = [np.tile(np.array(_to_rgb8(point_color), dtype=np.uint8), (len(dataset.points), 1))]

    if include_cameras and dataset.cameras:
        centers = np.array([camera_center(cam) for cam in dataset.cameras], dtype=np.float64)
        xyz.append(centers)
        rgb.append(np.tile(np.array(_to_rgb8(camera_color), dtype=np.uint8), (len(centers), 1)))

    return np.vstack(xyz), np.vstack(rgb).astype(np.uint8)


def write_binary_ply(ply_path: str | Path, xyz: np.ndarray, rgb: np.ndarray) -> int:
    """Write a binary little-endian PLY with float x,y,z and uchar r,g,b.

    Returns the number of vertices written.
    """
    xyz = np.asarray(xyz, dtype=np.float64).reshape(-1, 3)
    rgb = np.asarray(rgb, dtype=np.uint8).reshape(-1, 3)
    if len(xyz) != len(rgb):
        raise ValueError(f"xyz has {len(xyz)} rows but rgb has {len(rgb)}")

    vertices = np.empty(len(xyz), dtype=VERTEX_DTYPE)
    vertices["x"], vertices["y"], vertices["z"] = xyz[:, 0], xyz[:, 1], xyz[:, 2]
    vertices["red"], vertices["green"], vertices["blue"] = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    header = (
        "ply\n"
        "format binary_little_endian 1.0\n"
        "comment written by slamlog\n"
        f"element vertex {len(vertices)}\n"
        "property float x\n"
        "property float y\n"
        "property float z\n"
        "property uchar red\n"
        "property uchar green\n"
        "property uchar blue\n"
        "end_header\n"
    )
    with open(ply_path, "wb") as f:
        f.write(header.encode("ascii"))
        f.write(vertices.tobytes())
    return len(vertices)


_PLY_TYPES = {
    "float": "<f4", "float32": "<f4",
    "double": "<f8", "float64": "<f8",
    "uchar": "u1", "uint8": "u1",
    "int": "<i4", "int32": "<i4",
}


def read_ply_header(f) -> tuple[int, list[tuple[str, str]]]:
    """Parse a binary little-endian PLY header.

    Returns (vertex_count, [(name, numpy dtype), ...]) for the vertex element;
    properties of other elements are skipped. Leaves ``f`` at the first data byte.
    """
    if f.readline().strip() != b"ply":
        raise ValueError("Not a PLY file")

    num_vertices = 0
    fields = []
    element = None
    while True:
        raw = f.readline()
        if not raw:
            raise ValueError("PLY header has no end_header line")
        keyword, *args = raw.decode("ascii").split() or [""]
        if keyword == "end_header":
            return num_vertices, fields
        if keyword == "format" and args[:1] != ["binary_little_endian"]:
            raise ValueError(f"Unsupported PLY format: {' '.join(args)}")
        if keyword == "element":
            element = args[0]
            if element == "vertex":
                num_vertices = int(args[1])
        elif keyword == "property" and element == "vertex":
            ptype, pname = args[0], args[-1]
            if ptype not in _PLY_TYPES:
                raise ValueError(f"Unknown PLY property type: {ptype}")
            fields.append((pname, _PLY_TYPES[ptype]))


def read_binary_ply(ply_path: str | Path) -> np.ndarray:
    """Read the vertices of a binary little-endian PLY as a structured array."""
    with open(ply_path, "rb") as f:
        num_vertices, fields = read_ply_header(f)
        dt = np.dtype(fields)
        if num_vertices == 0:
            return np.zeros(0, dtype=dt)
        data = f.read(num_vertices * dt.itemsize)

    if len(data) < num_vertices * dt.itemsize:
        raise ValueError(f"PLY data truncated: expected {num_vertices} vertices")
    return np.frombuffer(data, dtype=dt, count=num_vertices)
