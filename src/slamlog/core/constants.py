"""Constants for the slamlog parser and tools."""


# Marker literals recognised in trajectory logs
CAMERA_LABEL_MARKER = "CAMERA_ID"
INTRINSIC_TAG_MARKER = "MATRIX K"

# Rows needed to close a multi-line block
POSE_BLOCK_ROWS = 3
INTRINSIC_BLOCK_ROWS = 3

# Pose conventions (names used in config and on the command line)
CONVENTION_WORLD_TO_CAMERA = "world_to_camera"
CONVENTION_CAMERA_TO_WORLD = "camera_to_world"

# Viewer defaults: (r, g, b) in 0.0-1.0
DEFAULT_POINT_COLOR = (0.0, 1.0, 0.0)
DEFAULT_CAMERA_COLOR = (1.0, 1.0, 0.0)

DEFAULT_RAY_LENGTH = 100.0
