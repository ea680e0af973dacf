import math
import math
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
from walkthrough.core.common_types import vec3f32
from walkthrough.core.common_types import vec3f32

# Engine rotation convention: R = Ry(yaw) * Rx(pitch) * Rz(roll), column vectors, yaw applied last.
# Angles are (pitch, yaw, roll) in radians everywhere in the project.

def to_euler(qx: float, qy: float, qz: float, qw: float) -> vec3f32:
    """
    Converts a unit quaternion (glTF xyzw order) to (pitch, yaw, roll).
#   Converts a unit quaternion (glTF xyzw order) to (pitch, yaw, roll).
    Derived from the quaternion rotation-matrix entries of R = Ry * Rx * Rz:
#   Derived from the quaternion rotation-matrix entries of R = Ry * Rx * Rz:
    R[1][2] = -sin(pitch)
#   R[1][2] = -sin(pitch)
    R[0][2] / R[2][2] = tan(yaw)
#   R[0][2] / R[2][2] = tan(yaw)
    R[1][0] / R[1][1] = tan(roll)
#   R[1][0] / R[1][1] = tan(roll)
    Non-unit input still gives a defined (but uncalibrated) result.
#   Non-unit input still gives a defined (but uncalibrated) result.
    """
    r02: float = 2.0 * (qx * qz + qw * qy)
#   r02: float = 2.0 * (qx * qz + qw * qy)
    r12: float = 2.0 * (qy * qz - qw * qx)
#   r12: float = 2.0 * (qy * qz - qw * qx)
    r22: float = 1.0 - 2.0 * (qx * qx + qy * qy)
#   r22: float = 1.0 - 2.0 * (qx * qx + qy * qy)
    r10: float = 2.0 * (qx * qy + qw * qz)
#   r10: float = 2.0 * (qx * qy + qw * qz)
    r11: float = 1.0 - 2.0 * (qx * qx + qz * qz)
#   r11: float = 1.0 - 2.0 * (qx * qx + qz * qz)

    # Round-off on a near-unit quaternion can leave |r12| slightly above 1, which asin turns into NaN.
#   # Round-off on a near-unit quaternion can leave |r12| slightly above 1, which asin turns into NaN.
    pitch: float = math.asin(max(-1.0, min(1.0, -r12)))
#   pitch: float = math.asin(max(-1.0, min(1.0, -r12)))
    yaw: float = math.atan2(r02, r22)
#   yaw: float = math.atan2(r02, r22)
    roll: float = math.atan2(r10, r11)
#   roll: float = math.atan2(r10, r11)
    return (pitch, yaw, roll)
#   return (pitch, yaw, roll)

def rotation_matrix(pitch: float, yaw: float, roll: float) -> npt.NDArray[np.float64]:
    # 3x3, column-vector convention (v' = R @ v).
#   # 3x3, column-vector convention (v' = R @ v).
    cp, sp = math.cos(pitch), math.sin(pitch)
#   cp, sp = math.cos(pitch), math.sin(pitch)
    cy, sy = math.cos(yaw), math.sin(yaw)
#   cy, sy = math.cos(yaw), math.sin(yaw)
    cr, sr = math.cos(roll), math.sin(roll)
#   cr, sr = math.cos(roll), math.sin(roll)
    matrix_yaw: npt.NDArray[np.float64] = np.array([
#   matrix_yaw: npt.NDArray[np.float64] = np.array([
        [cy, 0.0, sy],
#       [cy, 0.0, sy],
        [0.0, 1.0, 0.0],
#       [0.0, 1.0, 0.0],
        [-sy, 0.0, cy],
#       [-sy, 0.0, cy],
    ])
#   ])
    matrix_pitch: npt.NDArray[np.float64] = np.array([
#   matrix_pitch: npt.NDArray[np.float64] = np.array([
        [1.0, 0.0, 0.0],
#       [1.0, 0.0, 0.0],
        [0.0, cp, -sp],
#       [0.0, cp, -sp],
        [0.0, sp, cp],
#       [0.0, sp, cp],
    ])
#   ])
    matrix_roll: npt.NDArray[np.float64] = np.array([
#   matrix_roll: npt.NDArray[np.float64] = np.array([
        [cr, -sr, 0.0],
#       [cr, -sr, 0.0],
        [sr, cr, 0.0],
#       [sr, cr, 0.0],
        [0.0, 0.0, 1.0],
#       [0.0, 0.0, 1.0],
    ])
#   ])
    return matrix_yaw @ matrix_pitch @ matrix_roll
#   return matrix_yaw @ matrix_pitch @ matrix_roll
