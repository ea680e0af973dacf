import typing
import typing

vec2i32: typing.TypeAlias = tuple[
    int,
    int,
]
"""
type vec2i32 = tuple[
    int,
    int,
]
"""

vec3u32: typing.TypeAlias = tuple[
    int,
    int,
    int,
]
"""
type vec3u32 = tuple[
    int,
    int,
    int,
]
"""

vec2f32: typing.TypeAlias = tuple[
    float,
    float,
]
"""
type vec2f32 = tuple[
    float,
    float,
]
"""

vec3f32: typing.TypeAlias = tuple[
    float,
    float,
    float,
]
"""
type vec3f32 = tuple[
    float,
    float,
    float,
]
"""

vec4f32: typing.TypeAlias = tuple[
    float,
    float,
    float,
    float,
]
"""
type vec4f32 = tuple[
    float,
    float,
    float,
    float,
]
"""

class NodeTransform(typing.NamedTuple):
    # Local transform of the node that references a mesh.
#   # Local transform of the node that references a mesh.
    # Rotation is a glTF quaternion stored as (x, y, z, w).
#   # Rotation is a glTF quaternion stored as (x, y, z, w).
    scale: vec3f32 = (1.0, 1.0, 1.0)
#   scale: vec3f32 = (1.0, 1.0, 1.0)
    translation: vec3f32 = (0.0, 0.0, 0.0)
#   translation: vec3f32 = (0.0, 0.0, 0.0)
    rotation: vec4f32 = (0.0, 0.0, 0.0, 1.0)
#   rotation: vec4f32 = (0.0, 0.0, 0.0, 1.0)

class PlayerInput(typing.NamedTuple):
    # One frame of controller input, collected by the window and consumed by Player.update.
#   # One frame of controller input, collected by the window and consumed by Player.update.
    forward: bool = False
#   forward: bool = False
    backward: bool = False
#   backward: bool = False
    left: bool = False
#   left: bool = False
    right: bool = False
#   right: bool = False
    jump: bool = False
#   jump: bool = False
    mouse_dx: float = 0.0
#   mouse_dx: float = 0.0
    mouse_dy: float = 0.0
#   mouse_dy: float = 0.0
