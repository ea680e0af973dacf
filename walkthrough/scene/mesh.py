import typing
import typing
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import pyrr as rr # type: ignore[import-untyped]
import pyrr as rr
from walkthrough.core.common_types import NodeTransform, vec3f32
from walkthrough.core.common_types import NodeTransform, vec3f32
from walkthrough.core import rotation
from walkthrough.core import rotation
from walkthrough.importer.textures import MaterializedTexture
from walkthrough.importer.textures import MaterializedTexture

class ImportedMesh:
    # One triangle-mode glTF primitive.
#   # One triangle-mode glTF primitive.
    # Geometry stays in the primitive's local space; the node transform lives here as scale/origin/rotation.
#   # Geometry stays in the primitive's local space; the node transform lives here as scale/origin/rotation.
    def __init__(self, name: str, mesh_index: int, primitive_index: int, vertices: npt.NDArray[typing.Any], triangles: npt.NDArray[np.uint32], base_color: MaterializedTexture | None = None) -> None:
#   def __init__(self, name: str, mesh_index: int, primitive_index: int, vertices: npt.NDArray[typing.Any], triangles: npt.NDArray[np.uint32], base_color: MaterializedTexture | None = None) -> None:
        self.name: str = name
#       self.name: str = name
        self.mesh_index: int = mesh_index
#       self.mesh_index: int = mesh_index
        self.primitive_index: int = primitive_index
#       self.primitive_index: int = primitive_index
        self.vertices: npt.NDArray[typing.Any] = vertices
#       self.vertices: npt.NDArray[typing.Any] = vertices
        self.triangles: npt.NDArray[np.uint32] = triangles
#       self.triangles: npt.NDArray[np.uint32] = triangles
        self.base_color: MaterializedTexture | None = base_color
#       self.base_color: MaterializedTexture | None = base_color

        self.scale: rr.Vector3 = rr.Vector3([1.0, 1.0, 1.0])
#       self.scale: rr.Vector3 = rr.Vector3([1.0, 1.0, 1.0])
        self.origin: rr.Vector3 = rr.Vector3([0.0, 0.0, 0.0])
#       self.origin: rr.Vector3 = rr.Vector3([0.0, 0.0, 0.0])
        # (pitch, yaw, roll) in radians, composed as Ry(yaw) * Rx(pitch) * Rz(roll).
#       # (pitch, yaw, roll) in radians, composed as Ry(yaw) * Rx(pitch) * Rz(roll).
        self.rotation: vec3f32 = (0.0, 0.0, 0.0)
#       self.rotation: vec3f32 = (0.0, 0.0, 0.0)
        pass
#       pass

    @property
#   @property
    def vertex_count(self) -> int:
#   def vertex_count(self) -> int:
        return len(self.vertices)
#       return len(self.vertices)

    @property
#   @property
    def triangle_count(self) -> int:
#   def triangle_count(self) -> int:
        return len(self.triangles)
#       return len(self.triangles)

    def set_scale(self, scale: vec3f32) -> None:
#   def set_scale(self, scale: vec3f32) -> None:
        self.scale = rr.Vector3(scale)
#       self.scale = rr.Vector3(scale)

    def set_origin(self, origin: vec3f32) -> None:
#   def set_origin(self, origin: vec3f32) -> None:
        self.origin = rr.Vector3(origin)
#       self.origin = rr.Vector3(origin)

    def set_rotation(self, pitch: float, yaw: float, roll: float) -> None:
#   def set_rotation(self, pitch: float, yaw: float, roll: float) -> None:
        self.rotation = (pitch, yaw, roll)
#       self.rotation = (pitch, yaw, roll)

    def get_rotation(self) -> vec3f32:
#   def get_rotation(self) -> vec3f32:
        return self.rotation
#       return self.rotation

    def apply_transform(self, transform: NodeTransform) -> None:
#   def apply_transform(self, transform: NodeTransform) -> None:
        self.set_scale(transform.scale)
#       self.set_scale(transform.scale)
        self.set_origin(transform.translation)
#       self.set_origin(transform.translation)
        pitch, yaw, roll = rotation.to_euler(*transform.rotation)
#       pitch, yaw, roll = rotation.to_euler(*transform.rotation)
        self.set_rotation(pitch=pitch, yaw=yaw, roll=roll)
#       self.set_rotation(pitch=pitch, yaw=yaw, roll=roll)

    def rotation_matrix(self) -> npt.NDArray[np.float64]:
#   def rotation_matrix(self) -> npt.NDArray[np.float64]:
        return rotation.rotation_matrix(*self.rotation)
#       return rotation.rotation_matrix(*self.rotation)

    def model_matrix(self) -> rr.Matrix44:
#   def model_matrix(self) -> rr.Matrix44:
        # T * R * S; pyrr matrices are row-major (v' = v @ M).
#       # T * R * S; pyrr matrices are row-major (v' = v @ M).
        matrix_translation: rr.Matrix44 = rr.Matrix44.from_translation(self.origin)
#       matrix_translation: rr.Matrix44 = rr.Matrix44.from_translation(self.origin)
        matrix_rotation: rr.Matrix44 = rr.Matrix44.identity()
#       matrix_rotation: rr.Matrix44 = rr.Matrix44.identity()
        matrix_rotation[:3, :3] = self.rotation_matrix().T
#       matrix_rotation[:3, :3] = self.rotation_matrix().T
        matrix_scale: rr.Matrix44 = rr.Matrix44.from_scale(self.scale)
#       matrix_scale: rr.Matrix44 = rr.Matrix44.from_scale(self.scale)
        return (matrix_translation * matrix_rotation * matrix_scale).astype(dtype=np.float32)
#       return (matrix_translation * matrix_rotation * matrix_scale).astype(dtype=np.float32)

    def world_positions(self) -> npt.NDArray[np.float32]:
#   def world_positions(self) -> npt.NDArray[np.float32]:
        # Local positions with scale, rotation and origin applied, for the collision world.
#       # Local positions with scale, rotation and origin applied, for the collision world.
        scaled: npt.NDArray[np.float64] = self.vertices["position"].astype(dtype=np.float64) * np.asarray(self.scale, dtype=np.float64)
#       scaled: npt.NDArray[np.float64] = self.vertices["position"].astype(dtype=np.float64) * np.asarray(self.scale, dtype=np.float64)
        rotated: npt.NDArray[np.float64] = scaled @ self.rotation_matrix().T
#       rotated: npt.NDArray[np.float64] = scaled @ self.rotation_matrix().T
        return (rotated + np.asarray(self.origin, dtype=np.float64)).astype(dtype=np.float32)
#       return (rotated + np.asarray(self.origin, dtype=np.float64)).astype(dtype=np.float32)

    def world_triangles(self) -> npt.NDArray[np.float32]:
#   def world_triangles(self) -> npt.NDArray[np.float32]:
        # (triangle_count, 3, 3): three world-space corners per triangle.
#       # (triangle_count, 3, 3): three world-space corners per triangle.
        return self.world_positions()[self.triangles]
#       return self.world_positions()[self.triangles]

    def vertex_bytes(self) -> bytes:
#   def vertex_bytes(self) -> bytes:
        return np.ascontiguousarray(self.vertices).tobytes()
#       return np.ascontiguousarray(self.vertices).tobytes()

    def index_bytes(self) -> bytes:
#   def index_bytes(self) -> bytes:
        return np.ascontiguousarray(self.triangles, dtype=np.uint32).tobytes()
#       return np.ascontiguousarray(self.triangles, dtype=np.uint32).tobytes()

    def __repr__(self) -> str:
#   def __repr__(self) -> str:
        return f"ImportedMesh({self.name!r}, vertices={self.vertex_count}, triangles={self.triangle_count}, texture={self.base_color is not None})"
#       return f"ImportedMesh({self.name!r}, vertices={self.vertex_count}, triangles={self.triangle_count}, texture={self.base_color is not None})"
