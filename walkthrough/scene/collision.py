import typing
import typing
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
from walkthrough.scene.mesh import ImportedMesh
from walkthrough.scene.mesh import ImportedMesh

# A contact closer than this along an axis does not count as penetration.
EPSILON: float = 1.0e-6

BOX_AXES: npt.NDArray[np.float64] = np.identity(3, dtype=np.float64)

class Contact(typing.NamedTuple):
    # correction moves the box out of the triangle along the triangle's face normal.
#   # correction moves the box out of the triangle along the triangle's face normal.
    correction: npt.NDArray[np.float64]
#   correction: npt.NDArray[np.float64]
    normal: npt.NDArray[np.float64]
#   normal: npt.NDArray[np.float64]
    depth: float
#   depth: float

def box_triangle_overlap(center: npt.NDArray[np.float64], half_extents: npt.NDArray[np.float64], triangle: npt.NDArray[np.float64]) -> bool:
    """
    Separating axis test between an axis-aligned box and one triangle.
#   Separating axis test between an axis-aligned box and one triangle.
    Candidate axes: the 3 box face normals, the triangle normal, and the 9 cross products
#   Candidate axes: the 3 box face normals, the triangle normal, and the 9 cross products
    of triangle edges with box axes. Degenerate axes are skipped.
#   of triangle edges with box axes. Degenerate axes are skipped.
    """
    corners: npt.NDArray[np.float64] = triangle - center
#   corners: npt.NDArray[np.float64] = triangle - center
    edges: npt.NDArray[np.float64] = np.array([
#   edges: npt.NDArray[np.float64] = np.array([
        corners[1] - corners[0],
#       corners[1] - corners[0],
        corners[2] - corners[1],
#       corners[2] - corners[1],
        corners[0] - corners[2],
#       corners[0] - corners[2],
    ])
#   ])
    axes: list[npt.NDArray[np.float64]] = [axis for axis in BOX_AXES]
#   axes: list[npt.NDArray[np.float64]] = [axis for axis in BOX_AXES]
    axes.append(np.cross(edges[0], edges[1]))
#   axes.append(np.cross(edges[0], edges[1]))
    for edge in edges:
#   for edge in edges:
        for box_axis in BOX_AXES:
#       for box_axis in BOX_AXES:
            axes.append(np.cross(edge, box_axis))
#           axes.append(np.cross(edge, box_axis))

    for axis in axes:
#   for axis in axes:
        length: float = float(np.linalg.norm(axis))
#       length: float = float(np.linalg.norm(axis))
        if length < EPSILON:
#       if length < EPSILON:
            continue
#           continue
        unit_axis: npt.NDArray[np.float64] = axis / length
#       unit_axis: npt.NDArray[np.float64] = axis / length
        projections: npt.NDArray[np.float64] = corners @ unit_axis
#       projections: npt.NDArray[np.float64] = corners @ unit_axis
        radius: float = float(np.sum(half_extents * np.abs(unit_axis)))
#       radius: float = float(np.sum(half_extents * np.abs(unit_axis)))
        if projections.min() > radius - EPSILON or projections.max() < -radius + EPSILON:
#       if projections.min() > radius - EPSILON or projections.max() < -radius + EPSILON:
            return False
#           return False
    return True
#   return True

def face_contact(center: npt.NDArray[np.float64], half_extents: npt.NDArray[np.float64], triangle: npt.NDArray[np.float64]) -> Contact | None:
    # Push-out along the face normal only; internal edges of a tessellated floor never catch the box.
#   # Push-out along the face normal only; internal edges of a tessellated floor never catch the box.
    normal: npt.NDArray[np.float64] = np.cross(triangle[1] - triangle[0], triangle[2] - triangle[0])
#   normal: npt.NDArray[np.float64] = np.cross(triangle[1] - triangle[0], triangle[2] - triangle[0])
    length: float = float(np.linalg.norm(normal))
#   length: float = float(np.linalg.norm(normal))
    if length < EPSILON:
#   if length < EPSILON:
        return None
#       return None
    normal = normal / length
#   normal = normal / length

    distance: float = float(np.dot(normal, center - triangle[0]))
#   distance: float = float(np.dot(normal, center - triangle[0]))
    radius: float = float(np.sum(half_extents * np.abs(normal)))
#   radius: float = float(np.sum(half_extents * np.abs(normal)))
    depth: float = radius - abs(distance)
#   depth: float = radius - abs(distance)
    if depth <= EPSILON:
#   if depth <= EPSILON:
        return None
#       return None
    side: float = 1.0 if distance >= 0.0 else -1.0
#   side: float = 1.0 if distance >= 0.0 else -1.0
    return Contact(correction=normal * side * depth, normal=normal * side, depth=depth)
#   return Contact(correction=normal * side * depth, normal=normal * side, depth=depth)

class StaticCollider:
    # World-space triangle soup of one imported mesh plus the bounds used for the broad phase.
#   # World-space triangle soup of one imported mesh plus the bounds used for the broad phase.
    def __init__(self, mesh: ImportedMesh) -> None:
#   def __init__(self, mesh: ImportedMesh) -> None:
        self.name: str = mesh.name
#       self.name: str = mesh.name
        self.triangles: npt.NDArray[np.float64] = mesh.world_triangles().astype(dtype=np.float64)
#       self.triangles: npt.NDArray[np.float64] = mesh.world_triangles().astype(dtype=np.float64)
        if len(self.triangles) == 0:
#       if len(self.triangles) == 0:
            self.triangle_min: npt.NDArray[np.float64] = np.zeros((0, 3), dtype=np.float64)
#           self.triangle_min: npt.NDArray[np.float64] = np.zeros((0, 3), dtype=np.float64)
            self.triangle_max: npt.NDArray[np.float64] = np.zeros((0, 3), dtype=np.float64)
#           self.triangle_max: npt.NDArray[np.float64] = np.zeros((0, 3), dtype=np.float64)
            self.min_bounds: npt.NDArray[np.float64] = np.zeros(3, dtype=np.float64)
#           self.min_bounds: npt.NDArray[np.float64] = np.zeros(3, dtype=np.float64)
            self.max_bounds: npt.NDArray[np.float64] = np.zeros(3, dtype=np.float64)
#           self.max_bounds: npt.NDArray[np.float64] = np.zeros(3, dtype=np.float64)
            return
#           return
        self.triangle_min = np.min(self.triangles, axis=1)
#       self.triangle_min = np.min(self.triangles, axis=1)
        self.triangle_max = np.max(self.triangles, axis=1)
#       self.triangle_max = np.max(self.triangles, axis=1)
        self.min_bounds = np.min(self.triangle_min, axis=0)
#       self.min_bounds = np.min(self.triangle_min, axis=0)
        self.max_bounds = np.max(self.triangle_max, axis=0)
#       self.max_bounds = np.max(self.triangle_max, axis=0)

    def __len__(self) -> int:
#   def __len__(self) -> int:
        return len(self.triangles)
#       return len(self.triangles)

    def candidates(self, box_min: npt.NDArray[np.float64], box_max: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
#   def candidates(self, box_min: npt.NDArray[np.float64], box_max: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        if len(self.triangles) == 0 or np.any(box_max < self.min_bounds) or np.any(box_min > self.max_bounds):
#       if len(self.triangles) == 0 or np.any(box_max < self.min_bounds) or np.any(box_min > self.max_bounds):
            return np.zeros((0, 3, 3), dtype=np.float64)
#           return np.zeros((0, 3, 3), dtype=np.float64)
        overlapping: npt.NDArray[np.bool_] = np.all(self.triangle_max >= box_min, axis=1) & np.all(self.triangle_min <= box_max, axis=1)
#       overlapping: npt.NDArray[np.bool_] = np.all(self.triangle_max >= box_min, axis=1) & np.all(self.triangle_min <= box_max, axis=1)
        return self.triangles[overlapping]
#       return self.triangles[overlapping]

class CollisionWorld:
    # Static colliders built once from the imported meshes; the player queries it every frame.
#   # Static colliders built once from the imported meshes; the player queries it every frame.
    def __init__(self, meshes: list[ImportedMesh]) -> None:
#   def __init__(self, meshes: list[ImportedMesh]) -> None:
        self.colliders: list[StaticCollider] = [StaticCollider(mesh) for mesh in meshes]
#       self.colliders: list[StaticCollider] = [StaticCollider(mesh) for mesh in meshes]
        pass
#       pass

    @property
#   @property
    def triangle_count(self) -> int:
#   def triangle_count(self) -> int:
        return sum(len(collider) for collider in self.colliders)
#       return sum(len(collider) for collider in self.colliders)

    def contacts(self, center: npt.NDArray[np.float64], half_extents: npt.NDArray[np.float64]) -> typing.Iterator[npt.NDArray[np.float64]]:
#   def contacts(self, center: npt.NDArray[np.float64], half_extents: npt.NDArray[np.float64]) -> typing.Iterator[npt.NDArray[np.float64]]:
        # Broad phase only: triangles whose bounds touch the box.
#       # Broad phase only: triangles whose bounds touch the box.
        box_min: npt.NDArray[np.float64] = center - half_extents
#       box_min: npt.NDArray[np.float64] = center - half_extents
        box_max: npt.NDArray[np.float64] = center + half_extents
#       box_max: npt.NDArray[np.float64] = center + half_extents
        for collider in self.colliders:
#       for collider in self.colliders:
            yield from collider.candidates(box_min, box_max)
#           yield from collider.candidates(box_min, box_max)

    def resolve_box(self, center: npt.NDArray[np.float64], half_extents: npt.NDArray[np.float64]) -> tuple[npt.NDArray[np.float64], list[Contact]]:
#   def resolve_box(self, center: npt.NDArray[np.float64], half_extents: npt.NDArray[np.float64]) -> tuple[npt.NDArray[np.float64], list[Contact]]:
        """
        Moves a box out of every triangle it overlaps, one triangle at a time.
#       Moves a box out of every triangle it overlaps, one triangle at a time.
        Returns the corrected center and the contacts that were applied.
#       Returns the corrected center and the contacts that were applied.
        """
        resolved: npt.NDArray[np.float64] = np.array(center, dtype=np.float64)
#       resolved: npt.NDArray[np.float64] = np.array(center, dtype=np.float64)
        half: npt.NDArray[np.float64] = np.asarray(half_extents, dtype=np.float64)
#       half: npt.NDArray[np.float64] = np.asarray(half_extents, dtype=np.float64)
        applied: list[Contact] = []
#       applied: list[Contact] = []
        for triangle in list(self.contacts(resolved, half)):
#       for triangle in list(self.contacts(resolved, half)):
            if not box_triangle_overlap(resolved, half, triangle):
#           if not box_triangle_overlap(resolved, half, triangle):
                continue
#               continue
            contact: Contact | None = face_contact(resolved, half, triangle)
#           contact: Contact | None = face_contact(resolved, half, triangle)
            if contact is None:
#           if contact is None:
                continue
#               continue
            resolved = resolved + contact.correction
#           resolved = resolved + contact.correction
            applied.append(contact)
#           applied.append(contact)
        return resolved, applied
#       return resolved, applied
