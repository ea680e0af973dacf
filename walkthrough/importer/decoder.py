import typing
import typing
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import pygltflib
import pygltflib
from walkthrough.core.errors import MalformedDocument, MissingRequiredAttribute
from walkthrough.core.errors import MalformedDocument, MissingRequiredAttribute
from walkthrough.importer.document import Document, get_field
from walkthrough.importer.document import Document, get_field
from walkthrough.importer import accessor as acc
from walkthrough.importer import accessor as acc

# Matches the "3f 3f 2f" vertex format of the geometry pass: 32 bytes per vertex.
VERTEX_DTYPE: np.dtype[typing.Any] = np.dtype([
    ("position", np.float32, (3,)),
#   ("position", np.float32, (3,)),
    ("normal", np.float32, (3,)),
#   ("normal", np.float32, (3,)),
    ("uv", np.float32, (2,)),
#   ("uv", np.float32, (2,)),
])

TRIANGLES: int = 4

# Normalized unsigned integer UVs map [0, max] onto [0, 1].
UV_NORMALIZATION: dict[int, float] = {
    acc.UNSIGNED_BYTE: 255.0,
#   acc.UNSIGNED_BYTE: 255.0,
    acc.UNSIGNED_SHORT: 65535.0,
#   acc.UNSIGNED_SHORT: 65535.0,
}

INDEX_COMPONENT_TYPES: tuple[int, ...] = (acc.UNSIGNED_BYTE, acc.UNSIGNED_SHORT, acc.UNSIGNED_INT)

def primitive_mode(primitive: pygltflib.Primitive) -> int:
    return primitive.mode if primitive.mode is not None else TRIANGLES
#   return primitive.mode if primitive.mode is not None else TRIANGLES

def attribute_index(primitive: pygltflib.Primitive, name: str) -> int | None:
    return get_field(primitive.attributes, name)
#   return get_field(primitive.attributes, name)

def read_positions(document: Document, accessor_index: int | None) -> npt.NDArray[np.float32]:
    if accessor_index is None:
#   if accessor_index is None:
        raise MissingRequiredAttribute("POSITION")
#       raise MissingRequiredAttribute("POSITION")
    view: acc.AccessorView = acc.resolve(document, accessor_index)
#   view: acc.AccessorView = acc.resolve(document, accessor_index)
    if view.element_type != "VEC3" or view.component_type != acc.FLOAT:
#   if view.element_type != "VEC3" or view.component_type != acc.FLOAT:
        raise MissingRequiredAttribute("POSITION", reason=f"stored as {view.element_type}/{view.component_type}, expected VEC3/FLOAT")
#       raise MissingRequiredAttribute("POSITION", reason=f"stored as {view.element_type}/{view.component_type}, expected VEC3/FLOAT")
    return view.read()
#   return view.read()

def read_normals(document: Document, accessor_index: int, vertex_count: int) -> npt.NDArray[np.float32]:
    view: acc.AccessorView = acc.resolve(document, accessor_index)
#   view: acc.AccessorView = acc.resolve(document, accessor_index)
    if view.element_type != "VEC3" or view.component_type != acc.FLOAT:
#   if view.element_type != "VEC3" or view.component_type != acc.FLOAT:
        raise MalformedDocument(f"NORMAL accessor {accessor_index} is {view.element_type}/{view.component_type}, expected VEC3/FLOAT")
#       raise MalformedDocument(f"NORMAL accessor {accessor_index} is {view.element_type}/{view.component_type}, expected VEC3/FLOAT")
    if view.count < vertex_count:
#   if view.count < vertex_count:
        raise MalformedDocument(f"NORMAL accessor {accessor_index} has {view.count} elements for {vertex_count} vertices")
#       raise MalformedDocument(f"NORMAL accessor {accessor_index} has {view.count} elements for {vertex_count} vertices")
    return view.read()[:vertex_count]
#   return view.read()[:vertex_count]

def read_uvs(document: Document, accessor_index: int, vertex_count: int) -> npt.NDArray[np.float32]:
    view: acc.AccessorView = acc.resolve(document, accessor_index)
#   view: acc.AccessorView = acc.resolve(document, accessor_index)
    if view.element_type != "VEC2":
#   if view.element_type != "VEC2":
        raise MalformedDocument(f"TEXCOORD_0 accessor {accessor_index} is {view.element_type}, expected VEC2")
#       raise MalformedDocument(f"TEXCOORD_0 accessor {accessor_index} is {view.element_type}, expected VEC2")
    if view.count < vertex_count:
#   if view.count < vertex_count:
        raise MalformedDocument(f"TEXCOORD_0 accessor {accessor_index} has {view.count} elements for {vertex_count} vertices")
#       raise MalformedDocument(f"TEXCOORD_0 accessor {accessor_index} has {view.count} elements for {vertex_count} vertices")

    data: npt.NDArray[typing.Any] = view.read()[:vertex_count]
#   data: npt.NDArray[typing.Any] = view.read()[:vertex_count]
    if view.component_type == acc.FLOAT:
#   if view.component_type == acc.FLOAT:
        return data
#       return data
    if view.component_type in UV_NORMALIZATION:
#   if view.component_type in UV_NORMALIZATION:
        return (data.astype(dtype=np.float32) / UV_NORMALIZATION[view.component_type]).astype(dtype=np.float32)
#       return (data.astype(dtype=np.float32) / UV_NORMALIZATION[view.component_type]).astype(dtype=np.float32)
    raise MalformedDocument(f"TEXCOORD_0 accessor {accessor_index} has unsupported component type {view.component_type}")
#   raise MalformedDocument(f"TEXCOORD_0 accessor {accessor_index} has unsupported component type {view.component_type}")

def decode_indices(document: Document, accessor_index: int | None, vertex_count: int) -> npt.NDArray[np.uint32]:
    """
    Flat index stream widened to 32 bits.
#   Flat index stream widened to 32 bits.
    Without an index accessor the stream is the identity sequence 0..vertex_count.
#   Without an index accessor the stream is the identity sequence 0..vertex_count.
    """
    if accessor_index is None:
#   if accessor_index is None:
        return np.arange(vertex_count, dtype=np.uint32)
#       return np.arange(vertex_count, dtype=np.uint32)

    view: acc.AccessorView = acc.resolve(document, accessor_index)
#   view: acc.AccessorView = acc.resolve(document, accessor_index)
    if view.element_type != "SCALAR":
#   if view.element_type != "SCALAR":
        raise MalformedDocument(f"index accessor {accessor_index} is {view.element_type}, expected SCALAR")
#       raise MalformedDocument(f"index accessor {accessor_index} is {view.element_type}, expected SCALAR")
    if view.component_type not in INDEX_COMPONENT_TYPES:
#   if view.component_type not in INDEX_COMPONENT_TYPES:
        raise MalformedDocument(f"index accessor {accessor_index} has unsupported component type {view.component_type}")
#       raise MalformedDocument(f"index accessor {accessor_index} has unsupported component type {view.component_type}")

    indices: npt.NDArray[np.uint32] = view.read().reshape(-1).astype(dtype=np.uint32)
#   indices: npt.NDArray[np.uint32] = view.read().reshape(-1).astype(dtype=np.uint32)
    if indices.size > 0 and int(indices.max()) >= vertex_count:
#   if indices.size > 0 and int(indices.max()) >= vertex_count:
        raise MalformedDocument(f"index accessor {accessor_index} references vertex {int(indices.max())} of {vertex_count}")
#       raise MalformedDocument(f"index accessor {accessor_index} references vertex {int(indices.max())} of {vertex_count}")
    return indices
#   return indices

def group_triangles(indices: npt.NDArray[np.uint32]) -> npt.NDArray[np.uint32]:
    # Consecutive runs of three; a trailing one or two indices cannot form a triangle and are dropped.
#   # Consecutive runs of three; a trailing one or two indices cannot form a triangle and are dropped.
    triangle_count: int = len(indices) // 3
#   triangle_count: int = len(indices) // 3
    return np.ascontiguousarray(indices[:triangle_count * 3].reshape((triangle_count, 3)), dtype=np.uint32)
#   return np.ascontiguousarray(indices[:triangle_count * 3].reshape((triangle_count, 3)), dtype=np.uint32)

def decode_primitive(document: Document, primitive: pygltflib.Primitive) -> tuple[npt.NDArray[typing.Any], npt.NDArray[np.uint32]]:
    positions: npt.NDArray[np.float32] = read_positions(document, attribute_index(primitive, "POSITION"))
#   positions: npt.NDArray[np.float32] = read_positions(document, attribute_index(primitive, "POSITION"))
    vertex_count: int = len(positions)
#   vertex_count: int = len(positions)

    vertices: npt.NDArray[typing.Any] = np.zeros(vertex_count, dtype=VERTEX_DTYPE)
#   vertices: npt.NDArray[typing.Any] = np.zeros(vertex_count, dtype=VERTEX_DTYPE)
    vertices["position"] = positions
#   vertices["position"] = positions

    normal_index: int | None = attribute_index(primitive, "NORMAL")
#   normal_index: int | None = attribute_index(primitive, "NORMAL")
    if normal_index is not None:
#   if normal_index is not None:
        vertices["normal"] = read_normals(document, normal_index, vertex_count)
#       vertices["normal"] = read_normals(document, normal_index, vertex_count)

    uv_index: int | None = attribute_index(primitive, "TEXCOORD_0")
#   uv_index: int | None = attribute_index(primitive, "TEXCOORD_0")
    if uv_index is not None:
#   if uv_index is not None:
        vertices["uv"] = read_uvs(document, uv_index, vertex_count)
#       vertices["uv"] = read_uvs(document, uv_index, vertex_count)

    indices: npt.NDArray[np.uint32] = decode_indices(document, primitive.indices, vertex_count)
#   indices: npt.NDArray[np.uint32] = decode_indices(document, primitive.indices, vertex_count)
    return vertices, group_triangles(indices)
#   return vertices, group_triangles(indices)
