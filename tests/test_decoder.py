import pathlib as pl
import pathlib as pl
import numpy as np
import numpy as np
import pytest
import pytest
from gltf_builder import GltfBuilder, quad_positions
from gltf_builder import GltfBuilder, quad_positions
from walkthrough.core.errors import MalformedDocument, MissingRequiredAttribute
from walkthrough.core.errors import MalformedDocument, MissingRequiredAttribute
from walkthrough.importer import accessor as acc
from walkthrough.importer import accessor as acc
from walkthrough.importer.decoder import VERTEX_DTYPE, decode_primitive, group_triangles
from walkthrough.importer.decoder import VERTEX_DTYPE, decode_primitive, group_triangles
from walkthrough.importer.document import Document, load_document
from walkthrough.importer.document import Document, load_document

def decode_first(builder: GltfBuilder, tmp_path: pl.Path) -> tuple[np.ndarray, np.ndarray]:
    document: Document = load_document(builder.write_gltf(tmp_path / "scene.gltf"))
#   document: Document = load_document(builder.write_gltf(tmp_path / "scene.gltf"))
    return decode_primitive(document, document.meshes[0].primitives[0])
#   return decode_primitive(document, document.meshes[0].primitives[0])

def test_vertex_record_is_32_bytes() -> None:
    assert VERTEX_DTYPE.itemsize == 32
#   assert VERTEX_DTYPE.itemsize == 32

@pytest.mark.parametrize(("dtype", "component_type"), [
    ("<u1", acc.UNSIGNED_BYTE),
#   ("<u1", acc.UNSIGNED_BYTE),
    ("<u2", acc.UNSIGNED_SHORT),
#   ("<u2", acc.UNSIGNED_SHORT),
    ("<u4", acc.UNSIGNED_INT),
#   ("<u4", acc.UNSIGNED_INT),
])
def test_index_widening(tmp_path: pl.Path, dtype: str, component_type: int) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions()[:3])
#   positions: int = builder.add_positions(quad_positions()[:3])
    indices: int = builder.add_indices([0, 1, 2], dtype=dtype, component_type=component_type)
#   indices: int = builder.add_indices([0, 1, 2], dtype=dtype, component_type=component_type)
    builder.add_mesh({"POSITION": positions}, indices=indices)
#   builder.add_mesh({"POSITION": positions}, indices=indices)

    vertices, triangles = decode_first(builder, tmp_path)
#   vertices, triangles = decode_first(builder, tmp_path)
    assert len(vertices) == 3
#   assert len(vertices) == 3
    assert triangles.dtype == np.uint32
#   assert triangles.dtype == np.uint32
    np.testing.assert_array_equal(triangles, [[0, 1, 2]])
#   np.testing.assert_array_equal(triangles, [[0, 1, 2]])

def test_missing_indices_use_vertex_order(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions())
#   positions: int = builder.add_positions(quad_positions())
    builder.add_mesh({"POSITION": positions})
#   builder.add_mesh({"POSITION": positions})

    vertices, triangles = decode_first(builder, tmp_path)
#   vertices, triangles = decode_first(builder, tmp_path)
    assert len(vertices) == 4
#   assert len(vertices) == 4
    np.testing.assert_array_equal(triangles, [[0, 1, 2]])
#   np.testing.assert_array_equal(triangles, [[0, 1, 2]])

def test_trailing_indices_are_dropped() -> None:
    indices: np.ndarray = np.arange(8, dtype=np.uint32)
#   indices: np.ndarray = np.arange(8, dtype=np.uint32)
    np.testing.assert_array_equal(group_triangles(indices), [[0, 1, 2], [3, 4, 5]])
#   np.testing.assert_array_equal(group_triangles(indices), [[0, 1, 2], [3, 4, 5]])
    assert group_triangles(np.arange(2, dtype=np.uint32)).shape == (0, 3)
#   assert group_triangles(np.arange(2, dtype=np.uint32)).shape == (0, 3)

def test_attributes_fill_vertex_records(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions())
#   positions: int = builder.add_positions(quad_positions())
    normals: int = builder.add_array([[0.0, 1.0, 0.0]] * 4, "<f4", acc.FLOAT, "VEC3")
#   normals: int = builder.add_array([[0.0, 1.0, 0.0]] * 4, "<f4", acc.FLOAT, "VEC3")
    uvs: int = builder.add_array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], "<f4", acc.FLOAT, "VEC2")
#   uvs: int = builder.add_array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], "<f4", acc.FLOAT, "VEC2")
    indices: int = builder.add_indices([0, 1, 2, 0, 2, 3])
#   indices: int = builder.add_indices([0, 1, 2, 0, 2, 3])
    builder.add_mesh({"POSITION": positions, "NORMAL": normals, "TEXCOORD_0": uvs}, indices=indices)
#   builder.add_mesh({"POSITION": positions, "NORMAL": normals, "TEXCOORD_0": uvs}, indices=indices)

    vertices, triangles = decode_first(builder, tmp_path)
#   vertices, triangles = decode_first(builder, tmp_path)
    np.testing.assert_array_equal(vertices["position"], quad_positions())
#   np.testing.assert_array_equal(vertices["position"], quad_positions())
    np.testing.assert_array_equal(vertices["normal"][:, 1], np.ones(4, dtype=np.float32))
#   np.testing.assert_array_equal(vertices["normal"][:, 1], np.ones(4, dtype=np.float32))
    np.testing.assert_array_equal(vertices["uv"][2], [1.0, 1.0])
#   np.testing.assert_array_equal(vertices["uv"][2], [1.0, 1.0])
    np.testing.assert_array_equal(triangles, [[0, 1, 2], [0, 2, 3]])
#   np.testing.assert_array_equal(triangles, [[0, 1, 2], [0, 2, 3]])

def test_missing_optional_attributes_stay_zero(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions())
#   positions: int = builder.add_positions(quad_positions())
    builder.add_mesh({"POSITION": positions})
#   builder.add_mesh({"POSITION": positions})

    vertices, _ = decode_first(builder, tmp_path)
#   vertices, _ = decode_first(builder, tmp_path)
    assert not vertices["normal"].any()
#   assert not vertices["normal"].any()
    assert not vertices["uv"].any()
#   assert not vertices["uv"].any()

def test_normalized_byte_uvs_are_dequantized(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions())
#   positions: int = builder.add_positions(quad_positions())
    uvs: int = builder.add_array([[0, 0], [255, 0], [255, 255], [0, 51]], "<u1", acc.UNSIGNED_BYTE, "VEC2", normalized=True)
#   uvs: int = builder.add_array([[0, 0], [255, 0], [255, 255], [0, 51]], "<u1", acc.UNSIGNED_BYTE, "VEC2", normalized=True)
    builder.add_mesh({"POSITION": positions, "TEXCOORD_0": uvs})
#   builder.add_mesh({"POSITION": positions, "TEXCOORD_0": uvs})

    vertices, _ = decode_first(builder, tmp_path)
#   vertices, _ = decode_first(builder, tmp_path)
    np.testing.assert_allclose(vertices["uv"], [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 0.2]], atol=1e-6)
#   np.testing.assert_allclose(vertices["uv"], [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 0.2]], atol=1e-6)

def test_missing_position_is_reported(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    normals: int = builder.add_array([[0.0, 1.0, 0.0]] * 3, "<f4", acc.FLOAT, "VEC3")
#   normals: int = builder.add_array([[0.0, 1.0, 0.0]] * 3, "<f4", acc.FLOAT, "VEC3")
    builder.add_mesh({"NORMAL": normals})
#   builder.add_mesh({"NORMAL": normals})

    with pytest.raises(MissingRequiredAttribute):
#   with pytest.raises(MissingRequiredAttribute):
        decode_first(builder, tmp_path)
#       decode_first(builder, tmp_path)

def test_position_with_wrong_layout_is_reported(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_array([[0, 0, 0]] * 3, "<u2", acc.UNSIGNED_SHORT, "VEC3")
#   positions: int = builder.add_array([[0, 0, 0]] * 3, "<u2", acc.UNSIGNED_SHORT, "VEC3")
    builder.add_mesh({"POSITION": positions})
#   builder.add_mesh({"POSITION": positions})

    with pytest.raises(MissingRequiredAttribute):
#   with pytest.raises(MissingRequiredAttribute):
        decode_first(builder, tmp_path)
#       decode_first(builder, tmp_path)

def test_short_normal_stream_is_malformed(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions())
#   positions: int = builder.add_positions(quad_positions())
    normals: int = builder.add_array([[0.0, 1.0, 0.0]] * 2, "<f4", acc.FLOAT, "VEC3")
#   normals: int = builder.add_array([[0.0, 1.0, 0.0]] * 2, "<f4", acc.FLOAT, "VEC3")
    builder.add_mesh({"POSITION": positions, "NORMAL": normals})
#   builder.add_mesh({"POSITION": positions, "NORMAL": normals})

    with pytest.raises(MalformedDocument):
#   with pytest.raises(MalformedDocument):
        decode_first(builder, tmp_path)
#       decode_first(builder, tmp_path)

def test_signed_indices_are_malformed(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions()[:3])
#   positions: int = builder.add_positions(quad_positions()[:3])
    indices: int = builder.add_indices([0, 1, 2], dtype="<i2", component_type=acc.SHORT)
#   indices: int = builder.add_indices([0, 1, 2], dtype="<i2", component_type=acc.SHORT)
    builder.add_mesh({"POSITION": positions}, indices=indices)
#   builder.add_mesh({"POSITION": positions}, indices=indices)

    with pytest.raises(MalformedDocument):
#   with pytest.raises(MalformedDocument):
        decode_first(builder, tmp_path)
#       decode_first(builder, tmp_path)

def test_index_past_vertex_count_is_malformed(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    positions: int = builder.add_positions(quad_positions()[:3])
#   positions: int = builder.add_positions(quad_positions()[:3])
    indices: int = builder.add_indices([0, 1, 3])
#   indices: int = builder.add_indices([0, 1, 3])
    builder.add_mesh({"POSITION": positions}, indices=indices)
#   builder.add_mesh({"POSITION": positions}, indices=indices)

    with pytest.raises(MalformedDocument):
#   with pytest.raises(MalformedDocument):
        decode_first(builder, tmp_path)
#       decode_first(builder, tmp_path)
