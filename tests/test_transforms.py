import logging
import logging
import math
import math
import pathlib as pl
import pathlib as pl
import numpy as np
import numpy as np
import pytest
import pytest
from gltf_builder import GltfBuilder
from gltf_builder import GltfBuilder
import quaternion_helpers
import quaternion_helpers
from walkthrough.core import rotation
from walkthrough.core import rotation
from walkthrough.core.common_types import NodeTransform
from walkthrough.core.common_types import NodeTransform
from walkthrough.core.errors import ImportFailed, MalformedDocument, NoSceneAvailable
from walkthrough.core.errors import ImportFailed, MalformedDocument, NoSceneAvailable
from walkthrough.importer.assembler import import_scene
from walkthrough.importer.assembler import import_scene
from walkthrough.importer.document import Document, load_document
from walkthrough.importer.document import Document, load_document
from walkthrough.importer.transforms import active_scene_index, collect_transforms
from walkthrough.importer.transforms import active_scene_index, collect_transforms

def load(builder: GltfBuilder, tmp_path: pl.Path) -> Document:
    return load_document(builder.write_gltf(tmp_path / "scene.gltf"))
#   return load_document(builder.write_gltf(tmp_path / "scene.gltf"))

# ---------------------------------------------------------------------------
# Quaternion -> Euler
# ---------------------------------------------------------------------------

def test_identity_quaternion() -> None:
    assert rotation.to_euler(0.0, 0.0, 0.0, 1.0) == pytest.approx((0.0, 0.0, 0.0))
#   assert rotation.to_euler(0.0, 0.0, 0.0, 1.0) == pytest.approx((0.0, 0.0, 0.0))

def test_quarter_turn_about_y_is_yaw() -> None:
    half: float = math.sqrt(0.5)
#   half: float = math.sqrt(0.5)
    pitch, yaw, roll = rotation.to_euler(0.0, half, 0.0, half)
#   pitch, yaw, roll = rotation.to_euler(0.0, half, 0.0, half)
    assert pitch == pytest.approx(0.0, abs=1e-6)
#   assert pitch == pytest.approx(0.0, abs=1e-6)
    assert yaw == pytest.approx(math.pi / 2.0)
#   assert yaw == pytest.approx(math.pi / 2.0)
    assert roll == pytest.approx(0.0, abs=1e-6)
#   assert roll == pytest.approx(0.0, abs=1e-6)

@pytest.mark.parametrize("angles", [
    (0.3, 0.0, 0.0),
#   (0.3, 0.0, 0.0),
    (0.0, -1.2, 0.0),
#   (0.0, -1.2, 0.0),
    (0.0, 0.0, 2.5),
#   (0.0, 0.0, 2.5),
    (0.4, 1.1, -0.7),
#   (0.4, 1.1, -0.7),
    (-1.2, 3.0, 0.2),
#   (-1.2, 3.0, 0.2),
    (1.4, -2.9, -3.0),
#   (1.4, -2.9, -3.0),
])
def test_euler_round_trip(angles: tuple[float, float, float]) -> None:
    quaternion = quaternion_helpers.from_euler(*angles)
#   quaternion = quaternion_helpers.from_euler(*angles)
    assert rotation.to_euler(*quaternion) == pytest.approx(angles, abs=1e-4)
#   assert rotation.to_euler(*quaternion) == pytest.approx(angles, abs=1e-4)

def test_quaternion_matrix_matches_engine_order() -> None:
    angles: tuple[float, float, float] = (0.4, 1.1, -0.7)
#   angles: tuple[float, float, float] = (0.4, 1.1, -0.7)
    quaternion = quaternion_helpers.from_euler(*angles)
#   quaternion = quaternion_helpers.from_euler(*angles)
    np.testing.assert_allclose(quaternion_helpers.quaternion_matrix(*quaternion), rotation.rotation_matrix(*angles), atol=1e-9)
#   np.testing.assert_allclose(quaternion_helpers.quaternion_matrix(*quaternion), rotation.rotation_matrix(*angles), atol=1e-9)
    np.testing.assert_allclose(rotation.rotation_matrix(*rotation.to_euler(*quaternion)), rotation.rotation_matrix(*angles), atol=1e-9)
#   np.testing.assert_allclose(rotation.rotation_matrix(*rotation.to_euler(*quaternion)), rotation.rotation_matrix(*angles), atol=1e-9)

def test_slightly_non_unit_quaternion_stays_finite() -> None:
    # Pitch of exactly +90 degrees with a little extra length pushes the asin argument past 1.
#   # Pitch of exactly +90 degrees with a little extra length pushes the asin argument past 1.
    half: float = math.sqrt(0.5) * 1.0001
#   half: float = math.sqrt(0.5) * 1.0001
    pitch, yaw, roll = rotation.to_euler(half, 0.0, 0.0, half)
#   pitch, yaw, roll = rotation.to_euler(half, 0.0, 0.0, half)
    assert math.isfinite(pitch) and math.isfinite(yaw) and math.isfinite(roll)
#   assert math.isfinite(pitch) and math.isfinite(yaw) and math.isfinite(roll)
    assert pitch == pytest.approx(math.pi / 2.0)
#   assert pitch == pytest.approx(math.pi / 2.0)

# ---------------------------------------------------------------------------
# Scene graph
# ---------------------------------------------------------------------------

def test_node_without_trs_gets_identity(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    builder.add_scene([builder.add_node(mesh=mesh)])
#   builder.add_scene([builder.add_node(mesh=mesh)])

    assert collect_transforms(load(builder, tmp_path)) == {mesh: NodeTransform()}
#   assert collect_transforms(load(builder, tmp_path)) == {mesh: NodeTransform()}

def test_fields_default_independently(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    builder.add_scene([builder.add_node(mesh=mesh, translation=[1.0, 2.0, 3.0])])
#   builder.add_scene([builder.add_node(mesh=mesh, translation=[1.0, 2.0, 3.0])])

    transform: NodeTransform = collect_transforms(load(builder, tmp_path))[mesh]
#   transform: NodeTransform = collect_transforms(load(builder, tmp_path))[mesh]
    assert transform.translation == (1.0, 2.0, 3.0)
#   assert transform.translation == (1.0, 2.0, 3.0)
    assert transform.scale == (1.0, 1.0, 1.0)
#   assert transform.scale == (1.0, 1.0, 1.0)
    assert transform.rotation == (0.0, 0.0, 0.0, 1.0)
#   assert transform.rotation == (0.0, 0.0, 0.0, 1.0)

def test_last_visited_node_wins(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    child: int = builder.add_node(mesh=mesh, translation=[0.0, 0.0, 5.0])
#   child: int = builder.add_node(mesh=mesh, translation=[0.0, 0.0, 5.0])
    parent: int = builder.add_node(mesh=mesh, children=[child], translation=[0.0, 1.0, 0.0])
#   parent: int = builder.add_node(mesh=mesh, children=[child], translation=[0.0, 1.0, 0.0])
    sibling: int = builder.add_node(mesh=mesh, scale=[2.0, 2.0, 2.0])
#   sibling: int = builder.add_node(mesh=mesh, scale=[2.0, 2.0, 2.0])
    builder.add_scene([parent, sibling])
#   builder.add_scene([parent, sibling])

    transform: NodeTransform = collect_transforms(load(builder, tmp_path))[mesh]
#   transform: NodeTransform = collect_transforms(load(builder, tmp_path))[mesh]
    assert transform.scale == (2.0, 2.0, 2.0)
#   assert transform.scale == (2.0, 2.0, 2.0)
    assert transform.translation == (0.0, 0.0, 0.0)
#   assert transform.translation == (0.0, 0.0, 0.0)

def test_children_are_visited_in_pre_order(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    first: int = builder.add_node(mesh=mesh, translation=[1.0, 0.0, 0.0])
#   first: int = builder.add_node(mesh=mesh, translation=[1.0, 0.0, 0.0])
    second: int = builder.add_node(mesh=mesh, translation=[2.0, 0.0, 0.0])
#   second: int = builder.add_node(mesh=mesh, translation=[2.0, 0.0, 0.0])
    parent: int = builder.add_node(mesh=mesh, children=[first, second], translation=[9.0, 0.0, 0.0])
#   parent: int = builder.add_node(mesh=mesh, children=[first, second], translation=[9.0, 0.0, 0.0])
    builder.add_scene([parent])
#   builder.add_scene([parent])

    assert collect_transforms(load(builder, tmp_path))[mesh].translation == (2.0, 0.0, 0.0)
#   assert collect_transforms(load(builder, tmp_path))[mesh].translation == (2.0, 0.0, 0.0)

def test_shared_child_is_not_a_cycle(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    shared: int = builder.add_node(mesh=mesh, translation=[0.0, 4.0, 0.0])
#   shared: int = builder.add_node(mesh=mesh, translation=[0.0, 4.0, 0.0])
    left: int = builder.add_node(children=[shared])
#   left: int = builder.add_node(children=[shared])
    right: int = builder.add_node(children=[shared])
#   right: int = builder.add_node(children=[shared])
    builder.add_scene([left, right])
#   builder.add_scene([left, right])

    assert collect_transforms(load(builder, tmp_path))[mesh].translation == (0.0, 4.0, 0.0)
#   assert collect_transforms(load(builder, tmp_path))[mesh].translation == (0.0, 4.0, 0.0)

def test_cycle_is_malformed(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    builder.add_node(mesh=mesh, children=[1])
#   builder.add_node(mesh=mesh, children=[1])
    builder.add_node(children=[0])
#   builder.add_node(children=[0])
    builder.add_scene([0])
#   builder.add_scene([0])

    with pytest.raises(MalformedDocument):
#   with pytest.raises(MalformedDocument):
        collect_transforms(load(builder, tmp_path))
#       collect_transforms(load(builder, tmp_path))

def test_child_index_out_of_range_is_malformed(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    builder.add_scene([builder.add_node(mesh=mesh, children=[12])])
#   builder.add_scene([builder.add_node(mesh=mesh, children=[12])])

    with pytest.raises(MalformedDocument):
#   with pytest.raises(MalformedDocument):
        collect_transforms(load(builder, tmp_path))
#       collect_transforms(load(builder, tmp_path))

def test_first_scene_is_used_when_none_is_designated(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    builder.add_scene([builder.add_node(mesh=mesh, translation=[1.0, 0.0, 0.0])], default=False)
#   builder.add_scene([builder.add_node(mesh=mesh, translation=[1.0, 0.0, 0.0])], default=False)
    builder.add_scene([builder.add_node(mesh=mesh, translation=[2.0, 0.0, 0.0])], default=False)
#   builder.add_scene([builder.add_node(mesh=mesh, translation=[2.0, 0.0, 0.0])], default=False)
    document: Document = load(builder, tmp_path)
#   document: Document = load(builder, tmp_path)

    assert active_scene_index(document) == 0
#   assert active_scene_index(document) == 0
    assert collect_transforms(document)[mesh].translation == (1.0, 0.0, 0.0)
#   assert collect_transforms(document)[mesh].translation == (1.0, 0.0, 0.0)

def test_designated_scene_is_used(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    builder.add_scene([builder.add_node(mesh=mesh, translation=[1.0, 0.0, 0.0])], default=False)
#   builder.add_scene([builder.add_node(mesh=mesh, translation=[1.0, 0.0, 0.0])], default=False)
    builder.add_scene([builder.add_node(mesh=mesh, translation=[2.0, 0.0, 0.0])], default=True)
#   builder.add_scene([builder.add_node(mesh=mesh, translation=[2.0, 0.0, 0.0])], default=True)

    assert collect_transforms(load(builder, tmp_path))[mesh].translation == (2.0, 0.0, 0.0)
#   assert collect_transforms(load(builder, tmp_path))[mesh].translation == (2.0, 0.0, 0.0)

def test_no_scenes(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    builder.add_quad_mesh()
#   builder.add_quad_mesh()
    path: pl.Path = builder.write_gltf(tmp_path / "scene.gltf")
#   path: pl.Path = builder.write_gltf(tmp_path / "scene.gltf")

    with pytest.raises(NoSceneAvailable):
#   with pytest.raises(NoSceneAvailable):
        collect_transforms(load_document(path))
#       collect_transforms(load_document(path))
    with pytest.raises(ImportFailed):
#   with pytest.raises(ImportFailed):
        import_scene(path)
#       import_scene(path)

def test_designated_scene_out_of_range_fails_import(tmp_path: pl.Path) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    builder.add_scene([builder.add_node(mesh=mesh)])
#   builder.add_scene([builder.add_node(mesh=mesh)])
    builder.document["scene"] = 3
#   builder.document["scene"] = 3

    with pytest.raises(ImportFailed):
#   with pytest.raises(ImportFailed):
        import_scene(builder.write_gltf(tmp_path / "scene.gltf"))
#       import_scene(builder.write_gltf(tmp_path / "scene.gltf"))

def test_matrix_only_node_keeps_identity(tmp_path: pl.Path, caplog: pytest.LogCaptureFixture) -> None:
    builder: GltfBuilder = GltfBuilder()
#   builder: GltfBuilder = GltfBuilder()
    mesh: int = builder.add_quad_mesh()
#   mesh: int = builder.add_quad_mesh()
    matrix: list[float] = [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 5.0, 0.0, 0.0, 1.0]
#   matrix: list[float] = [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 5.0, 0.0, 0.0, 1.0]
    builder.add_scene([builder.add_node(mesh=mesh, matrix=matrix)])
#   builder.add_scene([builder.add_node(mesh=mesh, matrix=matrix)])

    with caplog.at_level(logging.WARNING):
#   with caplog.at_level(logging.WARNING):
        transforms = collect_transforms(load(builder, tmp_path))
#       transforms = collect_transforms(load(builder, tmp_path))
    assert transforms[mesh] == NodeTransform()
#   assert transforms[mesh] == NodeTransform()
    assert "matrix" in caplog.text
#   assert "matrix" in caplog.text
