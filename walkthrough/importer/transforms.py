import logging
import logging
import typing
import typing
import pygltflib
import pygltflib
from walkthrough.core.common_types import NodeTransform, vec3f32, vec4f32
from walkthrough.core.common_types import NodeTransform, vec3f32, vec4f32
from walkthrough.core.errors import MalformedDocument, NoSceneAvailable
from walkthrough.core.errors import MalformedDocument, NoSceneAvailable
from walkthrough.importer.document import Document
from walkthrough.importer.document import Document

logger: logging.Logger = logging.getLogger(__name__)

def active_scene_index(document: Document) -> int:
    if not document.scenes:
#   if not document.scenes:
        raise NoSceneAvailable(f"{document.path.name} contains no scenes")
#       raise NoSceneAvailable(f"{document.path.name} contains no scenes")
    return document.default_scene if document.default_scene is not None else 0
#   return document.default_scene if document.default_scene is not None else 0

def node_transform(node: pygltflib.Node) -> NodeTransform:
    # Each field falls back to its identity value on its own.
#   # Each field falls back to its identity value on its own.
    identity: NodeTransform = NodeTransform()
#   identity: NodeTransform = NodeTransform()
    scale: vec3f32 = identity.scale
#   scale: vec3f32 = identity.scale
    translation: vec3f32 = identity.translation
#   translation: vec3f32 = identity.translation
    rotation: vec4f32 = identity.rotation
#   rotation: vec4f32 = identity.rotation
    if node.scale is not None and len(node.scale) >= 3:
#   if node.scale is not None and len(node.scale) >= 3:
        scale = (float(node.scale[0]), float(node.scale[1]), float(node.scale[2]))
#       scale = (float(node.scale[0]), float(node.scale[1]), float(node.scale[2]))
    if node.translation is not None and len(node.translation) >= 3:
#   if node.translation is not None and len(node.translation) >= 3:
        translation = (float(node.translation[0]), float(node.translation[1]), float(node.translation[2]))
#       translation = (float(node.translation[0]), float(node.translation[1]), float(node.translation[2]))
    if node.rotation is not None and len(node.rotation) >= 4:
#   if node.rotation is not None and len(node.rotation) >= 4:
        rotation = (float(node.rotation[0]), float(node.rotation[1]), float(node.rotation[2]), float(node.rotation[3]))
#       rotation = (float(node.rotation[0]), float(node.rotation[1]), float(node.rotation[2]), float(node.rotation[3]))
    return NodeTransform(scale=scale, translation=translation, rotation=rotation)
#   return NodeTransform(scale=scale, translation=translation, rotation=rotation)

def collect_transforms(document: Document) -> dict[int, NodeTransform]:
    """
    Walks the active scene depth-first (pre-order, children in document order) and records,
#   Walks the active scene depth-first (pre-order, children in document order) and records,
    for every mesh index, the local transform of the node that references it.
#   for every mesh index, the local transform of the node that references it.
    A mesh referenced by several nodes keeps the transform of the last one visited.
#   A mesh referenced by several nodes keeps the transform of the last one visited.
    Raises NoSceneAvailable for a document without scenes and MalformedDocument for a cyclic graph.
#   Raises NoSceneAvailable for a document without scenes and MalformedDocument for a cyclic graph.
    """
    scene_index: int = active_scene_index(document)
#   scene_index: int = active_scene_index(document)
    scene: pygltflib.Scene = document.scene(scene_index)
#   scene: pygltflib.Scene = document.scene(scene_index)

    transforms: dict[int, NodeTransform] = {}
#   transforms: dict[int, NodeTransform] = {}
    on_path: set[int] = set()
#   on_path: set[int] = set()
    # (node index, leaving) pairs; the leaving marker pops the node off the current path once its subtree is done.
#   # (node index, leaving) pairs; the leaving marker pops the node off the current path once its subtree is done.
    stack: list[tuple[typing.Any, bool]] = [(root, False) for root in reversed(scene.nodes or [])]
#   stack: list[tuple[typing.Any, bool]] = [(root, False) for root in reversed(scene.nodes or [])]

    while stack:
#   while stack:
        node_index, leaving = stack.pop()
#       node_index, leaving = stack.pop()
        if leaving:
#       if leaving:
            on_path.discard(node_index)
#           on_path.discard(node_index)
            continue
#           continue

        node: pygltflib.Node = document.node(node_index)
#       node: pygltflib.Node = document.node(node_index)
        if node_index in on_path:
#       if node_index in on_path:
            raise MalformedDocument(f"node {node_index} is its own ancestor")
#           raise MalformedDocument(f"node {node_index} is its own ancestor")

        if node.mesh is not None:
#       if node.mesh is not None:
            if node.matrix is not None and node.scale is None and node.translation is None and node.rotation is None:
#           if node.matrix is not None and node.scale is None and node.translation is None and node.rotation is None:
                logger.warning("Node %s of %s uses a matrix transform; mesh %s keeps the identity transform", node_index, document.path.name, node.mesh)
#               logger.warning("Node %s of %s uses a matrix transform; mesh %s keeps the identity transform", node_index, document.path.name, node.mesh)
            transforms[node.mesh] = node_transform(node)
#           transforms[node.mesh] = node_transform(node)

        on_path.add(node_index)
#       on_path.add(node_index)
        stack.append((node_index, True))
#       stack.append((node_index, True))
        for child in reversed(node.children or []):
#       for child in reversed(node.children or []):
            stack.append((child, False))
#           stack.append((child, False))

    return transforms
#   return transforms
