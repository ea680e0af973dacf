import logging
import logging
import pathlib as pl
import pathlib as pl
import pygltflib
import pygltflib
from walkthrough.core.common_types import NodeTransform
from walkthrough.core.common_types import NodeTransform
from walkthrough.core.errors import ImportFailed, MalformedDocument, MissingRequiredAttribute, NoSceneAvailable
from walkthrough.core.errors import ImportFailed, MalformedDocument, MissingRequiredAttribute, NoSceneAvailable
from walkthrough.importer.document import Document, load_document
from walkthrough.importer.document import Document, load_document
from walkthrough.importer.decoder import TRIANGLES, decode_primitive, primitive_mode
from walkthrough.importer.decoder import TRIANGLES, decode_primitive, primitive_mode
from walkthrough.importer.textures import TextureTable, TextureUpload
from walkthrough.importer.textures import TextureTable, TextureUpload
from walkthrough.importer.transforms import collect_transforms
from walkthrough.importer.transforms import collect_transforms
from walkthrough.scene.mesh import ImportedMesh
from walkthrough.scene.mesh import ImportedMesh

logger: logging.Logger = logging.getLogger(__name__)

def mesh_name(mesh: pygltflib.Mesh, mesh_index: int, primitive_index: int) -> str:
    return f"{mesh.name or f'mesh_{mesh_index}'}:{primitive_index}"
#   return f"{mesh.name or f'mesh_{mesh_index}'}:{primitive_index}"

def assemble_meshes(document: Document, textures: TextureTable, transforms: dict[int, NodeTransform]) -> tuple[list[ImportedMesh], int]:
    """
    Builds one ImportedMesh per triangle-mode primitive, in mesh then primitive order.
#   Builds one ImportedMesh per triangle-mode primitive, in mesh then primitive order.
    A primitive that fails to decode is logged and skipped; returns the meshes and the skip count.
#   A primitive that fails to decode is logged and skipped; returns the meshes and the skip count.
    """
    meshes: list[ImportedMesh] = []
#   meshes: list[ImportedMesh] = []
    skipped: int = 0
#   skipped: int = 0

    for mesh_index, gltf_mesh in enumerate(document.meshes):
#   for mesh_index, gltf_mesh in enumerate(document.meshes):
        transform: NodeTransform = transforms.get(mesh_index, NodeTransform())
#       transform: NodeTransform = transforms.get(mesh_index, NodeTransform())
        for primitive_index, primitive in enumerate(gltf_mesh.primitives or []):
#       for primitive_index, primitive in enumerate(gltf_mesh.primitives or []):
            name: str = mesh_name(gltf_mesh, mesh_index, primitive_index)
#           name: str = mesh_name(gltf_mesh, mesh_index, primitive_index)
            if primitive_mode(primitive) != TRIANGLES:
#           if primitive_mode(primitive) != TRIANGLES:
                logger.debug("Skipping %s: mode %s is not a triangle list", name, primitive.mode)
#               logger.debug("Skipping %s: mode %s is not a triangle list", name, primitive.mode)
                continue
#               continue

            try:
#           try:
                vertices, triangles = decode_primitive(document, primitive)
#               vertices, triangles = decode_primitive(document, primitive)
            except (MalformedDocument, MissingRequiredAttribute) as e:
#           except (MalformedDocument, MissingRequiredAttribute) as e:
                logger.warning("Skipping primitive %s of %s: %s", name, document.path.name, e)
#               logger.warning("Skipping primitive %s of %s: %s", name, document.path.name, e)
                skipped += 1
#               skipped += 1
                continue
#               continue

            if len(vertices) == 0 or len(triangles) == 0:
#           if len(vertices) == 0 or len(triangles) == 0:
                logger.warning("Skipping primitive %s of %s: no complete triangle (%d vertices, %d triangles)", name, document.path.name, len(vertices), len(triangles))
#               logger.warning("Skipping primitive %s of %s: no complete triangle (%d vertices, %d triangles)", name, document.path.name, len(vertices), len(triangles))
                skipped += 1
#               skipped += 1
                continue
#               continue

            mesh: ImportedMesh = ImportedMesh(
#           mesh: ImportedMesh = ImportedMesh(
                name=name,
#               name=name,
                mesh_index=mesh_index,
#               mesh_index=mesh_index,
                primitive_index=primitive_index,
#               primitive_index=primitive_index,
                vertices=vertices,
#               vertices=vertices,
                triangles=triangles,
#               triangles=triangles,
                base_color=textures.resolve_base_color(primitive.material),
#               base_color=textures.resolve_base_color(primitive.material),
            )
#           )
            mesh.apply_transform(transform)
#           mesh.apply_transform(transform)
            meshes.append(mesh)
#           meshes.append(mesh)

    return meshes, skipped
#   return meshes, skipped

def import_scene(path: str | pl.Path, upload_texture: TextureUpload | None = None) -> list[ImportedMesh]:
    # Load -> texture table -> transforms -> assemble. Only ImportFailed escapes.
#   # Load -> texture table -> transforms -> assemble. Only ImportFailed escapes.
    path = pl.Path(path)
#   path = pl.Path(path)
    document: Document = load_document(path)
#   document: Document = load_document(path)

    textures: TextureTable = TextureTable(document, upload=upload_texture)
#   textures: TextureTable = TextureTable(document, upload=upload_texture)

    try:
#   try:
        transforms: dict[int, NodeTransform] = collect_transforms(document)
#       transforms: dict[int, NodeTransform] = collect_transforms(document)
    except (NoSceneAvailable, MalformedDocument) as e:
#   except (NoSceneAvailable, MalformedDocument) as e:
        raise ImportFailed(path, str(e)) from e
#       raise ImportFailed(path, str(e)) from e

    meshes, skipped = assemble_meshes(document, textures, transforms)
#   meshes, skipped = assemble_meshes(document, textures, transforms)
    if not meshes:
#   if not meshes:
        raise ImportFailed(path, f"no mesh survived decoding ({skipped} primitives skipped)")
#       raise ImportFailed(path, f"no mesh survived decoding ({skipped} primitives skipped)")

    triangle_count: int = sum(mesh.triangle_count for mesh in meshes)
#   triangle_count: int = sum(mesh.triangle_count for mesh in meshes)
    logger.info("Imported %s: %d meshes, %d triangles, %d textures, %d primitives skipped", path.name, len(meshes), triangle_count, len(textures), skipped)
#   logger.info("Imported %s: %d meshes, %d triangles, %d textures, %d primitives skipped", path.name, len(meshes), triangle_count, len(textures), skipped)
    return meshes
#   return meshes
