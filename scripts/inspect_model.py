import sys
import sys
import os
import os
import logging
import logging
from walkthrough.core.errors import ImportFailed
from walkthrough.core.errors import ImportFailed
from walkthrough.importer.assembler import import_scene
from walkthrough.importer.assembler import import_scene

def inspect(path: str) -> None:
    if not os.path.exists(path):
#   if not os.path.exists(path):
        print(f"Error: File {path} not found.")
#       print(f"Error: File {path} not found.")
        return
#       return

    print(f"Inspecting {path}...")
#   print(f"Inspecting {path}...")

    try:
#   try:
        # Headless import: no upload callback, textures stay as CPU pixel arrays.
#       # Headless import: no upload callback, textures stay as CPU pixel arrays.
        meshes = import_scene(path)
#       meshes = import_scene(path)
    except ImportFailed as e:
#   except ImportFailed as e:
        print(f"Failed to load model: {e.reason}")
#       print(f"Failed to load model: {e.reason}")
        return
#       return

    # Print Textures (shared textures are listed once)
#   # Print Textures (shared textures are listed once)
    textures = {id(mesh.base_color): mesh.base_color for mesh in meshes if mesh.base_color is not None}
#   textures = {id(mesh.base_color): mesh.base_color for mesh in meshes if mesh.base_color is not None}
    print(f"Textures ({len(textures)}):")
#   print(f"Textures ({len(textures)}):")
    for texture in textures.values():
#   for texture in textures.values():
        print(f"  [{texture.image_index}] {texture.width}x{texture.height} {texture.pixel_format}")
#       print(f"  [{texture.image_index}] {texture.width}x{texture.height} {texture.pixel_format}")

    # Print Meshes
#   # Print Meshes
    print(f"Meshes ({len(meshes)}):")
#   print(f"Meshes ({len(meshes)}):")
    for i, mesh in enumerate(meshes):
#   for i, mesh in enumerate(meshes):
        texture_idx = mesh.base_color.image_index if mesh.base_color is not None else None
#       texture_idx = mesh.base_color.image_index if mesh.base_color is not None else None
        pitch, yaw, roll = mesh.get_rotation()
#       pitch, yaw, roll = mesh.get_rotation()
        print(f"  [{i}] {mesh.name} | Vertices: {mesh.vertex_count} | Triangles: {mesh.triangle_count} | Texture: {texture_idx}")
#       print(f"  [{i}] {mesh.name} | Vertices: {mesh.vertex_count} | Triangles: {mesh.triangle_count} | Texture: {texture_idx}")
        print(f"       Origin: {tuple(round(float(v), 4) for v in mesh.origin)} | Rotation: ({pitch:.4f}, {yaw:.4f}, {roll:.4f}) | Scale: {tuple(round(float(v), 4) for v in mesh.scale)}")
#       print(f"       Origin: {tuple(round(float(v), 4) for v in mesh.origin)} | Rotation: ({pitch:.4f}, {yaw:.4f}, {roll:.4f}) | Scale: {tuple(round(float(v), 4) for v in mesh.scale)}")

if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
#   logging.basicConfig(level=logging.WARNING)
    if len(sys.argv) < 2:
#   if len(sys.argv) < 2:
        print("Usage: python inspect_model.py <path_to_model>")
#       print("Usage: python inspect_model.py <path_to_model>")
    else:
#   else:
        inspect(sys.argv[1])
#       inspect(sys.argv[1])
