import logging
import logging
import moderngl as mgl
import moderngl as mgl
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import pyrr as rr # type: ignore[import-untyped]
import pyrr as rr
from walkthrough.importer.textures import MaterializedTexture
from walkthrough.importer.textures import MaterializedTexture
from walkthrough.scene.mesh import ImportedMesh
from walkthrough.scene.mesh import ImportedMesh

logger: logging.Logger = logging.getLogger(__name__)

class SceneBatch:
    def __init__(self, name: str, vao: mgl.VertexArray, buffers: list[mgl.Buffer], texture: mgl.Texture | None, model_matrix: rr.Matrix44, triangle_count: int) -> None:
#   def __init__(self, name: str, vao: mgl.VertexArray, buffers: list[mgl.Buffer], texture: mgl.Texture | None, model_matrix: rr.Matrix44, triangle_count: int) -> None:
        self.name: str = name
#       self.name: str = name
        self.vao: mgl.VertexArray = vao
#       self.vao: mgl.VertexArray = vao
        self.buffers: list[mgl.Buffer] = buffers
#       self.buffers: list[mgl.Buffer] = buffers
        self.texture: mgl.Texture | None = texture
#       self.texture: mgl.Texture | None = texture
        self.model_matrix: rr.Matrix44 = model_matrix
#       self.model_matrix: rr.Matrix44 = model_matrix
        self.triangle_count: int = triangle_count
#       self.triangle_count: int = triangle_count
        pass
#       pass

class SceneBuilder:
    # Turns imported meshes into GPU resources for the forward pass: one VBO + IBO + VAO per mesh,
#   # Turns imported meshes into GPU resources for the forward pass: one VBO + IBO + VAO per mesh,
    # one texture object per distinct image (the importer hands the same MaterializedTexture to every mesh that shares it).
#   # one texture object per distinct image (the importer hands the same MaterializedTexture to every mesh that shares it).
    def __init__(self, ctx: mgl.Context, program: mgl.Program) -> None:
#   def __init__(self, ctx: mgl.Context, program: mgl.Program) -> None:
        self.ctx = ctx
#       self.ctx = ctx
        self.program = program
#       self.program = program
        self.scene_batches: list[SceneBatch] = []
#       self.scene_batches: list[SceneBatch] = []
        self.textures: list[mgl.Texture] = []
#       self.textures: list[mgl.Texture] = []

    def upload_texture(self, texture: MaterializedTexture) -> mgl.Texture:
#   def upload_texture(self, texture: MaterializedTexture) -> mgl.Texture:
        # Upload callback handed to import_scene; called exactly once per distinct image.
#       # Upload callback handed to import_scene; called exactly once per distinct image.
        # Top row first, no flip: glTF UVs have a top-left origin.
#       # Top row first, no flip: glTF UVs have a top-left origin.
        data: npt.NDArray[np.uint8] = texture.upload_pixels()
#       data: npt.NDArray[np.uint8] = texture.upload_pixels()
        gl_texture: mgl.Texture = self.ctx.texture(
#       gl_texture: mgl.Texture = self.ctx.texture(
            size=(texture.width, texture.height),
#           size=(texture.width, texture.height),
            components=len(texture.pixel_format),
#           components=len(texture.pixel_format),
            data=data.tobytes(),
#           data=data.tobytes(),
            alignment=1,
#           alignment=1,
            dtype="f1",
#           dtype="f1",
        )
#       )
        gl_texture.filter = (mgl.LINEAR_MIPMAP_LINEAR, mgl.LINEAR)
#       gl_texture.filter = (mgl.LINEAR_MIPMAP_LINEAR, mgl.LINEAR)
        gl_texture.repeat_x = True
#       gl_texture.repeat_x = True
        gl_texture.repeat_y = True
#       gl_texture.repeat_y = True
        gl_texture.build_mipmaps()
#       gl_texture.build_mipmaps()
        self.textures.append(gl_texture)
#       self.textures.append(gl_texture)
        return gl_texture
#       return gl_texture

    def add_mesh(self, mesh: ImportedMesh) -> SceneBatch:
#   def add_mesh(self, mesh: ImportedMesh) -> SceneBatch:
        # Vertex layout: interleaved [Position(3), Normal(3), UV(2)], 32 bytes, straight from the importer's structured array.
#       # Vertex layout: interleaved [Position(3), Normal(3), UV(2)], 32 bytes, straight from the importer's structured array.
        vbo_mesh: mgl.Buffer = self.ctx.buffer(mesh.vertex_bytes())
#       vbo_mesh: mgl.Buffer = self.ctx.buffer(mesh.vertex_bytes())
        ibo_mesh: mgl.Buffer = self.ctx.buffer(mesh.index_bytes())
#       ibo_mesh: mgl.Buffer = self.ctx.buffer(mesh.index_bytes())
        vao: mgl.VertexArray = self.ctx.vertex_array(
#       vao: mgl.VertexArray = self.ctx.vertex_array(
            self.program,
#           self.program,
            [
#           [
                (vbo_mesh, "3f 3f 2f", "inVertexLocalPosition", "inVertexLocalNormal", "inVertexLocalUV"),
#               (vbo_mesh, "3f 3f 2f", "inVertexLocalPosition", "inVertexLocalNormal", "inVertexLocalUV"),
            ],
#           ],
            index_buffer=ibo_mesh,
#           index_buffer=ibo_mesh,
            index_element_size=4,
#           index_element_size=4,
        )
#       )

        texture: mgl.Texture | None = None
#       texture: mgl.Texture | None = None
        if mesh.base_color is not None:
#       if mesh.base_color is not None:
            texture = mesh.base_color.handle
#           texture = mesh.base_color.handle

        scene_batch: SceneBatch = SceneBatch(name=mesh.name, vao=vao, buffers=[vbo_mesh, ibo_mesh], texture=texture, model_matrix=mesh.model_matrix(), triangle_count=mesh.triangle_count)
#       scene_batch: SceneBatch = SceneBatch(name=mesh.name, vao=vao, buffers=[vbo_mesh, ibo_mesh], texture=texture, model_matrix=mesh.model_matrix(), triangle_count=mesh.triangle_count)
        self.scene_batches.append(scene_batch)
#       self.scene_batches.append(scene_batch)
        return scene_batch
#       return scene_batch

    def build(self, meshes: list[ImportedMesh]) -> list[SceneBatch]:
#   def build(self, meshes: list[ImportedMesh]) -> list[SceneBatch]:
        for mesh in meshes:
#       for mesh in meshes:
            self.add_mesh(mesh)
#           self.add_mesh(mesh)
        logger.info("Uploaded %d meshes and %d textures", len(self.scene_batches), len(self.textures))
#       logger.info("Uploaded %d meshes and %d textures", len(self.scene_batches), len(self.textures))
        return self.scene_batches
#       return self.scene_batches

    def release(self) -> None:
#   def release(self) -> None:
        for scene_batch in self.scene_batches:
#       for scene_batch in self.scene_batches:
            scene_batch.vao.release()
#           scene_batch.vao.release()
            for buffer in scene_batch.buffers:
#           for buffer in scene_batch.buffers:
                buffer.release()
#               buffer.release()
        for texture in self.textures:
#       for texture in self.textures:
            texture.release()
#           texture.release()
        self.scene_batches.clear()
#       self.scene_batches.clear()
        self.textures.clear()
#       self.textures.clear()
