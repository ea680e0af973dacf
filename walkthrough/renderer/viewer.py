import argparse
import argparse
import logging
import logging
import moderngl as mgl
import moderngl as mgl
import moderngl_window as mglw
import moderngl_window as mglw
from moderngl_window.context.base import BaseKeys, KeyModifiers
from moderngl_window.context.base import BaseKeys, KeyModifiers
import numpy as np
import numpy as np
import pyrr as rr # type: ignore[import-untyped]
import pyrr as rr
import pathlib as pl
import pathlib as pl
import typing
import typing
from walkthrough.core.common_types import PlayerInput, vec2i32, vec3f32
from walkthrough.core.common_types import PlayerInput, vec2i32, vec3f32
from walkthrough.core.errors import ImportFailed
from walkthrough.core.errors import ImportFailed
from walkthrough.importer.assembler import import_scene
from walkthrough.importer.assembler import import_scene
from walkthrough.renderer.shader_compiler import load_shader_source
from walkthrough.renderer.shader_compiler import load_shader_source
from walkthrough.scene.camera import Player
from walkthrough.scene.camera import Player
from walkthrough.scene.collision import CollisionWorld
from walkthrough.scene.collision import CollisionWorld
from walkthrough.scene.scene_builder import SceneBuilder, SceneBatch
from walkthrough.scene.scene_builder import SceneBuilder, SceneBatch

logger: logging.Logger = logging.getLogger(__name__)

class Viewer(mglw.WindowConfig): # type: ignore[name-defined, misc]
    # First-person walkthrough of one glTF map:
#   # First-person walkthrough of one glTF map:
    # 1. Import: glTF -> ImportedMesh list (textures uploaded through SceneBuilder.upload_texture).
#   # 1. Import: glTF -> ImportedMesh list (textures uploaded through SceneBuilder.upload_texture).
    # 2. Collision: one static collider per mesh, queried by the Player every frame.
#   # 2. Collision: one static collider per mesh, queried by the Player every frame.
    # 3. Forward Pass: one draw call per mesh, base color texture or flat fallback color, single directional light.
#   # 3. Forward Pass: one draw call per mesh, base color texture or flat fallback color, single directional light.
    gl_version: vec2i32 = (3, 3)
#   gl_version: vec2i32 = (3, 3)
    title: str = "Walkthrough"
#   title: str = "Walkthrough"
    window_size: vec2i32 = (1280, 720)
#   window_size: vec2i32 = (1280, 720)
    aspect_ratio: float = window_size[0] / window_size[1]
#   aspect_ratio: float = window_size[0] / window_size[1]
    resizable: bool = True
#   resizable: bool = True
    resource_dir: pl.Path = pl.Path(__file__).parent.resolve(strict=False)
#   resource_dir: pl.Path = pl.Path(__file__).parent.resolve(strict=False)

    clear_color: vec3f32 = (0.3, 0.3, 0.3)
#   clear_color: vec3f32 = (0.3, 0.3, 0.3)
    fallback_color: vec3f32 = (0.8, 0.8, 0.8)
#   fallback_color: vec3f32 = (0.8, 0.8, 0.8)
    light_direction: vec3f32 = (-0.4, -1.0, -0.3)
#   light_direction: vec3f32 = (-0.4, -1.0, -0.3)

    @classmethod
#   @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
#   def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--scene", type=pl.Path, default=pl.Path("assets/map.glb"), help="glTF 2.0 map to walk through (.gltf or .glb)")
#       parser.add_argument("--scene", type=pl.Path, default=pl.Path("assets/map.glb"), help="glTF 2.0 map to walk through (.gltf or .glb)")
        parser.add_argument("--spawn", type=float, nargs=3, default=[0.0, 3.0, 0.0], metavar=("X", "Y", "Z"), help="Player spawn position (box centre)")
#       parser.add_argument("--spawn", type=float, nargs=3, default=[0.0, 3.0, 0.0], metavar=("X", "Y", "Z"), help="Player spawn position (box centre)")

    def __init__(self, **kwargs: dict[str, typing.Any]) -> None:
#   def __init__(self, **kwargs: dict[str, typing.Any]) -> None:
        super().__init__(**kwargs)
#       super().__init__(**kwargs)

        # -----------------------------
#       # -----------------------------
        # 1. Forward Shader
#       # 1. Forward Shader
        # -----------------------------
#       # -----------------------------
        forward_vs_code: str = load_shader_source(self.resource_dir / "../shaders/forward_vs.glsl")
#       forward_vs_code: str = load_shader_source(self.resource_dir / "../shaders/forward_vs.glsl")
        forward_fs_code: str = load_shader_source(self.resource_dir / "../shaders/forward_fs.glsl")
#       forward_fs_code: str = load_shader_source(self.resource_dir / "../shaders/forward_fs.glsl")
        self.program_forward: mgl.Program = self.ctx.program(
#       self.program_forward: mgl.Program = self.ctx.program(
              vertex_shader=forward_vs_code,
#             vertex_shader=forward_vs_code,
            fragment_shader=forward_fs_code,
#           fragment_shader=forward_fs_code,
        )
#       )

        # -----------------------------
#       # -----------------------------
        # 2. Scene Geometry
#       # 2. Scene Geometry
        # -----------------------------
#       # -----------------------------
        self.scene_builder: SceneBuilder = SceneBuilder(self.ctx, self.program_forward)
#       self.scene_builder: SceneBuilder = SceneBuilder(self.ctx, self.program_forward)
        scene_path: pl.Path = pl.Path(self.argv.scene)
#       scene_path: pl.Path = pl.Path(self.argv.scene)
        try:
#       try:
            meshes = import_scene(scene_path, upload_texture=self.scene_builder.upload_texture)
#           meshes = import_scene(scene_path, upload_texture=self.scene_builder.upload_texture)
        except ImportFailed as e:
#       except ImportFailed as e:
            print(f"Error: {e}")
#           print(f"Error: {e}")
            raise
#           raise
        self.scene_batches: list[SceneBatch] = self.scene_builder.build(meshes)
#       self.scene_batches: list[SceneBatch] = self.scene_builder.build(meshes)

        # -----------------------------
#       # -----------------------------
        # 3. Collision + Player
#       # 3. Collision + Player
        # -----------------------------
#       # -----------------------------
        logger.info("Building %d map colliders...", len(meshes))
#       logger.info("Building %d map colliders...", len(meshes))
        self.collision_world: CollisionWorld = CollisionWorld(meshes)
#       self.collision_world: CollisionWorld = CollisionWorld(meshes)
        logger.info("Map colliders ready: %d triangles", self.collision_world.triangle_count)
#       logger.info("Map colliders ready: %d triangles", self.collision_world.triangle_count)

        spawn: vec3f32 = (float(self.argv.spawn[0]), float(self.argv.spawn[1]), float(self.argv.spawn[2]))
#       spawn: vec3f32 = (float(self.argv.spawn[0]), float(self.argv.spawn[1]), float(self.argv.spawn[2]))
        self.player: Player = Player(position=spawn, aspect_ratio=self.aspect_ratio)
#       self.player: Player = Player(position=spawn, aspect_ratio=self.aspect_ratio)

        # -----------------------------
#       # -----------------------------
        # 4. Input State
#       # 4. Input State
        # -----------------------------
#       # -----------------------------
        # ESC toggles mouse capture instead of closing the window.
#       # ESC toggles mouse capture instead of closing the window.
        self.wnd.exit_key = None
#       self.wnd.exit_key = None
        self.mouse_captured: bool = False
#       self.mouse_captured: bool = False
        self.mouse_dx: float = 0.0
#       self.mouse_dx: float = 0.0
        self.mouse_dy: float = 0.0
#       self.mouse_dy: float = 0.0
        self.key_state: dict[str, bool] = {
#       self.key_state: dict[str, bool] = {
            "W": False, "A": False, "S": False, "D": False,
#           "W": False, "A": False, "S": False, "D": False,
            "SPACE": False,
#           "SPACE": False,
        }
#       }

        self.ctx.enable(flags=mgl.DEPTH_TEST | mgl.CULL_FACE)
#       self.ctx.enable(flags=mgl.DEPTH_TEST | mgl.CULL_FACE)
        pass
#       pass

    def set_mouse_captured(self, captured: bool) -> None:
#   def set_mouse_captured(self, captured: bool) -> None:
        self.mouse_captured = captured
#       self.mouse_captured = captured
        self.wnd.mouse_exclusivity = captured
#       self.wnd.mouse_exclusivity = captured
        self.wnd.cursor = not captured
#       self.wnd.cursor = not captured
        # Motion from before the toggle must not turn the view.
#       # Motion from before the toggle must not turn the view.
        self.mouse_dx = 0.0
#       self.mouse_dx = 0.0
        self.mouse_dy = 0.0
#       self.mouse_dy = 0.0

    def on_key_event(self, key: typing.Any, action: typing.Any, modifiers: KeyModifiers) -> None:
#   def on_key_event(self, key: typing.Any, action: typing.Any, modifiers: KeyModifiers) -> None:
        keys: BaseKeys = self.wnd.keys
#       keys: BaseKeys = self.wnd.keys
        if action == keys.ACTION_PRESS:
#       if action == keys.ACTION_PRESS:
            if key == keys.ESCAPE: self.set_mouse_captured(not self.mouse_captured)
#           if key == keys.ESCAPE: self.set_mouse_captured(not self.mouse_captured)
            elif key == keys.W: self.key_state["W"] = True
#           elif key == keys.W: self.key_state["W"] = True
            elif key == keys.S: self.key_state["S"] = True
#           elif key == keys.S: self.key_state["S"] = True
            elif key == keys.A: self.key_state["A"] = True
#           elif key == keys.A: self.key_state["A"] = True
            elif key == keys.D: self.key_state["D"] = True
#           elif key == keys.D: self.key_state["D"] = True
            elif key == keys.SPACE: self.key_state["SPACE"] = True
#           elif key == keys.SPACE: self.key_state["SPACE"] = True
        elif action == keys.ACTION_RELEASE:
#       elif action == keys.ACTION_RELEASE:
            if key == keys.W: self.key_state["W"] = False
#           if key == keys.W: self.key_state["W"] = False
            elif key == keys.S: self.key_state["S"] = False
#           elif key == keys.S: self.key_state["S"] = False
            elif key == keys.A: self.key_state["A"] = False
#           elif key == keys.A: self.key_state["A"] = False
            elif key == keys.D: self.key_state["D"] = False
#           elif key == keys.D: self.key_state["D"] = False
            elif key == keys.SPACE: self.key_state["SPACE"] = False
#           elif key == keys.SPACE: self.key_state["SPACE"] = False

    def on_mouse_position_event(self, x: int, y: int, dx: int, dy: int) -> None:
#   def on_mouse_position_event(self, x: int, y: int, dx: int, dy: int) -> None:
        if self.mouse_captured:
#       if self.mouse_captured:
            self.mouse_dx += dx
#           self.mouse_dx += dx
            self.mouse_dy += dy
#           self.mouse_dy += dy

    def on_resize(self, width: int, height: int) -> None:
#   def on_resize(self, width: int, height: int) -> None:
        if height > 0:
#       if height > 0:
            self.player.set_aspect_ratio(width / height)
#           self.player.set_aspect_ratio(width / height)

    def collect_input(self) -> PlayerInput:
#   def collect_input(self) -> PlayerInput:
        player_input: PlayerInput = PlayerInput(
#       player_input: PlayerInput = PlayerInput(
            forward=self.key_state["W"],
#           forward=self.key_state["W"],
            backward=self.key_state["S"],
#           backward=self.key_state["S"],
            left=self.key_state["A"],
#           left=self.key_state["A"],
            right=self.key_state["D"],
#           right=self.key_state["D"],
            jump=self.key_state["SPACE"],
#           jump=self.key_state["SPACE"],
            mouse_dx=self.mouse_dx,
#           mouse_dx=self.mouse_dx,
            mouse_dy=self.mouse_dy,
#           mouse_dy=self.mouse_dy,
        )
#       )
        self.mouse_dx = 0.0
#       self.mouse_dx = 0.0
        self.mouse_dy = 0.0
#       self.mouse_dy = 0.0
        return player_input
#       return player_input

    def on_render(self, time: float, frame_time: float) -> None:
#   def on_render(self, time: float, frame_time: float) -> None:
        # 1. Update Player (Input, Gravity, Collision)
#       # 1. Update Player (Input, Gravity, Collision)
        # 2. Forward Pass to the Screen
#       # 2. Forward Pass to the Screen
        self.player.update(frame_time=frame_time, player_input=self.collect_input(), world=self.collision_world)
#       self.player.update(frame_time=frame_time, player_input=self.collect_input(), world=self.collision_world)

        transform_view: rr.Matrix44 = self.player.get_view_matrix()
#       transform_view: rr.Matrix44 = self.player.get_view_matrix()
        transform_projection: rr.Matrix44 = self.player.get_projection_matrix()
#       transform_projection: rr.Matrix44 = self.player.get_projection_matrix()
        light_direction: rr.Vector3 = rr.vector.normalize(rr.Vector3(self.light_direction))
#       light_direction: rr.Vector3 = rr.vector.normalize(rr.Vector3(self.light_direction))

        self.ctx.screen.use()
#       self.ctx.screen.use()
        self.ctx.clear(*self.clear_color, 1.0)
#       self.ctx.clear(*self.clear_color, 1.0)

        typing.cast(mgl.Uniform, self.program_forward["uTransformView"]).write(transform_view.astype(dtype=np.float32).tobytes())
#       typing.cast(mgl.Uniform, self.program_forward["uTransformView"]).write(transform_view.astype(dtype=np.float32).tobytes())
        typing.cast(mgl.Uniform, self.program_forward["uTransformProjection"]).write(transform_projection.astype(dtype=np.float32).tobytes())
#       typing.cast(mgl.Uniform, self.program_forward["uTransformProjection"]).write(transform_projection.astype(dtype=np.float32).tobytes())
        typing.cast(mgl.Uniform, self.program_forward["uLightDirection"]).write(np.asarray(light_direction, dtype=np.float32).tobytes())
#       typing.cast(mgl.Uniform, self.program_forward["uLightDirection"]).write(np.asarray(light_direction, dtype=np.float32).tobytes())
        typing.cast(mgl.Uniform, self.program_forward["uColorFallback"]).value = self.fallback_color
#       typing.cast(mgl.Uniform, self.program_forward["uColorFallback"]).value = self.fallback_color
        typing.cast(mgl.Uniform, self.program_forward["uTextureBaseColor"]).value = 0
#       typing.cast(mgl.Uniform, self.program_forward["uTextureBaseColor"]).value = 0

        for scene_batch in self.scene_batches:
#       for scene_batch in self.scene_batches:
            typing.cast(mgl.Uniform, self.program_forward["uTransformModel"]).write(scene_batch.model_matrix.astype(dtype=np.float32).tobytes())
#           typing.cast(mgl.Uniform, self.program_forward["uTransformModel"]).write(scene_batch.model_matrix.astype(dtype=np.float32).tobytes())
            typing.cast(mgl.Uniform, self.program_forward["uHasTextureBaseColor"]).value = scene_batch.texture is not None
#           typing.cast(mgl.Uniform, self.program_forward["uHasTextureBaseColor"]).value = scene_batch.texture is not None
            if scene_batch.texture is not None:
#           if scene_batch.texture is not None:
                scene_batch.texture.use(location=0)
#               scene_batch.texture.use(location=0)
            scene_batch.vao.render()
#           scene_batch.vao.render()

    def on_close(self) -> None:
#   def on_close(self) -> None:
        self.scene_builder.release()
#       self.scene_builder.release()
