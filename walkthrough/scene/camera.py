import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import pyrr as rr # type: ignore[import-untyped]
import pyrr as rr
from walkthrough.core.common_types import PlayerInput, vec3f32
from walkthrough.core.common_types import PlayerInput, vec3f32
from walkthrough.core import rotation
from walkthrough.core import rotation
from walkthrough.scene.collision import CollisionWorld, Contact
from walkthrough.scene.collision import CollisionWorld, Contact

class Player:
    # First-person walker: an axis-aligned box that falls under gravity and is pushed out of the static map.
#   # First-person walker: an axis-aligned box that falls under gravity and is pushed out of the static map.
    # The camera sits at the eye position and looks along (pitch, yaw); roll is always zero.
#   # The camera sits at the eye position and looks along (pitch, yaw); roll is always zero.
    # Right-handed, Y-Up, -Z Forward, 1 unit = 1 metre.
#   # Right-handed, Y-Up, -Z Forward, 1 unit = 1 metre.

    # 0.5 m wide, 1.8 m tall
#   # 0.5 m wide, 1.8 m tall
    half_extents: vec3f32 = (0.25, 0.9, 0.25)
#   half_extents: vec3f32 = (0.25, 0.9, 0.25)
    # Above the box centre, ~1.65 m above the feet.
#   # Above the box centre, ~1.65 m above the feet.
    eye_height: float = 0.75
#   eye_height: float = 0.75
    move_speed: float = 5.0
#   move_speed: float = 5.0
    jump_speed: float = 5.0
#   jump_speed: float = 5.0
    gravity: float = -20.0
#   gravity: float = -20.0
    # Degrees per pixel of mouse motion.
#   # Degrees per pixel of mouse motion.
    mouse_sensitivity: float = 0.1
#   mouse_sensitivity: float = 0.1
    # A push whose direction has an up component above this counts as standing on a floor.
#   # A push whose direction has an up component above this counts as standing on a floor.
    floor_dot: float = 0.65
#   floor_dot: float = 0.65
    # Longest simulated step; longer frames are split.
#   # Longest simulated step; longer frames are split.
    max_step: float = 1.0 / 30.0
#   max_step: float = 1.0 / 30.0

    def __init__(self, position: vec3f32, aspect_ratio: float, fov: float = 90.0, near: float = 0.1, far: float = 10000.0) -> None:
#   def __init__(self, position: vec3f32, aspect_ratio: float, fov: float = 90.0, near: float = 0.1, far: float = 10000.0) -> None:
        self.position: rr.Vector3 = rr.Vector3(position)
#       self.position: rr.Vector3 = rr.Vector3(position)
        self.velocity: rr.Vector3 = rr.Vector3([0.0, 0.0, 0.0])
#       self.velocity: rr.Vector3 = rr.Vector3([0.0, 0.0, 0.0])
        self.grounded: bool = False
#       self.grounded: bool = False
        self.aspect_ratio: float = aspect_ratio
#       self.aspect_ratio: float = aspect_ratio
        self.fov: float = fov
#       self.fov: float = fov
        self.near: float = near
#       self.near: float = near
        self.far: float = far
#       self.far: float = far

        # Radians.
#       # Radians.
        self.yaw: float = 0.0
#       self.yaw: float = 0.0
        self.pitch: float = 0.0
#       self.pitch: float = 0.0

        self.base_projection: rr.Matrix44 = rr.Matrix44.perspective_projection(
#       self.base_projection: rr.Matrix44 = rr.Matrix44.perspective_projection(
            fovy=self.fov,
#           fovy=self.fov,
            aspect=self.aspect_ratio,
#           aspect=self.aspect_ratio,
            near=self.near,
#           near=self.near,
            far=self.far,
#           far=self.far,
        )
#       )
        pass
#       pass

    def set_aspect_ratio(self, aspect_ratio: float) -> None:
#   def set_aspect_ratio(self, aspect_ratio: float) -> None:
        self.aspect_ratio = aspect_ratio
#       self.aspect_ratio = aspect_ratio
        self.base_projection = rr.Matrix44.perspective_projection(fovy=self.fov, aspect=self.aspect_ratio, near=self.near, far=self.far)
#       self.base_projection = rr.Matrix44.perspective_projection(fovy=self.fov, aspect=self.aspect_ratio, near=self.near, far=self.far)

    def look(self, mouse_dx: float, mouse_dy: float) -> None:
#   def look(self, mouse_dx: float, mouse_dy: float) -> None:
        self.yaw -= np.radians(mouse_dx * self.mouse_sensitivity)
#       self.yaw -= np.radians(mouse_dx * self.mouse_sensitivity)
        self.pitch -= np.radians(mouse_dy * self.mouse_sensitivity)
#       self.pitch -= np.radians(mouse_dy * self.mouse_sensitivity)
        # Clamp pitch so the view never flips over the poles.
#       # Clamp pitch so the view never flips over the poles.
        self.pitch = max(-np.pi/2 + 0.1, min(np.pi/2 - 0.1, self.pitch))
#       self.pitch = max(-np.pi/2 + 0.1, min(np.pi/2 - 0.1, self.pitch))

    def get_move_direction(self, player_input: PlayerInput) -> rr.Vector3:
#   def get_move_direction(self, player_input: PlayerInput) -> rr.Vector3:
        # Horizontal only: pitch does not slow down walking.
#       # Horizontal only: pitch does not slow down walking.
        forward: rr.Vector3 = rr.Vector3([-np.sin(self.yaw), 0.0, -np.cos(self.yaw)])
#       forward: rr.Vector3 = rr.Vector3([-np.sin(self.yaw), 0.0, -np.cos(self.yaw)])
        right: rr.Vector3 = rr.Vector3([np.cos(self.yaw), 0.0, -np.sin(self.yaw)])
#       right: rr.Vector3 = rr.Vector3([np.cos(self.yaw), 0.0, -np.sin(self.yaw)])

        direction: rr.Vector3 = rr.Vector3([0.0, 0.0, 0.0])
#       direction: rr.Vector3 = rr.Vector3([0.0, 0.0, 0.0])
        if player_input.forward: direction += forward
#       if player_input.forward: direction += forward
        if player_input.backward: direction -= forward
#       if player_input.backward: direction -= forward
        if player_input.right: direction += right
#       if player_input.right: direction += right
        if player_input.left: direction -= right
#       if player_input.left: direction -= right

        length: float = float(np.linalg.norm(direction))
#       length: float = float(np.linalg.norm(direction))
        if length > 1e-6:
#       if length > 1e-6:
            direction = rr.Vector3(np.asarray(direction) / length)
#           direction = rr.Vector3(np.asarray(direction) / length)
        return direction
#       return direction

    def update(self, frame_time: float, player_input: PlayerInput, world: CollisionWorld | None = None) -> None:
#   def update(self, frame_time: float, player_input: PlayerInput, world: CollisionWorld | None = None) -> None:
        self.look(player_input.mouse_dx, player_input.mouse_dy)
#       self.look(player_input.mouse_dx, player_input.mouse_dy)

        remaining: float = max(frame_time, 0.0)
#       remaining: float = max(frame_time, 0.0)
        while remaining > 0.0:
#       while remaining > 0.0:
            step: float = min(remaining, self.max_step)
#           step: float = min(remaining, self.max_step)
            self.step(step, player_input, world)
#           self.step(step, player_input, world)
            remaining -= step
#           remaining -= step

    def step(self, dt: float, player_input: PlayerInput, world: CollisionWorld | None) -> None:
#   def step(self, dt: float, player_input: PlayerInput, world: CollisionWorld | None) -> None:
        direction: rr.Vector3 = self.get_move_direction(player_input)
#       direction: rr.Vector3 = self.get_move_direction(player_input)
        self.position[0] += direction[0] * self.move_speed * dt
#       self.position[0] += direction[0] * self.move_speed * dt
        self.position[2] += direction[2] * self.move_speed * dt
#       self.position[2] += direction[2] * self.move_speed * dt

        if player_input.jump and self.grounded:
#       if player_input.jump and self.grounded:
            self.velocity[1] = self.jump_speed
#           self.velocity[1] = self.jump_speed
        # Gravity applies every step; a floor contact zeroes the fall again.
#       # Gravity applies every step; a floor contact zeroes the fall again.
        self.velocity[1] += self.gravity * dt
#       self.velocity[1] += self.gravity * dt
        self.position[1] += self.velocity[1] * dt
#       self.position[1] += self.velocity[1] * dt

        self.grounded = False
#       self.grounded = False
        if world is not None:
#       if world is not None:
            self.resolve_collisions(world)
#           self.resolve_collisions(world)

    def resolve_collisions(self, world: CollisionWorld) -> list[Contact]:
#   def resolve_collisions(self, world: CollisionWorld) -> list[Contact]:
        center, contacts = world.resolve_box(np.asarray(self.position, dtype=np.float64), np.asarray(self.half_extents, dtype=np.float64))
#       center, contacts = world.resolve_box(np.asarray(self.position, dtype=np.float64), np.asarray(self.half_extents, dtype=np.float64))
        self.position = rr.Vector3(center)
#       self.position = rr.Vector3(center)

        for contact in contacts:
#       for contact in contacts:
            up_dot: float = float(contact.normal[1])
#           up_dot: float = float(contact.normal[1])
            if up_dot > self.floor_dot:
#           if up_dot > self.floor_dot:
                self.grounded = True
#               self.grounded = True
                if self.velocity[1] < 0.0:
#               if self.velocity[1] < 0.0:
                    self.velocity[1] = 0.0
#                   self.velocity[1] = 0.0
            elif up_dot < -self.floor_dot:
#           elif up_dot < -self.floor_dot:
                # Ceiling
#               # Ceiling
                if self.velocity[1] > 0.0:
#               if self.velocity[1] > 0.0:
                    self.velocity[1] = 0.0
#                   self.velocity[1] = 0.0
        return contacts
#       return contacts

    def get_eye_position(self) -> rr.Vector3:
#   def get_eye_position(self) -> rr.Vector3:
        return rr.Vector3([self.position[0], self.position[1] + self.eye_height, self.position[2]])
#       return rr.Vector3([self.position[0], self.position[1] + self.eye_height, self.position[2]])

    def get_view_angles(self) -> vec3f32:
#   def get_view_angles(self) -> vec3f32:
        # (pitch, yaw, roll), same convention as ImportedMesh rotations.
#       # (pitch, yaw, roll), same convention as ImportedMesh rotations.
        return (self.pitch, self.yaw, 0.0)
#       return (self.pitch, self.yaw, 0.0)

    def get_forward(self) -> rr.Vector3:
#   def get_forward(self) -> rr.Vector3:
        matrix: npt.NDArray[np.float64] = rotation.rotation_matrix(*self.get_view_angles())
#       matrix: npt.NDArray[np.float64] = rotation.rotation_matrix(*self.get_view_angles())
        return rr.Vector3(matrix @ np.array([0.0, 0.0, -1.0]))
#       return rr.Vector3(matrix @ np.array([0.0, 0.0, -1.0]))

    def get_view_matrix(self) -> rr.Matrix44:
#   def get_view_matrix(self) -> rr.Matrix44:
        eye: rr.Vector3 = self.get_eye_position()
#       eye: rr.Vector3 = self.get_eye_position()
        return rr.Matrix44.look_at(
#       return rr.Matrix44.look_at(
            eye=eye,
#           eye=eye,
            target=eye + self.get_forward(),
#           target=eye + self.get_forward(),
            up=rr.Vector3([0.0, 1.0, 0.0]),
#           up=rr.Vector3([0.0, 1.0, 0.0]),
        )
#       )

    def get_projection_matrix(self) -> rr.Matrix44:
#   def get_projection_matrix(self) -> rr.Matrix44:
        return self.base_projection.copy()
#       return self.base_projection.copy()
