import logging
import logging
import typing
import typing
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import pygltflib
import pygltflib
from walkthrough.core.errors import MalformedDocument
from walkthrough.core.errors import MalformedDocument
from walkthrough.importer.document import DecodedImage, Document, get_field
from walkthrough.importer.document import DecodedImage, Document, get_field

logger: logging.Logger = logging.getLogger(__name__)

PIXEL_FORMATS: dict[int, str] = {
    1: "R",
#   1: "R",
    2: "RG",
#   2: "RG",
    3: "RGB",
#   3: "RGB",
    4: "RGBA",
#   4: "RGBA",
}

def pixel_format(components: int) -> str:
    # Unknown channel counts are uploaded as RGBA.
#   # Unknown channel counts are uploaded as RGBA.
    return PIXEL_FORMATS.get(components, "RGBA")
#   return PIXEL_FORMATS.get(components, "RGBA")

class MaterializedTexture:
    # One per distinct image index per import, shared by reference between every mesh that samples it.
#   # One per distinct image index per import, shared by reference between every mesh that samples it.
    # handle is whatever the upload callback returned (a moderngl.Texture in the viewer, None when headless).
#   # handle is whatever the upload callback returned (a moderngl.Texture in the viewer, None when headless).
    def __init__(self, image_index: int, image: DecodedImage) -> None:
#   def __init__(self, image_index: int, image: DecodedImage) -> None:
        self.image_index: int = image_index
#       self.image_index: int = image_index
        self.width: int = image.width
#       self.width: int = image.width
        self.height: int = image.height
#       self.height: int = image.height
        self.components: int = image.components
#       self.components: int = image.components
        self.pixels: npt.NDArray[np.uint8] = image.pixels
#       self.pixels: npt.NDArray[np.uint8] = image.pixels
        self.handle: typing.Any = None
#       self.handle: typing.Any = None
        pass
#       pass

    @property
#   @property
    def pixel_format(self) -> str:
#   def pixel_format(self) -> str:
        return pixel_format(self.components)
#       return pixel_format(self.components)

    def upload_pixels(self) -> npt.NDArray[np.uint8]:
#   def upload_pixels(self) -> npt.NDArray[np.uint8]:
        # (height, width, len(pixel_format)); other channel counts are cut or padded to RGBA with opaque alpha.
#       # (height, width, len(pixel_format)); other channel counts are cut or padded to RGBA with opaque alpha.
        channels: int = len(self.pixel_format)
#       channels: int = len(self.pixel_format)
        if self.components == channels:
#       if self.components == channels:
            return np.ascontiguousarray(self.pixels, dtype=np.uint8)
#           return np.ascontiguousarray(self.pixels, dtype=np.uint8)
        rgba: npt.NDArray[np.uint8] = np.zeros((self.height, self.width, channels), dtype=np.uint8)
#       rgba: npt.NDArray[np.uint8] = np.zeros((self.height, self.width, channels), dtype=np.uint8)
        rgba[:, :, 3] = 255
#       rgba[:, :, 3] = 255
        kept: int = min(self.components, channels)
#       kept: int = min(self.components, channels)
        rgba[:, :, :kept] = self.pixels.reshape((self.height, self.width, -1))[:, :, :kept]
#       rgba[:, :, :kept] = self.pixels.reshape((self.height, self.width, -1))[:, :, :kept]
        return rgba
#       return rgba

    def __repr__(self) -> str:
#   def __repr__(self) -> str:
        return f"MaterializedTexture(image={self.image_index}, {self.width}x{self.height} {self.pixel_format})"
#       return f"MaterializedTexture(image={self.image_index}, {self.width}x{self.height} {self.pixel_format})"

TextureUpload = typing.Callable[[MaterializedTexture], typing.Any]

def materialize(image_index: int, image: DecodedImage, upload: TextureUpload | None = None) -> MaterializedTexture | None:
    if image.width <= 0 or image.height <= 0 or image.pixels.size == 0:
#   if image.width <= 0 or image.height <= 0 or image.pixels.size == 0:
        return None
#       return None
    texture: MaterializedTexture = MaterializedTexture(image_index=image_index, image=image)
#   texture: MaterializedTexture = MaterializedTexture(image_index=image_index, image=image)
    if upload is not None:
#   if upload is not None:
        texture.handle = upload(texture)
#       texture.handle = upload(texture)
    return texture
#   return texture

class TextureTable:
    # Built once before mesh assembly, read-only afterwards. Lives exactly as long as the import that owns it
#   # Built once before mesh assembly, read-only afterwards. Lives exactly as long as the import that owns it
    # (plus whatever meshes keep references to its textures).
#   # (plus whatever meshes keep references to its textures).
    def __init__(self, document: Document, upload: TextureUpload | None = None) -> None:
#   def __init__(self, document: Document, upload: TextureUpload | None = None) -> None:
        self.document: Document = document
#       self.document: Document = document
        self.textures: list[MaterializedTexture | None] = [
#       self.textures: list[MaterializedTexture | None] = [
            materialize(image_index=image_index, image=image, upload=upload)
#           materialize(image_index=image_index, image=image, upload=upload)
            for image_index, image in enumerate(document.images)
#           for image_index, image in enumerate(document.images)
        ]
#       ]
        pass
#       pass

    def __len__(self) -> int:
#   def __len__(self) -> int:
        return sum(1 for texture in self.textures if texture is not None)
#       return sum(1 for texture in self.textures if texture is not None)

    def for_image(self, image_index: int) -> MaterializedTexture | None:
#   def for_image(self, image_index: int) -> MaterializedTexture | None:
        if image_index < 0 or image_index >= len(self.textures):
#       if image_index < 0 or image_index >= len(self.textures):
            raise MalformedDocument(f"image index {image_index} out of range (document has {len(self.textures)})")
#           raise MalformedDocument(f"image index {image_index} out of range (document has {len(self.textures)})")
        return self.textures[image_index]
#       return self.textures[image_index]

    def base_color(self, material_index: int | None) -> MaterializedTexture | None:
#   def base_color(self, material_index: int | None) -> MaterializedTexture | None:
        """
        Base-color texture of a material: material -> pbrMetallicRoughness.baseColorTexture -> texture -> image.
#       Base-color texture of a material: material -> pbrMetallicRoughness.baseColorTexture -> texture -> image.
        Returns None when the chain is legitimately absent, raises MalformedDocument when an index in it is invalid.
#       Returns None when the chain is legitimately absent, raises MalformedDocument when an index in it is invalid.
        """
        if material_index is None:
#       if material_index is None:
            return None
#           return None
        material: pygltflib.Material = self.document.material(material_index)
#       material: pygltflib.Material = self.document.material(material_index)
        pbr: typing.Any = get_field(material, "pbrMetallicRoughness")
#       pbr: typing.Any = get_field(material, "pbrMetallicRoughness")
        texture_index: int | None = get_field(get_field(pbr, "baseColorTexture"), "index")
#       texture_index: int | None = get_field(get_field(pbr, "baseColorTexture"), "index")
        if texture_index is None:
#       if texture_index is None:
            return None
#           return None
        texture: pygltflib.Texture = self.document.texture(texture_index)
#       texture: pygltflib.Texture = self.document.texture(texture_index)
        if texture.source is None:
#       if texture.source is None:
            return None
#           return None
        return self.for_image(texture.source)
#       return self.for_image(texture.source)

    def resolve_base_color(self, material_index: int | None) -> MaterializedTexture | None:
#   def resolve_base_color(self, material_index: int | None) -> MaterializedTexture | None:
        # A bad material or texture reference costs the texture, never the primitive.
#       # A bad material or texture reference costs the texture, never the primitive.
        try:
#       try:
            return self.base_color(material_index)
#           return self.base_color(material_index)
        except MalformedDocument as e:
#       except MalformedDocument as e:
            logger.warning("Ignoring base-color texture of material %s: %s", material_index, e)
#           logger.warning("Ignoring base-color texture of material %s: %s", material_index, e)
            return None
#           return None
