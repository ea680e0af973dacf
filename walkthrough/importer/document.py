import base64
import base64
import logging
import logging
import pathlib as pl
import pathlib as pl
import typing
import typing
import urllib.parse
import urllib.parse
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import cv2
import cv2
import pygltflib
import pygltflib
from walkthrough.core.errors import ImportFailed, MalformedDocument
from walkthrough.core.errors import ImportFailed, MalformedDocument

logger: logging.Logger = logging.getLogger(__name__)

class DecodedImage(typing.NamedTuple):
    # Pixels are (height, width, components) uint8 in RGB(A) order, first row = first row of the file.
#   # Pixels are (height, width, components) uint8 in RGB(A) order, first row = first row of the file.
    width: int
#   width: int
    height: int
#   height: int
    components: int
#   components: int
    pixels: npt.NDArray[np.uint8]
#   pixels: npt.NDArray[np.uint8]

EMPTY_IMAGE: DecodedImage = DecodedImage(width=0, height=0, components=0, pixels=np.zeros((0, 0, 0), dtype=np.uint8))

def get_field(value: typing.Any, name: str) -> typing.Any:
    # pygltflib hands out nested objects either as dataclasses or as plain dicts depending on how they were built.
#   # pygltflib hands out nested objects either as dataclasses or as plain dicts depending on how they were built.
    if value is None:
#   if value is None:
        return None
#       return None
    if isinstance(value, dict):
#   if isinstance(value, dict):
        return value.get(name)
#       return value.get(name)
    return getattr(value, name, None)
#   return getattr(value, name, None)

def lookup(table: list[typing.Any] | None, index: int | None, kind: str) -> typing.Any:
    # Every cross-reference inside a document goes through here so a bad index is a MalformedDocument, never an IndexError.
#   # Every cross-reference inside a document goes through here so a bad index is a MalformedDocument, never an IndexError.
    entries: list[typing.Any] = table if table is not None else []
#   entries: list[typing.Any] = table if table is not None else []
    if index is None or isinstance(index, bool) or not isinstance(index, int):
#   if index is None or isinstance(index, bool) or not isinstance(index, int):
        raise MalformedDocument(f"{kind} index {index!r} is not an integer")
#       raise MalformedDocument(f"{kind} index {index!r} is not an integer")
    if index < 0 or index >= len(entries):
#   if index < 0 or index >= len(entries):
        raise MalformedDocument(f"{kind} index {index} out of range (document has {len(entries)})")
#       raise MalformedDocument(f"{kind} index {index} out of range (document has {len(entries)})")
    return entries[index]
#   return entries[index]

class Document:
    # Parsed once, read-only afterwards.
#   # Parsed once, read-only afterwards.
    # Owns the raw bytes of every buffer and the decoded pixels of every image; the glTF tables stay in the pygltflib object.
#   # Owns the raw bytes of every buffer and the decoded pixels of every image; the glTF tables stay in the pygltflib object.
    def __init__(self, gltf: pygltflib.GLTF2, buffers: list[bytes], images: list[DecodedImage], path: pl.Path, is_binary: bool) -> None:
#   def __init__(self, gltf: pygltflib.GLTF2, buffers: list[bytes], images: list[DecodedImage], path: pl.Path, is_binary: bool) -> None:
        self.gltf: pygltflib.GLTF2 = gltf
#       self.gltf: pygltflib.GLTF2 = gltf
        self.buffers: list[bytes] = buffers
#       self.buffers: list[bytes] = buffers
        self.images: list[DecodedImage] = images
#       self.images: list[DecodedImage] = images
        self.path: pl.Path = path
#       self.path: pl.Path = path
        self.is_binary: bool = is_binary
#       self.is_binary: bool = is_binary
        pass
#       pass

    @property
#   @property
    def meshes(self) -> list[pygltflib.Mesh]:
#   def meshes(self) -> list[pygltflib.Mesh]:
        return self.gltf.meshes or []
#       return self.gltf.meshes or []

    @property
#   @property
    def scenes(self) -> list[pygltflib.Scene]:
#   def scenes(self) -> list[pygltflib.Scene]:
        return self.gltf.scenes or []
#       return self.gltf.scenes or []

    @property
#   @property
    def default_scene(self) -> int | None:
#   def default_scene(self) -> int | None:
        return self.gltf.scene
#       return self.gltf.scene

    def accessor(self, index: int | None) -> pygltflib.Accessor:
#   def accessor(self, index: int | None) -> pygltflib.Accessor:
        return lookup(self.gltf.accessors, index, "accessor")
#       return lookup(self.gltf.accessors, index, "accessor")

    def buffer_view(self, index: int | None) -> pygltflib.BufferView:
#   def buffer_view(self, index: int | None) -> pygltflib.BufferView:
        return lookup(self.gltf.bufferViews, index, "bufferView")
#       return lookup(self.gltf.bufferViews, index, "bufferView")

    def buffer(self, index: int | None) -> bytes:
#   def buffer(self, index: int | None) -> bytes:
        return lookup(self.buffers, index, "buffer")
#       return lookup(self.buffers, index, "buffer")

    def node(self, index: int | None) -> pygltflib.Node:
#   def node(self, index: int | None) -> pygltflib.Node:
        return lookup(self.gltf.nodes, index, "node")
#       return lookup(self.gltf.nodes, index, "node")

    def scene(self, index: int | None) -> pygltflib.Scene:
#   def scene(self, index: int | None) -> pygltflib.Scene:
        return lookup(self.gltf.scenes, index, "scene")
#       return lookup(self.gltf.scenes, index, "scene")

    def material(self, index: int | None) -> pygltflib.Material:
#   def material(self, index: int | None) -> pygltflib.Material:
        return lookup(self.gltf.materials, index, "material")
#       return lookup(self.gltf.materials, index, "material")

    def texture(self, index: int | None) -> pygltflib.Texture:
#   def texture(self, index: int | None) -> pygltflib.Texture:
        return lookup(self.gltf.textures, index, "texture")
#       return lookup(self.gltf.textures, index, "texture")

    def image(self, index: int | None) -> DecodedImage:
#   def image(self, index: int | None) -> DecodedImage:
        return lookup(self.images, index, "image")
#       return lookup(self.images, index, "image")

def decode_data_uri(uri: str) -> bytes:
    # data:[<mediatype>][;base64],<data>
#   # data:[<mediatype>][;base64],<data>
    header, _, payload = uri.partition(",")
#   header, _, payload = uri.partition(",")
    if header.endswith(";base64"):
#   if header.endswith(";base64"):
        return base64.b64decode(payload)
#       return base64.b64decode(payload)
    return urllib.parse.unquote_to_bytes(payload)
#   return urllib.parse.unquote_to_bytes(payload)

def read_uri(uri: str, base_dir: pl.Path) -> bytes:
    if uri.startswith("data:"):
#   if uri.startswith("data:"):
        return decode_data_uri(uri)
#       return decode_data_uri(uri)
    return (base_dir / urllib.parse.unquote(uri)).read_bytes()
#   return (base_dir / urllib.parse.unquote(uri)).read_bytes()

def resolve_buffers(gltf: pygltflib.GLTF2, path: pl.Path, is_binary: bool) -> list[bytes]:
    buffers: list[bytes] = []
#   buffers: list[bytes] = []
    for buffer_index, buffer in enumerate(gltf.buffers or []):
#   for buffer_index, buffer in enumerate(gltf.buffers or []):
        data: bytes | None
#       data: bytes | None
        if buffer.uri:
#       if buffer.uri:
            try:
#           try:
                data = read_uri(buffer.uri, path.parent)
#               data = read_uri(buffer.uri, path.parent)
            except (OSError, ValueError) as e:
#           except (OSError, ValueError) as e:
                raise ImportFailed(path, f"buffer {buffer_index} could not be read ({e})") from e
#               raise ImportFailed(path, f"buffer {buffer_index} could not be read ({e})") from e
        elif is_binary and buffer_index == 0:
#       elif is_binary and buffer_index == 0:
            # The GLB BIN chunk backs the first buffer when it has no uri.
#           # The GLB BIN chunk backs the first buffer when it has no uri.
            data = gltf.binary_blob()
#           data = gltf.binary_blob()
        else:
#       else:
            data = None
#           data = None
        if data is None:
#       if data is None:
            raise ImportFailed(path, f"buffer {buffer_index} has no data source")
#           raise ImportFailed(path, f"buffer {buffer_index} has no data source")
        data = bytes(data)
#       data = bytes(data)
        if buffer.byteLength is not None and len(data) < buffer.byteLength:
#       if buffer.byteLength is not None and len(data) < buffer.byteLength:
            logger.warning("Buffer %d of %s holds %d bytes but declares %d", buffer_index, path.name, len(data), buffer.byteLength)
#           logger.warning("Buffer %d of %s holds %d bytes but declares %d", buffer_index, path.name, len(data), buffer.byteLength)
        buffers.append(data)
#       buffers.append(data)
    return buffers
#   return buffers

def image_source_bytes(gltf: pygltflib.GLTF2, image: pygltflib.Image, buffers: list[bytes], base_dir: pl.Path) -> bytes:
    if image.bufferView is not None:
#   if image.bufferView is not None:
        buffer_view: pygltflib.BufferView = lookup(gltf.bufferViews, image.bufferView, "bufferView")
#       buffer_view: pygltflib.BufferView = lookup(gltf.bufferViews, image.bufferView, "bufferView")
        data: bytes = lookup(buffers, buffer_view.buffer, "buffer")
#       data: bytes = lookup(buffers, buffer_view.buffer, "buffer")
        start: int = buffer_view.byteOffset or 0
#       start: int = buffer_view.byteOffset or 0
        end: int = start + (buffer_view.byteLength or 0)
#       end: int = start + (buffer_view.byteLength or 0)
        if end > len(data):
#       if end > len(data):
            raise MalformedDocument(f"image bufferView {image.bufferView} ends at byte {end}, buffer holds {len(data)}")
#           raise MalformedDocument(f"image bufferView {image.bufferView} ends at byte {end}, buffer holds {len(data)}")
        return data[start:end]
#       return data[start:end]
    if image.uri:
#   if image.uri:
        return read_uri(image.uri, base_dir)
#       return read_uri(image.uri, base_dir)
    raise MalformedDocument("image has neither a uri nor a bufferView")
#   raise MalformedDocument("image has neither a uri nor a bufferView")

def decode_image(encoded: bytes) -> DecodedImage:
    # Same channel handling as the texture loader of the renderer: OpenCV decodes BGR(A), we hand out RGB(A).
#   # Same channel handling as the texture loader of the renderer: OpenCV decodes BGR(A), we hand out RGB(A).
    if len(encoded) == 0:
#   if len(encoded) == 0:
        return EMPTY_IMAGE
#       return EMPTY_IMAGE
    try:
#   try:
        loaded_data: npt.NDArray[typing.Any] | None = cv2.imdecode(np.frombuffer(encoded, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
#       loaded_data: npt.NDArray[typing.Any] | None = cv2.imdecode(np.frombuffer(encoded, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
#   except cv2.error as e:
        logger.debug("OpenCV rejected %d encoded bytes: %s", len(encoded), e)
#       logger.debug("OpenCV rejected %d encoded bytes: %s", len(encoded), e)
        return EMPTY_IMAGE
#       return EMPTY_IMAGE
    if loaded_data is None or loaded_data.size == 0:
#   if loaded_data is None or loaded_data.size == 0:
        return EMPTY_IMAGE
#       return EMPTY_IMAGE

    if loaded_data.dtype == np.uint16:
#   if loaded_data.dtype == np.uint16:
        loaded_data = (loaded_data >> 8).astype(dtype=np.uint8)
#       loaded_data = (loaded_data >> 8).astype(dtype=np.uint8)
    elif loaded_data.dtype != np.uint8:
#   elif loaded_data.dtype != np.uint8:
        loaded_data = np.clip(loaded_data * 255.0, 0.0, 255.0).astype(dtype=np.uint8)
#       loaded_data = np.clip(loaded_data * 255.0, 0.0, 255.0).astype(dtype=np.uint8)

    if loaded_data.ndim == 2:
#   if loaded_data.ndim == 2:
        loaded_data = loaded_data[:, :, np.newaxis]
#       loaded_data = loaded_data[:, :, np.newaxis]
    elif loaded_data.shape[2] == 3:
#   elif loaded_data.shape[2] == 3:
        loaded_data = cv2.cvtColor(loaded_data, cv2.COLOR_BGR2RGB)
#       loaded_data = cv2.cvtColor(loaded_data, cv2.COLOR_BGR2RGB)
    elif loaded_data.shape[2] == 4:
#   elif loaded_data.shape[2] == 4:
        loaded_data = cv2.cvtColor(loaded_data, cv2.COLOR_BGRA2RGBA)
#       loaded_data = cv2.cvtColor(loaded_data, cv2.COLOR_BGRA2RGBA)

    pixels: npt.NDArray[np.uint8] = np.ascontiguousarray(loaded_data)
#   pixels: npt.NDArray[np.uint8] = np.ascontiguousarray(loaded_data)
    h, w, c = pixels.shape
#   h, w, c = pixels.shape
    return DecodedImage(width=w, height=h, components=c, pixels=pixels)
#   return DecodedImage(width=w, height=h, components=c, pixels=pixels)

def decode_images(gltf: pygltflib.GLTF2, buffers: list[bytes], path: pl.Path) -> list[DecodedImage]:
    # A broken image only costs its texture, so every failure here is a warning.
#   # A broken image only costs its texture, so every failure here is a warning.
    images: list[DecodedImage] = []
#   images: list[DecodedImage] = []
    for image_index, image in enumerate(gltf.images or []):
#   for image_index, image in enumerate(gltf.images or []):
        try:
#       try:
            encoded: bytes = image_source_bytes(gltf, image, buffers, path.parent)
#           encoded: bytes = image_source_bytes(gltf, image, buffers, path.parent)
        except (OSError, ValueError, MalformedDocument) as e:
#       except (OSError, ValueError, MalformedDocument) as e:
            logger.warning("Image %d of %s could not be read: %s", image_index, path.name, e)
#           logger.warning("Image %d of %s could not be read: %s", image_index, path.name, e)
            images.append(EMPTY_IMAGE)
#           images.append(EMPTY_IMAGE)
            continue
#           continue
        decoded: DecodedImage = decode_image(encoded)
#       decoded: DecodedImage = decode_image(encoded)
        if decoded.width == 0:
#       if decoded.width == 0:
            logger.warning("Image %d of %s could not be decoded", image_index, path.name)
#           logger.warning("Image %d of %s could not be decoded", image_index, path.name)
        images.append(decoded)
#       images.append(decoded)
    return images
#   return images

def load_document(path: str | pl.Path) -> Document:
    path = pl.Path(path)
#   path = pl.Path(path)
    is_binary: bool = path.suffix.lower() == ".glb"
#   is_binary: bool = path.suffix.lower() == ".glb"
    if not path.is_file():
#   if not path.is_file():
        raise ImportFailed(path, "file not found")
#       raise ImportFailed(path, "file not found")

    try:
#   try:
        gltf: pygltflib.GLTF2 | None = pygltflib.GLTF2().load_binary(str(path)) if is_binary else pygltflib.GLTF2().load_json(str(path))
#       gltf: pygltflib.GLTF2 | None = pygltflib.GLTF2().load_binary(str(path)) if is_binary else pygltflib.GLTF2().load_json(str(path))
    except Exception as e:
#   except Exception as e:
        # pygltflib surfaces container damage as json, struct or dataclass errors alike.
#       # pygltflib surfaces container damage as json, struct or dataclass errors alike.
        raise ImportFailed(path, f"container is malformed ({e})") from e
#       raise ImportFailed(path, f"container is malformed ({e})") from e
    if gltf is None:
#   if gltf is None:
        raise ImportFailed(path, "container is malformed")
#       raise ImportFailed(path, "container is malformed")

    buffers: list[bytes] = resolve_buffers(gltf, path, is_binary)
#   buffers: list[bytes] = resolve_buffers(gltf, path, is_binary)
    images: list[DecodedImage] = decode_images(gltf, buffers, path)
#   images: list[DecodedImage] = decode_images(gltf, buffers, path)
    logger.debug("Loaded %s: %d buffers, %d images, %d meshes", path.name, len(buffers), len(images), len(gltf.meshes or []))
#   logger.debug("Loaded %s: %d buffers, %d images, %d meshes", path.name, len(buffers), len(images), len(gltf.meshes or []))
    return Document(gltf=gltf, buffers=buffers, images=images, path=path, is_binary=is_binary)
#   return Document(gltf=gltf, buffers=buffers, images=images, path=path, is_binary=is_binary)
