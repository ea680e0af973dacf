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
from walkthrough.importer.document import Document
from walkthrough.importer.document import Document

BYTE: int = 5120
UNSIGNED_BYTE: int = 5121
SHORT: int = 5122
UNSIGNED_SHORT: int = 5123
INT: int = 5124
UNSIGNED_INT: int = 5125
FLOAT: int = 5126
DOUBLE: int = 5130

TYPE_COMPONENTS: dict[str, int] = {
    "SCALAR": 1,
#   "SCALAR": 1,
    "VEC2": 2,
#   "VEC2": 2,
    "VEC3": 3,
#   "VEC3": 3,
    "VEC4": 4,
#   "VEC4": 4,
    "MAT2": 4,
#   "MAT2": 4,
    "MAT3": 9,
#   "MAT3": 9,
    "MAT4": 16,
#   "MAT4": 16,
}

# glTF buffers are little-endian regardless of the host.
COMPONENT_DTYPES: dict[int, np.dtype[typing.Any]] = {
    BYTE: np.dtype("<i1"),
#   BYTE: np.dtype("<i1"),
    UNSIGNED_BYTE: np.dtype("<u1"),
#   UNSIGNED_BYTE: np.dtype("<u1"),
    SHORT: np.dtype("<i2"),
#   SHORT: np.dtype("<i2"),
    UNSIGNED_SHORT: np.dtype("<u2"),
#   UNSIGNED_SHORT: np.dtype("<u2"),
    INT: np.dtype("<i4"),
#   INT: np.dtype("<i4"),
    UNSIGNED_INT: np.dtype("<u4"),
#   UNSIGNED_INT: np.dtype("<u4"),
    FLOAT: np.dtype("<f4"),
#   FLOAT: np.dtype("<f4"),
    DOUBLE: np.dtype("<f8"),
#   DOUBLE: np.dtype("<f8"),
}

def component_count(element_type: str | None) -> int:
    return TYPE_COMPONENTS.get(element_type or "", 0)
#   return TYPE_COMPONENTS.get(element_type or "", 0)

def component_size(component_type: int | None) -> int:
    dtype: np.dtype[typing.Any] | None = COMPONENT_DTYPES.get(component_type or 0)
#   dtype: np.dtype[typing.Any] | None = COMPONENT_DTYPES.get(component_type or 0)
    return dtype.itemsize if dtype is not None else 0
#   return dtype.itemsize if dtype is not None else 0

def element_stride(element_type: str | None, component_type: int | None) -> int:
    """
    Byte size of one tightly packed element.
#   Byte size of one tightly packed element.
    Zero means the (type, componentType) pair is unknown and the accessor must be rejected.
#   Zero means the (type, componentType) pair is unknown and the accessor must be rejected.
    """
    return component_count(element_type) * component_size(component_type)
#   return component_count(element_type) * component_size(component_type)

class AccessorView:
    # Bounds-checked window onto one buffer, validated once in resolve().
#   # Bounds-checked window onto one buffer, validated once in resolve().
    # Every element i lives at buffer[offset + i * stride : offset + i * stride + element_size].
#   # Every element i lives at buffer[offset + i * stride : offset + i * stride + element_size].
    def __init__(self, buffer: bytes, buffer_index: int, offset: int, stride: int, count: int, component_type: int, element_type: str) -> None:
#   def __init__(self, buffer: bytes, buffer_index: int, offset: int, stride: int, count: int, component_type: int, element_type: str) -> None:
        self.buffer: bytes = buffer
#       self.buffer: bytes = buffer
        self.buffer_index: int = buffer_index
#       self.buffer_index: int = buffer_index
        self.offset: int = offset
#       self.offset: int = offset
        self.stride: int = stride
#       self.stride: int = stride
        self.count: int = count
#       self.count: int = count
        self.component_type: int = component_type
#       self.component_type: int = component_type
        self.element_type: str = element_type
#       self.element_type: str = element_type
        pass
#       pass

    @property
#   @property
    def components(self) -> int:
#   def components(self) -> int:
        return component_count(self.element_type)
#       return component_count(self.element_type)

    @property
#   @property
    def dtype(self) -> np.dtype[typing.Any]:
#   def dtype(self) -> np.dtype[typing.Any]:
        return COMPONENT_DTYPES[self.component_type]
#       return COMPONENT_DTYPES[self.component_type]

    def read(self) -> npt.NDArray[typing.Any]:
#   def read(self) -> npt.NDArray[typing.Any]:
        # (count, components) array in the component's own dtype, copied out of the buffer.
#       # (count, components) array in the component's own dtype, copied out of the buffer.
        if self.count == 0:
#       if self.count == 0:
            return np.zeros((0, self.components), dtype=self.dtype)
#           return np.zeros((0, self.components), dtype=self.dtype)
        view: npt.NDArray[typing.Any] = np.ndarray(
#       view: npt.NDArray[typing.Any] = np.ndarray(
            shape=(self.count, self.components),
#           shape=(self.count, self.components),
            dtype=self.dtype,
#           dtype=self.dtype,
            buffer=self.buffer,
#           buffer=self.buffer,
            offset=self.offset,
#           offset=self.offset,
            strides=(self.stride, self.dtype.itemsize),
#           strides=(self.stride, self.dtype.itemsize),
        )
#       )
        return view.astype(dtype=self.dtype.newbyteorder("="), copy=True)
#       return view.astype(dtype=self.dtype.newbyteorder("="), copy=True)

def resolve(document: Document, accessor_index: int | None) -> AccessorView:
    accessor: pygltflib.Accessor = document.accessor(accessor_index)
#   accessor: pygltflib.Accessor = document.accessor(accessor_index)

    packed_stride: int = element_stride(accessor.type, accessor.componentType)
#   packed_stride: int = element_stride(accessor.type, accessor.componentType)
    count: int = accessor.count or 0
#   count: int = accessor.count or 0
    if count < 0:
#   if count < 0:
        raise MalformedDocument(f"accessor {accessor_index} has negative count {count}")
#       raise MalformedDocument(f"accessor {accessor_index} has negative count {count}")
    if packed_stride == 0:
#   if packed_stride == 0:
        raise MalformedDocument(f"accessor {accessor_index} has unsupported layout {accessor.type}/{accessor.componentType}")
#       raise MalformedDocument(f"accessor {accessor_index} has unsupported layout {accessor.type}/{accessor.componentType}")
    if accessor.sparse is not None:
#   if accessor.sparse is not None:
        raise MalformedDocument(f"accessor {accessor_index} is sparse")
#       raise MalformedDocument(f"accessor {accessor_index} is sparse")
    if accessor.bufferView is None:
#   if accessor.bufferView is None:
        raise MalformedDocument(f"accessor {accessor_index} has no bufferView")
#       raise MalformedDocument(f"accessor {accessor_index} has no bufferView")

    buffer_view: pygltflib.BufferView = document.buffer_view(accessor.bufferView)
#   buffer_view: pygltflib.BufferView = document.buffer_view(accessor.bufferView)
    buffer: bytes = document.buffer(buffer_view.buffer)
#   buffer: bytes = document.buffer(buffer_view.buffer)

    # byteStride of zero or absent means tightly packed.
#   # byteStride of zero or absent means tightly packed.
    stride: int = buffer_view.byteStride or packed_stride
#   stride: int = buffer_view.byteStride or packed_stride
    if stride < packed_stride:
#   if stride < packed_stride:
        raise MalformedDocument(f"bufferView {accessor.bufferView} stride {stride} is smaller than element size {packed_stride}")
#       raise MalformedDocument(f"bufferView {accessor.bufferView} stride {stride} is smaller than element size {packed_stride}")

    view_start: int = buffer_view.byteOffset or 0
#   view_start: int = buffer_view.byteOffset or 0
    view_end: int = view_start + (buffer_view.byteLength or 0)
#   view_end: int = view_start + (buffer_view.byteLength or 0)
    offset: int = view_start + (accessor.byteOffset or 0)
#   offset: int = view_start + (accessor.byteOffset or 0)

    if view_end > len(buffer):
#   if view_end > len(buffer):
        raise MalformedDocument(f"bufferView {accessor.bufferView} ends at byte {view_end}, buffer {buffer_view.buffer} holds {len(buffer)}")
#       raise MalformedDocument(f"bufferView {accessor.bufferView} ends at byte {view_end}, buffer {buffer_view.buffer} holds {len(buffer)}")
    if count > 0:
#   if count > 0:
        last_byte: int = offset + (count - 1) * stride + packed_stride
#       last_byte: int = offset + (count - 1) * stride + packed_stride
        if last_byte > view_end:
#       if last_byte > view_end:
            raise MalformedDocument(f"accessor {accessor_index} reads up to byte {last_byte}, bufferView {accessor.bufferView} ends at {view_end}")
#           raise MalformedDocument(f"accessor {accessor_index} reads up to byte {last_byte}, bufferView {accessor.bufferView} ends at {view_end}")

    return AccessorView(
#   return AccessorView(
        buffer=buffer,
#       buffer=buffer,
        buffer_index=buffer_view.buffer,
#       buffer_index=buffer_view.buffer,
        offset=offset,
#       offset=offset,
        stride=stride,
#       stride=stride,
        count=count,
#       count=count,
        component_type=accessor.componentType,
#       component_type=accessor.componentType,
        element_type=accessor.type,
#       element_type=accessor.type,
    )
#   )
