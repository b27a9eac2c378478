from .broadcast import broadcast_shapes, can_fill
from .strides import index_tail, normalize_shape, strides_for_shape

__all__ = [
    "broadcast_shapes",
    "can_fill",
    "index_tail",
    "normalize_shape",
    "strides_for_shape",
]
