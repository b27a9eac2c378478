from .diagnostics import ErrorCode, ExecutionError, StrideError, ValidationError
from .expression import Constant, Elementwise, elementwise
from .operand_types import LinearBuffer, Operand, WritableOperand
from .printing import DEFAULT_PRINT_OPTIONS, PrintOptions, format_operand, print_operand
from .shape import broadcast_shapes, strides_for_shape
from .storage import BufferStorage, Ownership, capture_buffer, shares_buffer
from .traversal import assign, iter_indices, to_nested_list, walk
from .view import StridedView

__all__ = [
    "BufferStorage",
    "Constant",
    "DEFAULT_PRINT_OPTIONS",
    "Elementwise",
    "ErrorCode",
    "ExecutionError",
    "LinearBuffer",
    "Operand",
    "Ownership",
    "PrintOptions",
    "StridedView",
    "StrideError",
    "ValidationError",
    "WritableOperand",
    "assign",
    "broadcast_shapes",
    "capture_buffer",
    "elementwise",
    "format_operand",
    "iter_indices",
    "print_operand",
    "shares_buffer",
    "strides_for_shape",
    "to_nested_list",
    "walk",
]
