import logging
from array import array
from dataclasses import dataclass, replace
from typing import Any, Literal, TypeAlias

import numpy as np
from array_api_compat import (
    array_namespace,
    is_array_api_obj,
    is_numpy_array,
    is_torch_array,
)

from .diagnostics import ErrorCode, ValidationError
from .operand_types import LinearBuffer, WritableBuffer

logger = logging.getLogger(__name__)

Ownership: TypeAlias = Literal["own", "borrow"]

_OWNERSHIP_TAGS: frozenset[str] = frozenset(("own", "borrow"))
_SLICE_COPYABLE = (list, bytearray, array)


@dataclass(frozen=True, slots=True)
class BufferStorage:
    """Buffer captured by a view, either as a private copy or a caller alias."""

    data: LinearBuffer
    ownership: Ownership
    readonly: bool

    @property
    def owned(self) -> bool:
        """Return whether this storage holds a private copy."""
        return self.ownership == "own"

    def __len__(self) -> int:
        return len(self.data)


def torch_storage_ptr(tensor: Any) -> int | None:
    """Return torch storage base pointer when available."""
    untyped_storage = getattr(tensor, "untyped_storage", None)
    if not callable(untyped_storage):
        return None
    data_ptr = untyped_storage().data_ptr()
    return data_ptr if isinstance(data_ptr, int) else None


def _arrays_alias(lhs: Any, rhs: Any) -> bool | None:
    """Return whether two array API objects share memory, None if unknown."""
    if is_numpy_array(lhs) and is_numpy_array(rhs):
        return bool(np.shares_memory(lhs, rhs))
    if is_torch_array(lhs) and is_torch_array(rhs):
        lhs_ptr = torch_storage_ptr(lhs)
        rhs_ptr = torch_storage_ptr(rhs)
        if lhs_ptr is None or rhs_ptr is None:
            return None
        return lhs_ptr == rhs_ptr
    return None


def shares_buffer(lhs: BufferStorage, rhs: BufferStorage, /) -> bool:
    """Return whether writes through one storage are visible through the other."""
    if lhs.data is rhs.data:
        return True
    return bool(_arrays_alias(lhs.data, rhs.data))


def _is_array_readonly(buffer: Any) -> bool:
    flags = getattr(buffer, "flags", None)
    return flags is not None and not getattr(flags, "writeable", True)


def _capture_array(buffer: Any, *, ownership: Ownership) -> Any:
    """Flatten one array API object to 1-D, copying only when owning."""
    xp = array_namespace(buffer)
    if ownership == "own":
        logger.debug("copying %s buffer into owned storage", type(buffer).__name__)
        return xp.reshape(xp.asarray(buffer, copy=True), (-1,))
    if buffer.ndim == 1:
        return buffer

    flat = xp.reshape(buffer, (-1,))
    if _arrays_alias(buffer, flat) is False:
        raise ValidationError(
            code=ErrorCode.NOT_A_VIEW,
            message="not a view: borrowed array cannot be flattened without copying",
            help="pass a contiguous array, or capture it with ownership='own'",
            related=("buffer borrow",),
            data={"ndim": int(buffer.ndim)},
        )
    return flat


def _capture_sequence(buffer: Any, *, ownership: Ownership) -> Any:
    if ownership == "borrow":
        return buffer
    logger.debug("copying %s buffer into owned storage", type(buffer).__name__)
    if isinstance(buffer, _SLICE_COPYABLE):
        return buffer[:]
    return list(buffer)


def capture_buffer(
    buffer: Any,
    *,
    ownership: Ownership = "borrow",
    readonly: bool = False,
) -> BufferStorage:
    """Capture one caller buffer under an explicit ownership tag.

    ``"own"`` stores a private copy whose lifetime is tied to the capturing
    object; ``"borrow"`` aliases the caller's object so mutations are visible
    in both directions. Readonly-ness of the caller's buffer is preserved.
    An existing ``BufferStorage`` is shared as-is, keeping its ownership.
    """
    if ownership not in _OWNERSHIP_TAGS:
        raise ValueError(f"ownership must be 'own' or 'borrow', got {ownership!r}")
    if isinstance(buffer, BufferStorage):
        return replace(buffer, readonly=buffer.readonly or readonly)

    if is_array_api_obj(buffer):
        source_readonly = _is_array_readonly(buffer)
        data = _capture_array(buffer, ownership=ownership)
    elif isinstance(buffer, LinearBuffer) and not isinstance(buffer, str):
        source_readonly = not isinstance(buffer, WritableBuffer) or bool(
            getattr(buffer, "readonly", False)
        )
        data = _capture_sequence(buffer, ownership=ownership)
    else:
        raise ValidationError(
            code=ErrorCode.UNSUPPORTED_BUFFER,
            message=(
                "unsupported buffer: expected a linear indexable container, "
                f"got {type(buffer).__name__}"
            ),
            help="pass a list, array.array, bytearray, or a 1-D array object",
            related=("buffer capture",),
            data={"type": type(buffer).__name__},
        )

    # Owned copies are always writable lists or fresh arrays.
    return BufferStorage(
        data=data,
        ownership=ownership,
        readonly=readonly or (ownership == "borrow" and source_readonly),
    )


__all__ = [
    "BufferStorage",
    "Ownership",
    "capture_buffer",
    "shares_buffer",
    "torch_storage_ptr",
]
