from collections.abc import Sequence
from functools import lru_cache
from operator import index

from ..diagnostics import ErrorCode, ValidationError
from ..operand_types import Index, Shape

_STRIDES_CACHE_MAX_ENTRIES = 1_024


def normalize_shape(shape: Sequence[int], /) -> Shape:
    """Validate one caller shape and return it as a tuple of ints."""
    if isinstance(shape, str) or not isinstance(shape, Sequence):
        raise TypeError(
            f"shape must be a sequence of ints, got {type(shape).__name__}"
        )
    normalized = tuple(index(extent) for extent in shape)
    for dim, extent in enumerate(normalized):
        if extent < 0:
            raise ValidationError(
                code=ErrorCode.INVALID_SHAPE,
                message=f"invalid shape: extent {extent} at dim {dim} is negative",
                help="use non-negative extents",
                related=("shape validation",),
                data={"dim": dim, "extent": extent},
            )
    return normalized


@lru_cache(maxsize=_STRIDES_CACHE_MAX_ENTRIES)
def strides_for_shape(shape: Shape, /) -> tuple[tuple[int, ...], int]:
    """Return row-major strides and element count for one shape.

    Strides are built in a single right-to-left pass. A size-1 dimension gets
    stride 0, so any coordinate along it resolves to the same element.
    """
    strides = [0] * len(shape)
    numel = 1
    for dim in range(len(shape) - 1, -1, -1):
        extent = shape[dim]
        strides[dim] = 0 if extent == 1 else numel
        numel *= extent
    return tuple(strides), numel


def index_tail(indices: Index, rank: int, /) -> Index:
    """Return the rightmost ``rank`` coordinates, dropping extra leading ones."""
    return indices[len(indices) - rank :]


__all__ = ["index_tail", "normalize_shape", "strides_for_shape"]
