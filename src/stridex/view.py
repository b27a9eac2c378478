import logging
from collections.abc import Sequence
from operator import index
from typing import Any, NoReturn

try:
    from typing import Self
except ImportError:  # pragma: no cover
    from typing_extensions import Self

from .diagnostics import ErrorCode, ExecutionError, ValidationError
from .expression import ElementwiseOps, OperandLike
from .operand_types import Index, Shape
from .shape import index_tail, normalize_shape, strides_for_shape
from .storage import BufferStorage, Ownership, capture_buffer, shares_buffer
from .traversal import assign as assign_operand

logger = logging.getLogger(__name__)


def _key_indices(key: int | tuple[int, ...]) -> Index:
    if isinstance(key, tuple):
        return tuple(index(coordinate) for coordinate in key)
    return (index(key),)


class StridedView(ElementwiseOps):
    """Fixed-rank, row-major strided view over a linear buffer.

    Shape and strides are derived once at construction. Size-1 dimensions get
    stride 0, so any coordinate along them resolves to the same cell; this is
    what lets a view take part in broadcast expressions without copying.

    Indexing uses the rightmost ``rank`` coordinates of the index tuple and
    ignores extra leading ones, so one index tuple can probe views of
    different ranks in the same broadcast group. Coordinates are not bounds
    checked.
    """

    __slots__ = ("_storage", "_shape", "_strides", "_size")

    def __init__(
        self,
        buffer: Any,
        shape: Sequence[int],
        *,
        ownership: Ownership = "borrow",
        readonly: bool = False,
    ) -> None:
        storage = capture_buffer(buffer, ownership=ownership, readonly=readonly)
        normalized_shape = normalize_shape(shape)
        strides, size = strides_for_shape(normalized_shape)
        if size > len(storage):
            raise ValidationError(
                code=ErrorCode.BUFFER_TOO_SMALL,
                message=(
                    f"buffer too small: shape {normalized_shape} needs {size} "
                    f"elements, buffer holds {len(storage)}"
                ),
                help="pass a buffer with at least product(shape) elements",
                related=("view construction",),
                data={"required": size, "available": len(storage)},
            )

        self._storage = storage
        self._shape = normalized_shape
        self._strides = strides
        self._size = size
        logger.debug(
            "constructed view shape=%s strides=%s ownership=%s",
            normalized_shape,
            strides,
            storage.ownership,
        )

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def strides(self) -> tuple[int, ...]:
        return self._strides

    @property
    def rank(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        """Number of logical elements, ``product(shape)``."""
        return self._size

    @property
    def storage(self) -> BufferStorage:
        return self._storage

    @property
    def ownership(self) -> Ownership:
        return self._storage.ownership

    @property
    def readonly(self) -> bool:
        return self._storage.readonly

    def _raise_index_rank_mismatch(self, indices: Index) -> NoReturn:
        raise ExecutionError(
            code=ErrorCode.INDEX_RANK_MISMATCH,
            message=(
                f"index rank mismatch: view of rank {self.rank} indexed with "
                f"{len(indices)} coordinates"
            ),
            help="pass at least one coordinate per view dimension",
            related=("view indexing",),
            data={"rank": self.rank, "got": len(indices)},
        )

    def offset(self, *indices: int) -> int:
        """Return the buffer offset of one multi-index."""
        rank = len(self._shape)
        if len(indices) < rank:
            self._raise_index_rank_mismatch(indices)
        return sum(
            stride * coordinate
            for stride, coordinate in zip(self._strides, index_tail(indices, rank))
        )

    def __call__(self, *indices: int) -> Any:
        return self._storage.data[self.offset(*indices)]

    def read(self, *indices: int) -> Any:
        """Return the element at one multi-index."""
        return self(*indices)

    def write(self, indices: Index, value: Any, /) -> None:
        """Store ``value`` at one multi-index."""
        if self._storage.readonly:
            raise ExecutionError(
                code=ErrorCode.READONLY_BUFFER,
                message="readonly buffer: view does not accept writes",
                help="capture a writable buffer, or use ownership='own' for a copy",
                related=("view write",),
                data={"rank": self.rank},
            )
        self._storage.data[self.offset(*indices)] = value

    def __getitem__(self, key: int | tuple[int, ...]) -> Any:
        return self(*_key_indices(key))

    def __setitem__(self, key: int | tuple[int, ...], value: Any) -> None:
        self.write(_key_indices(key), value)

    def assign(self, source: OperandLike) -> Self:
        """Evaluate ``source`` at every coordinate of this view and store it."""
        assign_operand(self, source)
        return self

    def __iadd__(self, other: OperandLike) -> Self:
        return self.assign(self + other)

    def __isub__(self, other: OperandLike) -> Self:
        return self.assign(self - other)

    def __imul__(self, other: OperandLike) -> Self:
        return self.assign(self * other)

    def __itruediv__(self, other: OperandLike) -> Self:
        return self.assign(self / other)

    def shares_buffer(self, other: "StridedView") -> bool:
        """Return whether writes through either view are visible in the other."""
        return shares_buffer(self._storage, other.storage)

    def __repr__(self) -> str:
        return (
            f"StridedView(shape={self._shape}, strides={self._strides}, "
            f"ownership={self.ownership!r}, readonly={self.readonly})"
        )


__all__ = ["StridedView"]
