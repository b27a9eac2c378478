import logging
from collections.abc import Callable, Iterator
from itertools import product
from typing import Any

from .diagnostics import ErrorCode, ExecutionError, ValidationError
from .expression import OperandLike, as_operand
from .operand_types import Index, Operand, Shape, WritableOperand
from .shape import can_fill

logger = logging.getLogger(__name__)

LeafVisitor = Callable[[Index], None]
RowVisitor = Callable[[Index], None]


def walk(
    shape: Shape,
    leaf: LeafVisitor,
    *,
    row_end: RowVisitor | None = None,
) -> None:
    """Visit every coordinate of ``shape`` in row-major order.

    Outer dimensions loop and recurse with their coordinate appended to the
    index prefix. The innermost dimension calls ``leaf`` with each full index
    tuple, then ``row_end`` with the row's prefix once the row is complete.
    Empty rows are not reported, and a rank-0 shape visits ``()`` once and
    completes no rows.
    """
    rank = len(shape)
    if rank == 0:
        leaf(())
        return
    last_dim = rank - 1

    def visit(dim: int, prefix: Index) -> None:
        if dim == last_dim:
            for coordinate in range(shape[dim]):
                leaf(prefix + (coordinate,))
            if row_end is not None and shape[dim]:
                row_end(prefix)
            return
        for coordinate in range(shape[dim]):
            visit(dim + 1, prefix + (coordinate,))

    visit(0, ())


def iter_indices(shape: Shape, /) -> Iterator[Index]:
    """Yield every index tuple of ``shape`` in the order ``walk`` visits them."""
    return product(*(range(extent) for extent in shape))


def to_nested_list(operand: OperandLike, /) -> Any:
    """Evaluate ``operand`` into nested lists; rank 0 yields the bare element."""
    source = as_operand(operand)
    shape = source.shape

    def build(prefix: Index) -> Any:
        dim = len(prefix)
        if dim == len(shape):
            return source(*prefix)
        return [build(prefix + (coordinate,)) for coordinate in range(shape[dim])]

    return build(())


def _validate_assignment(target: WritableOperand, source: Operand) -> None:
    if not can_fill(target.shape, source.shape):
        raise ValidationError(
            code=ErrorCode.ASSIGN_SHAPE_MISMATCH,
            message=(
                f"assign shape mismatch: source shape {source.shape} cannot fill "
                f"target shape {target.shape}"
            ),
            help=(
                "source extents must equal the target's right-aligned extents "
                "or be 1, and the source rank must not exceed the target rank"
            ),
            related=("assignment",),
            data={"target_rank": len(target.shape), "source_rank": len(source.shape)},
        )
    if target.readonly:
        raise ExecutionError(
            code=ErrorCode.READONLY_BUFFER,
            message="readonly buffer: assignment target does not accept writes",
            help="assign into a view over a writable buffer",
            related=("assignment",),
            data={"target_rank": len(target.shape)},
        )


def assign(target: WritableOperand, source: OperandLike) -> None:
    """Write ``source`` evaluated at every coordinate of ``target`` into it."""
    operand = as_operand(source)
    _validate_assignment(target, operand)
    logger.debug("assigning %r into target of shape %s", operand, target.shape)

    write = target.write
    walk(target.shape, lambda index: write(index, operand(*index)))


__all__ = [
    "LeafVisitor",
    "RowVisitor",
    "assign",
    "iter_indices",
    "to_nested_list",
    "walk",
]
