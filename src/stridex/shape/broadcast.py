from functools import lru_cache
from typing import NoReturn

from ..diagnostics import ErrorCode, ValidationError
from ..operand_types import Shape

_BROADCAST_CACHE_MAX_ENTRIES = 512


def _raise_shape_mismatch(
    *,
    dim: int,
    expected: int,
    got: int,
    operand_index: int,
) -> NoReturn:
    raise ValidationError(
        code=ErrorCode.SHAPE_MISMATCH,
        message=(
            f"shape mismatch: extent {expected} vs {got} at dim {dim} "
            f"(operand {operand_index})"
        ),
        help="operands must agree on every aligned extent or supply 1 there",
        related=("broadcast shape inference",),
        data={
            "dim": dim,
            "expected": expected,
            "got": got,
            "operand": operand_index,
        },
    )


@lru_cache(maxsize=_BROADCAST_CACHE_MAX_ENTRIES)
def broadcast_shapes(*shapes: Shape) -> Shape:
    """Infer the broadcast shape of several right-aligned operand shapes.

    The result starts as all 1s at the maximum rank. The first operand that
    brings a non-1 extent to a dimension fixes it; later operands must match
    that extent or supply 1.
    """
    rank = max((len(shape) for shape in shapes), default=0)
    result = [1] * rank
    for operand_index, shape in enumerate(shapes):
        lead = rank - len(shape)
        for offset, extent in enumerate(shape):
            dim = lead + offset
            if result[dim] == 1:
                result[dim] = extent
            elif extent != 1 and extent != result[dim]:
                _raise_shape_mismatch(
                    dim=dim,
                    expected=result[dim],
                    got=extent,
                    operand_index=operand_index,
                )
    return tuple(result)


def can_fill(target: Shape, source: Shape, /) -> bool:
    """Return whether ``source`` read at every ``target`` index stays in range."""
    if len(source) > len(target):
        return False
    lead = len(target) - len(source)
    return all(
        extent == 1 or extent == target[lead + offset]
        for offset, extent in enumerate(source)
    )


__all__ = ["broadcast_shapes", "can_fill"]
