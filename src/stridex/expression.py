import logging
import operator
from collections.abc import Callable
from dataclasses import dataclass
from numbers import Number
from typing import Any, TypeAlias

from .operand_types import Operand, Shape
from .shape import broadcast_shapes

logger = logging.getLogger(__name__)

OperandLike: TypeAlias = Operand | Number


class ElementwiseOps:
    """Operator overloads that compose operands into lazy expressions."""

    __slots__ = ()
    __iter__ = None
    # NumPy scalars on the left defer to the reflected operators below.
    __array_ufunc__ = None

    def __add__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.add, self, other)

    def __radd__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.add, other, self)

    def __sub__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.sub, self, other)

    def __rsub__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.sub, other, self)

    def __mul__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.mul, self, other)

    def __rmul__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.mul, other, self)

    def __truediv__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.truediv, self, other)

    def __rtruediv__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.truediv, other, self)

    def __floordiv__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.floordiv, self, other)

    def __rfloordiv__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.floordiv, other, self)

    def __mod__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.mod, self, other)

    def __rmod__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.mod, other, self)

    def __pow__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.pow, self, other)

    def __rpow__(self, other: OperandLike) -> "Elementwise":
        return Elementwise(operator.pow, other, self)

    def __neg__(self) -> "Elementwise":
        return Elementwise(operator.neg, self)

    def __pos__(self) -> "Elementwise":
        return Elementwise(operator.pos, self)

    def __abs__(self) -> "Elementwise":
        return Elementwise(operator.abs, self)

    def tolist(self) -> Any:
        """Evaluate every element into nested Python lists."""
        from .traversal import to_nested_list

        return to_nested_list(self)

    def __str__(self) -> str:
        from .printing import format_operand

        return format_operand(self)


@dataclass(frozen=True, slots=True)
class Constant(ElementwiseOps):
    """Rank-0 operand that reads as the same scalar at every index."""

    value: Any

    @property
    def shape(self) -> Shape:
        return ()

    def __call__(self, *indices: int) -> Any:
        _ = indices
        return self.value


def as_operand(value: OperandLike, /) -> Operand:
    """Return ``value`` as an operand, wrapping plain scalars as constants."""
    if isinstance(value, Operand):
        return value
    if isinstance(value, Number):
        return Constant(value)
    raise TypeError(
        "elementwise operands must be views, expressions, or scalars, "
        f"got {type(value).__name__}"
    )


def _fn_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


class Elementwise(ElementwiseOps):
    """Lazy application of ``fn`` across broadcast operands.

    The broadcast shape is inferred once, here. Reading a coordinate forwards
    the full index tuple to every operand and applies ``fn`` to the results;
    nothing is cached, so operand mutations show up on the next read.
    """

    __slots__ = ("_fn", "_operands", "_shape")

    def __init__(self, fn: Callable[..., Any], /, *operands: OperandLike) -> None:
        if not callable(fn):
            raise TypeError(f"fn must be callable, got {type(fn).__name__}")
        if not operands:
            raise TypeError("elementwise expressions need at least one operand")

        self._fn = fn
        self._operands = tuple(as_operand(operand) for operand in operands)
        self._shape = broadcast_shapes(
            *(tuple(operand.shape) for operand in self._operands)
        )
        logger.debug(
            "built %s expression over %d operands, broadcast shape %s",
            _fn_name(fn),
            len(self._operands),
            self._shape,
        )

    @property
    def fn(self) -> Callable[..., Any]:
        return self._fn

    @property
    def operands(self) -> tuple[Operand, ...]:
        return self._operands

    @property
    def shape(self) -> Shape:
        """Broadcast shape of all operands."""
        return self._shape

    @property
    def rank(self) -> int:
        return len(self._shape)

    def __call__(self, *indices: int) -> Any:
        return self._fn(*[operand(*indices) for operand in self._operands])

    def read(self, *indices: int) -> Any:
        """Evaluate the expression at one multi-index."""
        return self(*indices)

    def __getitem__(self, key: int | tuple[int, ...]) -> Any:
        return self(*(key if isinstance(key, tuple) else (key,)))

    def __repr__(self) -> str:
        return f"Elementwise({_fn_name(self._fn)}, shape={self._shape})"


def elementwise(fn: Callable[..., Any], /, *operands: OperandLike) -> Elementwise:
    """Broadcast ``fn`` lazily over views, expressions, and scalars."""
    return Elementwise(fn, *operands)


__all__ = [
    "Constant",
    "Elementwise",
    "ElementwiseOps",
    "OperandLike",
    "as_operand",
    "elementwise",
]
