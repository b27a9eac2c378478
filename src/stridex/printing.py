import io
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

from .expression import OperandLike, as_operand
from .operand_types import Index
from .traversal import walk


@dataclass(frozen=True, slots=True)
class PrintOptions:
    """Separators and element formatting used when printing an operand."""

    separator: str = " "
    row_separator: str = "\n"
    block_separator: str = "\n"
    formatter: Callable[[Any], str] = str


DEFAULT_PRINT_OPTIONS = PrintOptions()


def print_operand(
    operand: OperandLike,
    *,
    options: PrintOptions | None = None,
    file: TextIO | None = None,
) -> None:
    """Write every element of ``operand`` row by row.

    Elements in a row are joined by ``separator`` and every row ends with
    ``row_separator``. Operands of rank 3 or more get an extra
    ``block_separator`` between consecutive 2-D slices.
    """
    source = as_operand(operand)
    resolved_options = DEFAULT_PRINT_OPTIONS if options is None else options
    stream = sys.stdout if file is None else file
    shape = source.shape
    rank = len(shape)
    row_open = False

    def leaf(index: Index) -> None:
        nonlocal row_open
        if row_open:
            stream.write(resolved_options.separator)
        stream.write(resolved_options.formatter(source(*index)))
        row_open = True

    def row_end(prefix: Index) -> None:
        nonlocal row_open
        stream.write(resolved_options.row_separator)
        row_open = False
        if rank < 3 or prefix[-1] != shape[-2] - 1:
            return
        last_block = all(prefix[dim] == shape[dim] - 1 for dim in range(rank - 2))
        if not last_block:
            stream.write(resolved_options.block_separator)

    walk(shape, leaf, row_end=row_end)
    if rank == 0:
        stream.write(resolved_options.row_separator)


def format_operand(
    operand: OperandLike,
    *,
    options: PrintOptions | None = None,
) -> str:
    """Return the printed form of ``operand`` without the final row separator."""
    resolved_options = DEFAULT_PRINT_OPTIONS if options is None else options
    buffer = io.StringIO()
    print_operand(operand, options=resolved_options, file=buffer)
    return buffer.getvalue().removesuffix(resolved_options.row_separator)


__all__ = [
    "DEFAULT_PRINT_OPTIONS",
    "PrintOptions",
    "format_operand",
    "print_operand",
]
