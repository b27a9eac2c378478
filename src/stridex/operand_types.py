from typing import Any, Protocol, TypeAlias, runtime_checkable

Shape: TypeAlias = tuple[int, ...]
Index: TypeAlias = tuple[int, ...]


@runtime_checkable
class LinearBuffer(Protocol):
    """Linear, randomly indexable element container backing a view."""

    def __len__(self) -> int: ...

    def __getitem__(self, index: int, /) -> Any: ...


@runtime_checkable
class WritableBuffer(LinearBuffer, Protocol):
    """Linear buffer that also accepts item assignment."""

    def __setitem__(self, index: int, value: Any, /) -> None: ...


@runtime_checkable
class Operand(Protocol):
    """Anything readable at a multi-index with a known broadcast shape."""

    @property
    def shape(self) -> Shape:
        """Operand shape."""
        ...

    def __call__(self, *indices: int) -> Any: ...


@runtime_checkable
class WritableOperand(Operand, Protocol):
    """Operand that can be written at a multi-index, e.g. an assignment target."""

    @property
    def readonly(self) -> bool:
        """Whether writes are rejected."""
        ...

    def write(self, indices: Index, value: Any, /) -> None: ...


__all__ = [
    "Index",
    "LinearBuffer",
    "Operand",
    "Shape",
    "WritableBuffer",
    "WritableOperand",
]
