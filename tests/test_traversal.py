import pytest

from stridex import (
    ExecutionError,
    StridedView,
    ValidationError,
    assign,
    iter_indices,
    to_nested_list,
    walk,
)
from stridex.operand_types import Index


def _record(
    shape: tuple[int, ...],
) -> tuple[list[Index], list[Index]]:
    leaves: list[Index] = []
    rows: list[Index] = []
    walk(shape, leaves.append, row_end=rows.append)
    return leaves, rows


def test_walk_visits_row_major_and_reports_completed_rows() -> None:
    leaves, rows = _record((2, 3))

    assert leaves == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]
    assert rows == [(0,), (1,)]
    assert leaves == list(iter_indices((2, 3)))


def test_walk_rank_three_rows_follow_outer_dims() -> None:
    leaves, rows = _record((2, 2, 2))

    assert len(leaves) == 8
    assert leaves[:3] == [(0, 0, 0), (0, 0, 1), (0, 1, 0)]
    assert rows == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_walk_rank_zero_and_empty_extents() -> None:
    assert _record(()) == ([()], [])
    assert _record((0, 3)) == ([], [])
    assert _record((2, 0)) == ([], [])
    assert _record((2, 0, 2)) == ([], [])
    assert list(iter_indices(())) == [()]


def test_walk_without_row_visitor() -> None:
    leaves: list[Index] = []
    walk((3,), leaves.append)
    assert leaves == [(0,), (1,), (2,)]


def test_assign_round_trips_expression_values() -> None:
    buffer = list(range(1, 10))
    left = StridedView(buffer, (3, 3))
    right = StridedView([2, 3, 4], (3, 1))
    source = left * right + 1
    expected = to_nested_list(source)

    result = StridedView([0] * 9, (3, 3))
    result.assign(source)
    buffer[0] = 1000

    assert result.tolist() == expected
    assert expected == [[3, 5, 7], [13, 16, 19], [29, 33, 37]]


def test_assign_broadcasts_lower_rank_sources_and_scalars() -> None:
    target = StridedView([0] * 6, (2, 3))

    assign(target, StridedView([7, 8, 9], (3,)))
    assert target.tolist() == [[7, 8, 9], [7, 8, 9]]

    assign(target, 4)
    assert target.tolist() == [[4, 4, 4], [4, 4, 4]]


def test_assign_rejects_sources_larger_than_target() -> None:
    target = StridedView([0] * 9, (3, 3))

    with pytest.raises(ValidationError) as error:
        assign(target, StridedView(list(range(12)), (3, 4)))
    assert error.value.code == "assign_shape_mismatch"

    with pytest.raises(ValidationError):
        assign(target, StridedView(list(range(18)), (2, 3, 3)))


def test_assign_rejects_readonly_targets_before_writing() -> None:
    target = StridedView((0, 0, 0), (3,))

    with pytest.raises(ExecutionError) as error:
        assign(target, StridedView([1, 2, 3], (3,)))
    assert error.value.code == "readonly_buffer"


def test_in_place_operators_assign_back_into_view() -> None:
    buffer = [1, 2, 3, 4]
    view = StridedView(buffer, (2, 2))
    original = view

    view += StridedView([10, 20], (2,))
    assert view is original
    assert buffer == [11, 22, 13, 24]

    view -= 1
    view *= 2
    assert buffer == [20, 42, 24, 46]

    view /= 2
    assert buffer == [10.0, 21.0, 12.0, 23.0]


def test_to_nested_list_handles_rank_zero_and_empty_shapes() -> None:
    assert to_nested_list(StridedView([5], ())) == 5
    assert to_nested_list(3) == 3
    assert to_nested_list(StridedView([], (2, 0))) == [[], []]
