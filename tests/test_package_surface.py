import stridex
from stridex import ErrorCode, StridedView, broadcast_shapes


def test_public_names_resolve() -> None:
    for name in stridex.__all__:
        assert hasattr(stridex, name), name


def test_error_codes_are_unique_snake_case() -> None:
    values = [code.value for code in ErrorCode]

    assert len(values) == len(set(values))
    assert all(value == value.lower() and " " not in value for value in values)


def test_reference_walkthrough() -> None:
    buffer = list(range(1, 10))
    v = StridedView(buffer, (3, 3))
    assert str(v) == "1 2 3\n4 5 6\n7 8 9"
    assert v(2, 1) == 8

    assert broadcast_shapes((3, 4), (3, 3, 1)) == (3, 3, 4)

    row = StridedView([-1000, 1, -1000], (3,))
    zeros = StridedView([0] * 9, (3, 3))
    res = StridedView([0] * 9, (3, 3))
    res.assign(zeros + row)
    assert res.tolist() == [[-1000, 1, -1000]] * 3
