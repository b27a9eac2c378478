import pytest

from stridex import ErrorCode, ExecutionError, StridedView, StrideError, ValidationError


def test_validation_error_exposes_structured_fields() -> None:
    error = ValidationError(
        code=ErrorCode.SHAPE_MISMATCH,
        message="shape mismatch: extent 3 vs 2 at dim 0",
        help="operands must agree on every aligned extent or supply 1 there",
        related=("broadcast shape inference",),
        data={"dim": 0, "expected": 3, "got": 2},
    )

    assert error.code == "shape_mismatch"
    assert error.external_code == "SHAPE_MISMATCH"
    assert error.severity == "error"
    assert error.channel == "validation_error"
    assert error.related == ("broadcast shape inference",)
    assert error.data == {"dim": 0, "expected": 3, "got": 2}
    assert str(error) == "shape mismatch: extent 3 vs 2 at dim 0"


def test_execution_error_exposes_channel() -> None:
    error = ExecutionError(code=ErrorCode.READONLY_BUFFER, message="readonly")
    assert error.channel == "execution_error"
    assert isinstance(error, StrideError)
    assert isinstance(error, ValueError)


def test_upper_snake_codes_are_normalized() -> None:
    error = ValidationError(code="BUFFER_TOO_SMALL", message="too small")
    assert error.code == "buffer_too_small"
    assert error.external_code == "BUFFER_TOO_SMALL"


@pytest.mark.parametrize("code", ["", "1abc", "has space", "Mixed_Case"])
def test_malformed_codes_are_rejected(code: str) -> None:
    with pytest.raises(ValueError):
        ValidationError(code=code, message="bad code")


def test_blank_message_and_related_notes_are_rejected() -> None:
    with pytest.raises(ValueError):
        ValidationError(code=ErrorCode.INVALID_SHAPE, message="  ")
    with pytest.raises(ValueError):
        ValidationError(code=ErrorCode.INVALID_SHAPE, message="x", related=(" ",))


def test_data_payload_types_are_checked() -> None:
    with pytest.raises(TypeError):
        ValidationError(
            code=ErrorCode.INVALID_SHAPE,
            message="x",
            data={"extent": 1.5},  # type: ignore[dict-item]
        )


def test_buffer_too_small_diagnostic_carries_sizes() -> None:
    with pytest.raises(ValidationError) as error:
        StridedView(list(range(9)), (2, 5))

    assert error.value.code == "buffer_too_small"
    assert error.value.data == {"required": 10, "available": 9}
    assert error.value.help is not None
    assert "view construction" in error.value.related
