"""Unit tests for the exception hierarchy."""

import pytest
import pytest_check

from worktrack.core.exceptions import (
    DataAccessError,
    ErrorCode,
    NotFoundError,
    Severity,
    ValidationError,
    WorktrackError,
)


@pytest.mark.unit
class TestWorktrackError:
    """Test the base exception."""

    def test_accepts_enum_or_string_code(self) -> None:
        assert WorktrackError(ErrorCode.NOT_FOUND, "x").error_code == "NOT_FOUND"
        assert WorktrackError("CUSTOM", "x").error_code == "CUSTOM"

    def test_str_and_repr(self) -> None:
        error = WorktrackError(
            ErrorCode.INTERNAL_ERROR, "Boom", context={"employee_id": 7}
        )

        with pytest_check.check:
            assert str(error) == "[INTERNAL_ERROR] Boom"
        with pytest_check.check:
            assert "context={'employee_id': 7}" in repr(error)
        with pytest_check.check:
            assert "severity=MEDIUM" in repr(error)

    def test_cause_is_chained(self) -> None:
        cause = OSError("connection refused")
        error = WorktrackError(ErrorCode.INTERNAL_ERROR, "Boom", cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    def test_fingerprint_is_stable_for_same_location(self) -> None:
        fingerprints = {
            WorktrackError(ErrorCode.INTERNAL_ERROR, f"msg {i}").fingerprint
            for i in range(3)
        }

        assert len(fingerprints) == 1
        assert len(fingerprints.pop()) == 16

    def test_fingerprint_differs_by_type(self) -> None:
        assert (
            NotFoundError("a").fingerprint != ValidationError("a").fingerprint
        )


@pytest.mark.unit
class TestSpecializedErrors:
    """Test the severities and codes of the concrete exceptions."""

    @pytest.mark.parametrize(
        ("error", "code", "severity", "expected", "alert"),
        [
            (ValidationError("bad"), "VALIDATION_ERROR", Severity.LOW, True, False),
            (NotFoundError("gone"), "NOT_FOUND", Severity.LOW, True, False),
            (
                DataAccessError("down"),
                "DATA_ACCESS_ERROR",
                Severity.HIGH,
                False,
                True,
            ),
        ],
    )
    def test_defaults(
        self,
        error: WorktrackError,
        code: str,
        severity: Severity,
        expected: bool,
        alert: bool,
    ) -> None:
        with pytest_check.check:
            assert error.error_code == code
        with pytest_check.check:
            assert error.severity is severity
        with pytest_check.check:
            assert error.is_expected is expected
        with pytest_check.check:
            assert error.should_alert is alert

    def test_all_are_worktrack_errors(self) -> None:
        for error_type in (ValidationError, NotFoundError, DataAccessError):
            assert issubclass(error_type, WorktrackError)
