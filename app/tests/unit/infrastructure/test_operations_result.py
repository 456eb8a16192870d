"""Unit tests for OperationResult and OperationStatus in infrastructure."""

import pytest
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


@pytest.mark.unit
class TestOperationStatus:
    def test_operation_status_success(self):
        assert OperationStatus.SUCCESS.value == "success"

    def test_operation_status_not_found(self):
        assert OperationStatus.NOT_FOUND.value == "not_found"

    def test_operation_status_policy_violation(self):
        assert OperationStatus.POLICY_VIOLATION.value == "policy_violation"

    def test_operation_status_permanent_error(self):
        assert OperationStatus.PERMANENT_ERROR.value == "permanent_error"


@pytest.mark.unit
class TestOperationResultFactories:
    def test_success_factory_minimal(self):
        result = OperationResult.success()
        assert result.status == OperationStatus.SUCCESS
        assert result.message == "ok"
        assert result.is_success

    def test_success_factory_with_data(self):
        data = {"id": 7}
        result = OperationResult.success(data=data, message="approved")
        assert result.status == OperationStatus.SUCCESS
        assert result.data == data

    def test_error_factory_with_error_code(self):
        result = OperationResult.error(
            OperationStatus.PERMANENT_ERROR, "Store unavailable", error_code="IO"
        )
        assert result.error_code == "IO"
        assert not result.is_success

    def test_not_found_factory(self):
        result = OperationResult.not_found("Translation 9 not found", data={"id": 9})
        assert result.status == OperationStatus.NOT_FOUND
        assert result.error_code == "NOT_FOUND"
        assert result.data == {"id": 9}

    def test_policy_violation_factory(self):
        result = OperationResult.policy_violation("Translation 3 is already approved")
        assert result.status == OperationStatus.POLICY_VIOLATION
        assert result.error_code == "POLICY_VIOLATION"

    def test_permanent_error_factory(self):
        result = OperationResult.permanent_error(
            "Invalid input", error_code="VALIDATION_ERROR"
        )
        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "VALIDATION_ERROR"


@pytest.mark.unit
class TestOperationResultEdgeCases:
    def test_operation_result_with_nested_data(self):
        data = {"translation": {"id": 1, "status": "approved"}}
        result = OperationResult.success(data=data)
        assert result.data["translation"]["id"] == 1

    def test_operation_result_with_empty_data(self):
        result = OperationResult.success(data={})
        assert result.data == {}
