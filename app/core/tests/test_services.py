"""
Tests for ServiceResult and BaseService.
"""

import pytest

from clinic.models import PriceListItem
from core.services import BaseService, ServiceResult


class TestServiceResult:

    def test_success(self):
        result = ServiceResult.success({"id": 1})

        assert result
        assert result.data == {"id": 1}
        assert result.error is None

    def test_failure_response(self):
        result = ServiceResult.failure(
            "Quantity must be at least 1.",
            error_code="INVALID_QUANTITY",
            errors={"quantity": ["Quantity must be at least 1."]},
        )

        assert not result
        assert result.to_response() == {
            "error": "Quantity must be at least 1.",
            "error_code": "INVALID_QUANTITY",
            "errors": {"quantity": ["Quantity must be at least 1."]},
        }

    def test_failure_without_code(self):
        assert ServiceResult.failure("Nope").to_response() == {"error": "Nope"}


class SampleService(BaseService):
    pass


class TestBaseService:

    def test_logger_named_after_service(self):
        assert SampleService.get_logger().name.endswith("SampleService")

    @pytest.mark.django_db
    def test_atomic_rolls_back_on_error(self):
        with pytest.raises(RuntimeError):
            with SampleService.atomic():
                PriceListItem.objects.create(name="Scaling", default_price=80)
                raise RuntimeError("boom")

        assert not PriceListItem.objects.exists()
