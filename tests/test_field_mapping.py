"""
Tests for the legacy payload translation layer.
"""

import pytest
from pydantic import ValidationError

from courierdesk.models import PackageStatus, WeightUnit
from courierdesk.schemas.package import PackageCreateRequest, PackageUpdateRequest
from courierdesk.services.field_mapping import normalize_status, upgrade_payload
from tests.fixtures.test_data import generate_legacy_payload


class TestUpgradePayload:
    """Tests for legacy name translation."""
    
    def test_camel_case_names(self):
        data = upgrade_payload({
            "trackingNumber": "TAS-1",
            "userCode": "CUST001",
            "amountPaid": 100,
            "deliveryFee": 250,
            "entryDate": "2026-01-01",
        })
        assert data == {
            "tracking_number": "TAS-1",
            "user_code": "CUST001",
            "amount_paid_jmd": 100,
            "delivery_fee_jmd": 250,
            "date_received": "2026-01-01",
        }
    
    def test_item_value_precedence(self):
        data = upgrade_payload({"value": 1, "itemValue": 2, "itemValueUsd": 3})
        assert data == {"item_value_usd": 3}
        
        data = upgrade_payload({"value": 1, "itemValue": 2})
        assert data == {"item_value_usd": 2}
    
    def test_canonical_name_wins(self):
        data = upgrade_payload({"item_value_usd": 10, "itemValue": 99, "branch": "MoBay", "current_location": "Kingston"})
        assert data["item_value_usd"] == 10
        assert data["current_location"] == "Kingston"
    
    def test_nested_dimensions_flattened(self):
        data = upgrade_payload({"dimensions": {"length": 30, "width": 20, "height": 10, "unit": "in"}})
        assert data == {"length": 30, "width": 20, "height": 10, "dimension_unit": "in"}
    
    def test_non_mapping_untouched(self):
        assert upgrade_payload(["not", "a", "dict"]) == ["not", "a", "dict"]
        assert upgrade_payload(None) is None
    
    def test_schema_versions(self):
        assert upgrade_payload({"schema_version": 1, "userCode": "C1"}) == {"user_code": "C1"}
        assert upgrade_payload({"schema_version": "2"}) == {}
        with pytest.raises(ValueError):
            upgrade_payload({"schema_version": 3})
        with pytest.raises(ValueError):
            upgrade_payload({"schema_version": "latest"})
    
    def test_input_not_mutated(self):
        payload = {"trackingNumber": "TAS-1"}
        upgrade_payload(payload)
        assert payload == {"trackingNumber": "TAS-1"}


class TestStatusLabels:
    
    @pytest.mark.parametrize("label,expected", [
        ("At Warehouse", "received"),
        ("In Storage", "received"),
        ("In Processing", "in_processing"),
        ("Ready to Ship", "ready_to_ship"),
        ("In Transit", "in_transit"),
        ("At Local Port", "customs_pending"),
        ("Out-for-Delivery", "out_for_delivery"),
        ("Delivered", "delivered"),
        ("Deleted", "returned"),
        ("received", "received"),
    ])
    def test_normalize(self, label, expected):
        assert normalize_status(label) == expected


class TestSchemasUseTranslation:
    """Request schemas accept legacy payloads."""
    
    def test_create_request_from_legacy_payload(self):
        request = PackageCreateRequest.model_validate(generate_legacy_payload())
        
        assert request.tracking_number == "TAS-LEGACY01"
        assert request.user_code == "CUST001"
        assert request.weight_unit == WeightUnit.LB
        assert request.length == 30
        assert request.item_value_usd == 75
        assert request.description == "Phone case"
        assert request.current_location == "Kingston"
        assert request.status == PackageStatus.RECEIVED
    
    def test_update_request_only_reports_sent_fields(self):
        request = PackageUpdateRequest.model_validate({"status": "In Transit", "warehouseLocation": "B-12"})
        assert request.changes() == {
            "status": PackageStatus.IN_TRANSIT,
            "warehouse_location": "B-12",
        }
    
    def test_future_schema_version_rejected(self):
        with pytest.raises(ValidationError):
            PackageCreateRequest.model_validate({"schema_version": 9, "tracking_number": "TAS-1", "user_code": "C"})
    
    def test_cannot_create_as_returned(self):
        with pytest.raises(ValidationError):
            PackageCreateRequest.model_validate({"tracking_number": "TAS-1", "user_code": "C", "status": "Deleted"})
