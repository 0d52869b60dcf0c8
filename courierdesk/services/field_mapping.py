"""
Inbound payload translation.

Older clients send camelCase names, alternate names for the same value
(itemValue / value / itemValueUsd) and display-style status labels
("At Warehouse"). This module is the only place those are understood:
payloads are upgraded to the canonical snake_case schema before validation,
and storage only ever sees canonical columns.
"""

from typing import Any, Mapping

CURRENT_SCHEMA_VERSION = 2

# legacy name -> canonical name
LEGACY_FIELD_NAMES = {
    "trackingNumber": "tracking_number",
    "userCode": "user_code",
    "itemValueUsd": "item_value_usd",
    "itemValue": "item_value_usd",
    "value": "item_value_usd",
    "amountPaid": "amount_paid_jmd",
    "amount_paid": "amount_paid_jmd",
    "deliveryFee": "delivery_fee_jmd",
    "delivery_fee": "delivery_fee_jmd",
    "additionalFees": "additional_fees",
    "branch": "current_location",
    "currentLocation": "current_location",
    "entryDate": "date_received",
    "dateReceived": "date_received",
    "itemDescription": "description",
    "weightUnit": "weight_unit",
    "warehouseLocation": "warehouse_location",
    "serviceMode": "service_mode",
    "mailboxNumber": "mailbox_number",
    "customsRequired": "customs_required",
    "customsStatus": "customs_status",
    "paymentStatus": "payment_status",
    "statusReason": "status_reason",
    "dimensionUnit": "dimension_unit",
}

# nested objects older clients send, flattened onto canonical columns
LEGACY_NESTED_FIELDS = {
    "dimensions": {
        "length": "length",
        "width": "width",
        "height": "height",
        "unit": "dimension_unit",
        "weightUnit": "weight_unit",
    },
    "recipient": {
        "name": "receiver_name",
        "phone": "receiver_phone",
        "email": "receiver_email",
        "address": "receiver_address",
    },
    "sender": {
        "name": "sender_name",
        "country": "sender_country",
    },
}

# normalised legacy label -> lifecycle status
LEGACY_STATUS_LABELS = {
    "at_warehouse": "received",
    "in_storage": "received",
    "at_local_port": "customs_pending",
    "deleted": "returned",
}


def normalize_status(value: Any) -> Any:
    """Map display-style or legacy status labels to lifecycle status values."""
    if not isinstance(value, str):
        return value
    label = value.strip().lower().replace("-", "_").replace(" ", "_")
    return LEGACY_STATUS_LABELS.get(label, label)


def upgrade_payload(payload: Any) -> Any:
    """
    Translate a package payload to the canonical schema.
    
    Canonical keys win over legacy aliases when both are present. Payloads
    that are not mappings are returned untouched so validation reports them.
    
    Raises:
        ValueError: schema_version is newer than this service understands
    """
    if not isinstance(payload, Mapping):
        return payload
    
    data = dict(payload)
    version = data.pop("schema_version", None)
    if version is not None:
        try:
            version = int(version)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid schema_version {version!r}")
        if version > CURRENT_SCHEMA_VERSION:
            raise ValueError(f"Unsupported schema_version {version}")
    
    for container, mapping in LEGACY_NESTED_FIELDS.items():
        nested = data.get(container)
        if not isinstance(nested, Mapping):
            continue
        data.pop(container)
        for legacy_name, canonical_name in mapping.items():
            if legacy_name in nested and canonical_name not in data:
                data[canonical_name] = nested[legacy_name]
    
    for legacy_name, canonical_name in LEGACY_FIELD_NAMES.items():
        if legacy_name not in data:
            continue
        legacy_value = data.pop(legacy_name)
        if canonical_name not in data:
            data[canonical_name] = legacy_value
    
    if "status" in data:
        data["status"] = normalize_status(data["status"])
    
    return data
