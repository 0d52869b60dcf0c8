"""Services package initialization."""

from courierdesk.services.fees import (
    PackageCosts,
    compute_package_costs,
    shipping_cost_jmd,
    storage_fee_jmd,
    customs_duty_usd,
    days_in_storage,
    weight_in_pounds,
)
from courierdesk.services.tracking import (
    generate_tracking_number,
    is_tracking_number_available,
    normalize_tracking_number,
)
from courierdesk.services.field_mapping import upgrade_payload, normalize_status

__all__ = [
    "PackageCosts",
    "compute_package_costs",
    "shipping_cost_jmd",
    "storage_fee_jmd",
    "customs_duty_usd",
    "days_in_storage",
    "weight_in_pounds",
    "generate_tracking_number",
    "is_tracking_number_available",
    "normalize_tracking_number",
    "upgrade_payload",
    "normalize_status",
]
