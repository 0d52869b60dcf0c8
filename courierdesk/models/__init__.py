"""Models package initialization - imports all models for easy access."""

from courierdesk.models.customer import Customer
from courierdesk.models.package import (
    Package,
    PackageEvent,
    PackageStatus,
    WeightUnit,
    ServiceMode,
    PaymentStatus,
    CustomsStatus,
    TERMINAL_STATUS,
)
from courierdesk.models.pre_alert import PreAlert, PreAlertStatus
from courierdesk.models.billing import BillingInvoice, InvoiceStatus, Payment
from courierdesk.models.message import Message
from courierdesk.models.api_key import ApiKey, Role, STAFF_ROLES

__all__ = [
    "Customer",
    "Package",
    "PackageEvent",
    "PackageStatus",
    "WeightUnit",
    "ServiceMode",
    "PaymentStatus",
    "CustomsStatus",
    "TERMINAL_STATUS",
    "PreAlert",
    "PreAlertStatus",
    "BillingInvoice",
    "InvoiceStatus",
    "Payment",
    "Message",
    "ApiKey",
    "Role",
    "STAFF_ROLES",
]
