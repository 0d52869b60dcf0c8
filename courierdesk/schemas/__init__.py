"""Schemas package initialization."""

from courierdesk.schemas.package import (
    AdditionalFee,
    PackageCreateRequest,
    PackageUpdateRequest,
    PackageCostsResponse,
    PackageResponse,
    PackageListResponse,
    PackageUpdateResponse,
    PackageDeleteResponse,
    PackageStatsResponse,
    TrackingNumberResponse,
    TrackingEvent,
    TrackingLookupResponse,
)
from courierdesk.schemas.billing import (
    PaymentRequest,
    PaymentResponse,
    PaymentRecordedResponse,
    PaymentListResponse,
    InvoiceResponse,
)
from courierdesk.schemas.customer import (
    CustomerCreateRequest,
    CustomerResponse,
    CustomerListResponse,
)
from courierdesk.schemas.pre_alert import (
    PreAlertCreateRequest,
    PreAlertResponse,
    PreAlertListResponse,
    PreAlertDecisionRequest,
)
from courierdesk.schemas.message import MessageResponse, MessageListResponse
from courierdesk.schemas.auth import ApiKeyCreateRequest, ApiKeyCreatedResponse

__all__ = [
    "AdditionalFee",
    "PackageCreateRequest",
    "PackageUpdateRequest",
    "PackageCostsResponse",
    "PackageResponse",
    "PackageListResponse",
    "PackageUpdateResponse",
    "PackageDeleteResponse",
    "PackageStatsResponse",
    "TrackingNumberResponse",
    "TrackingEvent",
    "TrackingLookupResponse",
    "PaymentRequest",
    "PaymentResponse",
    "PaymentRecordedResponse",
    "PaymentListResponse",
    "InvoiceResponse",
    "CustomerCreateRequest",
    "CustomerResponse",
    "CustomerListResponse",
    "PreAlertCreateRequest",
    "PreAlertResponse",
    "PreAlertListResponse",
    "PreAlertDecisionRequest",
    "MessageResponse",
    "MessageListResponse",
    "ApiKeyCreateRequest",
    "ApiKeyCreatedResponse",
]
