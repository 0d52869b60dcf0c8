"""
Package fee calculation service.
Computes shipping, storage, customs and balance figures from stored package attributes.

Every function here is total: malformed or missing inputs coerce to 0 instead of
raising, and fees are never negative. Nothing here touches the database, so the
figures are recomputed on every read and cannot drift from the inputs.
"""

import math
from dataclasses import dataclass, asdict
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from courierdesk.config import get_settings
from courierdesk.database import utcnow

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class PackageCosts:
    """Derived cost figures for one package (JMD unless noted)."""
    weight_lb: float
    days_in_storage: int
    shipping_cost_jmd: float
    storage_fee_jmd: float
    delivery_fee_jmd: float
    additional_fees_total_jmd: float
    total_cost_jmd: float
    amount_paid_jmd: float
    outstanding_balance_jmd: float
    customs_duty_usd: float

    def as_dict(self) -> dict:
        return asdict(self)


def as_number(value: Any) -> float:
    """
    Coerce a stored value to a finite float.
    
    Numbers pass through, numeric strings are parsed; None, booleans,
    NaN/inf and anything unparseable become 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def weight_in_pounds(weight: Any, unit: Any = "kg") -> float:
    """Convert a stored weight to pounds. Anything other than lb is treated as kg."""
    settings = get_settings()
    value = as_number(weight)
    unit = getattr(unit, "value", unit)
    if isinstance(unit, str) and unit.strip().lower() in ("lb", "lbs"):
        return value
    return value * settings.kg_to_lb


def to_naive_utc(value: Any) -> Optional[datetime]:
    """Parse a datetime, date or ISO string into a naive UTC datetime, or None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def days_in_storage(
    date_received: Any,
    created_at: Any = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Whole days since the package was received (falling back to creation time).
    
    Returns 0 when neither timestamp is usable or the timestamp is in the future.
    """
    base = to_naive_utc(date_received) or to_naive_utc(created_at)
    if base is None:
        return 0
    current = to_naive_utc(now) or utcnow()
    elapsed_days = math.floor((current - base).total_seconds() / SECONDS_PER_DAY)
    return max(0, elapsed_days)


def shipping_cost_jmd(weight_lb: Any) -> float:
    """
    Shipping cost by weight.
    
    Formula: 0 if w <= 0, else first_pound + max(0, ceil(w) - 1) * additional_pound
    """
    settings = get_settings()
    weight = as_number(weight_lb)
    if weight <= 0:
        return 0.0
    additional_pounds = max(0, math.ceil(weight) - 1)
    return settings.first_pound_fee_jmd + additional_pounds * settings.additional_pound_fee_jmd


def storage_fee_jmd(days: Any) -> float:
    """Storage fee: the first free_storage_days are free, then a flat daily charge."""
    settings = get_settings()
    stored_days = as_number(days)
    if stored_days <= settings.free_storage_days:
        return 0.0
    return (stored_days - settings.free_storage_days) * settings.storage_fee_per_day_jmd


def customs_duty_usd(item_value_usd: Any) -> float:
    """
    Customs duty on the declared value.
    
    Duty applies to items over $100 USD, but the rate has not been set by the
    business, so this returns 0 for every value until it is.
    """
    return 0.0


def additional_fees_total_jmd(fees: Any) -> float:
    """Sum the amount of each additional fee entry; malformed entries count as 0."""
    if not isinstance(fees, Iterable) or isinstance(fees, (str, bytes, Mapping)):
        return 0.0
    total = 0.0
    for fee in fees:
        if isinstance(fee, Mapping):
            total += as_number(fee.get("amount"))
        else:
            total += as_number(getattr(fee, "amount", None))
    return total


def outstanding_balance_jmd(total_cost: Any, amount_paid: Any) -> float:
    """Balance still owed, floored at 0."""
    return max(0.0, as_number(total_cost) - as_number(amount_paid))


def _field(pkg: Any, name: str, default: Any = None) -> Any:
    if isinstance(pkg, Mapping):
        return pkg.get(name, default)
    return getattr(pkg, name, default)


def compute_package_costs(pkg: Any, now: Optional[datetime] = None) -> PackageCosts:
    """
    Compute every derived cost figure for a package.
    
    Args:
        pkg: Package row or a mapping with canonical field names
        now: Reference time for storage days (defaults to current UTC time)
    
    Returns:
        PackageCosts with shipping, storage, totals and outstanding balance
    """
    weight_lb = weight_in_pounds(_field(pkg, "weight"), _field(pkg, "weight_unit", "kg"))
    stored_days = days_in_storage(
        _field(pkg, "date_received"),
        _field(pkg, "created_at"),
        now,
    )
    
    shipping = shipping_cost_jmd(weight_lb)
    storage = storage_fee_jmd(stored_days)
    delivery = max(0.0, as_number(_field(pkg, "delivery_fee_jmd")))
    additional = additional_fees_total_jmd(_field(pkg, "additional_fees"))
    total = shipping + storage + delivery + additional
    paid = as_number(_field(pkg, "amount_paid_jmd"))
    
    return PackageCosts(
        weight_lb=round(weight_lb, 3),
        days_in_storage=stored_days,
        shipping_cost_jmd=shipping,
        storage_fee_jmd=storage,
        delivery_fee_jmd=delivery,
        additional_fees_total_jmd=additional,
        total_cost_jmd=total,
        amount_paid_jmd=paid,
        outstanding_balance_jmd=outstanding_balance_jmd(total, paid),
        customs_duty_usd=customs_duty_usd(_field(pkg, "item_value_usd")),
    )
