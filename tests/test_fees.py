"""
Unit tests for package fee calculations.
Shipping, storage, balance and the combined cost breakdown.
"""

import math
from datetime import datetime, timedelta, timezone

import pytest
from courierdesk.models import WeightUnit
from courierdesk.services.fees import (
    as_number,
    weight_in_pounds,
    days_in_storage,
    shipping_cost_jmd,
    storage_fee_jmd,
    customs_duty_usd,
    additional_fees_total_jmd,
    outstanding_balance_jmd,
    compute_package_costs,
)

NOW = datetime(2026, 3, 15, 12, 0, 0)


class TestShippingCost:
    """Tests for the per-pound shipping rate."""
    
    @pytest.mark.parametrize("weight", [0, -1, -0.5, None, "abc", float("nan")])
    def test_no_weight_costs_nothing(self, weight):
        assert shipping_cost_jmd(weight) == 0
    
    @pytest.mark.parametrize("weight,expected", [
        (0.5, 700),
        (1, 700),
        (1.1, 1050),
        (2, 1050),
        (2.5, 1400),
        (3, 1400),
        (10, 3850),
    ])
    def test_fractional_pounds_round_up(self, weight, expected):
        assert shipping_cost_jmd(weight) == expected
    
    def test_matches_formula(self):
        """700 for the first pound, 350 for each started pound after it."""
        for tenths in range(1, 200):
            w = tenths / 10
            assert shipping_cost_jmd(w) == 700 + max(0, math.ceil(w) - 1) * 350
    
    def test_numeric_string_weight(self):
        assert shipping_cost_jmd("1.1") == 1050


class TestStorageFee:
    """Tests for storage charges after the free period."""
    
    @pytest.mark.parametrize("days,expected", [
        (0, 0),
        (1, 0),
        (7, 0),
        (8, 50),
        (30, 1150),
    ])
    def test_storage_fee(self, days, expected):
        assert storage_fee_jmd(days) == expected
    
    def test_garbage_days_are_free(self):
        assert storage_fee_jmd(None) == 0
        assert storage_fee_jmd("soon") == 0


class TestDaysInStorage:
    """Tests for whole-day storage counting."""
    
    def test_counts_whole_days(self):
        received = NOW - timedelta(days=10, hours=5)
        assert days_in_storage(received, now=NOW) == 10
    
    def test_falls_back_to_created_at(self):
        created = NOW - timedelta(days=3)
        assert days_in_storage(None, created, now=NOW) == 3
    
    def test_future_date_is_zero(self):
        assert days_in_storage(NOW + timedelta(days=2), now=NOW) == 0
    
    def test_no_dates_is_zero(self):
        assert days_in_storage(None, None, now=NOW) == 0
    
    def test_accepts_aware_and_string_dates(self):
        aware = datetime(2026, 3, 5, 12, 0, 0, tzinfo=timezone.utc)
        assert days_in_storage(aware, now=NOW) == 10
        assert days_in_storage("2026-03-05T12:00:00Z", now=NOW) == 10


class TestCoercion:
    """Tests for lenient numeric coercion."""
    
    @pytest.mark.parametrize("value", [None, True, "n/a", float("inf"), float("nan"), object()])
    def test_unusable_values_become_zero(self, value):
        assert as_number(value) == 0
    
    def test_numbers_and_numeric_strings(self):
        assert as_number(12) == 12.0
        assert as_number(" 12.5 ") == 12.5
    
    def test_weight_units(self):
        assert weight_in_pounds(2.5, "lb") == 2.5
        assert weight_in_pounds(2.5, WeightUnit.LB) == 2.5
        assert weight_in_pounds(1, "kg") == pytest.approx(2.20462)
        # Unknown units are treated as kilograms
        assert weight_in_pounds(1, None) == pytest.approx(2.20462)


class TestBalance:
    """Tests for outstanding balance and extras."""
    
    @pytest.mark.parametrize("total,paid,expected", [
        (1000, 250, 750),
        (1000, 1000, 0),
        (1000, 1500, 0),
        (0, 0, 0),
        ("bad", 100, 0),
    ])
    def test_never_negative(self, total, paid, expected):
        assert outstanding_balance_jmd(total, paid) == expected
    
    def test_additional_fees_skip_malformed_entries(self):
        fees = [{"label": "Handling", "amount": 200}, {"amount": "x"}, "oops", {"amount": "50"}]
        assert additional_fees_total_jmd(fees) == 250
        assert additional_fees_total_jmd(None) == 0
        assert additional_fees_total_jmd({"amount": 10}) == 0
    
    def test_customs_duty_is_not_charged(self):
        assert customs_duty_usd(50) == 0
        assert customs_duty_usd(5000) == 0


class TestComputePackageCosts:
    """Tests for the combined cost breakdown."""
    
    def _package(self, **overrides):
        pkg = {
            "weight": 2.5,
            "weight_unit": "lb",
            "date_received": NOW - timedelta(days=30),
            "delivery_fee_jmd": 500,
            "additional_fees": [{"label": "Handling", "amount": 200}],
            "amount_paid_jmd": 1000,
        }
        pkg.update(overrides)
        return pkg
    
    def test_full_breakdown(self):
        costs = compute_package_costs(self._package(), now=NOW)
        
        assert costs.weight_lb == 2.5
        assert costs.days_in_storage == 30
        assert costs.shipping_cost_jmd == 1400
        assert costs.storage_fee_jmd == 1150
        assert costs.delivery_fee_jmd == 500
        assert costs.additional_fees_total_jmd == 200
        assert costs.total_cost_jmd == 3250
        assert costs.amount_paid_jmd == 1000
        assert costs.outstanding_balance_jmd == 2250
        assert costs.customs_duty_usd == 0
    
    def test_overpayment_leaves_zero_balance(self):
        costs = compute_package_costs(self._package(amount_paid_jmd=99999), now=NOW)
        assert costs.outstanding_balance_jmd == 0
    
    def test_kilograms_are_converted(self):
        costs = compute_package_costs(self._package(weight=1, weight_unit="kg"), now=NOW)
        # 2.2 lb rounds up to 3 pounds
        assert costs.shipping_cost_jmd == 1400
    
    def test_malformed_record_costs_nothing(self):
        costs = compute_package_costs({
            "weight": "heavy",
            "additional_fees": "none",
            "amount_paid_jmd": None,
            "delivery_fee_jmd": -300,
        }, now=NOW)
        assert costs.total_cost_jmd == 0
        assert costs.outstanding_balance_jmd == 0
        assert costs.delivery_fee_jmd == 0
    
    def test_idempotent(self):
        pkg = self._package()
        first = compute_package_costs(pkg, now=NOW)
        second = compute_package_costs(pkg, now=NOW)
        assert first == second
        assert first.as_dict() == second.as_dict()
    
    def test_scenario_two_and_a_half_pounds(self):
        """TAS-000001 for CUST001 at 2.5 lb: ceil(2.5) = 3 pounds."""
        costs = compute_package_costs(
            {"tracking_number": "TAS-000001", "weight": 2.5, "weight_unit": "lb", "date_received": NOW},
            now=NOW,
        )
        assert costs.shipping_cost_jmd == 700 + (math.ceil(2.5) - 1) * 350 == 1400
