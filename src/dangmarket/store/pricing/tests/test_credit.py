"""Tests for credit terms and headroom checks."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ..credit import CreditTerm, add_months, check_credit, due_date
from ..exceptions import InsufficientCreditError
from ..types import GUEST_ACCOUNT, AccountProfile


def business(limit="10000", balance="0", terms="monthly"):
    return AccountProfile(
        is_business_account=True,
        credit_limit=Decimal(limit) if limit is not None else None,
        current_credit_balance=Decimal(balance),
        credit_payment_terms=terms,
    )


class TestDueDate:
    NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)

    def test_monthly_is_same_day_next_month(self):
        assert due_date("monthly", self.NOW) == datetime(2024, 4, 15, 10, 30, tzinfo=timezone.utc)

    def test_per_bill_is_one_week(self):
        assert due_date("per_bill", self.NOW) == datetime(2024, 3, 22, 10, 30, tzinfo=timezone.utc)

    def test_unknown_term_has_no_due_date(self):
        assert due_date(None, self.NOW) is None
        assert due_date("quarterly", self.NOW) is None

    @pytest.mark.parametrize("now,expected", [
        (datetime(2024, 1, 31), datetime(2024, 2, 29)),
        (datetime(2023, 1, 31), datetime(2023, 2, 28)),
        (datetime(2024, 3, 31), datetime(2024, 4, 30)),
        (datetime(2024, 12, 15), datetime(2025, 1, 15)),
    ])
    def test_monthly_clamps_to_month_end(self, now, expected):
        assert due_date(CreditTerm.MONTHLY, now) == expected

    def test_add_months_over_several_years(self):
        assert add_months(datetime(2024, 2, 29), 12) == datetime(2025, 2, 28)
        assert add_months(datetime(2024, 5, 10), 20) == datetime(2026, 1, 10)


class TestCheckCredit:
    def test_returns_available_credit(self):
        assert check_credit(business(balance="2500"), Decimal("1000")) == Decimal("7500")

    def test_exact_remaining_credit_is_allowed(self):
        assert check_credit(business(balance="9000"), Decimal("1000")) == Decimal("1000")

    def test_over_limit_raises(self):
        with pytest.raises(InsufficientCreditError) as exc_info:
            check_credit(business(balance="9500"), Decimal("1000"))
        error = exc_info.value
        assert error.code == "insufficient_credit"
        assert error.required == Decimal("1000")
        assert error.available == Decimal("500")

    def test_business_account_without_limit_has_no_credit(self):
        with pytest.raises(InsufficientCreditError):
            check_credit(business(limit=None), Decimal("1"))

    @pytest.mark.parametrize("account", [
        None,
        GUEST_ACCOUNT,
        AccountProfile(is_business_account=False, credit_limit=Decimal("10000")),
    ])
    def test_non_business_accounts_cannot_use_credit(self, account):
        with pytest.raises(InsufficientCreditError) as exc_info:
            check_credit(account, Decimal("100"))
        assert exc_info.value.available == Decimal("0")


class TestCreditTerm:
    def test_parse(self):
        assert CreditTerm.parse("Monthly") is CreditTerm.MONTHLY
        assert CreditTerm.parse("per_bill") is CreditTerm.PER_BILL
        assert CreditTerm.parse("weekly") is None
