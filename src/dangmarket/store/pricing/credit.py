"""Credit payment terms for business accounts."""

import calendar
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

from .exceptions import InsufficientCreditError
from .money import ZERO, to_decimal
from .types import AccountProfile

PER_BILL_DAYS = 7


class CreditTerm(str, Enum):
    MONTHLY = "monthly"
    PER_BILL = "per_bill"

    @classmethod
    def parse(cls, value) -> "CreditTerm | None":
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


def add_months(moment: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` later, clamped to the month's last day."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def due_date(term, now: datetime) -> datetime | None:
    """When a credit order must be paid.

    ``monthly`` is due one calendar month after ``now``, ``per_bill`` one
    week after. Without a recognised term there is no due date and the
    credit limit alone governs.
    """
    parsed = CreditTerm.parse(term)
    if parsed is CreditTerm.MONTHLY:
        return add_months(now, 1)
    if parsed is CreditTerm.PER_BILL:
        return now + timedelta(days=PER_BILL_DAYS)
    return None


def check_credit(account: AccountProfile | None, amount) -> Decimal:
    """Verify the account can put ``amount`` on credit.

    Returns:
        Remaining credit before this order

    Raises:
        InsufficientCreditError: not a business account, or the order
            exceeds the remaining credit limit
    """
    required = to_decimal(amount)
    if account is None or not account.is_business_account:
        raise InsufficientCreditError(required=required, available=ZERO)

    available = account.available_credit
    if required > available:
        raise InsufficientCreditError(required=required, available=available)
    return available
