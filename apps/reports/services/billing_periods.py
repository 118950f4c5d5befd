"""Billing period service - calendar periods for a year and billing cycle."""

import calendar
import logging
from datetime import date
from typing import List, Optional

from apps.courses.models import BillingCycle
from ..exceptions import InvalidYearError
from .types import BillingPeriod


logger = logging.getLogger(__name__)

QUARTERS = (
    ('Q1', 1, 3),
    ('Q2', 4, 6),
    ('Q3', 7, 9),
    ('Q4', 10, 12),
)


def billing_cycle_for(fee_settings) -> str:
    """
    Resolve the billing cycle for a course's fee settings.

    Courses without fee settings (or with an unrecognised cycle) are
    billed monthly.
    """
    if fee_settings is None:
        return BillingCycle.MONTHLY

    cycle = getattr(fee_settings, 'billing_cycle', None)
    if cycle not in BillingCycle.values:
        if cycle:
            logger.warning("Unknown billing cycle %r, falling back to monthly", cycle)
        return BillingCycle.MONTHLY
    return cycle


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def generate_billing_periods(year: int, billing_cycle: Optional[str] = None) -> List[BillingPeriod]:
    """
    Generate the ordered billing periods covering one calendar year.

    The periods are contiguous and non-overlapping, together spanning
    1 January to 31 December of ``year``.

    Args:
        year: Calendar year.
        billing_cycle: 'monthly', 'quarterly' or 'yearly'. Anything else,
            including None, produces monthly periods.

    Returns:
        List of BillingPeriod in chronological order:
        - monthly: 12 periods labelled 'Jan'..'Dec'
        - quarterly: 4 periods labelled 'Q1'..'Q4'
        - yearly: 1 period labelled with the year

    Raises:
        InvalidYearError: If year is not a valid calendar year.

    Example:
        >>> periods = generate_billing_periods(2025, 'quarterly')
        >>> [(p.label, p.period_start, p.period_end) for p in periods][0]
        ('Q1', datetime.date(2025, 1, 1), datetime.date(2025, 3, 31))
    """
    if isinstance(year, bool) or not isinstance(year, int) or not (date.min.year <= year <= date.max.year):
        raise InvalidYearError(f"Invalid year: {year!r}")

    if billing_cycle == BillingCycle.YEARLY:
        return [BillingPeriod(str(year), date(year, 1, 1), date(year, 12, 31))]

    if billing_cycle == BillingCycle.QUARTERLY:
        return [
            BillingPeriod(label, date(year, first_month, 1), _month_end(year, last_month))
            for label, first_month, last_month in QUARTERS
        ]

    return [
        BillingPeriod(calendar.month_abbr[month], date(year, month, 1), _month_end(year, month))
        for month in range(1, 13)
    ]
