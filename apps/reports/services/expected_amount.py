"""Expected amount service - what a student owes for one billing period."""

from datetime import datetime
from decimal import Decimal

from apps.enrollments.models import AcademicStatus
from .types import ZERO, BillingPeriod, to_decimal


# Academic states that stop any further fee obligation
NON_BILLABLE_ACADEMIC_STATUSES = (AcademicStatus.WITHDRAWN, AcademicStatus.SUSPENDED)


def as_date(value):
    """Normalise datetimes to dates so they compare with period bounds."""
    if isinstance(value, datetime):
        return value.date()
    return value


def enrollment_start(enrollment):
    """Effective start date: start_date when set, else enrollment_date."""
    return as_date(enrollment.start_date or enrollment.enrollment_date)


def calculate_expected_amount(enrollment, period: BillingPeriod, fee_settings=None) -> Decimal:
    """
    Calculate the fee a student should pay for a billing period.

    Rules, evaluated in order; the first matching rule yields zero:
    1. No enrollment.
    2. Enrollment starts after the period ends.
    3. Subscription cancelled on or before the period start.
    4. Academic status is withdrawn or suspended.

    Otherwise the enrollment's own fee wins when set and non-zero
    (discounts, promotions), falling back to the course fee.

    Args:
        enrollment: Enrollment or None.
        period: The billing period.
        fee_settings: Course fee settings or None.

    Returns:
        Decimal expected amount, never negative.
    """
    if enrollment is None:
        return ZERO

    start = enrollment_start(enrollment)
    if start is not None and start > period.period_end:
        return ZERO

    cancel_at = as_date(enrollment.subscription_cancel_at)
    if cancel_at is not None and cancel_at <= period.period_start:
        return ZERO

    if enrollment.academic_status in NON_BILLABLE_ACADEMIC_STATUSES:
        return ZERO

    enrollment_fee = to_decimal(enrollment.enrollment_fee)
    if enrollment_fee > ZERO:
        return enrollment_fee

    if fee_settings is not None:
        return max(ZERO, to_decimal(fee_settings.fee_amount))

    return ZERO
