"""Payment status service - priority-ordered classification of a period cell."""

from datetime import date
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from apps.enrollments.models import AcademicStatus, SubscriptionStatus
from .expected_amount import as_date, enrollment_start
from .types import ZERO, BillingPeriod, PaymentCellStatus, to_decimal


ACADEMIC_STATUS_RESULTS = {
    AcademicStatus.WITHDRAWN.value: PaymentCellStatus.WITHDRAWN,
    AcademicStatus.SUSPENDED.value: PaymentCellStatus.SUSPENDED,
    AcademicStatus.COMPLETED.value: PaymentCellStatus.COMPLETED,
}


def determine_payment_status(
    enrollment,
    period: BillingPeriod,
    paid_amount: Decimal,
    expected_amount: Decimal,
    today: Optional[date] = None,
) -> PaymentCellStatus:
    """
    Classify a (student, period) cell.

    The checks form a strict priority ladder; the first match wins:

    1. No enrollment                          -> no_enrollment
    2. Enrollment starts after period end     -> not_started
    3. Money received covers expected         -> paid
       Some money received                    -> partial_payment
    4. Cancelled within the period            -> cancelled_this_period
       Cancelled before the period            -> cancelled_before
    5. Academic status withdrawn/suspended/completed -> same-named status
    6. Nothing expected                       -> no_payment_due
    7. Period not started yet: active subscription -> pending_payment,
       otherwise                              -> not_started
    8. Otherwise                              -> unpaid

    Payment is checked before cancellation and academic state: a period
    that was paid shows as paid even if the subscription was cancelled
    during it.

    Args:
        enrollment: Enrollment or None.
        period: The billing period.
        paid_amount: Sum of paid orders in the period.
        expected_amount: Result of calculate_expected_amount.
        today: Reference date for future periods. Defaults to today.

    Returns:
        PaymentCellStatus member.
    """
    if enrollment is None:
        return PaymentCellStatus.NO_ENROLLMENT

    start = enrollment_start(enrollment)
    if start is not None and start > period.period_end:
        return PaymentCellStatus.NOT_STARTED

    paid_amount = to_decimal(paid_amount)
    expected_amount = to_decimal(expected_amount)

    if expected_amount > ZERO:
        if paid_amount >= expected_amount:
            return PaymentCellStatus.PAID
        if paid_amount > ZERO:
            return PaymentCellStatus.PARTIAL_PAYMENT

    cancel_at = as_date(enrollment.subscription_cancel_at)
    if cancel_at is not None:
        if period.contains(cancel_at):
            return PaymentCellStatus.CANCELLED_THIS_PERIOD
        if cancel_at < period.period_start:
            return PaymentCellStatus.CANCELLED_BEFORE

    academic_result = ACADEMIC_STATUS_RESULTS.get(str(enrollment.academic_status))
    if academic_result is not None:
        return academic_result

    if expected_amount <= ZERO:
        return PaymentCellStatus.NO_PAYMENT_DUE

    if today is None:
        today = timezone.localdate()

    if period.period_start > today:
        if enrollment.subscription_status == SubscriptionStatus.ACTIVE:
            return PaymentCellStatus.PENDING_PAYMENT
        return PaymentCellStatus.NOT_STARTED

    return PaymentCellStatus.UNPAID
