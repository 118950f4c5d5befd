import pytest
from datetime import date
from decimal import Decimal

from apps.reports.services import BillingPeriod, PaymentCellStatus, determine_payment_status
from apps.reports.tests.factories import make_enrollment


TODAY = date(2025, 6, 15)
MARCH = BillingPeriod('Mar', date(2025, 3, 1), date(2025, 3, 31))
SEPTEMBER = BillingPeriod('Sep', date(2025, 9, 1), date(2025, 9, 30))


def status_of(enrollment, period=MARCH, paid='0.00', expected='80.00'):
    return determine_payment_status(
        enrollment, period, Decimal(paid), Decimal(expected), today=TODAY
    )


class TestDeterminePaymentStatus:
    """Priority ladder for a single cell."""

    def test_no_enrollment(self):
        assert status_of(None, paid='80.00') == PaymentCellStatus.NO_ENROLLMENT

    def test_not_started_beats_payment(self):
        enrollment = make_enrollment(enrollment_date=date(2025, 4, 1))

        assert status_of(enrollment, paid='80.00') == PaymentCellStatus.NOT_STARTED

    def test_paid(self):
        assert status_of(make_enrollment(), paid='80.00') == PaymentCellStatus.PAID

    def test_overpaid_is_paid(self):
        assert status_of(make_enrollment(), paid='120.00') == PaymentCellStatus.PAID

    def test_partial(self):
        assert status_of(make_enrollment(), paid='30.00') == PaymentCellStatus.PARTIAL_PAYMENT

    def test_unpaid(self):
        assert status_of(make_enrollment()) == PaymentCellStatus.UNPAID

    def test_paid_beats_cancellation(self):
        enrollment = make_enrollment(subscription_cancel_at=date(2025, 3, 10))

        assert status_of(enrollment, paid='80.00') == PaymentCellStatus.PAID

    def test_cancelled_this_period(self):
        enrollment = make_enrollment(subscription_cancel_at=date(2025, 3, 15))

        assert status_of(enrollment) == PaymentCellStatus.CANCELLED_THIS_PERIOD

    def test_cancelled_on_period_end(self):
        enrollment = make_enrollment(subscription_cancel_at=date(2025, 3, 31))

        assert status_of(enrollment) == PaymentCellStatus.CANCELLED_THIS_PERIOD

    def test_cancelled_before(self):
        enrollment = make_enrollment(subscription_cancel_at=date(2025, 2, 1))

        assert status_of(enrollment, expected='0.00') == PaymentCellStatus.CANCELLED_BEFORE

    def test_cancellation_after_period_is_ignored(self):
        enrollment = make_enrollment(subscription_cancel_at=date(2025, 5, 1))

        assert status_of(enrollment) == PaymentCellStatus.UNPAID

    @pytest.mark.parametrize('academic_status, expected_status', [
        ('withdrawn', PaymentCellStatus.WITHDRAWN),
        ('suspended', PaymentCellStatus.SUSPENDED),
        ('completed', PaymentCellStatus.COMPLETED),
    ])
    def test_academic_status(self, academic_status, expected_status):
        enrollment = make_enrollment(academic_status=academic_status)

        assert status_of(enrollment) == expected_status

    def test_cancellation_beats_academic_status(self):
        enrollment = make_enrollment(
            academic_status='withdrawn',
            subscription_cancel_at=date(2025, 3, 5),
        )

        assert status_of(enrollment) == PaymentCellStatus.CANCELLED_THIS_PERIOD

    def test_no_payment_due(self):
        assert status_of(make_enrollment(), expected='0.00') == PaymentCellStatus.NO_PAYMENT_DUE

    def test_money_without_expected_amount(self):
        assert status_of(make_enrollment(), paid='50.00', expected='0.00') == PaymentCellStatus.NO_PAYMENT_DUE

    def test_future_period_with_active_subscription(self):
        enrollment = make_enrollment(subscription_status='active')

        assert status_of(enrollment, period=SEPTEMBER) == PaymentCellStatus.PENDING_PAYMENT

    @pytest.mark.parametrize('subscription_status', ['', 'past_due', 'canceled', 'trialing'])
    def test_future_period_without_active_subscription(self, subscription_status):
        enrollment = make_enrollment(subscription_status=subscription_status)

        assert status_of(enrollment, period=SEPTEMBER) == PaymentCellStatus.NOT_STARTED

    def test_current_period_is_not_future(self):
        june = BillingPeriod('Jun', date(2025, 6, 1), date(2025, 6, 30))

        assert status_of(make_enrollment(), period=june) == PaymentCellStatus.UNPAID

    def test_future_period_already_paid(self):
        assert status_of(make_enrollment(), period=SEPTEMBER, paid='80.00') == PaymentCellStatus.PAID

    def test_status_label(self):
        assert PaymentCellStatus.CANCELLED_THIS_PERIOD.label == 'Canceled'
        assert PaymentCellStatus.PARTIAL_PAYMENT.label == 'Partial'
