"""
Serializers for reports app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    PaymentReportQuerySerializer - Validates year and course parameters
    AtRiskQuerySerializer - Adds the consecutive-unpaid threshold

Response Serializers:
    BillingPeriodSerializer - One billing period
    PaymentCellSerializer - One (student, period) breakdown
    PaymentReportRowSerializer - One student's row with totals
    PaymentReportResponseSerializer - Full report
    AtRiskResponseSerializer - Flagged students
"""

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers


def current_year():
    return timezone.localdate().year


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class PaymentReportQuerySerializer(serializers.Serializer):
    """
    Validate payment report query parameters.

    Used by: payment_report, billing_periods, export_payment_report

    Query Parameters:
        year (int): Calendar year, defaults to the current year
        course (UUID): Course to report on; omit for all courses
    """

    year = serializers.IntegerField(
        required=False,
        default=current_year,
        help_text='Calendar year of the report'
    )
    course = serializers.UUIDField(
        required=False,
        allow_null=True,
        help_text='Course ID (omit for all courses)'
    )

    def validate_year(self, value):
        min_year = getattr(settings, 'PAYMENT_REPORT_MIN_YEAR', 2000)
        max_year = getattr(settings, 'PAYMENT_REPORT_MAX_YEAR', 2100)
        if not (min_year <= value <= max_year):
            raise serializers.ValidationError(
                f'Year must be between {min_year} and {max_year}'
            )
        return value


class AtRiskQuerySerializer(PaymentReportQuerySerializer):
    """
    Validate at-risk query parameters.

    Used by: at_risk_students

    Query Parameters:
        threshold (int): Consecutive unpaid periods that flag a student (1-12)
    """

    threshold = serializers.IntegerField(
        min_value=1,
        max_value=12,
        required=False,
        help_text='Consecutive unpaid periods that flag a student'
    )


# =============================================================================
# Response Serializers
# =============================================================================

AMOUNT = dict(max_digits=12, decimal_places=2)


class BillingPeriodSerializer(serializers.Serializer):
    label = serializers.CharField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()


class BillingPeriodsResponseSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    billing_cycle = serializers.CharField()
    periods = BillingPeriodSerializer(many=True)


class ReportStudentSerializer(serializers.Serializer):
    """Nested serializer for the student of a report row."""
    id = serializers.UUIDField()
    student_id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.EmailField(allow_blank=True)


class CellOrderSerializer(serializers.Serializer):
    """Nested serializer for an order matched to a period."""
    id = serializers.UUIDField()
    order_number = serializers.CharField()
    amount = serializers.DecimalField(**AMOUNT)
    status = serializers.CharField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()


class PaymentCellSerializer(serializers.Serializer):
    """Expected vs. paid breakdown for one period."""
    period = serializers.CharField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()
    status = serializers.CharField()
    status_label = serializers.CharField()
    expected_amount = serializers.DecimalField(**AMOUNT)
    paid_amount = serializers.DecimalField(**AMOUNT)
    pending_amount = serializers.DecimalField(**AMOUNT)
    failed_amount = serializers.DecimalField(**AMOUNT)
    unpaid_amount = serializers.DecimalField(**AMOUNT)
    total_amount = serializers.DecimalField(**AMOUNT)
    order_count = serializers.IntegerField()
    orders = CellOrderSerializer(many=True)


class StudentTotalsSerializer(serializers.Serializer):
    total_paid = serializers.DecimalField(**AMOUNT)
    total_expected = serializers.DecimalField(**AMOUNT)
    total_unpaid = serializers.DecimalField(**AMOUNT)


class PaymentReportRowSerializer(serializers.Serializer):
    """One student's row of the payment report."""
    student = ReportStudentSerializer()
    cells = PaymentCellSerializer(many=True)
    totals = StudentTotalsSerializer()
    has_consecutive_unpaid = serializers.BooleanField()


class PaymentReportResponseSerializer(serializers.Serializer):
    """Response serializer for the payment report."""
    year = serializers.IntegerField()
    course = serializers.UUIDField(allow_null=True)
    billing_cycle = serializers.CharField()
    periods = BillingPeriodSerializer(many=True)
    rows = PaymentReportRowSerializer(many=True)


class AtRiskResponseSerializer(serializers.Serializer):
    """Response serializer for students with consecutive unpaid periods."""
    year = serializers.IntegerField()
    course = serializers.UUIDField(allow_null=True)
    threshold = serializers.IntegerField()
    count = serializers.IntegerField()
    students = PaymentReportRowSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
