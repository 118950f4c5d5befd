"""
Reports services - Payment reconciliation engine.

This package contains the pure computation behind the student payment
report:
- Billing period generation
- Expected amount calculation
- Payment status classification
- Consecutive-unpaid detection
- Payment grid aggregation and CSV export
"""

from .types import (
    BillingPeriod,
    PaymentCell,
    PaymentCellStatus,
    PaymentReport,
    StudentTotals,
    to_decimal,
)

from .billing_periods import (
    billing_cycle_for,
    generate_billing_periods,
)

from .expected_amount import calculate_expected_amount

from .payment_status import determine_payment_status

from .consecutive_unpaid import has_consecutive_unpaid

from .payment_grid import PaymentReportService

from .csv_export import (
    export_report_csv,
    format_amount,
    report_filename,
)

__all__ = [
    # Value types
    'BillingPeriod',
    'PaymentCell',
    'PaymentCellStatus',
    'PaymentReport',
    'StudentTotals',
    'to_decimal',
    # Engine
    'billing_cycle_for',
    'generate_billing_periods',
    'calculate_expected_amount',
    'determine_payment_status',
    'has_consecutive_unpaid',
    'PaymentReportService',
    # Export
    'export_report_csv',
    'format_amount',
    'report_filename',
]
