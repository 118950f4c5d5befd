"""CSV export service - spreadsheet rendering of a payment report."""

import csv
import io
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.utils import timezone
from django.utils.text import get_valid_filename

from .types import ZERO


def format_amount(amount, currency: Optional[str] = None) -> str:
    """Format an amount like 'RM 1,234.00'."""
    if currency is None:
        currency = getattr(settings, 'PAYMENT_REPORT_CURRENCY', 'RM')
    return f"{currency} {amount:,.2f}"


def export_report_csv(report, students, currency: Optional[str] = None) -> str:
    """
    Render a payment report as CSV text.

    Columns: student name, email and ID; then Status, Paid, Expected and
    Unpaid for every period; then the student's totals.

    Args:
        report (PaymentReport): The computed report.
        students: Students in row order.
        currency (str, optional): Amount prefix. Defaults to
            settings.PAYMENT_REPORT_CURRENCY.

    Returns:
        str: CSV content including the header row.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    headers = ['Student Name', 'Student Email', 'Student ID']
    for period in report.periods:
        headers.extend([
            f'{period.label} - Status',
            f'{period.label} - Paid',
            f'{period.label} - Expected',
            f'{period.label} - Unpaid',
        ])
    headers.extend(['Total Paid', 'Total Expected', 'Total Unpaid'])
    writer.writerow(headers)

    for student in students:
        row = [student.name, student.email, student.student_id]
        total_paid = total_expected = total_unpaid = ZERO

        for period, cell in report.cells_for(student.id):
            if cell is None:
                row.extend(['No Data'] + [format_amount(ZERO, currency)] * 3)
                continue
            row.extend([
                cell.status_label,
                format_amount(cell.paid_amount, currency),
                format_amount(cell.expected_amount, currency),
                format_amount(cell.unpaid_amount, currency),
            ])
            total_paid += cell.paid_amount
            total_expected += cell.expected_amount
            total_unpaid += cell.unpaid_amount

        row.extend([
            format_amount(total_paid, currency),
            format_amount(total_expected, currency),
            format_amount(total_unpaid, currency),
        ])
        writer.writerow(row)

    return buffer.getvalue()


def report_filename(report, now: Optional[datetime] = None) -> str:
    """Download filename, e.g. 'student_payment_report_Maths_2025_2025_03_01_101500.csv'."""
    if now is None:
        now = timezone.now()
    course_label = report.course.name if report.course is not None else 'All_Courses'
    return get_valid_filename(
        f"student_payment_report_{course_label}_{report.year}_{now:%Y_%m_%d_%H%M%S}.csv"
    )
