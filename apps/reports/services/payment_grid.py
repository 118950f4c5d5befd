"""
Payment Grid Module
===================

This module reconciles expected and actual payments per student and
billing period. It is pure computation over data fetched in bulk through
a ``PaymentReportRepository``: one read of enrollments and one read of
orders per report, never a query per cell.

Classes:
    PaymentReportService: Static methods that build payment grids and
        reports.

Example:
    Building a yearly report for one course::

        from apps.reports.services import PaymentReportService

        report = PaymentReportService.build_report(
            students,
            year=2025,
            course=course,
        )
        for student in students:
            for period, cell in report.cells_for(student.id):
                print(period.label, cell.status, cell.unpaid_amount)

Note:
    Input records are never modified. Building the same report twice
    over the same data yields equal results.
"""

import logging
from collections import defaultdict

from django.utils import timezone

from apps.payments.models import OrderStatus
from ..exceptions import InvalidThresholdError
from ..repositories import DjangoPaymentReportRepository
from .billing_periods import billing_cycle_for, generate_billing_periods
from .consecutive_unpaid import default_unpaid_threshold, has_consecutive_unpaid
from .expected_amount import as_date, calculate_expected_amount
from .payment_status import determine_payment_status
from .types import ZERO, PaymentCell, PaymentReport, StudentTotals, to_decimal


logger = logging.getLogger(__name__)


class PaymentReportService:
    """
    Build per-student, per-period payment breakdowns.

    Methods:
        build_payment_grid: Compute the PaymentCell grid for students x periods.
        build_report: Generate periods, grid, totals and at-risk flags.
        report_rows: Flatten a report into serializable rows.
    """

    @staticmethod
    def build_payment_grid(students, periods, year, course=None, repository=None, today=None):
        """
        Compute the PaymentCell grid for a set of students and periods.

        For each (student, period):
            1. Match orders whose ``period_start`` falls inside the period
               (inclusive bounds), so each payment counts exactly once.
            2. Sum paid, pending and failed orders separately.
            3. Calculate the expected amount and classify the status.

        Args:
            students: Iterable of objects with an ``id``.
            periods (list[BillingPeriod]): Periods in chronological order.
            year (int): Year used to restrict the order fetch.
            course (Course, optional): Selected course. When None, each
                student's first reportable enrollment and its course's fee
                settings are used.
            repository (PaymentReportRepository, optional): Data source.
                Defaults to the ORM repository.
            today (date, optional): Reference date for future periods,
                resolved once per call. Defaults to timezone.localdate().

        Returns:
            dict: ``{student_id: {period_label: PaymentCell}}`` in the order
            of ``students`` and ``periods``.

        Note:
            A student without an enrollment gets ``no_enrollment`` cells with
            zero expected amount; this is not an error.
        """
        if repository is None:
            repository = DjangoPaymentReportRepository()
        # Every cell is classified against the same reference date
        if today is None:
            today = timezone.localdate()

        students = list(students)
        student_ids = [student.id for student in students]
        course_id = course.id if course is not None else None

        enrollments = repository.enrollments_for(student_ids, course_id)
        orders = repository.orders_for(student_ids, course_id, year)
        course_fee_settings = repository.fee_settings_for(course) if course is not None else None

        # First enrollment per student wins
        enrollment_by_student = {}
        for enrollment in enrollments:
            if course_id is not None and enrollment.course_id != course_id:
                continue
            enrollment_by_student.setdefault(enrollment.student_id, enrollment)

        orders_by_student = defaultdict(list)
        for order in orders:
            orders_by_student[order.student_id].append(order)

        grid = {}
        for student in students:
            enrollment = enrollment_by_student.get(student.id)
            fee_settings = course_fee_settings
            if fee_settings is None and enrollment is not None:
                fee_settings = repository.fee_settings_for(enrollment.course)

            student_orders = orders_by_student.get(student.id, [])
            grid[student.id] = {
                period.label: PaymentReportService._build_cell(
                    enrollment, period, student_orders, fee_settings, today
                )
                for period in periods
            }

        return grid

    @staticmethod
    def _build_cell(enrollment, period, orders, fee_settings, today):
        """Reconcile one student's orders against one period."""
        period_orders = tuple(
            order for order in orders
            if order.period_start is not None and period.contains(as_date(order.period_start))
        )

        paid_amount = ZERO
        pending_amount = ZERO
        failed_amount = ZERO
        total_amount = ZERO
        for order in period_orders:
            amount = to_decimal(order.amount)
            total_amount += amount
            if order.status == OrderStatus.PAID:
                paid_amount += amount
            elif order.status == OrderStatus.PENDING:
                pending_amount += amount
            elif order.status == OrderStatus.FAILED:
                failed_amount += amount

        expected_amount = calculate_expected_amount(enrollment, period, fee_settings)
        status = determine_payment_status(
            enrollment, period, paid_amount, expected_amount, today=today
        )

        return PaymentCell(
            status=status,
            expected_amount=expected_amount,
            paid_amount=paid_amount,
            pending_amount=pending_amount,
            failed_amount=failed_amount,
            total_amount=total_amount,
            orders=period_orders,
        )

    @staticmethod
    def build_report(students, year, course=None, repository=None, today=None, threshold=None):
        """
        Build the full payment report for one year.

        This generates the billing periods from the course's billing cycle
        (monthly when there is no course or no fee settings), computes the
        payment grid, per-student totals and the consecutive-unpaid flag.

        Args:
            students: Iterable of students to report on.
            year (int): Calendar year.
            course (Course, optional): Selected course, None for all courses.
            repository (PaymentReportRepository, optional): Data source.
            today (date, optional): Reference date for future periods,
                resolved once per call. Defaults to timezone.localdate().
            threshold (int, optional): Consecutive-unpaid run length.
                Defaults to settings.PAYMENT_REPORT_UNPAID_THRESHOLD.

        Returns:
            PaymentReport

        Raises:
            InvalidYearError: If year is not a valid calendar year.
            InvalidThresholdError: If threshold is below 1.

        Example:
            Flag students behind on two periods in a row::

                report = PaymentReportService.build_report(students, 2025, course)
                at_risk = report.at_risk_student_ids()
        """
        if repository is None:
            repository = DjangoPaymentReportRepository()
        if today is None:
            today = timezone.localdate()
        if threshold is None:
            threshold = default_unpaid_threshold()
        if threshold < 1:
            raise InvalidThresholdError(f"Threshold must be at least 1, got {threshold}")

        students = list(students)
        fee_settings = repository.fee_settings_for(course) if course is not None else None
        periods = tuple(generate_billing_periods(year, billing_cycle_for(fee_settings)))

        grid = PaymentReportService.build_payment_grid(
            students, periods, year, course=course, repository=repository, today=today
        )

        report = PaymentReport(year=year, course=course, periods=periods, grid=grid, threshold=threshold)
        for student_id, row in grid.items():
            cells = [row[period.label] for period in periods]
            report.totals[student_id] = StudentTotals(
                total_paid=sum((cell.paid_amount for cell in cells), ZERO),
                total_expected=sum((cell.expected_amount for cell in cells), ZERO),
                total_unpaid=sum((cell.unpaid_amount for cell in cells), ZERO),
            )
            report.consecutive_unpaid[student_id] = has_consecutive_unpaid(
                (cell.status for cell in cells), threshold
            )

        at_risk = report.at_risk_student_ids()
        logger.info(
            "Built payment report year=%s course=%s: %d students, %d periods, %d at risk",
            year, course_id_or_all(course), len(students), len(periods), len(at_risk),
        )
        return report

    @staticmethod
    def report_rows(report, students):
        """
        Flatten a report into one row per student for serialization.

        Returns:
            list[dict]: Each row contains ``student``, ``cells`` (period
            order, each with its ``period`` label), ``totals`` and
            ``has_consecutive_unpaid``.
        """
        rows = []
        for student in students:
            cells = []
            for period, cell in report.cells_for(student.id):
                if cell is None:
                    continue
                cells.append({
                    'period': period.label,
                    'period_start': period.period_start,
                    'period_end': period.period_end,
                    'status': cell.status,
                    'status_label': cell.status_label,
                    'expected_amount': cell.expected_amount,
                    'paid_amount': cell.paid_amount,
                    'pending_amount': cell.pending_amount,
                    'failed_amount': cell.failed_amount,
                    'unpaid_amount': cell.unpaid_amount,
                    'total_amount': cell.total_amount,
                    'order_count': cell.order_count,
                    'orders': cell.orders,
                })
            rows.append({
                'student': student,
                'cells': cells,
                'totals': report.totals.get(student.id, StudentTotals()),
                'has_consecutive_unpaid': report.consecutive_unpaid.get(student.id, False),
            })
        return rows


def course_id_or_all(course):
    return course.id if course is not None else 'all'
