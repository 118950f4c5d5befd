"""
Test helpers: in-memory stand-ins for engine tests that don't need the
database, plus an order builder for the database-backed ones.

The engine only reads attributes, so plain namespaces are enough for
enrollments, orders and fee settings.
"""

import calendar
import uuid
from collections import Counter
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from apps.payments.models import Order, OrderStatus
from apps.reports.repositories import PaymentReportRepository


# Past year used by database-backed tests so every period has already started
REPORT_YEAR = 2024


def make_student(name='Student', student_id=None, email=''):
    return SimpleNamespace(
        id=uuid.uuid4(),
        name=name,
        student_id=student_id or f'S-{uuid.uuid4().hex[:6]}',
        email=email,
    )


def make_course(name='Mathematics'):
    return SimpleNamespace(id=uuid.uuid4(), name=name)


def make_fee_settings(fee_amount='80.00', billing_cycle='monthly'):
    return SimpleNamespace(fee_amount=Decimal(fee_amount), billing_cycle=billing_cycle)


def make_enrollment(student=None, course=None, **overrides):
    values = {
        'student_id': student.id if student else uuid.uuid4(),
        'course_id': course.id if course else uuid.uuid4(),
        'course': course,
        'enrollment_date': date(2024, 1, 1),
        'start_date': None,
        'enrollment_fee': None,
        'subscription_status': 'active',
        'subscription_cancel_at': None,
        'academic_status': 'active',
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def make_order(student, course, period_start, amount='80.00', status='paid', period_end=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        order_number=f'ORD-{uuid.uuid4().hex[:8].upper()}',
        student_id=student.id,
        course_id=course.id,
        period_start=period_start,
        period_end=period_end or period_start,
        amount=amount,
        status=status,
    )


class InMemoryPaymentReportRepository(PaymentReportRepository):
    """Repository double backed by lists; counts calls per method."""

    def __init__(self, students=(), enrollments=(), orders=(), courses=(), fee_settings=None):
        self.students = list(students)
        self.enrollments = list(enrollments)
        self.orders = list(orders)
        self.courses = list(courses)
        self.fee_settings = dict(fee_settings or {})
        self.calls = Counter()

    def students_for(self, course_id=None):
        self.calls['students_for'] += 1
        if course_id is None:
            return list(self.students)
        enrolled = {e.student_id for e in self.enrollments if e.course_id == course_id}
        return [s for s in self.students if s.id in enrolled]

    def enrollments_for(self, student_ids, course_id=None):
        self.calls['enrollments_for'] += 1
        ids = set(student_ids)
        return [
            e for e in self.enrollments
            if e.student_id in ids and (course_id is None or e.course_id == course_id)
        ]

    def orders_for(self, student_ids, course_id, year):
        self.calls['orders_for'] += 1
        ids = set(student_ids)
        return [
            o for o in self.orders
            if o.student_id in ids
            and (course_id is None or o.course_id == course_id)
            and o.period_start.year == year
        ]

    def fee_settings_for(self, course):
        if course is None:
            return None
        return self.fee_settings.get(course.id)

    def get_course(self, course_id):
        return next((c for c in self.courses if c.id == course_id), None)


def month_order(student, course, month, amount, status=OrderStatus.PAID, enrollment=None):
    """Create an order covering one calendar month of REPORT_YEAR."""
    last_day = calendar.monthrange(REPORT_YEAR, month)[1]
    return Order.objects.create(
        student=student,
        course=course,
        enrollment=enrollment,
        amount=Decimal(amount),
        status=status,
        period_start=date(REPORT_YEAR, month, 1),
        period_end=date(REPORT_YEAR, month, last_day),
    )
