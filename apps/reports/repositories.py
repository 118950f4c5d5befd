"""
Repository seam between the payment report engine and storage.

The engine only needs a handful of bulk reads. ``PaymentReportRepository``
names them; ``DjangoPaymentReportRepository`` answers them with the ORM,
one query per method and no per-cell lookups.

Example:
    Building a report against the database::

        from apps.reports.repositories import DjangoPaymentReportRepository
        from apps.reports.services import PaymentReportService

        repository = DjangoPaymentReportRepository()
        students = repository.students_for(course.id)
        report = PaymentReportService.build_report(
            students, year=2025, course=course, repository=repository,
        )
"""

from abc import ABC, abstractmethod

from apps.courses.models import Course
from apps.enrollments.models import Enrollment, Student, REPORTABLE_ENROLLMENT_STATUSES
from apps.payments.models import Order


class PaymentReportRepository(ABC):
    """Read-only data access used by the payment report engine."""

    @abstractmethod
    def students_for(self, course_id=None):
        """Students to report on, optionally limited to a course's active enrollments."""

    @abstractmethod
    def enrollments_for(self, student_ids, course_id=None):
        """Enrollments of the given students, optionally limited to one course."""

    @abstractmethod
    def orders_for(self, student_ids, course_id, year):
        """Orders of the given students whose period starts in ``year``."""

    @abstractmethod
    def fee_settings_for(self, course):
        """Fee settings of ``course`` or None."""

    @abstractmethod
    def get_course(self, course_id):
        """Course by id or None."""


class DjangoPaymentReportRepository(PaymentReportRepository):
    """ORM-backed repository."""

    def students_for(self, course_id=None):
        queryset = Student.objects.all()
        if course_id:
            queryset = queryset.filter(
                enrollments__course_id=course_id,
                enrollments__status__in=REPORTABLE_ENROLLMENT_STATUSES,
            ).distinct()
        return list(queryset.order_by('name', 'student_id'))

    def enrollments_for(self, student_ids, course_id=None):
        queryset = Enrollment.objects.filter(
            student_id__in=list(student_ids),
            status__in=REPORTABLE_ENROLLMENT_STATUSES,
        ).select_related('course', 'course__fee_settings')
        if course_id:
            queryset = queryset.filter(course_id=course_id)
        return list(queryset.order_by('enrollment_date', 'created_at'))

    def orders_for(self, student_ids, course_id, year):
        queryset = Order.objects.filter(
            student_id__in=list(student_ids),
            period_start__year=year,
        )
        if course_id:
            queryset = queryset.filter(course_id=course_id)
        return list(queryset.order_by('period_start', 'created_at'))

    def fee_settings_for(self, course):
        if course is None:
            return None
        return course.get_fee_settings()

    def get_course(self, course_id):
        return Course.objects.select_related('fee_settings').filter(id=course_id).first()
