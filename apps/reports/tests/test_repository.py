import pytest
from datetime import date
from decimal import Decimal

from apps.enrollments.models import Enrollment, EnrollmentStatus
from apps.reports.repositories import DjangoPaymentReportRepository
from apps.reports.services import PaymentCellStatus, PaymentReportService
from apps.reports.tests.factories import REPORT_YEAR, month_order


@pytest.mark.django_db
class TestDjangoPaymentReportRepository:
    """ORM reads behind the payment report."""

    def test_students_for_course(self, maths_course, report_data):
        students = DjangoPaymentReportRepository().students_for(maths_course.id)

        assert [s.student_id for s in students] == ['S001', 'S002']

    def test_students_for_all_courses(self, report_data):
        students = DjangoPaymentReportRepository().students_for()

        assert [s.name for s in students] == ['Alice Tan', 'Bob Lim', 'Carol Wong', 'Dave Kumar']

    def test_dropped_enrollments_excluded(self, maths_course, bob_enrollment):
        Enrollment.objects.filter(pk=bob_enrollment.pk).update(status=EnrollmentStatus.DROPPED)
        repository = DjangoPaymentReportRepository()

        assert repository.students_for(maths_course.id) == []
        assert repository.enrollments_for([bob_enrollment.student_id]) == []

    def test_orders_for_year(self, alice, maths_course, alice_enrollment):
        month_order(alice, maths_course, 3, '80.00')
        old = month_order(alice, maths_course, 3, '80.00')
        old.period_start = date(REPORT_YEAR - 1, 3, 1)
        old.period_end = date(REPORT_YEAR - 1, 3, 31)
        old.save()

        orders = DjangoPaymentReportRepository().orders_for([alice.id], maths_course.id, REPORT_YEAR)

        assert len(orders) == 1
        assert orders[0].period_start == date(REPORT_YEAR, 3, 1)

    def test_orders_for_other_course_excluded(self, alice, maths_course, science_course, alice_enrollment):
        month_order(alice, science_course, 1, '240.00')

        repository = DjangoPaymentReportRepository()

        assert repository.orders_for([alice.id], maths_course.id, REPORT_YEAR) == []
        assert len(repository.orders_for([alice.id], None, REPORT_YEAR)) == 1

    def test_fee_settings_for(self, maths_course):
        repository = DjangoPaymentReportRepository()

        assert repository.fee_settings_for(maths_course).fee_amount == Decimal('80.00')
        assert repository.fee_settings_for(None) is None

    def test_course_without_fee_settings(self, db):
        from apps.courses.models import Course

        course = Course.objects.create(name='Art')

        assert DjangoPaymentReportRepository().fee_settings_for(course) is None

    def test_get_course(self, maths_course):
        import uuid

        repository = DjangoPaymentReportRepository()

        assert repository.get_course(maths_course.id) == maths_course
        assert repository.get_course(uuid.uuid4()) is None


@pytest.mark.django_db
class TestReportQueries:
    """Report building against the database."""

    def test_constant_number_of_queries(self, maths_course, report_data, django_assert_max_num_queries):
        repository = DjangoPaymentReportRepository()
        course = repository.get_course(maths_course.id)
        students = repository.students_for(course.id)

        # enrollments + orders, regardless of student or period count
        with django_assert_max_num_queries(2):
            PaymentReportService.build_report(
                students, REPORT_YEAR, course=course, repository=repository
            )

    def test_all_courses_uses_enrollment_course_fee(self, report_data, django_assert_max_num_queries):
        repository = DjangoPaymentReportRepository()
        students = repository.students_for()

        with django_assert_max_num_queries(2):
            report = PaymentReportService.build_report(students, REPORT_YEAR, repository=repository)

        carol = next(s for s in students if s.student_id == 'S003')
        assert report.grid[carol.id]['Jan'].expected_amount == Decimal('240.00')
        assert report.grid[carol.id]['Jan'].status == PaymentCellStatus.UNPAID

    def test_does_not_modify_records(self, maths_course, report_data):
        repository = DjangoPaymentReportRepository()
        students = repository.students_for(maths_course.id)
        before = list(Enrollment.objects.values_list('updated_at', flat=True).order_by('id'))

        PaymentReportService.build_report(students, REPORT_YEAR, course=maths_course, repository=repository)

        after = list(Enrollment.objects.values_list('updated_at', flat=True).order_by('id'))
        assert before == after
