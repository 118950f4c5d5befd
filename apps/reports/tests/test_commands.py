import uuid
import pytest
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from apps.reports.tests.factories import REPORT_YEAR


@pytest.mark.django_db
class TestFlagUnpaidStudentsCommand:
    """Tests for the flag_unpaid_students management command."""

    def test_lists_flagged_students(self, maths_course, report_data):
        out = StringIO()
        call_command('flag_unpaid_students', year=REPORT_YEAR, course=str(maths_course.id), stdout=out)

        output = out.getvalue()
        assert 'Found 1 student(s) with 2+ consecutive unpaid periods (Mathematics' in output
        assert 'Bob Lim (S002)' in output
        assert 'Alice Tan' not in output
        assert 'Periods: Feb, Mar' in output

    def test_all_courses(self, report_data):
        out = StringIO()
        call_command('flag_unpaid_students', year=REPORT_YEAR, stdout=out)

        output = out.getvalue()
        assert '(all courses' in output
        assert 'Bob Lim' in output
        assert 'Carol Wong' in output
        assert 'Dave Kumar' not in output

    def test_nobody_flagged(self, maths_course, alice_orders):
        out = StringIO()
        call_command('flag_unpaid_students', year=REPORT_YEAR, course=str(maths_course.id), stdout=out)

        assert 'No students with 2+ consecutive unpaid periods' in out.getvalue()

    def test_threshold_option(self, maths_course, report_data):
        out = StringIO()
        call_command(
            'flag_unpaid_students',
            year=REPORT_YEAR,
            course=str(maths_course.id),
            threshold=12,
            stdout=out,
        )

        assert 'No students with 12+ consecutive unpaid periods' in out.getvalue()

    def test_invalid_threshold(self, db):
        with pytest.raises(CommandError):
            call_command('flag_unpaid_students', year=REPORT_YEAR, threshold=0, stdout=StringIO())

    def test_invalid_course_id(self, db):
        with pytest.raises(CommandError, match='Invalid course ID'):
            call_command('flag_unpaid_students', course='abc', stdout=StringIO())

    def test_unknown_course(self, db):
        with pytest.raises(CommandError, match='not found'):
            call_command('flag_unpaid_students', course=str(uuid.uuid4()), stdout=StringIO())

    @pytest.mark.parametrize('year', [0, -5])
    def test_invalid_year(self, db, year):
        with pytest.raises(CommandError, match='Invalid year'):
            call_command('flag_unpaid_students', year=year, stdout=StringIO())

    def test_year_defaults_to_current(self, db):
        out = StringIO()
        call_command('flag_unpaid_students', stdout=out)

        assert f'(all courses, {timezone.localdate().year})' in out.getvalue()
