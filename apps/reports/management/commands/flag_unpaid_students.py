"""
Management command to list students with consecutive unpaid periods.

Intended for collections follow-up, e.g. from a monthly cron job.

Usage:
    python manage.py flag_unpaid_students
    python manage.py flag_unpaid_students --year 2025 --course <uuid> --threshold 3
"""

import uuid

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.reports.exceptions import ReportServiceError
from apps.reports.repositories import DjangoPaymentReportRepository
from apps.reports.services import PaymentReportService, format_amount


class Command(BaseCommand):
    help = 'List students with consecutive unpaid or partially paid billing periods'

    def add_arguments(self, parser):
        parser.add_argument(
            '--year',
            type=int,
            default=None,
            help='Calendar year (defaults to the current year)',
        )
        parser.add_argument(
            '--course',
            default=None,
            help='Course ID to restrict the report to',
        )
        parser.add_argument(
            '--threshold',
            type=int,
            default=None,
            help='Consecutive unpaid periods that flag a student',
        )

    def handle(self, *args, **options):
        year = options['year']
        if year is None:
            year = timezone.localdate().year
        repository = DjangoPaymentReportRepository()

        course = None
        if options['course']:
            try:
                course_id = uuid.UUID(options['course'])
            except ValueError:
                raise CommandError(f"Invalid course ID: {options['course']}")
            course = repository.get_course(course_id)
            if course is None:
                raise CommandError(f"Course {options['course']} not found")

        students = repository.students_for(course.id if course else None)

        try:
            report = PaymentReportService.build_report(
                students,
                year=year,
                course=course,
                repository=repository,
                threshold=options['threshold'],
            )
        except ReportServiceError as e:
            raise CommandError(str(e))

        flagged = [s for s in students if report.consecutive_unpaid.get(s.id)]
        scope = course.name if course else 'all courses'

        if not flagged:
            self.stdout.write(
                self.style.SUCCESS(f'No students with {report.threshold}+ consecutive unpaid periods ({scope}, {year}).')
            )
            return

        self.stdout.write(
            f'\nFound {len(flagged)} student(s) with {report.threshold}+ consecutive unpaid periods ({scope}, {year}):\n'
        )
        for student in flagged:
            totals = report.totals[student.id]
            unpaid_periods = ', '.join(
                period.label
                for period, cell in report.cells_for(student.id)
                if cell is not None and cell.unpaid_amount > 0
            )
            self.stdout.write(
                f'  - {student.name} ({student.student_id}) | '
                f'Unpaid: {format_amount(totals.total_unpaid)} | Periods: {unpaid_periods}'
            )

        self.stdout.write(self.style.WARNING(f'\n{len(flagged)} student(s) need follow-up.'))
