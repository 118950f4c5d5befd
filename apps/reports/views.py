from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from .exceptions import CourseNotFoundError, ReportServiceError
from .repositories import DjangoPaymentReportRepository
from .serializers import (
    # Input serializers
    PaymentReportQuerySerializer,
    AtRiskQuerySerializer,
    # Response serializers
    BillingPeriodsResponseSerializer,
    PaymentReportResponseSerializer,
    AtRiskResponseSerializer,
    ErrorSerializer,
)
from .services import (
    PaymentReportService,
    billing_cycle_for,
    export_report_csv,
    generate_billing_periods,
    report_filename,
)


REPORT_PARAMETERS = [
    OpenApiParameter('year', OpenApiTypes.INT, description='Calendar year (defaults to current year)'),
    OpenApiParameter('course', OpenApiTypes.UUID, description='Course ID (omit for all courses)'),
]


def _resolve_course(repository, course_id):
    """Load the selected course or raise 404."""
    if not course_id:
        return None
    course = repository.get_course(course_id)
    if course is None:
        raise CourseNotFoundError()
    return course


def _build_report(params, threshold=None):
    """Shared report computation for the report endpoints."""
    repository = DjangoPaymentReportRepository()
    course = _resolve_course(repository, params.get('course'))
    students = repository.students_for(course.id if course else None)
    report = PaymentReportService.build_report(
        students,
        year=params['year'],
        course=course,
        repository=repository,
        threshold=threshold,
    )
    return report, students, repository


@extend_schema(
    parameters=REPORT_PARAMETERS,
    responses={
        200: PaymentReportResponseSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Per-student, per-period payment report: expected, paid and unpaid amounts with status.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def payment_report(request):
    """Get the student payment report - thin HTTP handler."""
    query_serializer = PaymentReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        report, students, repository = _build_report(params)
    except ReportServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    data = PaymentReportResponseSerializer({
        'year': report.year,
        'course': report.course.id if report.course else None,
        'billing_cycle': billing_cycle_for(repository.fee_settings_for(report.course)),
        'periods': report.periods,
        'rows': PaymentReportService.report_rows(report, students),
    }).data

    return Response(data)


@extend_schema(
    parameters=REPORT_PARAMETERS,
    responses={
        200: BillingPeriodsResponseSerializer,
        404: ErrorSerializer,
    },
    description="Billing periods for a year, following the course's billing cycle.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def billing_periods(request):
    """Get billing period columns - thin HTTP handler."""
    query_serializer = PaymentReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    repository = DjangoPaymentReportRepository()
    course = _resolve_course(repository, params.get('course'))
    cycle = billing_cycle_for(repository.fee_settings_for(course))

    try:
        periods = generate_billing_periods(params['year'], cycle)
    except ReportServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(BillingPeriodsResponseSerializer({
        'year': params['year'],
        'billing_cycle': cycle,
        'periods': periods,
    }).data)


@extend_schema(
    parameters=REPORT_PARAMETERS + [
        OpenApiParameter('threshold', OpenApiTypes.INT, description='Consecutive unpaid periods that flag a student'),
    ],
    responses={
        200: AtRiskResponseSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Students with consecutive unpaid or partially paid periods, for collections follow-up.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def at_risk_students(request):
    """Get students flagged for consecutive unpaid periods - thin HTTP handler."""
    query_serializer = AtRiskQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        report, students, repository = _build_report(params, threshold=params.get('threshold'))
    except ReportServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    flagged = [s for s in students if report.consecutive_unpaid.get(s.id)]

    return Response(AtRiskResponseSerializer({
        'year': report.year,
        'course': report.course.id if report.course else None,
        'threshold': report.threshold,
        'count': len(flagged),
        'students': PaymentReportService.report_rows(report, flagged),
    }).data)


@extend_schema(
    parameters=REPORT_PARAMETERS,
    responses={
        (200, 'text/csv'): OpenApiTypes.STR,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Download the payment report as CSV.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def export_payment_report(request):
    """Download the payment report as CSV."""
    query_serializer = PaymentReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        report, students, _ = _build_report(params)
    except ReportServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    response = HttpResponse(export_report_csv(report, students), content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{report_filename(report)}"'
    return response
