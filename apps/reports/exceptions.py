"""
Domain exceptions for reports app.

This module defines the exception hierarchy for payment report errors.
Service-layer errors are plain exceptions, separate from HTTP concerns;
the API-facing errors subclass DRF's APIException so views can raise
them directly.

Exception Hierarchy:
    ReportServiceError (base)
    ├── InvalidYearError
    └── InvalidThresholdError

    CourseNotFoundError (APIException, 404)

Usage:
    from apps.reports.exceptions import InvalidThresholdError

    if threshold < 1:
        raise InvalidThresholdError("Threshold must be at least 1")
"""
from rest_framework.exceptions import APIException


class ReportServiceError(Exception):
    """
    Base exception for all payment report service errors.

    Views catch this to turn service-level validation failures into a
    400 response:

        try:
            report = PaymentReportService.build_report(...)
        except ReportServiceError as e:
            return Response({'error': str(e)}, status=400)
    """
    pass


class InvalidYearError(ReportServiceError):
    """
    Raised when a report year cannot be turned into calendar periods.

    Example:
        raise InvalidYearError("Invalid year: 0")
    """
    pass


class InvalidThresholdError(ReportServiceError):
    """
    Raised when the consecutive-unpaid threshold is below 1.

    Example:
        raise InvalidThresholdError("Threshold must be at least 1, got 0")
    """
    pass


class CourseNotFoundError(APIException):
    """Course selected for the report does not exist."""
    status_code = 404
    default_detail = 'Course not found.'
    default_code = 'course_not_found'
