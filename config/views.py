import logging

from django.db import connection
from django.db.utils import DatabaseError
from django.http import JsonResponse


logger = logging.getLogger(__name__)


def health_check(request):
    """Liveness probe that also checks the database connection."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError:
        logger.exception("Health check failed: database unavailable")
        return JsonResponse({'status': 'unhealthy', 'database': 'unavailable'}, status=503)

    return JsonResponse({'status': 'ok', 'database': 'ok'})


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    logger.error("Unhandled server error on %s", request.path)
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)
