import pytest
from unittest import mock
from django.db.utils import OperationalError
from django.urls import reverse
from rest_framework import status


@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_healthy(self, client):
        response = client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'ok', 'database': 'ok'}

    def test_database_unavailable(self, client):
        with mock.patch('config.views.connection') as connection:
            connection.cursor.side_effect = OperationalError('connection refused')
            response = client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json() == {'status': 'unhealthy', 'database': 'unavailable'}


class TestErrorHandlers:
    """JSON error handlers."""

    def test_not_found(self, rf):
        from config.views import error_404

        response = error_404(rf.get('/missing/'), exception=None)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_server_error(self, rf):
        from config.views import error_500

        response = error_500(rf.get('/boom/'))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
