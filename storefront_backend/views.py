import logging

from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@require_GET
def index(request):
    return JsonResponse({
        'message': 'API is running',
        'environment': settings.ENVIRONMENT,
        'timestamp': timezone.now().isoformat(),
    })


@require_GET
def db_health(request):
    """
    Round-trips a trivial query so load balancers can tell a live process
    from one that has lost its database.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1+1")
            result = cursor.fetchone()[0]
        return JsonResponse({
            'status': 'healthy',
            'dbResult': result,
            'timestamp': timezone.now().isoformat(),
        })
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        body = {'status': 'unhealthy', 'error': str(e) if settings.DEBUG else 'Database unavailable'}
        return JsonResponse(body, status=500)


def not_found(request, exception=None):
    return JsonResponse({'error': 'Not found', 'path': request.path, 'method': request.method}, status=404)


def server_error(request):
    return JsonResponse({'error': 'An error occurred'}, status=500)
