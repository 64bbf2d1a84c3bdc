from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
import logging

from accounts.auth import admin_token_required
from storefront_backend.errors import StorefrontError, ValidationError
from storefront_backend.http import load_json_body
from .models import Feedback
from .services import submit_feedback

logger = logging.getLogger(__name__)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def feedback(request):
    if request.method == 'POST':
        return create_feedback(request)
    return list_feedback(request)


def create_feedback(request):
    try:
        data = load_json_body(request)
        submit_feedback(data)
    except ValidationError as e:
        return JsonResponse({'error': e.message, 'errors': e.errors}, status=400)
    except StorefrontError as e:
        return JsonResponse({'error': e.message}, status=e.status_code)
    except Exception as e:
        logger.exception(f"Feedback submission failed: {e}")
        return JsonResponse({'error': 'Internal server error'}, status=500)
    return JsonResponse({'message': 'Feedback submitted and email sent successfully'})


@admin_token_required
def list_feedback(request):
    results = [entry.to_dict() for entry in Feedback.objects.all()]
    if not results:
        return JsonResponse({'message': 'No feedback found'}, status=404)
    return JsonResponse(results, safe=False)
