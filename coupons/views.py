from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST
import logging

from storefront_backend.errors import ValidationError
from storefront_backend.http import load_json_body
from .models import Coupon

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def apply_coupon(request):
    try:
        data = load_json_body(request)
    except ValidationError:
        return JsonResponse({'valid': False, 'message': 'Invalid JSON'}, status=400)

    code = data.get('couponCode')
    if not code:
        return JsonResponse({'valid': False, 'message': 'Coupon code is required'}, status=400)

    try:
        coupon = Coupon.objects.redeemable().filter(code=code).first()
    except Exception as e:
        logger.error(f"Coupon validation error: {e}")
        return JsonResponse({'valid': False, 'message': 'Server error during coupon validation'}, status=500)

    if coupon is None:
        logger.info(f"Rejected coupon code '{code}'.")
        return JsonResponse({'valid': False, 'message': 'Invalid or expired coupon'}, status=404)

    return JsonResponse({
        'valid': True,
        'discount': coupon.discount_percentage,
        'couponId': coupon.id,
        'message': 'Coupon applied successfully',
    })
