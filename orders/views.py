from django.http import JsonResponse, HttpResponse, HttpResponseBadRequest
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
import logging

from accounts.auth import admin_token_required, firebase_auth_required
from storefront_backend.errors import InternalError, SignatureError, StorefrontError, ValidationError, error_response
from storefront_backend.http import load_json_body
from .gateway import get_payment_gateway
from .models import Order
from .services import OrderLifecycleManager, PaymentVerifier, WebhookReconciler
from .validation import validate_create_order, validate_verify_payment

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
@firebase_auth_required
def create_order(request):
    """
    Creates the Razorpay order the client will pay against, and the local
    row that later payment verification and refunds are matched to.
    """
    try:
        data = load_json_body(request)
        cleaned = validate_create_order(data)

        manager = OrderLifecycleManager(get_payment_gateway())
        gateway_order, customer, order = manager.create_order(identity=request.identity, **cleaned)
    except ValidationError as e:
        logger.info(f"Create-order validation failed for user {request.identity.uid}: {e.errors}")
        return error_response(e)
    except StorefrontError as e:
        logger.error(f"Order creation error for user {request.identity.uid}: {e.message} {e.details or ''}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error creating order: {e}")
        return error_response(InternalError("Failed to create order", details=str(e)))

    return JsonResponse({
        'success': True,
        'order': gateway_order,
        'user': {
            'uid': customer.uid,
            'phone': customer.phone,
        },
    }, status=201)


@csrf_exempt
@require_POST
@firebase_auth_required
def verify_payment(request):
    try:
        data = load_json_body(request)
        order_id, payment_id, signature = validate_verify_payment(data)

        verifier = PaymentVerifier(get_payment_gateway())
        order = verifier.verify_payment(order_id, payment_id, signature, request.identity)
    except StorefrontError as e:
        logger.info(f"Payment verification rejected for user {request.identity.uid}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error verifying payment: {e}")
        return error_response(InternalError("Payment verification failed", details=str(e)))

    return JsonResponse({
        'success': True,
        'message': 'Payment verified successfully',
        'order': order.summary(),
    })


@csrf_exempt
@require_POST
def razorpay_webhook(request):
    """
    Listener for Razorpay webhooks. The signature is checked against the raw
    request bytes before anything is parsed.
    """
    signature = request.headers.get('X-Razorpay-Signature')
    try:
        ack = WebhookReconciler().handle_event(request.body, signature)
    except SignatureError:
        return HttpResponseBadRequest("Invalid signature")
    except ValidationError as e:
        logger.warning(f"Rejected webhook payload: {e.errors}")
        return HttpResponseBadRequest("Invalid payload")
    except Exception as e:
        logger.exception(f"Error handling webhook: {e}")
        return HttpResponse("Webhook error", status=500)
    return HttpResponse(ack, status=200)


@require_GET
@admin_token_required
def all_orders(request):
    results = [order.to_dict() for order in Order.objects.all()]
    if not results:
        return JsonResponse({'message': 'No orders found'}, status=404)
    return JsonResponse(results, safe=False)


@require_GET
@firebase_auth_required
def orders_for_user(request, uid):
    if uid != request.identity.uid:
        return JsonResponse({'error': 'Access forbidden'}, status=403)

    results = [order.to_dict() for order in Order.objects.filter(user_id=uid)]
    if not results:
        return JsonResponse({'message': 'No orders found for this UID'}, status=404)
    return JsonResponse(results, safe=False)
