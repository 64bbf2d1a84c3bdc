import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from storefront_backend.errors import StorefrontError, error_response
from storefront_backend.http import load_json_body
from .auth import admin_token_required, firebase_auth_required
from .models import Address, Customer
from .services import get_or_create_customer, login_admin, save_address

logger = logging.getLogger(__name__)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def customers(request):
    if request.method == 'POST':
        return register_customer(request)
    return list_customers(request)


@firebase_auth_required
def register_customer(request):
    """
    Get-or-create the customer row for the signed-in Firebase user. The uid
    always comes from the verified token; the body may only supply a phone
    number when the token carries none.
    """
    try:
        data = load_json_body(request)
        identity = request.identity
        customer = get_or_create_customer(identity.uid, identity.phone or data.get('phone'))
        return JsonResponse({'success': True, 'user': customer.to_dict()})
    except StorefrontError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"User lookup or creation failed: {e}")
        return JsonResponse({'success': False, 'message': 'User lookup or creation failed'}, status=500)


@admin_token_required
def list_customers(request):
    rows = [customer.to_dict() for customer in Customer.objects.all()]
    if not rows:
        return JsonResponse({'message': 'No user found'}, status=404)
    return JsonResponse(rows, safe=False)


@csrf_exempt
@require_POST
def submit_address(request):
    try:
        data = load_json_body(request)
        address, created = save_address(data)
    except StorefrontError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Address submission error: {e}")
        return error_response(e)

    if created:
        return JsonResponse({
            'success': True,
            'message': 'Address created successfully',
            'action': 'create',
            'addressId': address.id,
        }, status=201)
    return JsonResponse({'success': True, 'message': 'Address updated successfully', 'action': 'update'})


@require_GET
def get_address(request, uid):
    results = [address.to_dict() for address in Address.objects.filter(uid=uid)]
    if not results:
        return JsonResponse({'message': 'No address found for this UID'}, status=404)
    return JsonResponse(results, safe=False)


@csrf_exempt
@require_POST
def admin_login(request):
    try:
        data = load_json_body(request)
        token = login_admin(data.get('username'), data.get('password'))
    except StorefrontError as e:
        return JsonResponse({'message': e.message}, status=e.status_code)
    except Exception as e:
        logger.exception(f"Admin login error: {e}")
        return JsonResponse({'message': 'Server error'}, status=500)
    return JsonResponse({'message': 'Login successful', 'token': token})


@require_GET
@admin_token_required
def admin_dashboard(request):
    return JsonResponse({'message': 'Welcome to the admin dashboard', 'admin': request.admin.get('username')})
