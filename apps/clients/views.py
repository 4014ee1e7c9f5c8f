"""
Client membership JSON endpoints (owners/admins).

GET  /clients/api/<uuid>/         summary with active bookings
POST /clients/api/<uuid>/renew/   {"sessions_to_add": n}
"""
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from apps.core.decorators import api_login_required, json_api, read_json_body

from .services import get_client_summary, renew_membership


@require_GET
@api_login_required
@json_api
def api_client_detail(request, client_id):
    return JsonResponse(get_client_summary(request.user, client_id))


@require_POST
@api_login_required
@json_api
def api_renew_membership(request, client_id):
    payload = read_json_body(request)
    client = renew_membership(request.user, client_id, payload.get('sessions_to_add'))
    return JsonResponse({
        'id': str(client.id),
        'name': client.name,
        'email': client.email,
        'session_allowance': client.session_allowance,
    })
