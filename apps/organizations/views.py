"""
Organization policy JSON endpoints.

GET  /organizations/api/policy/?organization_id=<uuid>
POST /organizations/api/policy/?organization_id=<uuid>   (partial update)

Without organization_id the caller's first owner/admin organization is used.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.decorators import api_login_required, json_api, read_json_body

from .access import STAFF_ROLES, default_organization_id
from .services import get_policy, update_policy


@require_http_methods(['GET', 'POST', 'PATCH'])
@api_login_required
@json_api
def api_policy(request):
    organization_id = (
        request.GET.get('organization_id')
        or default_organization_id(request.user, STAFF_ROLES)
    )

    if request.method == 'GET':
        return JsonResponse(get_policy(request.user, organization_id))

    return JsonResponse(update_policy(request.user, organization_id, read_json_body(request)))
