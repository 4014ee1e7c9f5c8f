"""
Session & timetable JSON endpoints.

GET    /timetable/api/sessions/?organization_id=<uuid>   list (any member)
POST   /timetable/api/sessions/?organization_id=<uuid>   create (staff)
PATCH  /timetable/api/sessions/<uuid>/                   partial update (staff)
DELETE /timetable/api/sessions/<uuid>/                   delete with timetable and bookings
POST   /timetable/api/sessions/<uuid>/slots/             add a weekly slot
DELETE /timetable/api/sessions/<uuid>/slots/<uuid>/      remove a weekly slot
"""
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.decorators import api_login_required, json_api, read_json_body
from apps.organizations.access import ANY_ROLE, default_organization_id

from .services import (
    add_time_slot,
    create_session,
    delete_session,
    list_sessions,
    remove_time_slot,
    update_session,
)


def serialize_slot(slot) -> dict:
    return {
        'id': str(slot.id),
        'day_of_week': slot.day_of_week,
        'start_time': slot.start_time,
        'end_time': slot.end_time,
    }


def serialize_session(session) -> dict:
    return {
        'id': str(session.id),
        'organization_id': str(session.organization_id),
        'name': session.name,
        'description': session.description,
        'theme_color': session.theme_color,
        'slots': session.slots,
        'is_active': session.is_active,
        'timetable': [serialize_slot(t) for t in session.timetable.all()],
    }


@require_http_methods(['GET', 'POST'])
@api_login_required
@json_api
def api_sessions(request):
    organization_id = (
        request.GET.get('organization_id')
        or default_organization_id(request.user, ANY_ROLE)
    )
    if request.method == 'GET':
        sessions = list_sessions(request.user, organization_id)
        return JsonResponse({'sessions': [serialize_session(s) for s in sessions]})

    session = create_session(request.user, organization_id, read_json_body(request))
    return JsonResponse(serialize_session(session), status=201)


@require_http_methods(['PATCH', 'DELETE'])
@api_login_required
@json_api
def api_session_detail(request, session_id):
    if request.method == 'DELETE':
        delete_session(request.user, session_id)
        return HttpResponse(status=204)

    session = update_session(request.user, session_id, read_json_body(request))
    return JsonResponse(serialize_session(session))


@require_http_methods(['POST'])
@api_login_required
@json_api
def api_add_slot(request, session_id):
    slot = add_time_slot(request.user, session_id, read_json_body(request))
    return JsonResponse(serialize_slot(slot), status=201)


@require_http_methods(['DELETE'])
@api_login_required
@json_api
def api_remove_slot(request, session_id, slot_id):
    remove_time_slot(request.user, session_id, slot_id)
    return HttpResponse(status=204)
