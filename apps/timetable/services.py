"""
Session and timetable operations (owners/admins).

Public API:
  list_sessions(principal, organization_id)
  create_session(principal, organization_id, data)
  update_session(principal, session_id, data)
  delete_session(principal, session_id)
  add_time_slot(principal, session_id, data)
  remove_time_slot(principal, session_id, slot_id)

Input dicts use the model field names. Missing keys keep their defaults on
create and their current values on update.
"""
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.forms.models import model_to_dict

from apps.core.exceptions import ValidationError
from apps.core.shortcuts import get_object_or_not_found
from apps.organizations.access import ANY_ROLE, STAFF_ROLES, authorize
from apps.organizations.models import Organization

from .forms import ServiceSessionForm, TimeSlotTemplateForm
from .models import ServiceSession, TimeSlotTemplate

logger = logging.getLogger(__name__)

SESSION_FIELDS = ServiceSessionForm.Meta.fields


def _session_defaults() -> dict:
    return {
        'description': '',
        'theme_color': settings.DEFAULT_SESSION_COLOR,
        'slots': 1,
        'is_active': True,
    }


def _staff_session(principal, session_id) -> ServiceSession:
    session = get_object_or_not_found(ServiceSession, 'Session not found.', id=session_id)
    authorize(principal, session.organization_id, STAFF_ROLES).enforce('Session')
    return session


def list_sessions(principal, organization_id):
    """Sessions of an organization with their timetable prefetched, for any member."""
    authorize(principal, organization_id, ANY_ROLE).enforce('Organization')
    return (
        ServiceSession.objects
        .for_organization(organization_id)
        .prefetch_related('timetable')
        .order_by('name')
    )


def create_session(principal, organization_id, data: dict) -> ServiceSession:
    authorize(principal, organization_id, STAFF_ROLES).enforce('Organization')
    organization = get_object_or_not_found(Organization, 'Organization not found.', id=organization_id)

    form = ServiceSessionForm(
        {**_session_defaults(), **data},
        instance=ServiceSession(organization=organization),
    )
    if not form.is_valid():
        raise ValidationError.from_form(form)

    session = form.save()
    logger.info('Session %s (%s) created in organization %s', session.id, session.name, organization.id)
    return session


def update_session(principal, session_id, data: dict) -> ServiceSession:
    session = _staff_session(principal, session_id)

    current = model_to_dict(session, fields=SESSION_FIELDS)
    form = ServiceSessionForm({**current, **data}, instance=session)
    if not form.is_valid():
        raise ValidationError.from_form(form)

    session = form.save()
    logger.info('Session %s updated', session.id)
    return session


def delete_session(principal, session_id) -> None:
    """Delete a session; its timetable and bookings go with it."""
    session = _staff_session(principal, session_id)
    session_pk = session.pk
    session.delete()
    logger.info('Session %s deleted with its timetable and bookings', session_pk)


def add_time_slot(principal, session_id, data: dict) -> TimeSlotTemplate:
    session = _staff_session(principal, session_id)

    form = TimeSlotTemplateForm(data, instance=TimeSlotTemplate(session=session))
    if not form.is_valid():
        raise ValidationError.from_form(form)

    try:
        with transaction.atomic():
            slot = form.save()
    except IntegrityError:
        raise ValidationError('This time slot already exists in the timetable.')

    logger.info(
        'Time slot %s added to session %s: day=%s %s-%s',
        slot.id, session.id, slot.day_of_week, slot.start_time, slot.end_time,
    )
    return slot


def remove_time_slot(principal, session_id, slot_id) -> None:
    session = _staff_session(principal, session_id)
    slot = get_object_or_not_found(session.timetable.all(), 'Time slot not found.', id=slot_id)
    slot.delete()
    logger.info('Time slot %s removed from session %s', slot_id, session.id)
