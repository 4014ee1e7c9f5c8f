"""
Client membership operations.

Public API:
  get_client_summary(principal, client_id)
  renew_membership(principal, client_id, sessions_to_add)
  set_allowance(principal, client_id, sessions)
  resolve_client_for_user(user, organization)
"""
import logging

from django.db import transaction

from apps.core.exceptions import ValidationError
from apps.core.shortcuts import get_object_or_not_found
from apps.organizations.access import STAFF_ROLES, authorize

from .allowance import Limited, Unlimited
from .models import Client, normalize_email

logger = logging.getLogger(__name__)


def _staff_client(principal, client_id, queryset=None) -> Client:
    client = get_object_or_not_found(
        queryset if queryset is not None else Client.objects.all(),
        'Client not found.',
        id=client_id,
    )
    authorize(principal, client.organization_id, STAFF_ROLES).enforce('Client')
    return client


def _require_whole_number(value, field: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValidationError(
            'Validation error',
            errors={field: [f'Must be a whole number greater than or equal to {minimum}.']},
        )
    return value


def get_client_summary(principal, client_id) -> dict:
    """Client details plus active booking count and remaining sessions."""
    from apps.bookings.ledger import count_client_active_bookings

    client = _staff_client(principal, client_id)
    active = count_client_active_bookings(client.id)
    return {
        'id': str(client.id),
        'name': client.name,
        'email': client.email,
        'session_allowance': client.session_allowance,
        'active_bookings': active,
        'remaining_sessions': client.allowance.remaining(active),
    }


@transaction.atomic
def renew_membership(principal, client_id, sessions_to_add) -> Client:
    """
    Add sessions to a client's allowance. An unlimited client stays unlimited.
    Row is locked so two renewals never lose an increment.
    """
    sessions_to_add = _require_whole_number(sessions_to_add, 'sessions_to_add', 1)
    client = _staff_client(principal, client_id, Client.objects.select_for_update())

    before = client.allowance
    client.allowance = before.add(sessions_to_add)
    client.save(update_fields=['session_allowance', 'updated_at'])
    logger.info(
        'Membership renewed for client %s: %s -> %s',
        client.id, before, client.allowance,
    )
    return client


def set_allowance(principal, client_id, sessions) -> Client:
    """Set an explicit allowance; None makes the client unlimited."""
    if sessions is None:
        allowance = Unlimited()
    else:
        allowance = Limited(_require_whole_number(sessions, 'session_allowance', 0))

    client = _staff_client(principal, client_id)
    client.allowance = allowance
    client.save(update_fields=['session_allowance', 'updated_at'])
    logger.info('Allowance for client %s set to %s', client.id, allowance)
    return client


@transaction.atomic
def resolve_client_for_user(user, organization) -> Client:
    """
    Client record for a login identity inside one organization.

    Lookup order:
      1. client already linked to the user
      2. unlinked client with the user's email -> link it
      3. create a new client from the user's name and email
    """
    client = Client.objects.filter(organization=organization, user=user).first()
    if client:
        return client

    email = normalize_email(user.email)
    if not email:
        raise ValidationError('Your account has no email address; ask the studio to register you.')

    client = Client.objects.select_for_update().filter(organization=organization, email=email).first()
    if client:
        if client.user_id and client.user_id != user.pk:
            raise ValidationError('This email is already linked to another account.')
        client.user = user
        client.save(update_fields=['user', 'updated_at'])
        logger.info('Linked client %s to user %s', client.id, user.pk)
        return client

    name = user.get_full_name() or user.get_username()
    client = Client.objects.create(organization=organization, user=user, email=email, name=name)
    logger.info('Created client %s for user %s in organization %s', client.id, user.pk, organization.id)
    return client
