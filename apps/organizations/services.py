"""
Organization policy operations.

Public API:
  get_policy(principal, organization_id)
  update_policy(principal, organization_id, data)
"""
import logging

from apps.core.exceptions import ValidationError
from apps.core.shortcuts import get_object_or_not_found

from .access import STAFF_ROLES, authorize
from .models import Organization

logger = logging.getLogger(__name__)

_UNSET = object()


def _policy_dict(org: Organization) -> dict:
    return {
        'booking_change_hours': org.booking_change_hours,
        'require_membership_for_booking': org.require_membership_for_booking,
    }


def _get_organization(organization_id) -> Organization:
    return get_object_or_not_found(Organization, 'Organization not found.', id=organization_id)


def get_policy(principal, organization_id) -> dict:
    authorize(principal, organization_id, STAFF_ROLES).enforce('Organization')
    return _policy_dict(_get_organization(organization_id))


def _clean_policy(data: dict) -> dict:
    """Validate a partial policy update. Keys that are absent stay untouched."""
    errors = {}
    cleaned = {}

    hours = data.get('booking_change_hours', _UNSET)
    if hours is not _UNSET:
        # bool is an int subclass; reject it explicitly
        if hours is not None and (isinstance(hours, bool) or not isinstance(hours, int) or hours < 0):
            errors['booking_change_hours'] = ['Must be a non-negative whole number of hours or null.']
        else:
            cleaned['booking_change_hours'] = hours

    require = data.get('require_membership_for_booking', _UNSET)
    if require is not _UNSET:
        if not isinstance(require, bool):
            errors['require_membership_for_booking'] = ['Must be true or false.']
        else:
            cleaned['require_membership_for_booking'] = require

    if errors:
        raise ValidationError('Validation error', errors=errors)
    return cleaned


def update_policy(principal, organization_id, data: dict) -> dict:
    """Partially update the organization's booking policy. Owners/admins only."""
    authorize(principal, organization_id, STAFF_ROLES).enforce('Organization')
    org = _get_organization(organization_id)

    cleaned = _clean_policy(data)
    if cleaned:
        for field, value in cleaned.items():
            setattr(org, field, value)
        org.save(update_fields=[*cleaned.keys(), 'updated_at'])
        logger.info('Policy updated for organization %s: %s', org.id, cleaned)

    return _policy_dict(org)
