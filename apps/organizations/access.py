"""
Tenant authorization.

Every engine/service operation resolves its target resource, then calls
authorize(principal, organization_id, required_roles) exactly once and
enforces the result:

  - principal has no membership in the organization -> NotFoundError
    (the resource is invisible to other tenants)
  - member, but role not in required_roles          -> ForbiddenError
"""
from dataclasses import dataclass

from django.core.exceptions import ValidationError as DjangoValidationError

from apps.core.exceptions import ForbiddenError, NotFoundError

from .models import MembershipRole, OrganizationMembership

STAFF_ROLES = (MembershipRole.OWNER, MembershipRole.ADMIN)
ANY_ROLE = (MembershipRole.OWNER, MembershipRole.ADMIN, MembershipRole.CLIENT)


@dataclass(frozen=True)
class AuthResult:
    organization_id: object
    role: str | None
    required_roles: tuple

    @property
    def is_member(self) -> bool:
        return self.role is not None

    @property
    def allowed(self) -> bool:
        return self.role in self.required_roles

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def enforce(self, resource: str = 'Resource') -> 'AuthResult':
        if not self.is_member:
            raise NotFoundError(f'{resource} not found.')
        if not self.allowed:
            raise ForbiddenError()
        return self


def _is_authenticated(principal) -> bool:
    return principal is not None and getattr(principal, 'is_authenticated', False)


def authorize(principal, organization_id, required_roles=ANY_ROLE) -> AuthResult:
    """Look up the principal's role in the organization. Never raises."""
    role = None
    if _is_authenticated(principal) and organization_id is not None:
        try:
            role = (
                OrganizationMembership.objects
                .filter(user=principal, organization_id=organization_id)
                .values_list('role', flat=True)
                .first()
            )
        except DjangoValidationError:
            role = None
    return AuthResult(
        organization_id=organization_id,
        role=role,
        required_roles=tuple(required_roles),
    )


def default_organization_id(principal, required_roles=ANY_ROLE):
    """
    First organization the principal belongs to with one of required_roles.
    Used by endpoints that do not name an organization explicitly.
    """
    if not _is_authenticated(principal):
        return None
    return (
        OrganizationMembership.objects
        .filter(user=principal, role__in=required_roles)
        .order_by('created_at')
        .values_list('organization_id', flat=True)
        .first()
    )
