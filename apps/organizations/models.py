"""
Organization model: the tenant boundary.

Every Session, Space, Client and Booking belongs to exactly one organization.
The organization also carries the two booking policies evaluated by
apps.bookings.policies:
  - booking_change_hours          : minimum lead time for non-cancel changes
  - require_membership_for_booking: enforce client session allowances
"""
from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models
from apps.core.models import BaseModel


slug_validator = RegexValidator(
    r'^[a-z0-9-]+$',
    'Slug must be lowercase alphanumeric with hyphens.',
)


class Organization(BaseModel):
    name = models.CharField(max_length=150)
    slug = models.CharField(max_length=80, unique=True, validators=[slug_validator])
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)

    # Booking policy
    booking_change_hours = models.PositiveIntegerField(
        null=True, blank=True,
        help_text='Hours before start after which bookings can no longer be changed. Empty = unrestricted.',
    )
    require_membership_for_booking = models.BooleanField(
        default=False,
        help_text='Reject new bookings once a client has used up their session allowance.',
    )

    class Meta:
        verbose_name = 'Organization'
        verbose_name_plural = 'Organizations'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def has_change_window(self):
        return self.booking_change_hours is not None


class MembershipRole(models.TextChoices):
    OWNER  = 'OWNER',  'Owner'
    ADMIN  = 'ADMIN',  'Admin'
    CLIENT = 'CLIENT', 'Client'


class OrganizationMembership(BaseModel):
    """Role a login identity holds inside one organization."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='organization_memberships',
    )
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name='memberships',
    )
    role = models.CharField(max_length=10, choices=MembershipRole.choices, default=MembershipRole.CLIENT)

    class Meta:
        verbose_name = 'Organization Membership'
        verbose_name_plural = 'Organization Memberships'
        unique_together = [('user', 'organization')]
        ordering = ['organization', 'role']

    def __str__(self):
        return f"{self.user} — {self.organization.name} ({self.get_role_display()})"
