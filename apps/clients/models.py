"""
Client model: a tenant-scoped person who books sessions.
(organization, email) is the canonical identity key; a client may also be
linked to a login identity so they can book for themselves.
"""
from django.conf import settings
from django.db import models
from apps.core.models import TenantModel

from .allowance import Allowance, allowance_from_db


def normalize_email(raw: str) -> str:
    """Lower-case and strip an email address so lookups are case-insensitive."""
    return (raw or '').strip().lower()


class Client(TenantModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='client_profiles',
    )
    email = models.EmailField()
    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=30, blank=True)
    notes = models.TextField(blank=True)
    session_allowance = models.PositiveIntegerField(
        null=True, blank=True,
        help_text='Maximum concurrently active bookings. Empty = unlimited.',
    )

    class Meta:
        verbose_name = 'Client'
        verbose_name_plural = 'Clients'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['organization', 'email'], name='uq_client_org_email'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    @property
    def allowance(self) -> Allowance:
        return allowance_from_db(self.session_allowance)

    @allowance.setter
    def allowance(self, value: Allowance):
        self.session_allowance = value.to_db()
