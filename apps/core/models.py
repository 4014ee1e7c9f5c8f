"""
Core base model mixins.
All tenant-owned models should inherit from TenantModel.
"""
import uuid
from django.db import models


class UUIDModel(models.Model):
    """Primary key is a UUID, not an auto-incrementing integer."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """Automatically tracks creation and last-update timestamps."""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BaseModel(UUIDModel, TimestampedModel):
    """Convenience base combining UUID pk + timestamps."""
    class Meta:
        abstract = True


class TenantQuerySet(models.QuerySet):
    """Queryset helpers for rows owned by a single organization."""
    def for_organization(self, organization_id):
        return self.filter(organization_id=organization_id)

    def active(self):
        return self.filter(is_active=True)


class TenantModel(BaseModel):
    """
    Row owned by exactly one organization (the tenant boundary).
    Deleting the organization deletes everything it owns.
    """
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.CASCADE,
        related_name='%(class)ss',
    )

    objects = TenantQuerySet.as_manager()

    class Meta:
        abstract = True
