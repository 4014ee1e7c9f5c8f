"""
Space model: a bookable room/resource keyed by absolute capacity.

Spaces have no weekly timetable: they are offered on the operating-hours
grid, and any booking whose interval overlaps counts against `capacity`.
"""
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import TenantModel


class Space(TenantModel):
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    capacity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True, db_index=True)
    metadata = models.JSONField(null=True, blank=True)

    class Meta:
        verbose_name = 'Space'
        verbose_name_plural = 'Spaces'
        ordering = ['name']
        constraints = [
            models.CheckConstraint(condition=models.Q(capacity__gte=1), name='ck_space_capacity_positive'),
        ]

    def __str__(self):
        return f"{self.name} (capacity {self.capacity})"
