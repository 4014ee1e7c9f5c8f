"""
Lookup helpers mirroring django.shortcuts.get_object_or_404, but raising
the domain NotFoundError so engine code stays free of HTTP concerns.
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from .exceptions import NotFoundError


def get_object_or_not_found(klass, message='Not found.', **lookup):
    """
    Return the single object matching lookup from a model or queryset.
    Missing rows and malformed ids (e.g. a non-UUID string) both raise
    NotFoundError.
    """
    queryset = klass._default_manager.all() if isinstance(klass, type) and issubclass(klass, models.Model) else klass
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError(message)
