"""
Bookings app models:
  - Booking          : one client's reservation of a concrete occurrence
  - BookingStatusLog : full audit trail of status transitions and check-ins
"""
from django.conf import settings
from django.db import models
from django.utils import timezone
from apps.core.models import TenantModel, TenantQuerySet, UUIDModel
from apps.clients.models import Client
from apps.spaces.models import Space
from apps.timetable.models import ServiceSession

from .projection import day_bounds


# ── Booking State Machine ─────────────────────────────────────────────────────

class BookingStatus(models.TextChoices):
    PENDING   = 'PENDING',   'Pending'
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    CANCELLED = 'CANCELLED', 'Cancelled'
    COMPLETED = 'COMPLETED', 'Completed'
    NO_SHOW   = 'NO_SHOW',   'No Show'


# Leaving CANCELLED would re-take capacity without a capacity check.
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED, BookingStatus.CANCELLED,
        BookingStatus.COMPLETED, BookingStatus.NO_SHOW,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW,
    },
    BookingStatus.COMPLETED: {BookingStatus.CANCELLED},
    BookingStatus.NO_SHOW: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}


class BookingQuerySet(TenantQuerySet):
    def active(self):
        """Bookings that hold capacity and count against allowances."""
        return self.exclude(status=BookingStatus.CANCELLED)

    def starting_on(self, day, tz=None):
        """Bookings whose start falls on the local calendar day `day`."""
        lo, hi = day_bounds(day, tz)
        return self.filter(start_time__gte=lo, start_time__lt=hi)


class Booking(TenantModel):
    """
    Absolute reservation of a session occurrence and/or a space.
    Status transitions go through transition_to(), never direct field writes.
    """
    session = models.ForeignKey(
        ServiceSession, on_delete=models.CASCADE, null=True, blank=True, related_name='bookings',
    )
    space = models.ForeignKey(
        Space, on_delete=models.CASCADE, null=True, blank=True, related_name='bookings',
    )
    # RESTRICT lets an organization delete cascade through, but not a lone client delete
    client = models.ForeignKey(Client, on_delete=models.RESTRICT, related_name='bookings')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_bookings',
    )

    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()

    status = models.CharField(
        max_length=12, choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED, db_index=True,
    )
    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(null=True, blank=True)

    notes = models.TextField(blank=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-start_time']
        indexes = [
            models.Index(fields=['session', 'start_time', 'end_time'], name='ix_booking_session_slot'),
            models.Index(fields=['space', 'start_time', 'end_time'], name='ix_booking_space_slot'),
            models.Index(fields=['client', 'status'], name='ix_booking_client_status'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='ck_booking_end_after_start',
            ),
            models.CheckConstraint(
                condition=models.Q(session__isnull=False) | models.Q(space__isnull=False),
                name='ck_booking_has_resource',
            ),
            # DB-level guard: one active booking per client per occurrence
            models.UniqueConstraint(
                fields=['session', 'start_time', 'end_time', 'client'],
                condition=~models.Q(status='CANCELLED'),
                name='uq_active_session_booking_client',
            ),
            models.UniqueConstraint(
                fields=['space', 'start_time', 'end_time', 'client'],
                condition=~models.Q(status='CANCELLED'),
                name='uq_active_space_booking_client',
            ),
        ]

    def __str__(self):
        resource = self.session.name if self.session_id else (self.space.name if self.space_id else '?')
        return f"#{self.id_short} | {self.client.name} | {resource} | {self.start_time:%Y-%m-%d %H:%M}"

    @property
    def id_short(self):
        """Returns the first 8 chars of UUID in uppercase."""
        return str(self.id)[:8].upper()

    @property
    def is_active(self):
        return self.status != BookingStatus.CANCELLED

    @property
    def duration_minutes(self):
        return round((self.end_time - self.start_time).total_seconds() / 60)

    def can_transition_to(self, new_status) -> bool:
        return new_status in ALLOWED_TRANSITIONS.get(self.status, set())

    # ── State transition helpers ──────────────────────────────────────────────

    def transition_to(self, new_status, changed_by='system', reason=''):
        self._transition(new_status, changed_by, reason)
        self.save(update_fields=['status', 'updated_at'])

    def cancel(self, changed_by='system', reason=''):
        self.transition_to(BookingStatus.CANCELLED, changed_by, reason)

    def mark_checked_in(self, changed_by='admin', at=None):
        self.checked_in = True
        self.checked_in_at = at or timezone.now()
        self.save(update_fields=['checked_in', 'checked_in_at', 'updated_at'])
        BookingStatusLog.objects.create(
            booking=self,
            from_status=self.status,
            to_status=self.status,
            changed_by=changed_by,
            reason='Checked in',
        )

    def _transition(self, new_status, changed_by, reason=''):
        old_status = self.status
        self.status = new_status
        BookingStatusLog.objects.create(
            booking=self,
            from_status=old_status,
            to_status=new_status,
            changed_by=changed_by,
            reason=reason,
        )


# ── Booking Audit Log ─────────────────────────────────────────────────────────

class BookingStatusLog(UUIDModel):
    """Immutable audit trail of every status transition on a booking."""
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='status_logs')
    from_status = models.CharField(max_length=12, choices=BookingStatus.choices, blank=True)
    to_status = models.CharField(max_length=12, choices=BookingStatus.choices)
    changed_by = models.CharField(max_length=150, help_text='username / system')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Booking Status Log'
        verbose_name_plural = 'Booking Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"Booking {str(self.booking_id)[:8]}: {self.from_status or '∅'} → {self.to_status}"
