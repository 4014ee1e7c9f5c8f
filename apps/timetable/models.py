"""
Timetable models: ServiceSession and its weekly TimeSlotTemplate rows.

A ServiceSession is a recurring bookable offering (e.g. "Reformer Pilates")
with a fixed capacity per occurrence (`slots`). Its timetable is a set of
weekly recurrence rules; the rules are projected onto concrete dates by
apps.bookings.projection, nothing about occurrences is persisted.

Weekdays follow the Sunday-first convention: 0 = Sunday ... 6 = Saturday.
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models
from apps.core.models import TenantModel, UUIDModel, TimestampedModel


hex_color_validator = RegexValidator(
    r'^#[0-9A-Fa-f]{6}$',
    'Colour must be a hex value like #3B82F6.',
)

hhmm_validator = RegexValidator(
    r'^([01]\d|2[0-3]):[0-5]\d$',
    'Time must be in HH:mm format (00:00 – 23:59).',
)


class Weekday(models.IntegerChoices):
    SUNDAY    = 0, 'Sunday'
    MONDAY    = 1, 'Monday'
    TUESDAY   = 2, 'Tuesday'
    WEDNESDAY = 3, 'Wednesday'
    THURSDAY  = 4, 'Thursday'
    FRIDAY    = 5, 'Friday'
    SATURDAY  = 6, 'Saturday'


def _default_color():
    return getattr(settings, 'DEFAULT_SESSION_COLOR', '#3B82F6')


class ServiceSession(TenantModel):
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    theme_color = models.CharField(max_length=7, default=_default_color, validators=[hex_color_validator])
    slots = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text='Capacity of every occurrence of this session.',
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Service Session'
        verbose_name_plural = 'Service Sessions'
        ordering = ['name']
        constraints = [
            models.CheckConstraint(condition=models.Q(slots__gte=1), name='ck_session_slots_positive'),
        ]

    def __str__(self):
        return f"{self.name} ({self.slots} per slot)"


class TimeSlotTemplate(UUIDModel, TimestampedModel):
    """One weekly recurrence rule: (day_of_week, HH:mm start, HH:mm end)."""
    session = models.ForeignKey(
        ServiceSession,
        on_delete=models.CASCADE,
        related_name='timetable',
    )
    day_of_week = models.PositiveSmallIntegerField(
        choices=Weekday.choices,
        validators=[MinValueValidator(0), MaxValueValidator(6)],
    )
    start_time = models.CharField(max_length=5, validators=[hhmm_validator])
    end_time = models.CharField(max_length=5, validators=[hhmm_validator])

    class Meta:
        verbose_name = 'Time Slot Template'
        verbose_name_plural = 'Time Slot Templates'
        ordering = ['day_of_week', 'start_time']
        constraints = [
            # Zero-padded HH:mm strings order the same way as the times they encode
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='ck_template_end_after_start',
            ),
            models.UniqueConstraint(
                fields=['session', 'day_of_week', 'start_time', 'end_time'],
                name='uq_template_per_session',
            ),
        ]

    def __str__(self):
        return f"{self.session.name} — {self.get_day_of_week_display()} {self.start_time}–{self.end_time}"

    def clean(self):
        super().clean()
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({'end_time': 'End time must be after start time.'})
