from django.contrib import admin
from .models import Booking, BookingStatusLog


class BookingStatusLogInline(admin.TabularInline):
    model = BookingStatusLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        'short_id', 'client', 'organization', 'session', 'space',
        'start_time', 'end_time', 'status', 'checked_in',
    ]
    list_filter = ['status', 'checked_in', 'organization']
    search_fields = ['client__name', 'client__email', 'session__name', 'space__name']
    readonly_fields = ['id', 'created_by', 'checked_in_at', 'created_at', 'updated_at']
    raw_id_fields = ['client', 'session', 'space']
    date_hierarchy = 'start_time'
    inlines = [BookingStatusLogInline]
    fieldsets = (
        ('Booking', {'fields': ('id', 'organization', 'session', 'space', 'client', 'created_by')}),
        ('Schedule', {'fields': ('start_time', 'end_time')}),
        ('Status', {'fields': ('status', 'checked_in', 'checked_in_at', 'notes')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def short_id(self, obj):
        return obj.id_short
    short_id.short_description = 'ID'


@admin.register(BookingStatusLog)
class BookingStatusLogAdmin(admin.ModelAdmin):
    list_display = ['booking', 'from_status', 'to_status', 'changed_by', 'changed_at']
    readonly_fields = ['id', 'booking', 'from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    search_fields = ['booking__client__name']
