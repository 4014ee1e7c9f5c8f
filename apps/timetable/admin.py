from django.contrib import admin
from .models import ServiceSession, TimeSlotTemplate


class TimeSlotTemplateInline(admin.TabularInline):
    model = TimeSlotTemplate
    extra = 0
    fields = ['day_of_week', 'start_time', 'end_time']


@admin.register(ServiceSession)
class ServiceSessionAdmin(admin.ModelAdmin):
    list_display = ['name', 'organization', 'slots', 'theme_color', 'is_active']
    list_filter = ['organization', 'is_active']
    search_fields = ['name', 'organization__name']
    list_editable = ['is_active']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [TimeSlotTemplateInline]
    fieldsets = (
        ('Session Info', {'fields': ('id', 'organization', 'name', 'description', 'theme_color')}),
        ('Capacity', {'fields': ('slots',)}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
