from django.contrib import admin
from .models import Organization, OrganizationMembership


class OrganizationMembershipInline(admin.TabularInline):
    model = OrganizationMembership
    extra = 0
    raw_id_fields = ['user']


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'booking_change_hours', 'require_membership_for_booking', 'created_at']
    list_filter = ['require_membership_for_booking']
    search_fields = ['name', 'slug', 'email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [OrganizationMembershipInline]
    fieldsets = (
        ('Organization', {'fields': ('id', 'name', 'slug', 'email', 'phone')}),
        ('Booking Policy', {'fields': ('booking_change_hours', 'require_membership_for_booking')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(OrganizationMembership)
class OrganizationMembershipAdmin(admin.ModelAdmin):
    list_display = ['user', 'organization', 'role', 'created_at']
    list_filter = ['role', 'organization']
    search_fields = ['user__username', 'user__email', 'organization__name']
    raw_id_fields = ['user']
