from django.contrib import admin
from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'organization', 'session_allowance', 'user', 'created_at']
    list_filter = ['organization']
    search_fields = ['name', 'email', 'phone']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['user']
    fieldsets = (
        ('Client', {'fields': ('id', 'organization', 'name', 'email', 'phone', 'user')}),
        ('Membership', {'fields': ('session_allowance', 'notes')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
