from django.contrib import admin
from .models import Space


@admin.register(Space)
class SpaceAdmin(admin.ModelAdmin):
    list_display = ['name', 'organization', 'capacity', 'is_active']
    list_filter = ['organization', 'is_active']
    search_fields = ['name', 'organization__name']
    list_editable = ['is_active']
    readonly_fields = ['id', 'created_at', 'updated_at']
