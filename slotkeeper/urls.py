"""
URL configuration for the Slotkeeper booking platform.

Only the JSON adapter endpoints are routed here; pages, forms and QR
scanning live in the separate front-end.
"""
from django.contrib import admin
from django.conf import settings
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('organizations/', include('apps.organizations.urls', namespace='organizations')),
    path('clients/', include('apps.clients.urls', namespace='clients')),
    path('timetable/', include('apps.timetable.urls', namespace='timetable')),
    path('bookings/', include('apps.bookings.urls', namespace='bookings')),
]
