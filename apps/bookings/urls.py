"""
Booking JSON API.

  /bookings/api/                              POST  create a booking
  /bookings/api/my/                           GET   caller's upcoming bookings
  /bookings/api/availability/                 GET   space availability grid
  /bookings/api/sessions/<uuid>/availability/ GET   one session, one date
  /bookings/api/<uuid>/status/                POST  change status
  /bookings/api/<uuid>/check-in/              POST  front-desk check-in
  /bookings/api/check-in/client/<uuid>/       GET   client's booking today
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    path('api/',                                      views.api_create_booking,       name='api_create'),
    path('api/my/',                                   views.api_my_bookings,          name='api_my'),

    # ── Availability ───────────────────────────────────────────────────────────
    path('api/availability/',                         views.api_space_availability,   name='api_availability'),
    path('api/sessions/<uuid:session_id>/availability/', views.api_session_availability, name='api_session_availability'),

    # ── Lifecycle ──────────────────────────────────────────────────────────────
    path('api/<uuid:booking_id>/status/',             views.api_change_status,        name='api_status'),
    path('api/<uuid:booking_id>/check-in/',           views.api_check_in,             name='api_check_in'),
    path('api/check-in/client/<uuid:client_id>/',     views.api_todays_booking,       name='api_todays_booking'),
]
