from django.urls import path
from . import views

app_name = 'timetable'

urlpatterns = [
    path('api/sessions/',                                   views.api_sessions,       name='api_sessions'),
    path('api/sessions/<uuid:session_id>/',                 views.api_session_detail, name='api_session_detail'),
    path('api/sessions/<uuid:session_id>/slots/',           views.api_add_slot,       name='api_add_slot'),
    path('api/sessions/<uuid:session_id>/slots/<uuid:slot_id>/', views.api_remove_slot, name='api_remove_slot'),
]
