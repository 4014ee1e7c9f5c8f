from django.urls import path
from . import views

app_name = 'clients'

urlpatterns = [
    path('api/<uuid:client_id>/',        views.api_client_detail,    name='api_detail'),
    path('api/<uuid:client_id>/renew/',  views.api_renew_membership, name='api_renew'),
]
