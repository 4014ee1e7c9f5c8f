from django.urls import path
from . import views

app_name = 'organizations'

urlpatterns = [
    path('api/policy/', views.api_policy, name='api_policy'),
]
